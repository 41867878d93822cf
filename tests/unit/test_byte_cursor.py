# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Unit tests for the bounds-checked ByteCursor.
"""

import pytest

from getexif.byte_cursor import ByteCursor, ByteOrder
from getexif.exceptions import MetadataReadError, TruncatedDataError


@pytest.mark.unit
class TestByteCursorReads:
    """Integer and rational reads in both byte orders."""

    def test_big_endian_reads(self):
        cursor = ByteCursor(b'\x12\x34\x56\x78\xff\xfe', ByteOrder.BIG_ENDIAN)
        assert cursor.read_u8(0) == 0x12
        assert cursor.read_u16(0) == 0x1234
        assert cursor.read_u32(0) == 0x12345678
        assert cursor.read_s16(4) == -2
        assert cursor.read_s8(4) == -1

    def test_little_endian_reads(self):
        cursor = ByteCursor(b'\x12\x34\x56\x78', ByteOrder.LITTLE_ENDIAN)
        assert cursor.read_u16(0) == 0x3412
        assert cursor.read_u32(0) == 0x78563412

    def test_signed_long(self):
        cursor = ByteCursor(b'\xff\xff\xff\xfe', ByteOrder.BIG_ENDIAN)
        assert cursor.read_s32(0) == -2
        assert cursor.read_u32(0) == 0xFFFFFFFE

    def test_read_rational(self):
        cursor = ByteCursor(b'\x00\x00\x01\x18\x00\x00\x00\x0a', ByteOrder.BIG_ENDIAN)
        assert cursor.read_rational(0) == (280, 10)

    def test_read_signed_rational(self):
        cursor = ByteCursor(b'\xff\xff\xff\xfd\x00\x00\x00\x02', ByteOrder.BIG_ENDIAN)
        assert cursor.read_rational(0, signed=True) == (-3, 2)

    def test_read_bytes_returns_copy(self):
        data = bytearray(b'abcdef')
        cursor = ByteCursor(data)
        chunk = cursor.read_bytes(1, 3)
        data[1] = ord('z')
        assert chunk == b'bcd'


@pytest.mark.unit
class TestByteCursorBounds:
    """Every out-of-range access raises instead of reading past the end."""

    def test_read_past_end_raises(self):
        cursor = ByteCursor(b'\x00\x01\x02')
        with pytest.raises(TruncatedDataError):
            cursor.read_u32(0)
        with pytest.raises(TruncatedDataError):
            cursor.read_u16(2)

    def test_negative_offset_raises(self):
        cursor = ByteCursor(b'\x00\x01')
        with pytest.raises(TruncatedDataError):
            cursor.read_u8(-1)

    def test_truncated_is_metadata_read_error(self):
        with pytest.raises(MetadataReadError):
            ByteCursor(b'').read_u8(0)

    def test_contains(self):
        cursor = ByteCursor(b'\x00' * 8)
        assert cursor.contains(0, 8)
        assert cursor.contains(7)
        assert not cursor.contains(7, 2)
        assert not cursor.contains(-1)
        assert not cursor.contains(8)

    def test_ensure(self):
        cursor = ByteCursor(b'\x00' * 4)
        cursor.ensure(0, 4)
        with pytest.raises(TruncatedDataError):
            cursor.ensure(1, 4)

    def test_window_outside_buffer_raises(self):
        with pytest.raises(TruncatedDataError):
            ByteCursor(b'\x00' * 4, base=2, length=4)
        with pytest.raises(TruncatedDataError):
            ByteCursor(b'\x00' * 4, base=5)


@pytest.mark.unit
class TestByteCursorWindows:
    """Sub-windows are spans over the same buffer."""

    def test_window_offsets_are_relative(self):
        cursor = ByteCursor(b'....MM\x00\x2a', ByteOrder.BIG_ENDIAN)
        window = cursor.window(4)
        assert len(window) == 4
        assert window.base == 4
        assert window.startswith(b'MM')
        assert window.read_u16(2) == 42

    def test_window_limits_reads(self):
        cursor = ByteCursor(b'\x01\x02\x03\x04\x05\x06')
        window = cursor.window(1, 2)
        assert window.read_u16(0) == 0x0203
        with pytest.raises(TruncatedDataError):
            window.read_u8(2)

    def test_window_past_end_raises(self):
        cursor = ByteCursor(b'\x00' * 4)
        with pytest.raises(TruncatedDataError):
            cursor.window(2, 4)

    def test_with_byte_order_keeps_span(self):
        cursor = ByteCursor(b'xx\x01\x00', ByteOrder.BIG_ENDIAN).window(2)
        swapped = cursor.with_byte_order(ByteOrder.LITTLE_ENDIAN)
        assert swapped.base == cursor.base
        assert cursor.read_u16(0) == 0x0100
        assert swapped.read_u16(0) == 0x0001

    def test_startswith_out_of_range(self):
        cursor = ByteCursor(b'II')
        assert cursor.startswith(b'II')
        assert not cursor.startswith(b'II*')
        assert not cursor.startswith(b'I', offset=5)

    def test_byte_order_label(self):
        assert 'MM' in ByteOrder.BIG_ENDIAN.label
        assert 'II' in ByteOrder.LITTLE_ENDIAN.label
