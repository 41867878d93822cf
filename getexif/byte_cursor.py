# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Bounds-checked binary reader

ByteCursor is a read-only window over a shared byte buffer. All EXIF
parsing goes through it so that no read can run past the end of the data:
every access checks its width first and raises TruncatedDataError instead.

Windows are spans (base offset + length) over the same backing buffer,
so handing a sub-IFD or a segment payload to another parser never copies
the buffer.

Copyright 2025 DNAi inc.
"""

import struct
from enum import Enum
from typing import Optional, Tuple, Union

from getexif.exceptions import TruncatedDataError


class ByteOrder(Enum):
    """Byte order of a TIFF structure; the value is the struct prefix."""
    BIG_ENDIAN = '>'  # "MM", Motorola
    LITTLE_ENDIAN = '<'  # "II", Intel

    @property
    def label(self) -> str:
        if self is ByteOrder.BIG_ENDIAN:
            return 'Big-endian (Motorola, MM)'
        return 'Little-endian (Intel, II)'


class ByteCursor:
    """
    Read-only, bounds-checked view over a byte buffer.

    Offsets passed to the read methods are relative to the start of the
    window. The underlying buffer is never modified.

    Example:
        >>> cursor = ByteCursor(b'MM\\x00*\\x00\\x00\\x00\\x08', ByteOrder.BIG_ENDIAN)
        >>> cursor.read_u16(2)
        42
    """

    def __init__(
        self,
        data: Union[bytes, bytearray, memoryview],
        byte_order: ByteOrder = ByteOrder.BIG_ENDIAN,
        base: int = 0,
        length: Optional[int] = None
    ):
        """
        Initialize the cursor.

        Args:
            data: Backing buffer
            byte_order: Byte order used by the multi-byte reads
            base: Absolute offset of the window start in the buffer
            length: Window length (default: up to the end of the buffer)
        """
        self._data = data if isinstance(data, memoryview) else memoryview(data)
        total = len(self._data)
        if base < 0 or base > total:
            raise TruncatedDataError(f"Window start {base} outside buffer of {total} bytes")
        if length is None:
            length = total - base
        if length < 0 or base + length > total:
            raise TruncatedDataError(
                f"Window of {length} bytes at {base} exceeds buffer of {total} bytes"
            )
        self.byte_order = byte_order
        self.base = base
        self._length = length

    def __len__(self) -> int:
        return self._length

    def ensure(self, offset: int, width: int) -> None:
        """
        Check that `width` bytes starting at `offset` lie inside the window.

        Raises:
            TruncatedDataError: If the range is not fully inside the window
        """
        if offset < 0 or width < 0 or offset + width > self._length:
            raise TruncatedDataError(
                f"Read of {width} bytes at offset {offset} exceeds "
                f"{self._length}-byte buffer"
            )

    def contains(self, offset: int, width: int = 1) -> bool:
        """Return True if the range is readable, without raising."""
        return 0 <= offset and 0 <= width and offset + width <= self._length

    def _unpack(self, fmt: str, offset: int, width: int):
        self.ensure(offset, width)
        return struct.unpack_from(f'{self.byte_order.value}{fmt}', self._data, self.base + offset)[0]

    def read_u8(self, offset: int) -> int:
        return self._unpack('B', offset, 1)

    def read_s8(self, offset: int) -> int:
        return self._unpack('b', offset, 1)

    def read_u16(self, offset: int) -> int:
        return self._unpack('H', offset, 2)

    def read_s16(self, offset: int) -> int:
        return self._unpack('h', offset, 2)

    def read_u32(self, offset: int) -> int:
        return self._unpack('I', offset, 4)

    def read_s32(self, offset: int) -> int:
        return self._unpack('i', offset, 4)

    def read_rational(self, offset: int, signed: bool = False) -> Tuple[int, int]:
        """
        Read an 8-byte rational as (numerator, denominator).

        Args:
            offset: Offset of the numerator
            signed: Read two signed 32-bit integers (SRATIONAL)
        """
        self.ensure(offset, 8)
        fmt = 'ii' if signed else 'II'
        return struct.unpack_from(f'{self.byte_order.value}{fmt}', self._data, self.base + offset)

    def read_bytes(self, offset: int, size: int) -> bytes:
        """Copy `size` bytes out of the window."""
        self.ensure(offset, size)
        start = self.base + offset
        return bytes(self._data[start:start + size])

    def window(self, offset: int, length: Optional[int] = None) -> 'ByteCursor':
        """
        Return a sub-window sharing the same buffer.

        Args:
            offset: Start of the sub-window, relative to this window
            length: Length of the sub-window (default: to the end of this window)
        """
        if length is None:
            length = self._length - offset
        self.ensure(offset, length)
        return ByteCursor(self._data, self.byte_order, self.base + offset, length)

    def with_byte_order(self, byte_order: ByteOrder) -> 'ByteCursor':
        """Return the same window read with a different byte order."""
        return ByteCursor(self._data, byte_order, self.base, self._length)

    def startswith(self, prefix: bytes, offset: int = 0) -> bool:
        """Return True if the window holds `prefix` at `offset`."""
        if not self.contains(offset, len(prefix)):
            return False
        start = self.base + offset
        return self._data[start:start + len(prefix)] == prefix
