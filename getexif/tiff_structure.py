# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
TIFF header parser

The Exif payload of an APP1 segment is a small TIFF structure. This module
validates its 8-byte header and determines the byte order used by the rest
of the payload and the offset of IFD0.

Copyright 2025 DNAi inc.
"""

from dataclasses import dataclass

from getexif.byte_cursor import ByteCursor, ByteOrder
from getexif.exceptions import InvalidTiffHeaderError, TruncatedDataError

TIFF_MAGIC = 42
TIFF_HEADER_SIZE = 8


@dataclass(frozen=True)
class TiffHeader:
    """Decoded TIFF header. Offsets are relative to the byte order marker."""
    byte_order: ByteOrder
    ifd0_offset: int


class TiffHeaderParser:
    """
    TIFF header parser.

    Example:
        >>> header = TiffHeaderParser(payload).parse()
        >>> header.byte_order
        <ByteOrder.LITTLE_ENDIAN: '<'>
    """

    def __init__(self, payload: ByteCursor):
        """
        Initialize the parser.

        Args:
            payload: Cursor positioned on the "II"/"MM" marker
        """
        self.payload = payload

    def parse(self) -> TiffHeader:
        """
        Parse the TIFF header.

        Returns:
            TiffHeader with byte order and IFD0 offset

        Raises:
            TruncatedDataError: If the header is short or IFD0 lies outside the payload
            InvalidTiffHeaderError: If the byte order marker or magic number is wrong
        """
        if len(self.payload) < TIFF_HEADER_SIZE:
            raise TruncatedDataError(
                f"Exif payload too short for TIFF header: {len(self.payload)} bytes"
            )

        # Determine endianness
        if self.payload.startswith(b'II'):
            byte_order = ByteOrder.LITTLE_ENDIAN
        elif self.payload.startswith(b'MM'):
            byte_order = ByteOrder.BIG_ENDIAN
        else:
            raise InvalidTiffHeaderError(
                f"Invalid TIFF byte order marker: {self.payload.read_bytes(0, 2)!r}"
            )

        cursor = self.payload.with_byte_order(byte_order)

        # Check magic number
        magic = cursor.read_u16(2)
        if magic != TIFF_MAGIC:
            raise InvalidTiffHeaderError(f"Invalid TIFF magic number: {magic}")

        # Read IFD0 offset; its 2-byte entry count must be readable
        ifd0_offset = cursor.read_u32(4)
        if not cursor.contains(ifd0_offset, 2):
            raise TruncatedDataError(
                f"IFD0 offset {ifd0_offset} points past the end of the "
                f"{len(cursor)}-byte Exif payload"
            )

        return TiffHeader(byte_order=byte_order, ifd0_offset=ifd0_offset)
