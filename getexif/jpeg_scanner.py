# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
JPEG marker segment scanner

Walks the marker segments of a JPEG file header to find the APP1 segment
that carries EXIF data. Scanning stops at the Start-Of-Scan marker so that
entropy-coded image data is never mistaken for markers.

Copyright 2025 DNAi inc.
"""

import logging
from dataclasses import dataclass
from typing import Iterator, Union

from getexif.byte_cursor import ByteCursor, ByteOrder
from getexif.exceptions import NoExifSegmentError, NotAJpegError, TruncatedDataError

logger = logging.getLogger(__name__)

SOI = 0xD8
EOI = 0xD9
SOS = 0xDA
APP1 = 0xE1
TEM = 0x01

EXIF_SIGNATURE = b'Exif\x00\x00'

# Markers that stand alone, without a length field
STANDALONE_MARKERS = {SOI, EOI, TEM} | set(range(0xD0, 0xD8))  # RST0-RST7


@dataclass(frozen=True)
class JpegSegment:
    """
    One marker segment.

    `offset` and `length` describe the payload that follows the 2-byte
    length field; both are zero for stand-alone markers.
    """
    marker: int
    offset: int
    length: int

    @property
    def name(self) -> str:
        if 0xE0 <= self.marker <= 0xEF:
            return f'APP{self.marker - 0xE0}'
        return {
            SOI: 'SOI',
            EOI: 'EOI',
            SOS: 'SOS',
            0xDB: 'DQT',
            0xC4: 'DHT',
            0xC0: 'SOF0',
            0xC2: 'SOF2',
            0xDD: 'DRI',
            0xFE: 'COM',
        }.get(self.marker, f'0xFF{self.marker:02X}')


class JpegSegmentScanner:
    """
    Scanner for the marker segments of a JPEG header.

    Example:
        >>> payload = JpegSegmentScanner(jpeg_bytes).find_exif_payload()
        >>> payload.read_bytes(0, 2)
        b'II'
    """

    def __init__(self, data: Union[bytes, bytearray, memoryview]):
        """
        Initialize the scanner.

        Args:
            data: Complete JPEG file, or at least everything up to SOS
        """
        # Segment lengths are always big-endian
        self.cursor = ByteCursor(data, ByteOrder.BIG_ENDIAN)

    def iter_segments(self) -> Iterator[JpegSegment]:
        """
        Yield the marker segments in file order, up to and including SOS or EOI.

        Raises:
            NotAJpegError: If the buffer does not start with SOI
            TruncatedDataError: If a segment length runs past the buffer
        """
        cursor = self.cursor
        if not cursor.startswith(b'\xff\xd8'):
            raise NotAJpegError("Not a JPEG file: missing SOI marker")

        yield JpegSegment(SOI, 0, 0)
        offset = 2

        while offset < len(cursor):
            if cursor.read_u8(offset) != 0xFF:
                logger.debug(f"Expected marker at offset {offset}, stopping scan")
                return

            # Any number of 0xFF fill bytes may precede the marker code
            while cursor.contains(offset + 1) and cursor.read_u8(offset + 1) == 0xFF:
                offset += 1
            if not cursor.contains(offset + 1):
                return

            marker = cursor.read_u8(offset + 1)
            offset += 2

            if marker in STANDALONE_MARKERS:
                yield JpegSegment(marker, offset, 0)
                if marker == EOI:
                    return
                continue

            if not cursor.contains(offset, 2):
                raise TruncatedDataError(f"Segment length of marker 0xFF{marker:02X} is truncated")
            length = cursor.read_u16(offset)
            if length < 2:
                raise TruncatedDataError(f"Invalid segment length {length} for marker 0xFF{marker:02X}")
            payload_length = length - 2
            if not cursor.contains(offset + 2, payload_length):
                raise TruncatedDataError(
                    f"Segment 0xFF{marker:02X} at offset {offset - 2} claims {length} bytes, "
                    f"past the end of the buffer"
                )

            segment = JpegSegment(marker, offset + 2, payload_length)
            logger.debug(f"{segment.name} segment at {offset - 2}, {payload_length} bytes")
            yield segment

            if marker == SOS:
                return
            offset += length

    def find_exif_payload(self) -> ByteCursor:
        """
        Locate the Exif APP1 segment.

        Returns:
            Cursor over the payload following the "Exif\\0\\0" signature,
            i.e. starting at the TIFF header

        Raises:
            NotAJpegError: If the buffer does not start with SOI
            NoExifSegmentError: If no Exif APP1 segment precedes the image data
            TruncatedDataError: If a segment length runs past the buffer
        """
        for segment in self.iter_segments():
            if segment.marker != APP1:
                continue
            if segment.length >= len(EXIF_SIGNATURE) and self.cursor.startswith(EXIF_SIGNATURE, segment.offset):
                return self.cursor.window(
                    segment.offset + len(EXIF_SIGNATURE),
                    segment.length - len(EXIF_SIGNATURE)
                )
            logger.debug(f"Skipping non-Exif APP1 segment at {segment.offset}")

        raise NoExifSegmentError("No APP1 Exif segment found before image data")
