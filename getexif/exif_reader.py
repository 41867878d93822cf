# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
EXIF reader

Decodes the EXIF metadata of a JPEG held in memory:
scan segments -> parse TIFF header -> decode IFDs -> build document.

Copyright 2025 DNAi inc.
"""

import logging
from types import MappingProxyType
from typing import Optional, Union

from getexif.document import ExifDocument
from getexif.ifd_decoder import IfdDecoder
from getexif.jpeg_scanner import JpegSegmentScanner
from getexif.options import DecoderOptions
from getexif.tiff_structure import TiffHeaderParser

logger = logging.getLogger(__name__)


class ExifReader:
    """
    Decoder for EXIF metadata embedded in JPEG files.

    The reader holds no per-call state, so one instance can decode any
    number of buffers, from several threads if needed.

    Example:
        >>> document = ExifReader().decode(jpeg_bytes)
        >>> document.get('EXIF', 'FocalLength')
        Rational(numerator=280, denominator=10)
    """

    def __init__(self, options: Optional[DecoderOptions] = None):
        """
        Initialize the reader.

        Args:
            options: Decoding limits (default: DecoderOptions())
        """
        self.options = options or DecoderOptions()

    def decode(self, data: Union[bytes, bytearray, memoryview]) -> ExifDocument:
        """
        Decode EXIF metadata from a JPEG buffer.

        Args:
            data: Complete JPEG file, or at least its header up to SOS

        Returns:
            ExifDocument; it copies every value it needs, so `data` may be
            released once this returns

        Raises:
            NotAJpegError: If the buffer does not start with SOI
            NoExifSegmentError: If there is no Exif APP1 segment
            InvalidTiffHeaderError: If the TIFF header is invalid
            TruncatedDataError: If the segment, header or IFD0 is cut short
        """
        payload = JpegSegmentScanner(data).find_exif_payload()
        header = TiffHeaderParser(payload).parse()
        logger.debug(f"Exif payload of {len(payload)} bytes, {header.byte_order.label}, "
                     f"IFD0 at {header.ifd0_offset}")

        decoder = IfdDecoder(payload.with_byte_order(header.byte_order), self.options)
        groups, errors = decoder.decode(header.ifd0_offset)

        return ExifDocument(
            groups=MappingProxyType(groups),
            byte_order=header.byte_order,
            errors=tuple(errors),
        )


def decode(data: Union[bytes, bytearray, memoryview], options: Optional[DecoderOptions] = None) -> ExifDocument:
    """Decode EXIF metadata from a JPEG buffer with a one-off ExifReader."""
    return ExifReader(options).decode(data)
