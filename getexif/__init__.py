# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
GetExif - A Pure Python EXIF Reader for JPEG Images

Locates the EXIF segment of a JPEG, walks its IFD structure and decodes
typed tag values, with bounds-checked reads throughout so that malformed
files fail with a typed error instead of crashing.

This is a native Python implementation with NO dependencies on
external executables or libraries.

Copyright 2025 DNAi inc.
"""

__version__ = "0.1.0"
__author__ = "DNAi inc."

from getexif.byte_cursor import ByteCursor, ByteOrder
from getexif.core import GetExif, build_summary
from getexif.document import ExifDocument, GeoCoordinate, rational_to_float
from getexif.exceptions import (
    EntryDecodeError,
    GetExifError,
    InvalidTiffHeaderError,
    MetadataReadError,
    NoExifSegmentError,
    NotAJpegError,
    TruncatedDataError,
)
from getexif.exif_reader import ExifReader, decode
from getexif.ifd_decoder import EntryError, IfdDecoder, IfdEntry, IfdGroup
from getexif.jpeg_scanner import JpegSegment, JpegSegmentScanner
from getexif.options import DecoderOptions, FieldSet, FormatMode
from getexif.tag_codec import (
    Ascii,
    ByteSequence,
    ExifTagType,
    IntegerSequence,
    Rational,
    RationalSequence,
    SignedInt,
    UnsignedInt,
    decode_tag_value,
)
from getexif.tiff_structure import TiffHeader, TiffHeaderParser

__all__ = [
    "GetExif",
    "build_summary",
    "ExifReader",
    "decode",
    "ExifDocument",
    "GeoCoordinate",
    "rational_to_float",
    "GetExifError",
    "MetadataReadError",
    "NotAJpegError",
    "NoExifSegmentError",
    "InvalidTiffHeaderError",
    "TruncatedDataError",
    "EntryDecodeError",
    "ByteCursor",
    "ByteOrder",
    "JpegSegment",
    "JpegSegmentScanner",
    "TiffHeader",
    "TiffHeaderParser",
    "IfdDecoder",
    "IfdEntry",
    "IfdGroup",
    "EntryError",
    "ExifTagType",
    "UnsignedInt",
    "SignedInt",
    "Rational",
    "Ascii",
    "ByteSequence",
    "IntegerSequence",
    "RationalSequence",
    "decode_tag_value",
    "DecoderOptions",
    "FieldSet",
    "FormatMode",
]
