# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Core GetExif class

This module provides the high-level API: read a JPEG file and return a
summary of its EXIF metadata (camera, orientation, position, creation time
and exposure settings) with raw and formatted values side by side.

Copyright 2025 DNAi inc.
"""

import logging
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple, Union

from getexif import value_formatter
from getexif.document import ExifDocument
from getexif.exceptions import MetadataReadError
from getexif.exif_reader import ExifReader
from getexif.exif_tags import GROUP_EXIF, GROUP_IFD0
from getexif.options import DecoderOptions, FieldSet, FormatMode
from getexif.tag_codec import Ascii, to_python

logger = logging.getLogger(__name__)

# Tag ids used by the summary
MODEL = 0x0110
MAKE = 0x010F
ORIENTATION = 0x0112
FOCAL_LENGTH = 0x920A
F_NUMBER = 0x829D
EXPOSURE_TIME = 0x829A
SHUTTER_SPEED_VALUE = 0x9201
ISO_SPEED_RATINGS = 0x8827
LENS_MODEL = 0xA434


class GetExif:
    """
    Main class for reading EXIF summaries from JPEG files.

    Example:
        >>> reader = GetExif()
        >>> data = reader.read('photo.jpg', format_mode=FormatMode.HUMAN_WITH_UNITS)
        >>> data['exposure']['shutter_speed']
        {'raw': '10/1250', 'value': '1/125 s'}
    """

    def __init__(self, max_bytes: Optional[int] = None, options: Optional[DecoderOptions] = None):
        """
        Initialize GetExif.

        Args:
            max_bytes: Optional maximum number of bytes to read from each file.
                       EXIF lives in the first 64KB of a JPEG; if None, reads
                       the entire file.
            options: Decoding limits passed to ExifReader
        """
        self.max_bytes = max_bytes
        self.reader = ExifReader(options)

    def read(
        self,
        file_path: Union[str, Path],
        fields: Union[FieldSet, str] = FieldSet.ALL,
        format_mode: Union[FormatMode, str] = FormatMode.HUMAN_WITH_UNITS,
        keep_raw_keys: bool = False,
        ignore_errors: bool = False
    ) -> Dict[str, Any]:
        """
        Read the EXIF summary of a JPEG file.

        Args:
            file_path: Path to the JPEG file
            fields: FieldSet.ALL or FieldSet.EXPOSURE
            format_mode: FormatMode.RAW, HUMAN or HUMAN_WITH_UNITS
            keep_raw_keys: Include every decoded tag under "raw_all"
            ignore_errors: Return an all-empty summary instead of raising
                           when the EXIF data cannot be decoded

        Returns:
            Summary dictionary (see build_summary)

        Raises:
            FileNotFoundError: If the file does not exist
            MetadataReadError: If the EXIF data cannot be decoded and
                               ignore_errors is False
        """
        data = self._load(file_path)
        return self.read_bytes(data, fields, format_mode, keep_raw_keys, ignore_errors)

    def decode_file(self, file_path: Union[str, Path]) -> ExifDocument:
        """
        Decode the full EXIF document of a JPEG file.

        Raises:
            FileNotFoundError: If the file does not exist
            MetadataReadError: If the EXIF data cannot be decoded
        """
        return self.reader.decode(self._load(file_path))

    def _load(self, file_path: Union[str, Path]) -> bytes:
        path = Path(file_path)
        if not path.is_file():
            raise FileNotFoundError(f"File not found or not readable: {file_path}")

        with open(path, 'rb') as f:
            return f.read() if self.max_bytes is None else f.read(self.max_bytes)

    def read_bytes(
        self,
        data: bytes,
        fields: Union[FieldSet, str] = FieldSet.ALL,
        format_mode: Union[FormatMode, str] = FormatMode.HUMAN_WITH_UNITS,
        keep_raw_keys: bool = False,
        ignore_errors: bool = False
    ) -> Dict[str, Any]:
        """Same as read(), for a JPEG already in memory."""
        fields = FieldSet(fields)
        format_mode = FormatMode(format_mode)

        try:
            document = self.reader.decode(data)
        except MetadataReadError as e:
            if not ignore_errors:
                raise
            logger.error(f"Could not decode EXIF data: {e.message}")
            document = ExifDocument()

        return build_summary(document, fields, format_mode, keep_raw_keys)


def _first_value(document: ExifDocument, *candidates: Tuple[str, int]):
    for group, tag in candidates:
        value = document.get(group, tag)
        if value is not None:
            return value
    return None


def _text(value) -> Optional[str]:
    if isinstance(value, Ascii):
        text = value.text.strip(' \x00')
        return text or None
    return None


def _format_value(
    raw: Any,
    formatter: Callable[..., str],
    format_mode: FormatMode,
    source: Any = None
) -> Any:
    if raw is None:
        return None
    if format_mode is FormatMode.RAW:
        return to_python(raw)
    return formatter(raw if source is None else source,
                     with_unit=format_mode is FormatMode.HUMAN_WITH_UNITS)


def build_summary(
    document: ExifDocument,
    fields: FieldSet = FieldSet.ALL,
    format_mode: FormatMode = FormatMode.HUMAN_WITH_UNITS,
    keep_raw_keys: bool = False
) -> Dict[str, Any]:
    """
    Build the summary dictionary for a decoded document.

    Keys:
        camera, orientation, geolocation ({"lat", "lng"}), created
        ("YYYY-MM-DD HH:MM:SS"), raw_all (only with keep_raw_keys),
        exposure ({focal_length, aperture, shutter_speed, iso}, each
        {"raw", "value"}), and for FieldSet.ALL also lens and make.
        Missing values are None.
    """
    result: Dict[str, Any] = {}

    result['camera'] = _text(document.get(GROUP_IFD0, MODEL))
    orientation = document.get(GROUP_IFD0, ORIENTATION)
    result['orientation'] = to_python(orientation) if orientation is not None else None

    location = document.geolocation()
    result['geolocation'] = {'lat': location.latitude, 'lng': location.longitude} if location else None

    created = document.created_at()
    result['created'] = created.strftime('%Y-%m-%d %H:%M:%S') if created else None

    if keep_raw_keys:
        result['raw_all'] = document.to_dict()

    raw_focal = _first_value(document, (GROUP_EXIF, FOCAL_LENGTH), (GROUP_IFD0, FOCAL_LENGTH))
    raw_aperture = _first_value(document, (GROUP_EXIF, F_NUMBER), (GROUP_IFD0, F_NUMBER))
    raw_iso = document.get(GROUP_EXIF, ISO_SPEED_RATINGS)

    # ShutterSpeedValue is APEX; convert it to seconds before formatting
    raw_shutter = document.get(GROUP_EXIF, EXPOSURE_TIME)
    shutter_seconds = None
    if raw_shutter is None:
        raw_shutter = document.get(GROUP_EXIF, SHUTTER_SPEED_VALUE)
        if raw_shutter is not None:
            shutter_seconds = value_formatter.apex_to_exposure_time(raw_shutter)

    exposure = {
        'focal_length': (raw_focal, value_formatter.focal_length, None),
        'aperture': (raw_aperture, value_formatter.aperture, None),
        'shutter_speed': (raw_shutter, value_formatter.shutter, shutter_seconds),
        'iso': (raw_iso, value_formatter.iso, None),
    }
    result['exposure'] = {
        key: {
            'raw': to_python(raw) if raw is not None else None,
            'value': _format_value(raw, formatter, format_mode, source),
        }
        for key, (raw, formatter, source) in exposure.items()
    }

    if fields is FieldSet.ALL:
        result['lens'] = _text(_first_value(document, (GROUP_EXIF, LENS_MODEL), (GROUP_IFD0, LENS_MODEL)))
        result['make'] = _text(document.get(GROUP_IFD0, MAKE))

    return result
