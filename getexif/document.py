# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Decoded EXIF document

ExifDocument is the immutable result of a decode: the IFD groups, the byte
order of the payload and the entries that had to be skipped. Derived views
(geolocation, creation time) are computed on demand and never raise; any
missing or inconsistent data gives None.

Copyright 2025 DNAi inc.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from getexif.byte_cursor import ByteOrder
from getexif.exif_tags import GROUP_EXIF, GROUP_GPS, GROUP_IFD0, tag_id as lookup_tag_id, tag_name
from getexif.ifd_decoder import EntryError, IfdEntry, IfdGroup
from getexif.tag_codec import Ascii, Rational, RationalSequence, RawTagValue

# Creation time candidates, in order of preference
CREATED_AT_TAGS = (
    (GROUP_EXIF, 0x9003),  # DateTimeOriginal
    (GROUP_EXIF, 0x9004),  # DateTimeDigitized
    (GROUP_IFD0, 0x0132),  # DateTime
)

GPS_LATITUDE_REF = 0x0001
GPS_LATITUDE = 0x0002
GPS_LONGITUDE_REF = 0x0003
GPS_LONGITUDE = 0x0004

# "YYYY:MM:DD", then optionally " HH:MM:SS" with sub-seconds
_EXIF_DATETIME = re.compile(
    r'([0-9]{4}):([0-9]{2}):([0-9]{2})'
    r'(?:\s+([0-9]{2}):([0-9]{2}):([0-9]{2})(?:\.([0-9]{1,6})[0-9]*)?)?'
)


def rational_to_float(value: Rational) -> float:
    """
    Convert a rational to float.

    Returns 0.0 for a zero denominator, the undefined-value convention,
    so the result is never infinite or NaN.
    """
    return value.to_float()


def parse_exif_datetime(value: str) -> Optional[datetime]:
    """
    Parse an EXIF date string such as "2020:05:26 14:32:18".

    Only the fixed "YYYY:MM:DD HH:MM:SS" layout is accepted, with an
    optional fraction of a second ("14:32:18.50", kept to microseconds).
    The time part defaults to midnight when missing. Returns None for
    anything else, including unpadded fields and calendar dates that do
    not exist such as the "0000:00:00 00:00:00" placeholder some cameras
    write.
    """
    match = _EXIF_DATETIME.fullmatch(value.strip(' \t\r\n\x00'))
    if not match:
        return None
    year, month, day, hour, minute, second, fraction = match.groups()
    try:
        return datetime(
            int(year), int(month), int(day),
            int(hour or 0), int(minute or 0), int(second or 0),
            int((fraction or '').ljust(6, '0')),
        )
    except ValueError:
        return None
    date_part = parts[0].replace(':', '-', 2)
    time_part = parts[1] if len(parts) > 1 else '00:00:00'
    try:
        return datetime.strptime(f'{date_part} {time_part}', '%Y-%m-%d %H:%M:%S')
    except ValueError:
        return None


@dataclass(frozen=True)
class GeoCoordinate:
    """Latitude/longitude in signed decimal degrees."""
    latitude: float
    longitude: float


@dataclass(frozen=True)
class ExifDocument:
    """
    Decoded EXIF metadata.

    Attributes:
        groups: IFD groups by name (IFD0, EXIF, GPS, Interop)
        byte_order: Byte order of the Exif payload
        errors: Entries skipped while decoding

    Example:
        >>> document = ExifReader().decode(jpeg_bytes)
        >>> document.get('IFD0', 'Model')
        Ascii(text='X-T4')
        >>> document.geolocation()
        GeoCoordinate(latitude=40.446..., longitude=-79.982...)
    """
    groups: Mapping[str, IfdGroup] = field(default_factory=lambda: MappingProxyType({}))
    byte_order: ByteOrder = ByteOrder.BIG_ENDIAN
    errors: Tuple[EntryError, ...] = ()

    def __contains__(self, group: object) -> bool:
        return group in self.groups

    def group(self, name: str) -> Optional[IfdGroup]:
        return self.groups.get(name)

    def get_entry(self, group: str, tag: Union[int, str]) -> Optional[IfdEntry]:
        """
        Look up a directory entry.

        Args:
            group: Group name
            tag: Numeric tag id or tag name (e.g. "FocalLength")
        """
        ifd = self.groups.get(group)
        if ifd is None:
            return None
        if isinstance(tag, str):
            tag = lookup_tag_id(group, tag)
            if tag is None:
                return None
        return ifd.get(tag)

    def get(self, group: str, tag: Union[int, str]) -> Optional[RawTagValue]:
        """
        Get a decoded tag value.

        Returns:
            The value, or None if the group or tag is absent
        """
        entry = self.get_entry(group, tag)
        return entry.value if entry is not None else None

    def geolocation(self) -> Optional[GeoCoordinate]:
        """
        Assemble the GPS position.

        Latitude and longitude must each be exactly three rationals
        (degrees, minutes, seconds). "S" and "W" references negate;
        a missing reference leaves the value positive.
        """
        latitude = self._gps_degrees(GPS_LATITUDE, GPS_LATITUDE_REF, 's')
        longitude = self._gps_degrees(GPS_LONGITUDE, GPS_LONGITUDE_REF, 'w')
        if latitude is None or longitude is None:
            return None
        return GeoCoordinate(latitude=latitude, longitude=longitude)

    def _gps_degrees(self, coordinate_tag: int, ref_tag: int, negative_ref: str) -> Optional[float]:
        coordinate = self.get(GROUP_GPS, coordinate_tag)
        if not isinstance(coordinate, RationalSequence) or len(coordinate) != 3:
            return None

        degrees, minutes, seconds = (rational_to_float(r) for r in coordinate.values)
        value = degrees + minutes / 60.0 + seconds / 3600.0

        ref = self.get(GROUP_GPS, ref_tag)
        if isinstance(ref, Ascii) and ref.text.strip(' \x00').lower() == negative_ref:
            value = -value
        return value

    def created_at(self) -> Optional[datetime]:
        """
        Creation time of the image.

        Tries DateTimeOriginal, then DateTimeDigitized, then IFD0 DateTime;
        the first one that parses as a valid date and time wins.
        """
        for group, tag in CREATED_AT_TAGS:
            value = self.get(group, tag)
            if not isinstance(value, Ascii):
                continue
            parsed = parse_exif_datetime(value.text)
            if parsed is not None:
                return parsed
        return None

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        """
        Plain nested dictionary {group: {tag name: value}}, JSON-friendly.
        """
        return {
            name: {tag_name(name, tag): entry.value.to_python() for tag, entry in ifd.items()}
            for name, ifd in self.groups.items()
        }
