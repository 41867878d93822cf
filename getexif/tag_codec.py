# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
EXIF tag value codec

Type-specific decoding of the raw bytes of an IFD entry into typed values.
Decoded values form a closed set of small immutable classes:

- UnsignedInt / SignedInt: a single integer
- Rational: numerator/denominator pair (denominator 0 means undefined)
- Ascii: text
- ByteSequence: BYTE/SBYTE arrays, UNDEFINED data and unknown types
- IntegerSequence: SHORT/LONG/SSHORT/SLONG arrays
- RationalSequence: RATIONAL/SRATIONAL arrays (e.g. GPS coordinates)

Copyright 2025 DNAi inc.
"""

import struct
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Tuple, Union

from getexif.byte_cursor import ByteOrder
from getexif.exceptions import TruncatedDataError


class ExifTagType(IntEnum):
    """EXIF tag data types"""
    BYTE = 1
    ASCII = 2
    SHORT = 3
    LONG = 4
    RATIONAL = 5
    SBYTE = 6
    UNDEFINED = 7
    SSHORT = 8
    SLONG = 9
    SRATIONAL = 10


# EXIF tag sizes in bytes
TAG_SIZES = {
    ExifTagType.BYTE: 1,
    ExifTagType.ASCII: 1,
    ExifTagType.SHORT: 2,
    ExifTagType.LONG: 4,
    ExifTagType.RATIONAL: 8,
    ExifTagType.SBYTE: 1,
    ExifTagType.UNDEFINED: 1,
    ExifTagType.SSHORT: 2,
    ExifTagType.SLONG: 4,
    ExifTagType.SRATIONAL: 8,
}

# struct codes for the integer types
_INTEGER_CODES = {
    ExifTagType.BYTE: 'B',
    ExifTagType.SBYTE: 'b',
    ExifTagType.SHORT: 'H',
    ExifTagType.SSHORT: 'h',
    ExifTagType.LONG: 'I',
    ExifTagType.SLONG: 'i',
}

_SIGNED_TYPES = {ExifTagType.SBYTE, ExifTagType.SSHORT, ExifTagType.SLONG}


def tag_size(value_type: int) -> int:
    """Size in bytes of one unit of `value_type`; unknown types count as 1."""
    try:
        return TAG_SIZES[ExifTagType(value_type)]
    except ValueError:
        return 1


@dataclass(frozen=True)
class UnsignedInt:
    value: int

    def to_python(self) -> int:
        return self.value

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class SignedInt:
    value: int

    def to_python(self) -> int:
        return self.value

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Rational:
    """
    EXIF rational number.

    The pair is kept exactly as stored so formatting code can apply its own
    rounding. A zero denominator is an explicit "undefined" marker.
    """
    numerator: int
    denominator: int

    @property
    def is_undefined(self) -> bool:
        return self.denominator == 0

    def to_float(self) -> float:
        """Return numerator / denominator, or 0.0 when the denominator is 0."""
        if self.denominator == 0:
            return 0.0
        return self.numerator / self.denominator

    def to_python(self) -> str:
        return f'{self.numerator}/{self.denominator}'

    def __str__(self) -> str:
        return self.to_python()


@dataclass(frozen=True)
class Ascii:
    text: str

    def to_python(self) -> str:
        return self.text

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class ByteSequence:
    values: Tuple[int, ...]

    def __len__(self) -> int:
        return len(self.values)

    def to_bytes(self) -> bytes:
        return bytes(v & 0xFF for v in self.values)

    def to_python(self) -> list:
        return list(self.values)

    def __str__(self) -> str:
        return ' '.join(str(v) for v in self.values)


@dataclass(frozen=True)
class IntegerSequence:
    values: Tuple[int, ...]

    def __len__(self) -> int:
        return len(self.values)

    def to_python(self) -> list:
        return list(self.values)

    def __str__(self) -> str:
        return ' '.join(str(v) for v in self.values)


@dataclass(frozen=True)
class RationalSequence:
    values: Tuple[Rational, ...]

    def __len__(self) -> int:
        return len(self.values)

    def to_python(self) -> list:
        return [r.to_python() for r in self.values]

    def __str__(self) -> str:
        return ', '.join(str(r) for r in self.values)


RawTagValue = Union[
    UnsignedInt, SignedInt, Rational, Ascii,
    ByteSequence, IntegerSequence, RationalSequence,
]


def _decode_ascii(data: bytes) -> str:
    # Count includes the terminator; drop exactly one trailing NUL
    if data.endswith(b'\x00'):
        data = data[:-1]
    try:
        return data.decode('utf-8', errors='strict')
    except UnicodeDecodeError:
        # Latin-1 maps every byte, so nothing is ever rejected
        return data.decode('latin-1')


def decode_tag_value(
    value_type: int,
    count: int,
    raw: bytes,
    byte_order: ByteOrder
) -> RawTagValue:
    """
    Decode the raw bytes of an IFD entry.

    Args:
        value_type: EXIF type code (ExifTagType value or an unknown code)
        count: Number of values
        raw: At least count * tag_size(value_type) bytes
        byte_order: Byte order of the TIFF structure

    Returns:
        Decoded value; count == 1 collapses numeric types to a scalar

    Raises:
        TruncatedDataError: If `raw` is shorter than the declared size
    """
    total_size = tag_size(value_type) * count
    if len(raw) < total_size:
        raise TruncatedDataError(
            f"Tag value needs {total_size} bytes, only {len(raw)} available"
        )
    data = bytes(raw[:total_size])
    endian = byte_order.value

    try:
        tag_type = ExifTagType(value_type)
    except ValueError:
        return ByteSequence(tuple(data))

    if tag_type == ExifTagType.ASCII:
        return Ascii(_decode_ascii(data))

    if tag_type == ExifTagType.UNDEFINED:
        return ByteSequence(tuple(data))

    if tag_type in (ExifTagType.RATIONAL, ExifTagType.SRATIONAL):
        code = 'i' if tag_type == ExifTagType.SRATIONAL else 'I'
        numbers = struct.unpack(f'{endian}{2 * count}{code}', data)
        values = tuple(Rational(numbers[i], numbers[i + 1]) for i in range(0, len(numbers), 2))
        if count == 1:
            return values[0]
        return RationalSequence(values)

    numbers = struct.unpack(f'{endian}{count}{_INTEGER_CODES[tag_type]}', data)
    if count == 1:
        if tag_type in _SIGNED_TYPES:
            return SignedInt(numbers[0])
        return UnsignedInt(numbers[0])
    if tag_type in (ExifTagType.BYTE, ExifTagType.SBYTE):
        return ByteSequence(tuple(numbers))
    return IntegerSequence(tuple(numbers))


def to_python(value: Any) -> Any:
    """JSON-friendly form of a decoded value; passes other objects through."""
    if hasattr(value, 'to_python'):
        return value.to_python()
    return value
