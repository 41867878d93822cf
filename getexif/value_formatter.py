# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Value formatter for exposure-related EXIF values.

Turns decoded values (usually rationals) into human-readable strings,
with or without units:

    FocalLength   280/10    -> "28 mm"    / "28"
    FNumber       4600/1000 -> "f/4.6"    / "4.6"
    ExposureTime  10/1250   -> "1/125 s"  / "1/125"
    ISO           200       -> "ISO 200"  / "200"

Every function accepts a missing or degenerate value and falls back to
zero instead of raising. Arithmetic is done on exact fractions so the
rounding only happens once, on the final displayed number; rounding is
half away from zero.

Copyright 2025 DNAi inc.
"""

import math
import sys
from fractions import Fraction
from typing import Any, Optional

from getexif.tag_codec import (
    Ascii,
    ByteSequence,
    IntegerSequence,
    Rational,
    RationalSequence,
    SignedInt,
    UnsignedInt,
)

# Largest magnitude that still converts back to a float
_MAX_FLOAT = Fraction(sys.float_info.max)


def _to_fraction(value: Any) -> Optional[Fraction]:
    """
    Convert a decoded value, number or "n/d" string to an exact fraction.

    Sequences use their first element. Returns None for anything empty,
    non-numeric, non-finite, beyond the float range or with a zero
    denominator.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Rational):
        if value.denominator == 0:
            return None
        return Fraction(value.numerator, value.denominator)
    if isinstance(value, (UnsignedInt, SignedInt)):
        return Fraction(value.value)
    if isinstance(value, (RationalSequence, IntegerSequence, ByteSequence)):
        return _to_fraction(value.values[0]) if value.values else None
    if isinstance(value, Ascii):
        return _to_fraction(value.text)
    if isinstance(value, int):
        return Fraction(value)
    if isinstance(value, float):
        return Fraction(value) if math.isfinite(value) else None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        numerator, _, denominator = text.partition('/')
        try:
            numerator_value = float(numerator)
            denominator_value = float(denominator) if denominator.strip() else 1.0
        except ValueError:
            return None
        # "inf", "nan" and "1e400" parse as floats but have no exact fraction
        if not (math.isfinite(numerator_value) and math.isfinite(denominator_value)):
            return None
        if denominator_value == 0:
            return None
        result = Fraction(numerator_value) / Fraction(denominator_value)
        return result if abs(result) <= _MAX_FLOAT else None
    return None


def to_float(value: Any) -> float:
    """
    Convert any decoded value, number or "n/d" string to float.

    Returns 0.0 for missing, non-numeric or non-finite values and zero
    denominators. For a Rational alone, document.rational_to_float is the
    same as Rational.to_float.
    """
    fraction = _to_fraction(value)
    return float(fraction) if fraction is not None else 0.0


def _round_half_up(value: Fraction, places: int = 0) -> Fraction:
    scale = 10 ** places
    rounded = math.floor(abs(value) * scale + Fraction(1, 2))
    result = Fraction(rounded, scale)
    return -result if value < 0 else result


def _format_number(value: Fraction) -> str:
    # Whole numbers print without a decimal point
    if value.denominator == 1:
        return str(value.numerator)
    return f'{float(value):.10f}'.rstrip('0').rstrip('.')


def focal_length(value: Any, with_unit: bool = True) -> str:
    """Focal length rounded to whole millimetres, e.g. "28 mm"."""
    text = _format_number(_round_half_up(_to_fraction(value) or Fraction(0)))
    return f'{text} mm' if with_unit else text


def aperture(value: Any, with_unit: bool = True) -> str:
    """F-number rounded to one decimal, e.g. "f/4.6"."""
    text = _format_number(_round_half_up(_to_fraction(value) or Fraction(0), 1))
    return f'f/{text}' if with_unit else text


def shutter(value: Any, with_unit: bool = True) -> str:
    """
    Exposure time, e.g. "1/125 s" or "13 s".

    Times of a second or more keep one decimal; shorter times are shown
    as 1/N with N the rounded reciprocal. Non-positive times give "0 s".
    """
    seconds = _to_fraction(value) or Fraction(0)

    if seconds <= 0:
        text = '0'
    elif seconds >= 1:
        text = _format_number(_round_half_up(seconds, 1))
    else:
        text = f'1/{_format_number(_round_half_up(1 / seconds))}'

    return f'{text} s' if with_unit else text


def iso(value: Any, with_unit: bool = True) -> str:
    """ISO speed rounded to a whole number, e.g. "ISO 200"."""
    text = _format_number(_round_half_up(_to_fraction(value) or Fraction(0)))
    return f'ISO {text}' if with_unit else text


def apex_to_exposure_time(value: Any) -> float:
    """
    Convert an APEX shutter speed value (ShutterSpeedValue) to seconds.

    Exposure time is 2 ** -Tv. Returns 0.0 when the value is missing
    or out of range.
    """
    tv = _to_fraction(value)
    if tv is None:
        return 0.0
    try:
        return 2.0 ** -float(tv)
    except OverflowError:
        return 0.0
