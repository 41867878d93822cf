# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Unit tests for exposure value formatting.
"""

import pytest

from getexif import value_formatter
from getexif.tag_codec import Ascii, IntegerSequence, Rational, RationalSequence, SignedInt, UnsignedInt


@pytest.mark.unit
class TestToFloat:

    @pytest.mark.parametrize("value,expected", [
        (Rational(280, 10), 28.0),
        (UnsignedInt(200), 200.0),
        (SignedInt(-3), -3.0),
        (RationalSequence((Rational(1, 2), Rational(3, 1))), 0.5),
        (Ascii('280/10'), 28.0),
        ('280/10', 28.0),
        ('4.5', 4.5),
        (7, 7.0),
        (0.25, 0.25),
    ])
    def test_values(self, value, expected):
        assert value_formatter.to_float(value) == expected

    @pytest.mark.parametrize("value", [
        None, '', '1/0', 'abc', Rational(1, 0), float('inf'), True, IntegerSequence(()),
        'inf/1', '1/inf', '1e400/2', 'nan', '1e308/1e-308', Ascii('inf/1'),
    ])
    def test_degenerate_values_are_zero(self, value):
        assert value_formatter.to_float(value) == 0.0


@pytest.mark.unit
class TestFocalLength:

    def test_with_unit(self):
        assert value_formatter.focal_length(Rational(280, 10)) == '28 mm'

    def test_without_unit(self):
        assert value_formatter.focal_length(Rational(280, 10), with_unit=False) == '28'

    def test_rounds_half_up(self):
        assert value_formatter.focal_length(Rational(245, 10)) == '25 mm'
        assert value_formatter.focal_length(Rational(244, 10)) == '24 mm'

    def test_missing(self):
        assert value_formatter.focal_length(None) == '0 mm'

    @pytest.mark.parametrize("value", ['inf/1', '1e400/2', Ascii('nan')])
    def test_non_finite_text(self, value):
        assert value_formatter.focal_length(value) == '0 mm'
        assert value_formatter.aperture(value) == 'f/0'
        assert value_formatter.shutter(value) == '0 s'
        assert value_formatter.iso(value) == 'ISO 0'


@pytest.mark.unit
class TestAperture:

    @pytest.mark.parametrize("value,expected", [
        (Rational(4600, 1000), 'f/4.6'),
        (Rational(28, 10), 'f/2.8'),
        (Rational(8, 1), 'f/8'),
        (Rational(45, 20), 'f/2.3'),
    ])
    def test_with_unit(self, value, expected):
        assert value_formatter.aperture(value) == expected

    def test_without_unit(self):
        assert value_formatter.aperture(Rational(4600, 1000), with_unit=False) == '4.6'

    def test_zero_denominator(self):
        assert value_formatter.aperture(Rational(4, 0)) == 'f/0'


@pytest.mark.unit
class TestShutter:

    @pytest.mark.parametrize("value,expected", [
        (Rational(10, 1250), '1/125 s'),
        (Rational(1, 4000), '1/4000 s'),
        (Rational(3, 10), '1/3 s'),
        (Rational(1, 1), '1 s'),
        (Rational(13, 1), '13 s'),
        (Rational(25, 10), '2.5 s'),
        (Rational(0, 1), '0 s'),
        (Rational(1, 0), '0 s'),
        ('1/3', '1/3 s'),
        (None, '0 s'),
    ])
    def test_with_unit(self, value, expected):
        assert value_formatter.shutter(value) == expected

    def test_without_unit(self):
        assert value_formatter.shutter(Rational(10, 1250), with_unit=False) == '1/125'
        assert value_formatter.shutter(Rational(13, 1), with_unit=False) == '13'

    def test_exact_reciprocal(self):
        # 1/(1/3) is computed on the exact fraction, not a rounded float
        assert value_formatter.shutter(Rational(1, 3)) == '1/3 s'


@pytest.mark.unit
class TestIso:

    def test_with_unit(self):
        assert value_formatter.iso(UnsignedInt(200)) == 'ISO 200'

    def test_without_unit(self):
        assert value_formatter.iso(UnsignedInt(200), with_unit=False) == '200'

    def test_sequence_uses_first_value(self):
        assert value_formatter.iso(IntegerSequence((100, 400))) == 'ISO 100'

    def test_missing(self):
        assert value_formatter.iso(None) == 'ISO 0'


@pytest.mark.unit
class TestApex:

    def test_shutter_speed_value(self):
        assert value_formatter.apex_to_exposure_time(Rational(7, 1)) == 2 ** -7
        assert value_formatter.shutter(value_formatter.apex_to_exposure_time(Rational(7, 1))) == '1/128 s'

    def test_long_exposure(self):
        assert value_formatter.apex_to_exposure_time(SignedInt(-2)) == 4.0

    @pytest.mark.parametrize("value", [None, Rational(1, 0), SignedInt(-2000)])
    def test_unusable_values(self, value):
        assert value_formatter.apex_to_exposure_time(value) == 0.0
