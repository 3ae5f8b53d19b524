"""
Unit tests for bound literal lexing and duration normalization.
"""

from datetime import timedelta
from fractions import Fraction

import pytest
from hypothesis import given
from hypothesis import strategies as st

from rangetag.core.validators import MalformedLiteral, split_literal, to_ticks
from rangetag.core.validators.literals import UNIT_TICKS, duration_to_ticks, unit_multiplier


class TestSplitLiteral:
    """Tests for split_literal"""

    def test_magnitude_and_unit(self):
        assert split_literal("4milli") == (4, "milli")

    def test_plain_number_has_empty_unit(self):
        assert split_literal("12") == (12, "")

    def test_single_letter_units(self):
        assert split_literal("3h") == (3, "h")
        assert split_literal("15m") == (15, "m")
        assert split_literal("2d") == (2, "d")

    def test_unit_returned_verbatim(self):
        """The lexer does not judge units"""
        assert split_literal("7weeks") == (7, "weeks")

    def test_no_leading_digit_raises(self):
        with pytest.raises(MalformedLiteral) as exc_info:
            split_literal("milli", field_name="D")

        assert exc_info.value.field_name == "D"
        assert "milli" in str(exc_info.value)

    def test_sign_is_not_a_digit(self):
        with pytest.raises(MalformedLiteral):
            split_literal("-5m")

    @given(st.integers(min_value=0, max_value=10**12), st.sampled_from(["", "milli", "m", "h", "d"]))
    def test_split_recovers_parts(self, magnitude, unit):
        """Property: any digits+unit token splits back into its parts"""
        assert split_literal(f"{magnitude}{unit}") == (magnitude, unit)


class TestToTicks:
    """Tests for the duration unit table"""

    @pytest.mark.parametrize("token, expected", [
        ("1milli", 1),
        ("500milli", 500),
        ("1m", 60_000),
        ("1h", 3_600_000),
        ("3h", 10_800_000),
        ("1d", 86_400_000),
        ("0milli", 0),
    ])
    def test_known_units(self, token, expected):
        assert to_ticks(token) == expected

    def test_unknown_unit_counts_as_one_tick(self):
        assert unit_multiplier("fortnight") == 1
        assert to_ticks("42fortnight") == 42

    def test_unit_ordering(self):
        assert UNIT_TICKS["milli"] < UNIT_TICKS["m"] < UNIT_TICKS["h"] < UNIT_TICKS["d"]


class TestDurationToTicks:
    """Tests for converting timedelta field values"""

    def test_whole_milliseconds(self):
        assert duration_to_ticks(timedelta(seconds=1)) == 1000
        assert duration_to_ticks(timedelta(hours=3)) == to_ticks("3h")

    def test_sub_millisecond_kept_exactly(self):
        assert duration_to_ticks(timedelta(microseconds=1500)) == Fraction(3, 2)

    def test_negative_duration(self):
        assert duration_to_ticks(timedelta(milliseconds=-5)) == -5
