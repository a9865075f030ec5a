"""
Tests for the time-of-day conversion helpers.
"""

import pytest

from stylebook.domain.time_of_day import (
    FALLBACK_HOURS,
    decimal_to_label,
    decimal_to_time,
    time_to_decimal,
)


class TestTimeToDecimal:
    """Tests for time_to_decimal."""

    def test_parses_hours_and_minutes(self):
        """Test parsing regular HH:MM strings."""
        assert time_to_decimal("09:30") == 9.5
        assert time_to_decimal("00:00") == 0.0
        assert time_to_decimal("17:45") == 17.75
        assert time_to_decimal("24:00") == 24.0

    @pytest.mark.parametrize("value", ["ab:cd", "9", "", "nine:30", "09:xx", "inf:00"])
    def test_unparseable_falls_back(self, value):
        """Test that malformed strings return the fallback instead of raising."""
        assert time_to_decimal(value) == FALLBACK_HOURS

    def test_non_string_falls_back(self):
        assert time_to_decimal(None) == FALLBACK_HOURS  # type: ignore[arg-type]

    def test_empty_component_reads_as_zero(self):
        """Test that an empty hour or minute component counts as zero."""
        assert time_to_decimal(":30") == 0.5
        assert time_to_decimal("10:") == 10.0


class TestDecimalToTime:
    """Tests for decimal_to_time."""

    def test_formats_zero_padded(self):
        assert decimal_to_time(9.5) == "09:30"
        assert decimal_to_time(0) == "00:00"
        assert decimal_to_time(13.25) == "13:15"

    def test_values_are_not_clamped(self):
        """Test that out-of-range values pass straight through."""
        assert decimal_to_time(24) == "24:00"
        assert decimal_to_time(30.5) == "30:30"

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_falls_back(self, value):
        """Test that NaN and infinities format as the fallback instead of raising."""
        assert decimal_to_time(value) == "09:00"
        assert decimal_to_label(value) == "9:00 AM"

    def test_round_trip_for_every_minute_of_the_day(self):
        """Every valid HH:MM survives a trip through decimal hours."""
        for hour in range(24):
            for minute in range(60):
                value = f"{hour:02d}:{minute:02d}"
                assert decimal_to_time(time_to_decimal(value)) == value


class TestDecimalToLabel:
    """Tests for decimal_to_label."""

    def test_midnight_and_noon_display_as_twelve(self):
        assert decimal_to_label(0) == "12:00 AM"
        assert decimal_to_label(12) == "12:00 PM"

    def test_afternoon(self):
        assert decimal_to_label(13.5) == "1:30 PM"
        assert decimal_to_label(23.75) == "11:45 PM"

    def test_morning(self):
        assert decimal_to_label(9.5) == "9:30 AM"
        assert decimal_to_label(11) == "11:00 AM"
