"""
Conversions between "HH:MM" wall-clock strings and decimal hours.

The open-hours editor works in decimal hours (a range slider from 0 to 24)
while availability documents store "HH:MM" strings. None of these helpers
raise: a string that cannot be read maps to ``FALLBACK_HOURS``.
"""

import math
from typing import Optional, Tuple

FALLBACK_HOURS = 9.0


def _parse_component(raw: str) -> Optional[float]:
    raw = raw.strip()
    if not raw:
        # An empty component reads as zero, so ":30" is half past midnight.
        return 0.0
    try:
        value = float(raw)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value


def _split_decimal(decimal: float) -> Tuple[int, int]:
    """Split decimal hours into whole hours and minutes rounded half up."""
    if not isinstance(decimal, (int, float)) or not math.isfinite(decimal):
        decimal = FALLBACK_HOURS
    hours = math.floor(decimal)
    minutes = math.floor((decimal - hours) * 60 + 0.5)
    return hours, minutes


def time_to_decimal(value: str) -> float:
    """
    Convert a "HH:MM" string to decimal hours.

    e.g. "09:30" -> 9.5

    Returns FALLBACK_HOURS when the string has no minutes component or when
    either component is not numeric.
    """
    if not isinstance(value, str):
        return FALLBACK_HOURS

    parts = value.split(":")
    if len(parts) < 2:
        return FALLBACK_HOURS

    hours = _parse_component(parts[0])
    minutes = _parse_component(parts[1])
    if hours is None or minutes is None:
        return FALLBACK_HOURS

    return hours + minutes / 60


def decimal_to_time(decimal: float) -> str:
    """
    Convert decimal hours to a zero-padded "HH:MM" string.

    e.g. 9.5 -> "09:30"

    The value is not clamped to 0-24.
    """
    hours, minutes = _split_decimal(decimal)
    return f"{hours:02d}:{minutes:02d}"


def decimal_to_label(decimal: float) -> str:
    """
    Format decimal hours as a 12-hour label.

    e.g. 9.5 -> "9:30 AM", 14.0 -> "2:00 PM", 0 -> "12:00 AM"
    """
    hours, minutes = _split_decimal(decimal)

    period = "PM" if hours >= 12 else "AM"
    display_hour = hours % 12 or 12

    return f"{display_hour}:{minutes:02d} {period}"
