"""
Domain models for weekly availability and bookable slots.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import IntEnum
from typing import Any, Dict, List, Mapping, Optional

from pendulum import DateTime

from .time_of_day import decimal_to_label, time_to_decimal


class Weekday(IntEnum):
    """
    Day of the week, numbered from Sunday like the availability documents.

    Each member maps to the three-letter key used in ``weeklyRules``
    (sun, mon, ..., sat).
    """
    SUNDAY = 0
    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6

    @property
    def key(self) -> str:
        """Document key, e.g. 'sat'."""
        return self.name[:3].lower()

    @property
    def display_name(self) -> str:
        return self.name.capitalize()

    @classmethod
    def from_key(cls, key: str) -> "Weekday | None":
        """Look up a weekday by its document key. Returns None if unknown."""
        for day in cls:
            if day.key == key:
                return day
        return None

    @classmethod
    def from_date(cls, value: date) -> "Weekday":
        """Weekday of a calendar date (isoweekday runs Monday=1 .. Sunday=7)."""
        return cls(value.isoweekday() % 7)


@dataclass(frozen=True)
class OpenBlock:
    """
    One contiguous stretch of local wall-clock time within a day.

    ``start`` and ``end`` are "HH:MM" strings exactly as the provider saved
    them. They are not validated here: a malformed or inverted block simply
    produces no slots.
    """
    start: str
    end: str

    def label(self) -> str:
        """Human-readable range, e.g. '9:00 AM – 5:00 PM'."""
        start_label = decimal_to_label(time_to_decimal(self.start))
        end_label = decimal_to_label(time_to_decimal(self.end))
        return f"{start_label} – {end_label}"

    def to_dict(self) -> Dict[str, str]:
        return {"start": self.start, "end": self.end}


@dataclass
class WeeklyAvailability:
    """
    A provider's recurring open hours, one list of blocks per weekday.

    Days missing from ``weekly_rules`` count as closed. Blocks within a day
    may be unsorted or overlap.
    """
    provider_id: str
    weekly_rules: Dict[Weekday, List[OpenBlock]] = field(default_factory=dict)
    slot_granularity_minutes: Optional[int] = None  # informational only

    def blocks_for(self, day: Weekday) -> List[OpenBlock]:
        """Open blocks for a weekday, empty when the day is closed."""
        return list(self.weekly_rules.get(day) or [])

    def is_closed(self) -> bool:
        """True when no day of the week has any open block."""
        return not any(self.weekly_rules.get(day) for day in Weekday)

    @classmethod
    def closed(
        cls,
        provider_id: str,
        slot_granularity_minutes: Optional[int] = None
    ) -> "WeeklyAvailability":
        """Availability with all seven days closed."""
        return cls(
            provider_id=provider_id,
            weekly_rules={day: [] for day in Weekday},
            slot_granularity_minutes=slot_granularity_minutes
        )

    @classmethod
    def from_document(
        cls,
        provider_id: str,
        document: Optional[Mapping[str, Any]]
    ) -> "WeeklyAvailability":
        """
        Build availability from its stored document form.

        Expected shape:
        {
            "slotDurationMins": 60,
            "weeklyRules": {
                "sun": [],
                "sat": [{"start": "09:00", "end": "17:00"}],
                ...
            }
        }

        Parsing is lenient: unknown day keys and blocks without string
        start/end values are skipped, and a missing document yields the
        all-closed default.
        """
        if not isinstance(document, Mapping):
            return cls.closed(provider_id)

        granularity = document.get("slotDurationMins")
        if not isinstance(granularity, int) or isinstance(granularity, bool):
            granularity = None

        availability = cls.closed(provider_id, slot_granularity_minutes=granularity)

        raw_rules = document.get("weeklyRules")
        if not isinstance(raw_rules, Mapping):
            return availability

        for key, raw_blocks in raw_rules.items():
            day = Weekday.from_key(str(key).lower())
            if day is None or not isinstance(raw_blocks, (list, tuple)):
                continue

            availability.weekly_rules[day] = [
                OpenBlock(start=raw["start"], end=raw["end"])
                for raw in raw_blocks
                if isinstance(raw, Mapping)
                and isinstance(raw.get("start"), str)
                and isinstance(raw.get("end"), str)
            ]

        return availability

    def to_document(self) -> Dict[str, Any]:
        """Serialize to the stored document form, always with all 7 days."""
        document: Dict[str, Any] = {
            "weeklyRules": {
                day.key: [block.to_dict() for block in self.blocks_for(day)]
                for day in Weekday
            }
        }
        if self.slot_granularity_minutes is not None:
            document["slotDurationMins"] = self.slot_granularity_minutes
        return document


@dataclass(frozen=True)
class BookableSlot:
    """
    A concrete, dated appointment window derived from an open block.

    Slots are never stored. ``key`` (the UTC ISO form of ``start_at``) is
    what callers use to identify the slot a client picked.
    """
    start_at: DateTime
    end_at: DateTime
    label: str = ""

    @property
    def key(self) -> str:
        return self.start_at.in_timezone("UTC").to_iso8601_string()

    def duration_minutes(self) -> int:
        """Return the duration in minutes."""
        return int((self.end_at - self.start_at).total_seconds() / 60)

    def date_key(self) -> str:
        """Local calendar date of the start, as YYYY-MM-DD."""
        return self.start_at.format("YYYY-MM-DD")

    def to_dict(self) -> Dict[str, str]:
        return {
            "startAt": self.key,
            "endAt": self.end_at.in_timezone("UTC").to_iso8601_string(),
            "label": self.label,
        }

    def __str__(self) -> str:
        return f"{self.start_at.format('YYYY-MM-DD HH:mm')} - {self.end_at.format('HH:mm')}"
