"""
Core business logic for expanding weekly open hours into bookable slots.

Pure domain logic without any external dependencies (no API calls, no
database, no I/O). "now" and the timezone are injectable so the same inputs
always produce the same slots.
"""

import logging
import re
from datetime import datetime
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Tuple

import pendulum
from pendulum import DateTime

from .models import BookableSlot, OpenBlock, Weekday, WeeklyAvailability

logger = logging.getLogger(__name__)

DEFAULT_SERVICE_DURATION_MINUTES = 60
DEFAULT_DAYS_FORWARD = 14

# Candidate start times step by this much regardless of the service length.
SCAN_STRIDE_MINUTES = 30

_WALL_TIME_PATTERN = re.compile(r"^\s*(\d{1,2}):(\d{2})(?::(\d{2}))?\s*$")


class SlotGenerator:
    """
    Turns a provider's weekly availability into bookable slots.

    Algorithm:
    1. Walk calendar days from today (local) for ``days_forward`` days
    2. Look up the open blocks for each day's weekday
    3. Inside each block, try a start every 30 minutes from the block's own
       start while the whole service still fits before the block ends
    4. Keep only starts strictly after "now"

    Blocks are expanded independently, so overlapping blocks on the same
    day can produce out-of-order (or repeated) starts. Callers needing a
    strict global order must sort by ``start_at``.
    """

    def __init__(
        self,
        timezone: Optional[str] = None,
        clock: Optional[Callable[[], DateTime]] = None
    ):
        """
        Args:
            timezone: IANA timezone for wall-clock times. Defaults to the
                local timezone of the machine.
            clock: Returns the current moment. Defaults to ``pendulum.now``.
        """
        self.timezone = timezone
        self._clock = clock

    def now(self) -> DateTime:
        """Current moment in the generator's timezone."""
        if self._clock is None:
            return pendulum.now(self._timezone_name())
        return self._localize(self._clock())

    def generate(
        self,
        availability: WeeklyAvailability,
        service_duration_minutes: int = DEFAULT_SERVICE_DURATION_MINUTES,
        days_forward: int = DEFAULT_DAYS_FORWARD,
        now: Optional[datetime] = None
    ) -> List[BookableSlot]:
        """
        Generate every bookable slot over the horizon.

        Args:
            availability: Weekly open hours of the provider
            service_duration_minutes: Length of the booked service
            days_forward: Number of calendar days to expand, starting today
            now: Moment of generation. Defaults to the generator's clock.

        Returns:
            Slots in day, then block, then start order. Empty when nothing
            fits; this method does not raise for odd input.
        """
        return list(
            self.iter_slots(
                availability,
                service_duration_minutes=service_duration_minutes,
                days_forward=days_forward,
                now=now
            )
        )

    def iter_slots(
        self,
        availability: WeeklyAvailability,
        service_duration_minutes: int = DEFAULT_SERVICE_DURATION_MINUTES,
        days_forward: int = DEFAULT_DAYS_FORWARD,
        now: Optional[datetime] = None
    ) -> Iterator[BookableSlot]:
        """Lazy form of :meth:`generate`."""
        if service_duration_minutes <= 0 or days_forward <= 0:
            return

        current = self.now() if now is None else self._localize(now)
        today = current.start_of("day")

        for offset in range(days_forward):
            day = today.add(days=offset)
            for block in availability.blocks_for(Weekday.from_date(day)):
                yield from self._expand_block(
                    day=day,
                    block=block,
                    service_duration_minutes=service_duration_minutes,
                    now=current
                )

    def _expand_block(
        self,
        day: DateTime,
        block: OpenBlock,
        service_duration_minutes: int,
        now: DateTime
    ) -> Iterator[BookableSlot]:
        bounds = self._block_bounds(day, block)
        if bounds is None:
            logger.debug(
                "Skipping unreadable block %s-%s on %s",
                block.start, block.end, day.to_date_string()
            )
            return

        block_start, block_end = bounds
        cursor = block_start

        while True:
            slot_end = cursor.add(minutes=service_duration_minutes)
            if slot_end > block_end:
                break

            if cursor > now:
                yield BookableSlot(
                    start_at=cursor,
                    end_at=slot_end,
                    label=format_slot_label(cursor)
                )

            cursor = cursor.add(minutes=SCAN_STRIDE_MINUTES)

    def _block_bounds(
        self,
        day: DateTime,
        block: OpenBlock
    ) -> Tuple[DateTime, DateTime] | None:
        start = _at_wall_time(day, block.start)
        end = _at_wall_time(day, block.end)
        if start is None or end is None:
            return None
        return start, end

    def _timezone_name(self) -> str:
        if self.timezone:
            return self.timezone
        return pendulum.local_timezone().name

    def _localize(self, moment: datetime) -> DateTime:
        """
        Convert an injected moment to the generator's timezone.

        A naive datetime is read as wall-clock time in that timezone.
        """
        timezone = self._timezone_name()
        if moment.tzinfo is None:
            return pendulum.instance(moment, tz=timezone)
        return pendulum.instance(moment).in_timezone(timezone)


def _at_wall_time(day: DateTime, value: str) -> DateTime | None:
    """
    Combine a start-of-day with an "HH:MM" or "HH:MM:SS" wall time.

    "24:00" is the following midnight. Returns None for anything else
    outside 00:00-23:59:59.
    """
    if not isinstance(value, str):
        return None

    match = _WALL_TIME_PATTERN.match(value)
    if match is None:
        return None

    hour, minute = int(match.group(1)), int(match.group(2))
    second = int(match.group(3) or 0)
    if hour == 24 and minute == 0 and second == 0:
        return day.add(days=1)
    if hour > 23 or minute > 59 or second > 59:
        return None

    return day.set(hour=hour, minute=minute, second=second, microsecond=0)


def format_slot_label(start: DateTime) -> str:
    """Display label for a slot, e.g. 'Sat, Nov 23 • 9:00 AM'."""
    return f"{start.format('ddd, MMM D', locale='en')} • {start.format('h:mm A', locale='en')}"


def generate_slots(
    availability: WeeklyAvailability,
    service_duration_minutes: int = DEFAULT_SERVICE_DURATION_MINUTES,
    days_forward: int = DEFAULT_DAYS_FORWARD,
    *,
    now: Optional[datetime] = None,
    timezone: Optional[str] = None
) -> List[BookableSlot]:
    """Shorthand for ``SlotGenerator(timezone).generate(...)``."""
    return SlotGenerator(timezone=timezone).generate(
        availability,
        service_duration_minutes=service_duration_minutes,
        days_forward=days_forward,
        now=now
    )


def group_slots_by_date(slots: Iterable[BookableSlot]) -> Dict[str, List[BookableSlot]]:
    """
    Group slots by the local date of their start.

    Keys are YYYY-MM-DD in ascending order; each group keeps the order in
    which the slots were generated.
    """
    groups: Dict[str, List[BookableSlot]] = {}

    for slot in slots:
        groups.setdefault(slot.date_key(), []).append(slot)

    return {date_key: groups[date_key] for date_key in sorted(groups)}


def find_slot(slots: Iterable[BookableSlot], key: str) -> BookableSlot | None:
    """Find the slot whose ``key`` (UTC ISO start) matches. None if absent."""
    for slot in slots:
        if slot.key == key:
            return slot
    return None
