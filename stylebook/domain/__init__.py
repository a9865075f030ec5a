"""
Domain layer - Pure business logic without external dependencies.
"""

from .models import BookableSlot, OpenBlock, Weekday, WeeklyAvailability
from .slot_generator import SlotGenerator, find_slot, generate_slots, group_slots_by_date

__all__ = [
    "BookableSlot",
    "OpenBlock",
    "Weekday",
    "WeeklyAvailability",
    "SlotGenerator",
    "find_slot",
    "generate_slots",
    "group_slots_by_date",
]
