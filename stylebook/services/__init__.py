"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .availability import AvailabilityService, DocumentStoreProtocol
from .booking_requests import BookingRequestService

__all__ = ["AvailabilityService", "BookingRequestService", "DocumentStoreProtocol"]
