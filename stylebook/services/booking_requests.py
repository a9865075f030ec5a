"""
Recording a client's chosen slot as a booking request, and moving a
booking to another slot.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

import pendulum
from pendulum import DateTime

from ..domain.exceptions import DocumentNotFoundError
from ..domain.models import BookableSlot
from ..domain.slot_generator import DEFAULT_DAYS_FORWARD
from .availability import AvailabilityService, DocumentStoreProtocol

logger = logging.getLogger(__name__)

BOOKING_COLLECTION = "bookings"
LOCATION_TYPES = ("home_studio", "mobile")
ACTOR_ROLES = ("client", "stylist")


class BookingRequestService:
    """
    Writes booking requests to the document store.

    The chosen slot's start and end are copied verbatim, both for new
    requests and for reschedule proposals. There is no check against other
    bookings for the same stylist.
    """

    def __init__(
        self,
        store: DocumentStoreProtocol,
        clock: Optional[Callable[[], DateTime]] = None,
    ) -> None:
        self._store = store
        self._clock = clock or (lambda: pendulum.now("UTC"))

    async def create_request(
        self,
        *,
        client_id: str,
        provider_id: str,
        service_id: str,
        slot: BookableSlot,
        location_type: str,
        client_name: str = "",
        provider_name: str = "",
        deposit_amount: float = 0,
        total_amount: float = 0,
        mobile_location_note: str | None = None,
    ) -> str:
        """
        Create a booking request in the ``requested`` state.

        Returns:
            The new booking id

        Raises:
            ValueError: If location_type is not a known location option
        """
        if location_type not in LOCATION_TYPES:
            raise ValueError(
                f"Unknown location type '{location_type}'. "
                f"Expected one of: {', '.join(LOCATION_TYPES)}"
            )

        requested_at = self._now_iso()
        slot_data = slot.to_dict()

        document: Dict[str, Any] = {
            "clientId": client_id,
            "clientName": client_name,
            "stylistId": provider_id,
            "stylistName": provider_name,
            "serviceId": service_id,
            "startAt": slot_data["startAt"],
            "endAt": slot_data["endAt"],
            "status": "requested",
            "requestedAt": requested_at,
            "locationType": location_type,
            "mobileLocationNote": mobile_location_note,
            "lastMessageAt": None,
            "depositAmount": deposit_amount,
            "depositPaid": False,
            "totalAmount": total_amount,
            "balancePaid": False,
            "stylistHasNotification": True,
            "createdAt": requested_at,
            "updatedAt": requested_at,
        }

        booking_id = await self._store.add_document(BOOKING_COLLECTION, document)
        logger.info(
            "Booking request %s created for stylist %s at %s",
            booking_id, provider_id, slot_data["startAt"],
        )
        return booking_id

    async def propose_reschedule(
        self,
        booking_id: str,
        slot: BookableSlot,
        *,
        proposed_by: str,
        actor_role: str | None = None,
    ) -> None:
        """
        Attach a proposed new time to a booking.

        The booking keeps its current time until the other party accepts.
        The party that did not propose is flagged as having a notification.
        """
        notify = _notification_field(actor_role)
        now_iso = self._now_iso()
        slot_data = slot.to_dict()

        patch: Dict[str, Any] = {
            "rescheduleProposal": {
                "proposedStartAt": slot_data["startAt"],
                "proposedEndAt": slot_data["endAt"],
                "proposedBy": proposed_by,
                "createdAt": now_iso,
            },
            "updatedAt": now_iso,
        }
        if notify:
            patch[notify] = True

        await self._store.update_document(BOOKING_COLLECTION, booking_id, patch)
        logger.info(
            "Reschedule of %s to %s proposed by %s",
            booking_id, slot_data["startAt"], proposed_by,
        )

    async def respond_to_reschedule(
        self,
        booking_id: str,
        accept: bool,
        *,
        actor_role: str | None = None,
    ) -> bool:
        """
        Accept or decline a pending reschedule proposal.

        Accepting copies the proposed start and end onto the booking. Either
        way the proposal is cleared.

        Returns:
            True if the booking's time changed

        Raises:
            DocumentNotFoundError: If the booking does not exist
        """
        notify = _notification_field(actor_role)
        now_iso = self._now_iso()

        patch: Dict[str, Any] = {"updatedAt": now_iso}
        if notify:
            patch[notify] = True

        if not accept:
            patch["rescheduleProposal"] = None
            await self._store.update_document(BOOKING_COLLECTION, booking_id, patch)
            logger.info("Reschedule of %s declined", booking_id)
            return False

        booking = await self._store.get_document(BOOKING_COLLECTION, booking_id)
        if booking is None:
            raise DocumentNotFoundError(f"Booking '{booking_id}' not found")

        proposal = booking.get("rescheduleProposal")
        if not proposal:
            logger.info("Booking %s has no reschedule proposal to accept", booking_id)
            return False

        patch.update({
            "startAt": proposal["proposedStartAt"],
            "endAt": proposal["proposedEndAt"],
            "rescheduleProposal": None,
        })
        await self._store.update_document(BOOKING_COLLECTION, booking_id, patch)
        logger.info("Booking %s moved to %s", booking_id, proposal["proposedStartAt"])
        return True

    async def reschedule_slots(
        self,
        booking_id: str,
        availability_service: AvailabilityService,
        *,
        days_forward: int = DEFAULT_DAYS_FORWARD,
        now: Optional[datetime] = None,
    ) -> List[BookableSlot]:
        """
        Slots a booking could move to, sized to the booked service.

        Raises:
            DocumentNotFoundError: If the booking does not exist
            ServiceNotFoundError: If the stylist no longer offers the service
        """
        booking = await self._store.get_document(BOOKING_COLLECTION, booking_id)
        if booking is None:
            raise DocumentNotFoundError(f"Booking '{booking_id}' not found")

        return await availability_service.find_slots_for_service(
            booking["stylistId"],
            booking["serviceId"],
            days_forward=days_forward,
            now=now,
        )

    def _now_iso(self) -> str:
        return self._clock().in_timezone("UTC").to_iso8601_string()


def _notification_field(actor_role: str | None) -> str | None:
    """The flag to raise for the party opposite ``actor_role``."""
    if actor_role is None:
        return None
    if actor_role not in ACTOR_ROLES:
        raise ValueError(
            f"Unknown actor role '{actor_role}'. Expected one of: {', '.join(ACTOR_ROLES)}"
        )
    return "clientHasNotification" if actor_role == "stylist" else "stylistHasNotification"
