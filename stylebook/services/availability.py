"""
Application services for loading availability and producing slots.

The service reads a stylist's availability through a document store adapter
and delegates slot expansion to the domain-level ``SlotGenerator``. The
store is typed as a small protocol so tests can plug in the in-memory mock.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Protocol

from ..domain.exceptions import DocumentStoreError, ServiceNotFoundError
from ..domain.models import BookableSlot, WeeklyAvailability
from ..domain.slot_generator import (
    DEFAULT_DAYS_FORWARD,
    DEFAULT_SERVICE_DURATION_MINUTES,
    SlotGenerator,
    group_slots_by_date,
)

logger = logging.getLogger(__name__)

PROVIDER_COLLECTION = "stylists"


class DocumentStoreProtocol(Protocol):
    """Protocol describing the document store behaviour the services need."""

    async def get_document(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        """Return the document, or None when it does not exist."""

    async def update_document(self, collection: str, doc_id: str, patch: Dict[str, Any]) -> None:
        """Merge top-level fields into an existing document."""

    async def add_document(self, collection: str, data: Dict[str, Any]) -> str:
        """Create a document and return its generated id."""


class AvailabilityService:
    """
    Loads weekly availability and turns it into bookable slots.

    A missing or unreadable availability document never reaches the
    generator: it is replaced with the all-closed default.
    """

    def __init__(
        self,
        store: DocumentStoreProtocol,
        slot_generator: SlotGenerator | None = None,
    ) -> None:
        self._store = store
        self._slot_generator = slot_generator or SlotGenerator()

    async def get_availability(self, provider_id: str) -> WeeklyAvailability:
        """Fetch a stylist's availability, all days closed if unavailable."""
        document = await self._load_provider_document(provider_id)
        return self._availability_from_provider(provider_id, document)

    async def save_availability(self, availability: WeeklyAvailability) -> None:
        """Persist edited availability on the stylist document."""
        await self._store.update_document(
            PROVIDER_COLLECTION,
            availability.provider_id,
            {"availability": availability.to_document()},
        )
        logger.info("Saved availability for %s", availability.provider_id)

    async def find_slots(
        self,
        provider_id: str,
        *,
        service_duration_minutes: int = DEFAULT_SERVICE_DURATION_MINUTES,
        days_forward: int = DEFAULT_DAYS_FORWARD,
        now: Optional[datetime] = None,
    ) -> List[BookableSlot]:
        """Load availability and generate slots for a service length."""
        availability = await self.get_availability(provider_id)

        return self.calculate_slots(
            availability,
            service_duration_minutes=service_duration_minutes,
            days_forward=days_forward,
            now=now,
        )

    async def find_slots_for_service(
        self,
        provider_id: str,
        service_id: str,
        *,
        days_forward: int = DEFAULT_DAYS_FORWARD,
        now: Optional[datetime] = None,
    ) -> List[BookableSlot]:
        """
        Generate slots sized to one of the stylist's own services.

        Raises:
            ServiceNotFoundError: If the stylist does not list the service
        """
        document = await self._load_provider_document(provider_id)
        duration = service_duration(document, service_id)
        if duration is None:
            raise ServiceNotFoundError(
                f"Stylist '{provider_id}' does not offer service '{service_id}'"
            )

        availability = self._availability_from_provider(provider_id, document)

        return self.calculate_slots(
            availability,
            service_duration_minutes=duration,
            days_forward=days_forward,
            now=now,
        )

    async def grouped_slots(
        self,
        provider_id: str,
        *,
        service_duration_minutes: int = DEFAULT_SERVICE_DURATION_MINUTES,
        days_forward: int = DEFAULT_DAYS_FORWARD,
        now: Optional[datetime] = None,
    ) -> Dict[str, List[BookableSlot]]:
        """Slots grouped by local date, dates ascending."""
        slots = await self.find_slots(
            provider_id,
            service_duration_minutes=service_duration_minutes,
            days_forward=days_forward,
            now=now,
        )
        return group_slots_by_date(slots)

    def calculate_slots(
        self,
        availability: WeeklyAvailability,
        *,
        service_duration_minutes: int = DEFAULT_SERVICE_DURATION_MINUTES,
        days_forward: int = DEFAULT_DAYS_FORWARD,
        now: Optional[datetime] = None,
    ) -> List[BookableSlot]:
        """Generate slots from availability that is already loaded."""
        return self._slot_generator.generate(
            availability,
            service_duration_minutes=service_duration_minutes,
            days_forward=days_forward,
            now=now,
        )

    async def _load_provider_document(self, provider_id: str) -> Optional[Dict[str, Any]]:
        try:
            return await self._store.get_document(PROVIDER_COLLECTION, provider_id)
        except DocumentStoreError as exc:
            logger.warning("Could not load stylist %s, treating as closed: %s", provider_id, exc)
            return None

    @staticmethod
    def _availability_from_provider(
        provider_id: str,
        document: Optional[Mapping[str, Any]],
    ) -> WeeklyAvailability:
        if not document:
            return WeeklyAvailability.closed(provider_id)
        return WeeklyAvailability.from_document(provider_id, document.get("availability"))


def service_duration(
    document: Optional[Mapping[str, Any]],
    service_id: str,
) -> int | None:
    """
    Duration in minutes of a service listed on a stylist document.

    Services without a usable ``durationMins`` fall back to the default
    length. Returns None when the service is not listed.
    """
    if not document:
        return None

    for service in document.get("services") or []:
        if not isinstance(service, Mapping) or service.get("serviceId") != service_id:
            continue

        duration = service.get("durationMins")
        if isinstance(duration, int) and not isinstance(duration, bool) and duration > 0:
            return duration
        return DEFAULT_SERVICE_DURATION_MINUTES

    return None
