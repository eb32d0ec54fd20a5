"""Store interfaces (repository pattern).

Stores must be swappable and return domain models. None of them serialize
concurrent writers; see count_committed_for_activity and increment_usage.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any

from registrations.domain import (
    CancellationRequest,
    DiscountCode,
    DiscountCodeId,
    Event,
    EventId,
    Registration,
    RegistrationId,
)


class EventStore(ABC):
    """Read-only access to event pricing snapshots."""

    @abstractmethod
    def get_event(self, event_id: EventId) -> Event | None:
        """Return an event by ID, or None if not found."""
        ...


class RegistrationStore(ABC):
    """Interface for registration persistence operations."""

    @abstractmethod
    def get_registration(self, registration_id: RegistrationId) -> Registration | None:
        """Return a registration by ID, or None if not found."""
        ...

    @abstractmethod
    def list_registrations(self, event_id: EventId | None = None) -> list[Registration]:
        """Return registrations, optionally for one event, oldest first."""
        ...

    @abstractmethod
    def create_registration(self, fields: dict[str, Any]) -> Registration:
        """Insert a registration and return it."""
        ...

    @abstractmethod
    def update_registration(self, registration_id: RegistrationId, fields: dict[str, Any]) -> Registration:
        """Write ``fields`` to a registration and return the updated row."""
        ...

    @abstractmethod
    def count_committed_for_activity(
        self,
        event_id: EventId,
        activity: str,
        exclude_id: RegistrationId | None = None,
    ) -> int:
        """Count non-cancelled registrations holding a seat in ``activity``.

        This is a plain read; a later insert is not guarded against
        concurrent inserts.
        """
        ...


class DiscountCodeStore(ABC):
    """Interface for discount code persistence operations."""

    @abstractmethod
    def find_code(self, event_id: EventId, code: str) -> DiscountCode | None:
        """Return the code for an event by its normalized value."""
        ...

    @abstractmethod
    def increment_usage(self, code_id: DiscountCodeId) -> bool:
        """Count one use of a code.

        Returns False when the usage limit was already reached, without
        changing anything.
        """
        ...


class CancellationRequestStore(ABC):
    """Interface for cancellation request persistence operations."""

    @abstractmethod
    def get_request(self, request_id: int) -> CancellationRequest | None:
        ...

    @abstractmethod
    def has_pending_request(self, registration_id: RegistrationId) -> bool:
        ...

    @abstractmethod
    def create_request(
        self,
        registration: Registration,
        reason: str | None,
    ) -> CancellationRequest:
        ...

    @abstractmethod
    def list_requests(self, status: str = "pending") -> list[CancellationRequest]:
        """Return requests in ``status``, newest first."""
        ...

    @abstractmethod
    def mark_processed(
        self,
        request_id: int,
        status: str,
        admin_note: str | None,
        processed_at: datetime,
    ) -> CancellationRequest:
        ...
