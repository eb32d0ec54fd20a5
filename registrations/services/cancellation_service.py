"""Cancellation service.

Cancelling flags the registration instead of deleting it; a cancelled
registration no longer holds a seat in its activity.
"""

import logging

from registrations.domain import CancellationRequest, Registration
from registrations.domain.clock import Clock, SystemClock
from registrations.domain.errors import (
    CancellationAlreadyPendingError,
    CancellationAlreadyProcessedError,
    CancellationNotFoundError,
    RegistrationCancelledError,
    RegistrationNotFoundError,
)
from registrations.domain.models import CancellationStatus, RegistrationStatus
from registrations.services.registration_service import parse_registration_id
from registrations.stores.interfaces import CancellationRequestStore, RegistrationStore

logger = logging.getLogger(__name__)


class CancellationService:
    """Service for cancellation requests."""

    def __init__(
        self,
        registrations: RegistrationStore,
        requests: CancellationRequestStore,
        clock: Clock | None = None,
    ) -> None:
        self._registrations = registrations
        self._requests = requests
        self._clock = clock or SystemClock()

    def request_cancellation(self, registration_id: str, reason: str | None = None) -> CancellationRequest:
        """File a cancellation request.

        Raises:
            RegistrationNotFoundError: If the registration does not exist.
            RegistrationCancelledError: If it is already cancelled.
            CancellationAlreadyPendingError: If a request is already open.
        """
        parsed = parse_registration_id(registration_id)
        registration = self._registrations.get_registration(parsed)
        if registration is None:
            raise RegistrationNotFoundError(registration_id)
        if registration.is_cancelled:
            raise RegistrationCancelledError()
        if self._requests.has_pending_request(registration.id):
            raise CancellationAlreadyPendingError()
        return self._requests.create_request(registration, reason)

    def list_requests(self, status: str = CancellationStatus.PENDING.value) -> list[CancellationRequest]:
        return self._requests.list_requests(status)

    def _pending_request(self, request_id: int) -> CancellationRequest:
        request = self._requests.get_request(request_id)
        if request is None:
            raise CancellationNotFoundError()
        if request.status is not CancellationStatus.PENDING:
            raise CancellationAlreadyProcessedError()
        return request

    def approve(self, request_id: int, admin_note: str | None = None) -> Registration:
        request = self._pending_request(request_id)
        now = self._clock.now_utc()
        registration = self._registrations.update_registration(
            request.registration_id,
            {
                "status": RegistrationStatus.CANCELLED.value,
                "cancellation_reason": request.reason,
                "cancellation_at": now,
            },
        )
        self._requests.mark_processed(request_id, CancellationStatus.APPROVED.value, admin_note, now)
        logger.info("Registration %s cancelled (request %s)", registration.id, request_id)
        return registration

    def reject(self, request_id: int, admin_note: str | None = None) -> CancellationRequest:
        self._pending_request(request_id)
        return self._requests.mark_processed(
            request_id,
            CancellationStatus.REJECTED.value,
            admin_note,
            self._clock.now_utc(),
        )
