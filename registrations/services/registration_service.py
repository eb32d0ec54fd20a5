"""Registration service - pricing, capacity and payment orchestration.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors

Each operation reads what it needs, then writes. Nothing here locks: two
requests racing for the last seat of an activity can both pass the
capacity check. Discount usage is counted after the registration write so a
failed write never consumes a use.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any

from registrations.domain import (
    DiscountCode,
    Event,
    EventId,
    Registration,
    RegistrationDraft,
    RegistrationId,
)
from registrations.domain.capacity import has_capacity
from registrations.domain.clock import Clock, SystemClock
from registrations.domain.discounts import DiscountValidation, normalize_code, validate_discount
from registrations.domain.errors import (
    ActivityFullError,
    DiscountRejectedError,
    EventNotFoundError,
    InvalidIdError,
    PaymentReferenceRequiredError,
    RegistrationNotFoundError,
)
from registrations.domain.pricing import PriceBreakdown, compute_total
from registrations.domain.reconciliation import (
    RegistrationPatch,
    apply_user_payment_completion,
    initial_payment_state,
    reconcile_admin_update,
    selection_fields,
)
from registrations.stores.interfaces import DiscountCodeStore, EventStore, RegistrationStore

logger = logging.getLogger(__name__)

ATTENDEE_FIELDS = ("first_name", "last_name", "email")


@dataclass(frozen=True)
class PriceQuote:
    total: Decimal
    discount_amount: Decimal
    breakdown: PriceBreakdown


@dataclass(frozen=True)
class AdminUpdateResult:
    registration: Registration
    pending_delta: Decimal
    reason: str | None
    inconsistent: bool


def parse_event_id(event_id: str | EventId) -> EventId:
    if isinstance(event_id, EventId):
        return event_id
    try:
        return EventId.from_string(str(event_id))
    except ValueError as exc:
        raise InvalidIdError() from exc


def parse_registration_id(registration_id: str | RegistrationId) -> RegistrationId:
    if isinstance(registration_id, RegistrationId):
        return registration_id
    try:
        return RegistrationId.from_string(str(registration_id))
    except ValueError as exc:
        raise InvalidIdError() from exc


class RegistrationService:
    """Service for registration pricing and payment operations."""

    def __init__(
        self,
        events: EventStore,
        registrations: RegistrationStore,
        discounts: DiscountCodeStore,
        clock: Clock | None = None,
    ) -> None:
        self._events = events
        self._registrations = registrations
        self._discounts = discounts
        self._clock = clock or SystemClock()

    def get_event(self, event_id: str | EventId) -> Event:
        """Return an event by ID.

        Raises:
            InvalidIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
        """
        parsed = parse_event_id(event_id)
        event = self._events.get_event(parsed)
        if event is None:
            raise EventNotFoundError(str(event_id))
        return event

    def get_registration(self, registration_id: str | RegistrationId) -> Registration:
        """Return a registration by ID.

        Raises:
            InvalidIdError: If the registration_id is not a valid UUID.
            RegistrationNotFoundError: If the registration does not exist.
        """
        parsed = parse_registration_id(registration_id)
        registration = self._registrations.get_registration(parsed)
        if registration is None:
            raise RegistrationNotFoundError(str(registration_id))
        return registration

    # -- discounts ------------------------------------------------------------

    def validate_discount_code(self, event_id: str | EventId, code: str) -> DiscountValidation:
        """Check a code without using it up.

        Raises:
            InvalidDiscountCodeError: If the code is malformed.
        """
        normalized = normalize_code(code)
        event = self.get_event(event_id)
        found = self._discounts.find_code(event.id, normalized)
        return validate_discount(found, self._clock.now_utc())

    def _usable_discount(self, event: Event, code: str, now: datetime) -> DiscountCode:
        normalized = normalize_code(code)
        found = self._discounts.find_code(event.id, normalized)
        validation = validate_discount(found, now)
        if not validation.valid:
            raise DiscountRejectedError(validation.error or "Invalid discount code")
        return found

    def _record_discount_use(self, discount: DiscountCode, registration_id: RegistrationId) -> None:
        if not self._discounts.increment_usage(discount.id):
            logger.warning(
                "Discount code %s hit its usage limit before registration %s was counted",
                discount.code,
                registration_id,
            )

    # -- capacity -------------------------------------------------------------

    def check_activity_capacity(
        self,
        event_id: str | EventId,
        activity_name: str,
        exclude_id: str | RegistrationId | None = None,
    ) -> bool:
        """Return True when ``activity_name`` has a seat left.

        ``exclude_id`` leaves a registration being edited out of its own
        count.
        """
        event = self.get_event(event_id)
        excluded = parse_registration_id(exclude_id) if exclude_id is not None else None
        committed = self._registrations.count_committed_for_activity(event.id, activity_name, excluded)
        return has_capacity(event, activity_name, committed)

    def _ensure_capacity(self, event: Event, activity: str, exclude_id: RegistrationId | None = None) -> None:
        if not self.check_activity_capacity(event.id, activity, exclude_id):
            logger.info("Activity %r of event %s is full", activity, event.id)
            raise ActivityFullError(activity)

    # -- pricing --------------------------------------------------------------

    def compute_registration_price(
        self,
        event_id: str | EventId,
        draft: RegistrationDraft,
        now: datetime | None = None,
    ) -> PriceQuote:
        """Quote the price of a registration without writing anything.

        Raises:
            DiscountRejectedError: If the draft carries an unusable code.
        """
        event = self.get_event(event_id)
        now = now or self._clock.now_utc()
        discount = self._usable_discount(event, draft.discount_code, now) if draft.discount_code else None
        breakdown = compute_total(event, draft, now, discount)
        return PriceQuote(
            total=breakdown.total,
            discount_amount=breakdown.discount_amount,
            breakdown=breakdown,
        )

    # -- lifecycle ------------------------------------------------------------

    def create_registration(
        self,
        event_id: str | EventId,
        draft: RegistrationDraft,
        attendee: dict[str, Any] | None = None,
        *,
        privileged: bool = False,
        marked_paid: bool = False,
        user_id: int | None = None,
        payment_reference: str | None = None,
    ) -> Registration:
        """Price and store a new registration.

        Raises:
            ActivityFullError: If the selected activity has no seat left.
            DiscountRejectedError: If the attached code is expired or used up.
        """
        event = self.get_event(event_id)
        now = self._clock.now_utc()
        discount = self._usable_discount(event, draft.discount_code, now) if draft.discount_code else None
        if draft.activity:
            self._ensure_capacity(event, draft.activity)

        breakdown = compute_total(event, draft, now, discount)
        payment = initial_payment_state(
            breakdown.total,
            privileged=privileged,
            marked_paid=marked_paid,
            now=now,
        )

        fields: dict[str, Any] = {
            name: value for name, value in (attendee or {}).items() if name in ATTENDEE_FIELDS
        }
        fields.update(selection_fields(draft))
        fields.update(payment.to_fields())
        fields.update(
            event_id=event.id,
            user_id=user_id,
            registration_tier=breakdown.tier_label,
            total_price=breakdown.total,
            discount_code=discount.code if discount else None,
            discount_amount=breakdown.discount_amount,
            payment_reference=payment_reference,
        )
        registration = self._registrations.create_registration(fields)

        if discount is not None:
            self._record_discount_use(discount, registration.id)
        logger.info(
            "Registration %s created for event %s, total %s (%s)",
            registration.id,
            event.id,
            breakdown.total,
            type(payment).__name__,
        )
        return registration

    def update_registration_as_user(
        self,
        registration_id: str | RegistrationId,
        patch: RegistrationPatch,
    ) -> Registration:
        """Apply an attendee's own edit.

        Only attendee details and the activity can change here; nothing is
        repriced.

        Raises:
            ActivityFullError: If the newly chosen activity is full.
        """
        existing = self.get_registration(registration_id)
        fields = {name: value for name, value in patch.details.items() if name in ATTENDEE_FIELDS}
        if patch.activity is not None and patch.activity != existing.selections.activity:
            event = self.get_event(existing.event_id)
            self._ensure_capacity(event, patch.activity, existing.id)
            fields["activity"] = patch.activity
        if not fields:
            return existing
        return self._registrations.update_registration(existing.id, fields)

    def update_registration_as_admin(
        self,
        registration_id: str | RegistrationId,
        patch: RegistrationPatch,
    ) -> AdminUpdateResult:
        """Apply a privileged edit and reconcile what is owed.

        Raises:
            ActivityFullError: If the newly chosen activity is full.
            DiscountRejectedError: If a newly attached code is unusable.
        """
        existing = self.get_registration(registration_id)
        event = self.get_event(existing.event_id)
        now = self._clock.now_utc()

        if patch.activity and patch.activity != existing.selections.activity:
            self._ensure_capacity(event, patch.activity, existing.id)

        newly_attached = None
        discount = None
        if patch.discount_code and normalize_code(patch.discount_code) != existing.discount_code:
            newly_attached = self._usable_discount(event, patch.discount_code, now)
            discount = newly_attached
        elif existing.discount_code:
            # Already counted for this registration; keep pricing with it.
            discount = self._discounts.find_code(event.id, existing.discount_code)

        reconciliation = reconcile_admin_update(existing, patch, event, now, discount)
        fields = {name: value for name, value in patch.details.items() if name in ATTENDEE_FIELDS}
        fields.update(reconciliation.db_fields)
        registration = self._registrations.update_registration(existing.id, fields)

        if newly_attached is not None:
            self._record_discount_use(newly_attached, registration.id)
        return AdminUpdateResult(
            registration=registration,
            pending_delta=reconciliation.pending_delta,
            reason=reconciliation.reason,
            inconsistent=reconciliation.inconsistent,
        )

    def complete_payment(
        self,
        registration_id: str | RegistrationId,
        payment_reference: str,
    ) -> Registration:
        """Record that the attendee paid what they owed.

        Raises:
            PaymentReferenceRequiredError: If no gateway payment id is given.
        """
        if not payment_reference or not payment_reference.strip():
            raise PaymentReferenceRequiredError()
        existing = self.get_registration(registration_id)
        fields = apply_user_payment_completion(existing, self._clock.now_utc(), payment_reference)
        return self._registrations.update_registration(existing.id, fields)
