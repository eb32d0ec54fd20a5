"""Pytest configuration and shared fixtures."""

from dataclasses import replace
from datetime import datetime, timezone
from decimal import Decimal
from itertools import count
from uuid import uuid4

import pytest
from rest_framework.test import APIClient

from registrations.domain import (
    Activity,
    CancellationRequest,
    Capacity,
    DiscountCode,
    DiscountCodeId,
    DiscountType,
    Event,
    EventId,
    Money,
    PriceTier,
    Registration,
    RegistrationDraft,
    RegistrationId,
    RegistrationStatus,
)
from registrations.domain.capacity import is_committed
from registrations.domain.clock import FixedClock
from registrations.domain.models import CancellationStatus
from registrations.domain.payments import payment_state_from_fields
from registrations.stores.interfaces import (
    CancellationRequestStore,
    DiscountCodeStore,
    EventStore,
    RegistrationStore,
)

# Mid-January: the "Regular" tier of the conference fixture is active.
NOW = datetime(2026, 1, 15, 15, 0, tzinfo=timezone.utc)


def tier(label: str, price: str, start: str | None = None, end: str | None = None) -> PriceTier:
    return PriceTier(label=label, price=Money(Decimal(price)), start_date=start, end_date=end)


def build_event(**overrides) -> Event:
    values = dict(
        id=EventId(uuid4()),
        name="Annual Conference",
        default_price=Money(Decimal("675")),
        registration_tiers=(
            tier("Early Bird", "450", end="2025-12-11"),
            tier("Regular", "500", start="2025-12-12", end="2026-03-01"),
            tier("Walk-in", "650"),
        ),
        spouse_tiers=(tier("Spouse", "200"),),
        child_tiers=(tier("Child", "75"),),
        breakfast_price=Money(Decimal("40")),
        breakfast_end_date="2026-02-01",
        activities=(
            Activity(name="Golf Tournament", seat_limit=Capacity(2)),
            Activity(name="Fishing"),
        ),
    )
    values.update(overrides)
    return Event(**values)


def build_discount(event: Event, code: str = "SAVE20", **overrides) -> DiscountCode:
    values = dict(
        id=DiscountCodeId(uuid4()),
        event_id=event.id,
        code=code,
        discount_type=DiscountType.PERCENTAGE,
        discount_value=Decimal("20"),
    )
    values.update(overrides)
    return DiscountCode(**values)


REGISTRATION_DEFAULTS = {
    "user_id": None,
    "first_name": "",
    "last_name": "",
    "email": "",
    "registration_tier": None,
    "spouse_ticket": False,
    "spouse_breakfast": False,
    "children_count": 0,
    "activity": None,
    "discount_code": None,
    "discount_amount": Decimal("0.00"),
    "total_price": Decimal("0.00"),
    "original_total_price": None,
    "paid": False,
    "paid_amount": Decimal("0.00"),
    "pending_payment_amount": Decimal("0.00"),
    "pending_payment_reason": None,
    "pending_payment_created_at": None,
    "paid_at": None,
    "payment_reference": None,
    "status": "active",
    "cancellation_reason": None,
    "cancellation_at": None,
}


def registration_from_row(row: dict) -> Registration:
    return Registration(
        id=row["id"],
        event_id=row["event_id"],
        user_id=row["user_id"],
        first_name=row["first_name"],
        last_name=row["last_name"],
        email=row["email"],
        selections=RegistrationDraft(
            registration_tier=row["registration_tier"],
            spouse_ticket=row["spouse_ticket"],
            spouse_breakfast=row["spouse_breakfast"],
            children_count=row["children_count"],
            activity=row["activity"],
            discount_code=row["discount_code"],
        ),
        total_price=row["total_price"],
        created_at=row["created_at"],
        payment=payment_state_from_fields(
            total_price=row["total_price"],
            paid=row["paid"],
            paid_amount=row["paid_amount"],
            pending_payment_amount=row["pending_payment_amount"],
            pending_payment_reason=row["pending_payment_reason"],
            pending_payment_created_at=row["pending_payment_created_at"],
            paid_at=row["paid_at"],
        ),
        original_total_price=row["original_total_price"],
        discount_code=row["discount_code"],
        discount_amount=row["discount_amount"],
        payment_reference=row["payment_reference"],
        paid_at=row["paid_at"],
        status=RegistrationStatus(row["status"]),
        cancellation_reason=row["cancellation_reason"],
        cancellation_at=row["cancellation_at"],
    )


class InMemoryEventStore(EventStore):
    def __init__(self, *events: Event) -> None:
        self.events = {event.id: event for event in events}

    def get_event(self, event_id):
        return self.events.get(event_id)


class InMemoryRegistrationStore(RegistrationStore):
    def __init__(self, clock: FixedClock) -> None:
        self.rows: dict[RegistrationId, dict] = {}
        self._clock = clock

    def get_registration(self, registration_id):
        row = self.rows.get(registration_id)
        return registration_from_row(row) if row is not None else None

    def list_registrations(self, event_id=None):
        rows = sorted(self.rows.values(), key=lambda row: row["created_at"])
        return [registration_from_row(row) for row in rows if event_id in (None, row["event_id"])]

    def create_registration(self, fields):
        registration_id = RegistrationId(uuid4())
        row = {**REGISTRATION_DEFAULTS, **fields, "id": registration_id, "created_at": self._clock.now_utc()}
        self.rows[registration_id] = row
        return registration_from_row(row)

    def update_registration(self, registration_id, fields):
        self.rows[registration_id].update(fields)
        return registration_from_row(self.rows[registration_id])

    def count_committed_for_activity(self, event_id, activity, exclude_id=None):
        return sum(
            1
            for row in self.rows.values()
            if row["event_id"] == event_id
            and row["activity"] == activity
            and is_committed(row["status"], row["cancellation_at"])
            and row["id"] != exclude_id
        )


class InMemoryDiscountCodeStore(DiscountCodeStore):
    def __init__(self, *codes: DiscountCode) -> None:
        self.codes = {code.id: code for code in codes}

    def find_code(self, event_id, code):
        for candidate in self.codes.values():
            if candidate.event_id == event_id and candidate.code == code:
                return candidate
        return None

    def increment_usage(self, code_id):
        code = self.codes[code_id]
        if code.usage_limit is not None and code.used_count >= code.usage_limit:
            return False
        self.codes[code_id] = replace(code, used_count=code.used_count + 1)
        return True


class InMemoryCancellationRequestStore(CancellationRequestStore):
    def __init__(self, clock: FixedClock) -> None:
        self.requests: dict[int, CancellationRequest] = {}
        self._ids = count(1)
        self._clock = clock

    def get_request(self, request_id):
        return self.requests.get(request_id)

    def has_pending_request(self, registration_id):
        return any(
            request.registration_id == registration_id and request.status is CancellationStatus.PENDING
            for request in self.requests.values()
        )

    def create_request(self, registration, reason):
        request = CancellationRequest(
            id=next(self._ids),
            registration_id=registration.id,
            event_id=registration.event_id,
            user_id=registration.user_id,
            reason=reason,
            status=CancellationStatus.PENDING,
            created_at=self._clock.now_utc(),
        )
        self.requests[request.id] = request
        return request

    def list_requests(self, status="pending"):
        return [request for request in self.requests.values() if request.status.value == status]

    def mark_processed(self, request_id, status, admin_note, processed_at):
        request = replace(
            self.requests[request_id],
            status=CancellationStatus(status),
            admin_note=admin_note,
            processed_at=processed_at,
        )
        self.requests[request_id] = request
        return request


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(NOW)


@pytest.fixture
def conference() -> Event:
    return build_event()
