"""Domain models representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in registrations/models.py (persistence layer).
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum

from registrations.domain.payments import PaymentState, Unpaid
from registrations.domain.value_objects import (
    Capacity,
    DiscountCodeId,
    EventId,
    Money,
    RegistrationId,
)


class DiscountType(Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


class RegistrationStatus(Enum):
    ACTIVE = "active"
    CANCELLED = "cancelled"


class CancellationStatus(Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


@dataclass(frozen=True)
class PriceTier:
    """A price bracket valid over a date range.

    Dates are civil calendar strings (YYYY-MM-DD). A missing start or end
    leaves that side of the range open.
    """

    label: str
    price: Money
    start_date: str | None = None
    end_date: str | None = None


@dataclass(frozen=True)
class Activity:
    """A selectable activity, optionally seat-limited."""

    name: str
    seat_limit: Capacity | None = None


@dataclass(frozen=True)
class Event:
    """Read-only pricing snapshot of an Event."""

    id: EventId
    name: str
    default_price: Money
    registration_tiers: tuple[PriceTier, ...] = ()
    spouse_tiers: tuple[PriceTier, ...] = ()
    child_tiers: tuple[PriceTier, ...] = ()
    breakfast_price: Money = field(default_factory=Money.zero)
    breakfast_end_date: str | None = None
    activities: tuple[Activity, ...] = ()

    def find_activity(self, name: str) -> Activity | None:
        for activity in self.activities:
            if activity.name == name:
                return activity
        return None


@dataclass(frozen=True)
class DiscountCode:
    """Domain representation of a DiscountCode."""

    id: DiscountCodeId
    event_id: EventId
    code: str
    discount_type: DiscountType
    discount_value: Decimal
    expires_at: datetime | None = None
    usage_limit: int | None = None
    used_count: int = 0


@dataclass(frozen=True)
class RegistrationDraft:
    """The pricing-relevant selections of a registration.

    ``registration_tier`` records the tier that was applied; it is never
    used to choose one.
    """

    registration_tier: str | None = None
    spouse_ticket: bool = False
    spouse_breakfast: bool = False
    children_count: int = 0
    activity: str | None = None
    discount_code: str | None = None

    def __post_init__(self) -> None:
        if self.children_count < 0:
            raise ValueError("Children count cannot be negative")


@dataclass(frozen=True)
class Registration:
    """Domain representation of a Registration."""

    id: RegistrationId
    event_id: EventId
    user_id: int | None
    first_name: str
    last_name: str
    email: str
    selections: RegistrationDraft
    total_price: Decimal
    created_at: datetime
    payment: PaymentState = field(default_factory=Unpaid)
    original_total_price: Decimal | None = None
    discount_code: str | None = None
    discount_amount: Decimal = Decimal("0.00")
    payment_reference: str | None = None
    paid_at: datetime | None = None
    status: RegistrationStatus = RegistrationStatus.ACTIVE
    cancellation_reason: str | None = None
    cancellation_at: datetime | None = None

    @property
    def is_cancelled(self) -> bool:
        return self.status is RegistrationStatus.CANCELLED or self.cancellation_at is not None


@dataclass(frozen=True)
class CancellationRequest:
    """A user's request to cancel a registration."""

    id: int
    registration_id: RegistrationId
    event_id: EventId
    user_id: int | None
    reason: str | None
    status: CancellationStatus
    created_at: datetime
    admin_note: str | None = None
    processed_at: datetime | None = None
