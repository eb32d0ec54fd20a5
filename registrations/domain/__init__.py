from registrations.domain.models import (
    Activity,
    CancellationRequest,
    DiscountCode,
    DiscountType,
    Event,
    PriceTier,
    Registration,
    RegistrationDraft,
    RegistrationStatus,
)
from registrations.domain.payments import FullyPaid, PartiallyPaid, PaymentState, Unpaid
from registrations.domain.value_objects import (
    Capacity,
    DiscountCodeId,
    EventId,
    Money,
    RegistrationId,
)

__all__ = [
    "Activity",
    "CancellationRequest",
    "DiscountCode",
    "DiscountType",
    "Event",
    "PriceTier",
    "Registration",
    "RegistrationDraft",
    "RegistrationStatus",
    "PaymentState",
    "Unpaid",
    "PartiallyPaid",
    "FullyPaid",
    "EventId",
    "RegistrationId",
    "DiscountCodeId",
    "Money",
    "Capacity",
]
