"""Payment status of a registration.

A registration is in exactly one of three states, so combinations such as
"paid with an amount still pending" cannot be expressed.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any

from registrations.domain.value_objects import to_cents

ZERO = Decimal("0.00")


@dataclass(frozen=True)
class Unpaid:
    """Nothing collected and nothing tracked as pending."""

    @property
    def paid_amount(self) -> Decimal:
        return ZERO

    @property
    def pending_amount(self) -> Decimal:
        return ZERO

    def to_fields(self) -> dict[str, Any]:
        return _fields(paid=False, paid_amount=ZERO)


@dataclass(frozen=True)
class PartiallyPaid:
    """Payment outstanding; ``pending_amount`` is what is currently owed."""

    paid_amount: Decimal
    pending_amount: Decimal
    reason: str | None = None
    pending_since: datetime | None = None

    def __post_init__(self) -> None:
        if self.paid_amount < 0 or self.pending_amount < 0:
            raise ValueError("Payment amounts cannot be negative")
        object.__setattr__(self, "paid_amount", to_cents(self.paid_amount))
        object.__setattr__(self, "pending_amount", to_cents(self.pending_amount))

    def to_fields(self) -> dict[str, Any]:
        fields = _fields(paid=False, paid_amount=self.paid_amount)
        if self.pending_amount > 0:
            fields.update(
                pending_payment_amount=self.pending_amount,
                pending_payment_reason=self.reason,
                pending_payment_created_at=self.pending_since,
            )
        return fields


@dataclass(frozen=True)
class FullyPaid:
    """Settled. ``paid_at`` is stamped once and never moved."""

    paid_amount: Decimal
    paid_at: datetime | None

    def __post_init__(self) -> None:
        object.__setattr__(self, "paid_amount", to_cents(self.paid_amount))

    @property
    def pending_amount(self) -> Decimal:
        return ZERO

    def to_fields(self) -> dict[str, Any]:
        return _fields(paid=True, paid_amount=self.paid_amount, paid_at=self.paid_at)


PaymentState = Unpaid | PartiallyPaid | FullyPaid


def _fields(*, paid: bool, paid_amount: Decimal, paid_at: datetime | None = None) -> dict[str, Any]:
    fields: dict[str, Any] = {
        "paid": paid,
        "paid_amount": paid_amount,
        "pending_payment_amount": ZERO,
        "pending_payment_reason": None,
        "pending_payment_created_at": None,
    }
    if paid:
        fields["paid_at"] = paid_at
    return fields


def payment_state_from_fields(
    *,
    total_price: Decimal,
    paid: bool,
    paid_amount: Decimal | None,
    pending_payment_amount: Decimal | None,
    pending_payment_reason: str | None = None,
    pending_payment_created_at: datetime | None = None,
    paid_at: datetime | None = None,
) -> PaymentState:
    """Rebuild the state from persisted columns.

    Rows written before amounts were tracked carry ``paid`` but no
    ``paid_amount``; those count as paid in full.
    """
    pending = pending_payment_amount or ZERO
    if paid_amount is None:
        paid_amount = total_price if paid else ZERO
    if paid and pending <= 0:
        return FullyPaid(paid_amount=paid_amount, paid_at=paid_at)
    if pending > 0 or paid_amount > 0:
        return PartiallyPaid(
            paid_amount=paid_amount,
            pending_amount=pending,
            reason=pending_payment_reason,
            pending_since=pending_payment_created_at,
        )
    return Unpaid()
