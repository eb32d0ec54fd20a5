"""Payment reconciliation for registration creation and edits.

Administrators may change what a registration includes after it was paid.
The difference between the old and the new price becomes a pending amount
the attendee still owes, so nothing is ever charged twice.

A price decrease clears the pending amount but is not turned into a
refund; any overpayment shows up as an inconsistency.
"""

import logging
from dataclasses import dataclass, field, fields, replace
from datetime import datetime
from decimal import Decimal
from typing import Any

from registrations.domain.models import DiscountCode, Event, Registration, RegistrationDraft
from registrations.domain.payments import (
    ZERO,
    FullyPaid,
    PartiallyPaid,
    PaymentState,
    Unpaid,
)
from registrations.domain.pricing import PriceBreakdown, compute_total
from registrations.domain.value_objects import to_cents

logger = logging.getLogger(__name__)

EPSILON = Decimal("0.01")
ADMIN_CREATED_REASON = "Registration created by administrator"
REASON_SEPARATOR = "; "


@dataclass(frozen=True)
class RegistrationPatch:
    """Changes requested for an existing registration.

    ``None`` means "leave as is". ``details`` carries attendee fields that
    do not affect the price.
    """

    spouse_ticket: bool | None = None
    spouse_breakfast: bool | None = None
    children_count: int | None = None
    activity: str | None = None
    discount_code: str | None = None
    total_price: Decimal | None = None
    paid: bool | None = None
    details: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Reconciliation:
    db_fields: dict[str, Any]
    pending_delta: Decimal
    reason: str | None
    breakdown: PriceBreakdown
    inconsistent: bool = False


SELECTION_FIELDS = tuple(f.name for f in fields(RegistrationDraft))


def merge_selections(current: RegistrationDraft, patch: RegistrationPatch) -> RegistrationDraft:
    changes = {
        name: getattr(patch, name)
        for name in SELECTION_FIELDS
        if getattr(patch, name, None) is not None
    }
    return replace(current, **changes)


def selection_fields(selections: RegistrationDraft) -> dict[str, Any]:
    return {name: getattr(selections, name) for name in SELECTION_FIELDS if name != "discount_code"}


def check_consistency(total_price: Decimal, payment: PaymentState, registration_id=None) -> bool:
    """Return False, and log it, when more is paid or owed than the total."""
    tracked = payment.paid_amount + payment.pending_amount
    if tracked > total_price + EPSILON:
        logger.warning(
            "Registration %s payment inconsistency: paid %s + pending %s exceeds total %s",
            registration_id,
            payment.paid_amount,
            payment.pending_amount,
            total_price,
        )
        return False
    return True


def initial_payment_state(
    total: Decimal,
    *,
    privileged: bool,
    marked_paid: bool,
    now: datetime,
) -> PaymentState:
    if marked_paid:
        return FullyPaid(paid_amount=total, paid_at=now)
    if privileged and total > 0:
        return PartiallyPaid(
            paid_amount=ZERO,
            pending_amount=total,
            reason=ADMIN_CREATED_REASON,
            pending_since=now,
        )
    return Unpaid()


def _component_reasons(
    previous: RegistrationDraft,
    current: RegistrationDraft,
    breakdown: PriceBreakdown,
) -> tuple[list[str], Decimal]:
    reasons: list[str] = []
    added = ZERO
    if current.spouse_ticket and not previous.spouse_ticket and breakdown.spouse > 0:
        reasons.append(f"Spouse dinner ticket added (${breakdown.spouse:.2f})")
        added += breakdown.spouse
    if current.spouse_breakfast and not previous.spouse_breakfast and breakdown.breakfast > 0:
        reasons.append(f"Spouse breakfast added (${breakdown.breakfast:.2f})")
        added += breakdown.breakfast
    extra_children = current.children_count - previous.children_count
    if extra_children > 0 and breakdown.children > 0:
        amount = to_cents(breakdown.children / current.children_count * extra_children)
        reasons.append(f"{extra_children} child ticket(s) added (${amount:.2f})")
        added += amount
    return reasons, added


def _after_increase(payment: PaymentState, delta: Decimal, reason: str, now: datetime) -> PartiallyPaid:
    if isinstance(payment, PartiallyPaid) and payment.pending_amount > 0:
        joined = REASON_SEPARATOR.join(r for r in (payment.reason, reason) if r)
        return PartiallyPaid(
            paid_amount=payment.paid_amount,
            pending_amount=payment.pending_amount + delta,
            reason=joined,
            pending_since=payment.pending_since or now,
        )
    return PartiallyPaid(
        paid_amount=payment.paid_amount,
        pending_amount=delta,
        reason=reason,
        pending_since=now,
    )


def _after_decrease(payment: PaymentState, total: Decimal, paid_at: datetime | None, now: datetime) -> PaymentState:
    paid_amount = payment.paid_amount
    if paid_amount > 0 and paid_amount >= total:
        return FullyPaid(paid_amount=paid_amount, paid_at=paid_at or now)
    if paid_amount > 0:
        return PartiallyPaid(paid_amount=paid_amount, pending_amount=ZERO)
    return Unpaid()


def reconcile_admin_update(
    existing: Registration,
    patch: RegistrationPatch,
    event: Event,
    now: datetime,
    discount: DiscountCode | None = None,
) -> Reconciliation:
    """Work out the fields to write for a privileged edit.

    ``discount`` is the code to price with: the one being attached by this
    edit, or the one already on the registration.
    """
    previous = existing.selections
    current = merge_selections(previous, patch)
    breakdown = compute_total(event, current, now, discount)

    if patch.total_price is not None:
        # An override replaces the computed price and its per-component lines.
        new_total = to_cents(patch.total_price)
        delta = new_total - to_cents(existing.total_price)
        reasons = [f"Price adjusted by administrator (${new_total:.2f})"]
    else:
        new_total = breakdown.total
        delta = new_total - to_cents(existing.total_price)
        reasons, added = _component_reasons(previous, current, breakdown)
        if delta > added:
            reasons.append(f"Pricing updated (${delta - added:.2f})")

    db_fields: dict[str, Any] = selection_fields(current)
    db_fields["registration_tier"] = breakdown.tier_label
    db_fields["total_price"] = new_total
    if discount is not None:
        if patch.total_price is None:
            db_fields["discount_amount"] = breakdown.discount_amount
        if discount.code != existing.discount_code:
            db_fields["discount_code"] = discount.code

    payment = existing.payment
    pending_delta = ZERO
    reason = None
    if delta > 0:
        pending_delta = delta
        reason = REASON_SEPARATOR.join(reasons) or "Price increased"
        payment = _after_increase(payment, delta, reason, now)
        if existing.original_total_price is None:
            db_fields["original_total_price"] = to_cents(existing.total_price)
    elif delta < 0:
        payment = _after_decrease(payment, new_total, existing.paid_at, now)

    if patch.paid:
        payment = FullyPaid(
            paid_amount=max(payment.paid_amount + payment.pending_amount, new_total),
            paid_at=existing.paid_at or now,
        )
    if payment != existing.payment:
        db_fields.update(payment.to_fields())

    if pending_delta:
        logger.info(
            "Registration %s price %s -> %s, pending +%s (%s)",
            existing.id,
            existing.total_price,
            new_total,
            pending_delta,
            reason,
        )

    return Reconciliation(
        db_fields=db_fields,
        pending_delta=pending_delta,
        reason=reason,
        breakdown=breakdown,
        inconsistent=not check_consistency(new_total, payment, existing.id),
    )


def apply_user_payment_completion(
    existing: Registration,
    now: datetime,
    payment_reference: str | None = None,
) -> dict[str, Any]:
    """Settle what the attendee owes.

    The pending amount is added to what was already paid. When nothing is
    pending the outstanding balance is collected instead. ``total_price`` is
    never part of the result.
    """
    payment = existing.payment
    total = to_cents(existing.total_price)
    if payment.pending_amount > 0:
        amount = payment.pending_amount
    else:
        amount = max(total - payment.paid_amount, ZERO)

    paid_amount = payment.paid_amount + amount
    if paid_amount >= total:
        settled: PaymentState = FullyPaid(paid_amount=paid_amount, paid_at=existing.paid_at or now)
    else:
        settled = PartiallyPaid(paid_amount=paid_amount, pending_amount=ZERO)

    check_consistency(total, settled, existing.id)
    db_fields = settled.to_fields()
    if payment_reference:
        db_fields["payment_reference"] = payment_reference
    logger.info("Registration %s collected %s, paid %s of %s", existing.id, amount, paid_amount, total)
    return db_fields
