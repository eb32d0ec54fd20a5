"""Registration price composition.

``compute_total`` reads no clock: the instant is always passed in, so the
same inputs always produce the same price.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from registrations.domain.civil_time import civil_end_of_day
from registrations.domain.discounts import discount_amount_for
from registrations.domain.models import DiscountCode, Event, PriceTier, RegistrationDraft
from registrations.domain.tiers import select_tier
from registrations.domain.value_objects import to_cents

ZERO = Decimal("0.00")


@dataclass(frozen=True)
class PriceBreakdown:
    """Per-component prices of one registration, all in cents precision."""

    base: Decimal
    spouse: Decimal
    breakfast: Decimal
    children: Decimal
    discount_amount: Decimal
    tier_label: str | None = None

    @property
    def subtotal(self) -> Decimal:
        return self.base + self.spouse + self.breakfast + self.children

    @property
    def total(self) -> Decimal:
        return max(self.subtotal - self.discount_amount, ZERO)


def _tier_price(tier: PriceTier | None) -> Decimal:
    return tier.price.amount if tier is not None else ZERO


def breakfast_available(event: Event, instant: datetime) -> bool:
    """Breakfast can be bought up to and including its end date."""
    if not event.breakfast_end_date:
        return True
    end = civil_end_of_day(event.breakfast_end_date)
    return end is None or instant < end


def compute_total(
    event: Event,
    draft: RegistrationDraft,
    instant: datetime,
    discount: DiscountCode | None = None,
) -> PriceBreakdown:
    # The base tier always follows the instant; a stored label only records it.
    base_tier = select_tier(event.registration_tiers, instant)
    base = base_tier.price.amount if base_tier is not None else event.default_price.amount

    spouse = ZERO
    if draft.spouse_ticket:
        spouse = _tier_price(select_tier(event.spouse_tiers, instant))

    breakfast = ZERO
    if draft.spouse_breakfast and breakfast_available(event, instant):
        breakfast = event.breakfast_price.amount

    children = ZERO
    if draft.children_count:
        children = to_cents(_tier_price(select_tier(event.child_tiers, instant)) * draft.children_count)

    subtotal = base + spouse + breakfast + children
    return PriceBreakdown(
        base=base,
        spouse=spouse,
        breakfast=breakfast,
        children=children,
        discount_amount=discount_amount_for(discount, subtotal),
        tier_label=base_tier.label if base_tier is not None else None,
    )
