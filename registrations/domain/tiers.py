"""Date-bounded price tier selection."""

from collections.abc import Sequence
from datetime import datetime

from registrations.domain.civil_time import civil_end_of_day, civil_midnight
from registrations.domain.models import PriceTier


def tier_contains(tier: PriceTier, instant: datetime) -> bool:
    """Return True when ``start <= instant < end`` for the tier."""
    start = civil_midnight(tier.start_date) if tier.start_date else None
    end = civil_end_of_day(tier.end_date) if tier.end_date else None
    if start is not None and instant < start:
        return False
    if end is not None and instant >= end:
        return False
    return True


def select_tier(tiers: Sequence[PriceTier], instant: datetime) -> PriceTier | None:
    """Pick the tier active at ``instant``.

    List order encodes priority (early-bird, regular, late, walk-in). When no
    tier covers the instant the last one is used, not the cheapest or the
    latest-dated one.
    """
    if not tiers:
        return None
    for tier in tiers:
        if tier_contains(tier, instant):
            return tier
    return tiers[-1]
