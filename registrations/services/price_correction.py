"""Offline re-pricing of stored registrations.

Each registration is priced again at the instant it was paid (or created,
when unpaid), with the same tier selection the live path uses. Only
``total_price`` is rewritten; payment columns are left for an administrator
to reconcile.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from decimal import Decimal

from registrations.domain import Event, EventId, Registration
from registrations.domain.civil_time import civil_instant_for
from registrations.domain.pricing import compute_total
from registrations.stores.interfaces import DiscountCodeStore, EventStore, RegistrationStore

logger = logging.getLogger(__name__)

TOLERANCE = Decimal("0.01")


@dataclass
class CorrectionSummary:
    total: int = 0
    updated: int = 0
    unchanged: int = 0
    skipped: int = 0
    errors: int = 0
    changes: list[tuple[str, Decimal, Decimal]] = field(default_factory=list)


class PriceCorrectionService:
    def __init__(
        self,
        events: EventStore,
        registrations: RegistrationStore,
        discounts: DiscountCodeStore,
    ) -> None:
        self._events = events
        self._registrations = registrations
        self._discounts = discounts

    def _expected_total(self, registration: Registration, event: Event) -> Decimal | None:
        instant = civil_instant_for(registration.paid_at or registration.created_at)
        if instant is None:
            return None
        discount = None
        if registration.discount_code:
            discount = self._discounts.find_code(event.id, registration.discount_code)
        return compute_total(event, registration.selections, instant, discount).total

    def run(
        self,
        event_id: EventId | None = None,
        dry_run: bool = False,
        report: Callable[[str], None] | None = None,
    ) -> CorrectionSummary:
        summary = CorrectionSummary()
        events: dict[EventId, Event | None] = {}
        report = report or (lambda message: None)

        for registration in self._registrations.list_registrations(event_id):
            summary.total += 1
            if registration.event_id not in events:
                events[registration.event_id] = self._events.get_event(registration.event_id)
            event = events[registration.event_id]
            if event is None:
                report(f"Registration {registration.id}: event {registration.event_id} not found, skipping")
                summary.skipped += 1
                continue

            try:
                expected = self._expected_total(registration, event)
                if expected is None:
                    summary.skipped += 1
                    continue
                current = registration.total_price
                if abs(expected - current) <= TOLERANCE:
                    summary.unchanged += 1
                    continue
                if not dry_run:
                    self._registrations.update_registration(registration.id, {"total_price": expected})
                summary.updated += 1
                summary.changes.append((str(registration.id), current, expected))
                report(f"Registration {registration.id}: {current:.2f} -> {expected:.2f}")
            except Exception:
                logger.exception("Failed to re-price registration %s", registration.id)
                summary.errors += 1

        logger.info(
            "Price correction finished: %s total, %s updated, %s unchanged, %s skipped, %s errors%s",
            summary.total,
            summary.updated,
            summary.unchanged,
            summary.skipped,
            summary.errors,
            " (dry run)" if dry_run else "",
        )
        return summary
