"""Re-price stored registrations against their event's tiers."""

from django.core.management.base import BaseCommand, CommandError

from registrations.domain.errors import DomainError
from registrations.services.price_correction import PriceCorrectionService
from registrations.services.registration_service import parse_event_id
from registrations.stores.django_store import (
    DjangoDiscountCodeStore,
    DjangoEventStore,
    DjangoRegistrationStore,
)


class Command(BaseCommand):
    help = "Recalculate total_price for registrations from the tier active when they were paid or created."

    def add_arguments(self, parser):
        parser.add_argument("--event", help="Only re-price registrations of this event ID.")
        parser.add_argument("--dry-run", action="store_true", help="Report changes without writing them.")

    def handle(self, *args, **options):
        try:
            event_id = parse_event_id(options["event"]) if options["event"] else None
        except DomainError as exc:
            raise CommandError(exc.message) from exc

        service = PriceCorrectionService(
            DjangoEventStore(),
            DjangoRegistrationStore(),
            DjangoDiscountCodeStore(),
        )
        summary = service.run(event_id=event_id, dry_run=options["dry_run"], report=self.stdout.write)

        self.stdout.write("")
        self.stdout.write(f"Total registrations: {summary.total}")
        self.stdout.write(f"Updated: {summary.updated}")
        self.stdout.write(f"Unchanged: {summary.unchanged}")
        self.stdout.write(f"Skipped: {summary.skipped}")
        self.stdout.write(f"Errors: {summary.errors}")
        if summary.errors:
            raise CommandError(f"{summary.errors} registration(s) could not be re-priced")
        self.stdout.write(self.style.SUCCESS("Price correction completed."))
