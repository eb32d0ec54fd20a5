"""Django ORM implementation of the registration stores."""

from datetime import datetime
from decimal import Decimal
from typing import Any

from django.db.models import F, Q

from registrations import models as orm
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
from registrations.domain.models import CancellationStatus
from registrations.domain.payments import payment_state_from_fields
from registrations.stores.interfaces import (
    CancellationRequestStore,
    DiscountCodeStore,
    EventStore,
    RegistrationStore,
)


def _tiers(raw: list[dict[str, Any]] | None) -> tuple[PriceTier, ...]:
    tiers = []
    for item in raw or []:
        price = item.get("price")
        if price is None:
            continue
        tiers.append(
            PriceTier(
                label=item.get("label") or item.get("name") or "",
                price=Money(Decimal(str(price))),
                start_date=item.get("startDate") or None,
                end_date=item.get("endDate") or None,
            )
        )
    return tuple(tiers)


def _activities(raw: list[Any] | None) -> tuple[Activity, ...]:
    activities = []
    for item in raw or []:
        # Older events store plain activity names.
        if isinstance(item, str):
            activities.append(Activity(name=item))
            continue
        limit = item.get("seatLimit")
        activities.append(
            Activity(
                name=item["name"],
                seat_limit=Capacity(int(limit)) if limit not in (None, "") else None,
            )
        )
    return tuple(activities)


def event_to_domain(row: orm.Event) -> Event:
    return Event(
        id=EventId(row.id),
        name=row.name,
        default_price=Money(row.default_price),
        registration_tiers=_tiers(row.registration_pricing),
        spouse_tiers=_tiers(row.spouse_pricing),
        child_tiers=_tiers(row.child_pricing),
        breakfast_price=Money(row.breakfast_price or Decimal(0)),
        breakfast_end_date=row.breakfast_end_date.isoformat() if row.breakfast_end_date else None,
        activities=_activities(row.activities),
    )


def discount_to_domain(row: orm.DiscountCode) -> DiscountCode:
    return DiscountCode(
        id=DiscountCodeId(row.id),
        event_id=EventId(row.event_id),
        code=row.code,
        discount_type=DiscountType(row.discount_type),
        discount_value=row.discount_value,
        expires_at=row.expires_at,
        usage_limit=row.usage_limit,
        used_count=row.used_count,
    )


def registration_to_domain(row: orm.Registration) -> Registration:
    return Registration(
        id=RegistrationId(row.id),
        event_id=EventId(row.event_id),
        user_id=row.user_id,
        first_name=row.first_name,
        last_name=row.last_name,
        email=row.email,
        selections=RegistrationDraft(
            registration_tier=row.registration_tier,
            spouse_ticket=row.spouse_ticket,
            spouse_breakfast=row.spouse_breakfast,
            children_count=row.children_count,
            activity=row.activity,
            discount_code=row.discount_code,
        ),
        total_price=row.total_price,
        created_at=row.created_at,
        payment=payment_state_from_fields(
            total_price=row.total_price,
            paid=row.paid,
            paid_amount=row.paid_amount,
            pending_payment_amount=row.pending_payment_amount,
            pending_payment_reason=row.pending_payment_reason,
            pending_payment_created_at=row.pending_payment_created_at,
            paid_at=row.paid_at,
        ),
        original_total_price=row.original_total_price,
        discount_code=row.discount_code,
        discount_amount=row.discount_amount,
        payment_reference=row.payment_reference,
        paid_at=row.paid_at,
        status=RegistrationStatus(row.status),
        cancellation_reason=row.cancellation_reason,
        cancellation_at=row.cancellation_at,
    )


def cancellation_to_domain(row: orm.CancellationRequest) -> CancellationRequest:
    return CancellationRequest(
        id=row.pk,
        registration_id=RegistrationId(row.registration_id),
        event_id=EventId(row.event_id),
        user_id=row.user_id,
        reason=row.reason,
        status=CancellationStatus(row.status),
        created_at=row.created_at,
        admin_note=row.admin_note,
        processed_at=row.processed_at,
    )


class DjangoEventStore(EventStore):
    """Event store using Django ORM."""

    def get_event(self, event_id: EventId) -> Event | None:
        row = orm.Event.objects.filter(pk=event_id.value).first()
        return event_to_domain(row) if row is not None else None


class DjangoRegistrationStore(RegistrationStore):
    """Registration store using Django ORM."""

    def get_registration(self, registration_id: RegistrationId) -> Registration | None:
        row = orm.Registration.objects.filter(pk=registration_id.value).first()
        return registration_to_domain(row) if row is not None else None

    def list_registrations(self, event_id: EventId | None = None) -> list[Registration]:
        rows = orm.Registration.objects.order_by("created_at")
        if event_id is not None:
            rows = rows.filter(event_id=event_id.value)
        return [registration_to_domain(row) for row in rows]

    def create_registration(self, fields: dict[str, Any]) -> Registration:
        fields = dict(fields)
        event_id = fields.pop("event_id")
        row = orm.Registration.objects.create(event_id=event_id.value, **fields)
        return registration_to_domain(row)

    def update_registration(self, registration_id: RegistrationId, fields: dict[str, Any]) -> Registration:
        row = orm.Registration.objects.get(pk=registration_id.value)
        for name, value in fields.items():
            setattr(row, name, value)
        row.save(update_fields=[*fields, "updated_at"])
        return registration_to_domain(row)

    def count_committed_for_activity(
        self,
        event_id: EventId,
        activity: str,
        exclude_id: RegistrationId | None = None,
    ) -> int:
        rows = orm.Registration.objects.filter(
            event_id=event_id.value,
            activity=activity,
            cancellation_at__isnull=True,
        ).exclude(status=orm.Registration.Status.CANCELLED)
        if exclude_id is not None:
            rows = rows.exclude(pk=exclude_id.value)
        return rows.count()


class DjangoDiscountCodeStore(DiscountCodeStore):
    """Discount code store using Django ORM."""

    def find_code(self, event_id: EventId, code: str) -> DiscountCode | None:
        row = orm.DiscountCode.objects.filter(event_id=event_id.value, code=code).first()
        return discount_to_domain(row) if row is not None else None

    def increment_usage(self, code_id: DiscountCodeId) -> bool:
        # Conditional UPDATE so two concurrent redemptions cannot both take the last use.
        updated = (
            orm.DiscountCode.objects.filter(pk=code_id.value)
            .filter(Q(usage_limit__isnull=True) | Q(used_count__lt=F("usage_limit")))
            .update(used_count=F("used_count") + 1)
        )
        return updated == 1


class DjangoCancellationRequestStore(CancellationRequestStore):
    """Cancellation request store using Django ORM."""

    def get_request(self, request_id: int) -> CancellationRequest | None:
        row = orm.CancellationRequest.objects.filter(pk=request_id).first()
        return cancellation_to_domain(row) if row is not None else None

    def has_pending_request(self, registration_id: RegistrationId) -> bool:
        return orm.CancellationRequest.objects.filter(
            registration_id=registration_id.value,
            status=orm.CancellationRequest.Status.PENDING,
        ).exists()

    def create_request(self, registration: Registration, reason: str | None) -> CancellationRequest:
        row = orm.CancellationRequest.objects.create(
            registration_id=registration.id.value,
            event_id=registration.event_id.value,
            user_id=registration.user_id,
            reason=reason,
        )
        return cancellation_to_domain(row)

    def list_requests(self, status: str = "pending") -> list[CancellationRequest]:
        rows = orm.CancellationRequest.objects.filter(status=status).order_by("-created_at")
        return [cancellation_to_domain(row) for row in rows]

    def mark_processed(
        self,
        request_id: int,
        status: str,
        admin_note: str | None,
        processed_at: datetime,
    ) -> CancellationRequest:
        row = orm.CancellationRequest.objects.get(pk=request_id)
        row.status = status
        row.admin_note = admin_note
        row.processed_at = processed_at
        row.save(update_fields=["status", "admin_note", "processed_at"])
        return cancellation_to_domain(row)
