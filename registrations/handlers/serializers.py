"""Serializers for request parsing and domain model responses."""

from rest_framework import serializers

from registrations.domain import RegistrationDraft
from registrations.domain.reconciliation import RegistrationPatch

MONEY = {"max_digits": 10, "decimal_places": 2}


class RegistrationDraftSerializer(serializers.Serializer):
    """Pricing-relevant selections of a registration."""

    spouse_ticket = serializers.BooleanField(required=False, default=False)
    spouse_breakfast = serializers.BooleanField(required=False, default=False)
    children_count = serializers.IntegerField(required=False, default=0, min_value=0)
    activity = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    discount_code = serializers.CharField(required=False, allow_null=True, allow_blank=True)

    def to_draft(self) -> RegistrationDraft:
        data = self.validated_data
        return RegistrationDraft(
            spouse_ticket=data.get("spouse_ticket", False),
            spouse_breakfast=data.get("spouse_breakfast", False),
            children_count=data.get("children_count", 0),
            activity=data.get("activity") or None,
            discount_code=data.get("discount_code") or None,
        )


class CreateRegistrationSerializer(RegistrationDraftSerializer):
    event_id = serializers.UUIDField()
    first_name = serializers.CharField(max_length=100)
    last_name = serializers.CharField(max_length=100)
    email = serializers.EmailField()
    paid = serializers.BooleanField(required=False, default=False)
    payment_reference = serializers.CharField(required=False, allow_null=True, allow_blank=True)

    def attendee(self) -> dict:
        return {name: self.validated_data[name] for name in ("first_name", "last_name", "email")}


class UserPatchSerializer(serializers.Serializer):
    """Fields an attendee may change on their own registration."""

    first_name = serializers.CharField(required=False, max_length=100)
    last_name = serializers.CharField(required=False, max_length=100)
    email = serializers.EmailField(required=False)
    activity = serializers.CharField(required=False)

    def to_patch(self) -> RegistrationPatch:
        data = dict(self.validated_data)
        activity = data.pop("activity", None)
        return RegistrationPatch(activity=activity, details=data)


class AdminPatchSerializer(UserPatchSerializer):
    spouse_ticket = serializers.BooleanField(required=False)
    spouse_breakfast = serializers.BooleanField(required=False)
    children_count = serializers.IntegerField(required=False, min_value=0)
    discount_code = serializers.CharField(required=False)
    total_price = serializers.DecimalField(required=False, min_value=0, **MONEY)
    paid = serializers.BooleanField(required=False)

    PRICING_FIELDS = (
        "spouse_ticket",
        "spouse_breakfast",
        "children_count",
        "activity",
        "discount_code",
        "total_price",
        "paid",
    )

    def to_patch(self) -> RegistrationPatch:
        data = dict(self.validated_data)
        pricing = {name: data.pop(name) for name in self.PRICING_FIELDS if name in data}
        return RegistrationPatch(details=data, **pricing)


class DiscountCodeInputSerializer(serializers.Serializer):
    code = serializers.CharField()


class PaymentCompletionSerializer(serializers.Serializer):
    """A completion must name the gateway payment that settled it."""

    payment_reference = serializers.CharField(max_length=255)


class CancellationInputSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_null=True, allow_blank=True)


class AdminNoteSerializer(serializers.Serializer):
    admin_note = serializers.CharField(required=False, allow_null=True, allow_blank=True)


class PriceQuoteSerializer(serializers.Serializer):
    """Serializer for a PriceQuote."""

    total = serializers.DecimalField(**MONEY)
    discount_amount = serializers.DecimalField(**MONEY)
    base = serializers.DecimalField(source="breakdown.base", **MONEY)
    spouse = serializers.DecimalField(source="breakdown.spouse", **MONEY)
    breakfast = serializers.DecimalField(source="breakdown.breakfast", **MONEY)
    children = serializers.DecimalField(source="breakdown.children", **MONEY)
    tier = serializers.CharField(source="breakdown.tier_label", allow_null=True)


class DiscountValidationSerializer(serializers.Serializer):
    valid = serializers.BooleanField()
    error = serializers.CharField(allow_null=True)


class RegistrationSerializer(serializers.Serializer):
    """Serializer for Registration domain model."""

    id = serializers.UUIDField(source="id.value")
    event_id = serializers.UUIDField(source="event_id.value")
    first_name = serializers.CharField()
    last_name = serializers.CharField()
    email = serializers.CharField()
    registration_tier = serializers.CharField(source="selections.registration_tier", allow_null=True)
    spouse_ticket = serializers.BooleanField(source="selections.spouse_ticket")
    spouse_breakfast = serializers.BooleanField(source="selections.spouse_breakfast")
    children_count = serializers.IntegerField(source="selections.children_count")
    activity = serializers.CharField(source="selections.activity", allow_null=True)
    discount_code = serializers.CharField(allow_null=True)
    discount_amount = serializers.DecimalField(**MONEY)
    total_price = serializers.DecimalField(**MONEY)
    original_total_price = serializers.DecimalField(allow_null=True, **MONEY)
    paid = serializers.SerializerMethodField()
    paid_amount = serializers.DecimalField(source="payment.paid_amount", **MONEY)
    pending_payment_amount = serializers.DecimalField(source="payment.pending_amount", **MONEY)
    pending_payment_reason = serializers.SerializerMethodField()
    paid_at = serializers.DateTimeField(allow_null=True)
    status = serializers.CharField(source="status.value")
    cancellation_at = serializers.DateTimeField(allow_null=True)
    created_at = serializers.DateTimeField()

    def get_paid(self, registration) -> bool:
        return registration.payment.to_fields()["paid"]

    def get_pending_payment_reason(self, registration) -> str | None:
        return getattr(registration.payment, "reason", None)


class CancellationRequestSerializer(serializers.Serializer):
    """Serializer for CancellationRequest domain model."""

    id = serializers.IntegerField()
    registration_id = serializers.UUIDField(source="registration_id.value")
    event_id = serializers.UUIDField(source="event_id.value")
    reason = serializers.CharField(allow_null=True)
    status = serializers.CharField(source="status.value")
    admin_note = serializers.CharField(allow_null=True)
    created_at = serializers.DateTimeField()
    processed_at = serializers.DateTimeField(allow_null=True)
