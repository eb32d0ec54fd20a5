"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/.
"""

import uuid

from django.db import models
from django.db.models import F, Q


class Event(models.Model):
    """Persistence model for conference events.

    Tier lists are JSON arrays of ``{label, price, startDate?, endDate?}``;
    activities are ``{name, seatLimit?}``.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    default_price = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    registration_pricing = models.JSONField(default=list, blank=True)
    spouse_pricing = models.JSONField(default=list, blank=True)
    child_pricing = models.JSONField(default=list, blank=True)
    breakfast_price = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    breakfast_end_date = models.DateField(blank=True, null=True)
    activities = models.JSONField(default=list, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return self.name


class DiscountCode(models.Model):
    """Persistence model for discount codes."""

    class DiscountType(models.TextChoices):
        PERCENTAGE = "percentage"
        FIXED = "fixed"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="discount_codes")
    code = models.CharField(max_length=50)
    discount_type = models.CharField(max_length=20, choices=DiscountType.choices)
    discount_value = models.DecimalField(max_digits=10, decimal_places=2)
    expires_at = models.DateTimeField(blank=True, null=True)
    usage_limit = models.PositiveIntegerField(blank=True, null=True)
    used_count = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(fields=["event", "code"], name="unique_discount_code_per_event"),
            models.CheckConstraint(
                condition=Q(usage_limit__isnull=True) | Q(used_count__lte=F("usage_limit")),
                name="discount_used_count_within_limit",
            ),
        ]

    def save(self, *args, **kwargs):
        self.code = self.code.strip().upper()
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return self.code


class Registration(models.Model):
    """Persistence model for registrations."""

    class Status(models.TextChoices):
        ACTIVE = "active"
        CANCELLED = "cancelled"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="registrations")
    user_id = models.IntegerField(blank=True, null=True)
    first_name = models.CharField(max_length=100, blank=True)
    last_name = models.CharField(max_length=100, blank=True)
    email = models.EmailField(blank=True)

    registration_tier = models.CharField(max_length=100, blank=True, null=True)
    spouse_ticket = models.BooleanField(default=False)
    spouse_breakfast = models.BooleanField(default=False)
    children_count = models.PositiveIntegerField(default=0)
    activity = models.CharField(max_length=100, blank=True, null=True)

    discount_code = models.CharField(max_length=50, blank=True, null=True)
    discount_amount = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    total_price = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    original_total_price = models.DecimalField(max_digits=10, decimal_places=2, blank=True, null=True)

    paid = models.BooleanField(default=False)
    paid_amount = models.DecimalField(max_digits=10, decimal_places=2, blank=True, null=True, default=0)
    pending_payment_amount = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    pending_payment_reason = models.TextField(blank=True, null=True)
    pending_payment_created_at = models.DateTimeField(blank=True, null=True)
    paid_at = models.DateTimeField(blank=True, null=True)
    payment_reference = models.CharField(max_length=255, blank=True, null=True)

    status = models.CharField(max_length=20, choices=Status.choices, default=Status.ACTIVE)
    cancellation_reason = models.TextField(blank=True, null=True)
    cancellation_at = models.DateTimeField(blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["created_at"]
        indexes = [
            models.Index(fields=["event", "activity", "status"]),
        ]

    def __str__(self) -> str:
        return f"{self.first_name} {self.last_name} - {self.event.name}"


class CancellationRequest(models.Model):
    """Persistence model for cancellation requests."""

    class Status(models.TextChoices):
        PENDING = "pending"
        APPROVED = "approved"
        REJECTED = "rejected"

    registration = models.ForeignKey(
        Registration, on_delete=models.CASCADE, related_name="cancellation_requests"
    )
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="cancellation_requests")
    user_id = models.IntegerField(blank=True, null=True)
    reason = models.TextField(blank=True, null=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    admin_note = models.TextField(blank=True, null=True)
    processed_at = models.DateTimeField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"Cancellation {self.pk} ({self.status})"
