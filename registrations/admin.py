from django.contrib import admin

from registrations.models import CancellationRequest, DiscountCode, Event, Registration


class DiscountCodeInline(admin.TabularInline):
    model = DiscountCode
    extra = 1
    readonly_fields = ["used_count"]


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ["name", "default_price", "breakfast_price", "breakfast_end_date", "created_at"]
    search_fields = ["name"]
    inlines = [DiscountCodeInline]


@admin.register(DiscountCode)
class DiscountCodeAdmin(admin.ModelAdmin):
    list_display = ["code", "event", "discount_type", "discount_value", "used_count", "usage_limit", "expires_at"]
    list_filter = ["event", "discount_type"]
    search_fields = ["code"]
    readonly_fields = ["used_count"]


@admin.register(Registration)
class RegistrationAdmin(admin.ModelAdmin):
    list_display = [
        "first_name",
        "last_name",
        "event",
        "activity",
        "total_price",
        "paid",
        "paid_amount",
        "pending_payment_amount",
        "status",
    ]
    list_filter = ["event", "status", "paid", "activity"]
    search_fields = ["first_name", "last_name", "email"]
    readonly_fields = [
        "original_total_price",
        "paid_amount",
        "pending_payment_amount",
        "pending_payment_reason",
        "pending_payment_created_at",
        "paid_at",
    ]


@admin.register(CancellationRequest)
class CancellationRequestAdmin(admin.ModelAdmin):
    list_display = ["registration", "event", "status", "created_at", "processed_at"]
    list_filter = ["status", "event"]
