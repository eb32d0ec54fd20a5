from django.urls import path

from registrations.handlers.views import (
    ActivityCapacityView,
    AdminCancellationDecisionView,
    AdminCancellationListView,
    AdminRegistrationView,
    CancellationRequestView,
    DiscountCodeValidateView,
    PaymentCompletionView,
    PriceQuoteView,
    RegistrationCreateView,
    RegistrationDetailView,
)

urlpatterns = [
    path("events/<str:event_id>/price-quote", PriceQuoteView.as_view(), name="price-quote"),
    path(
        "events/<str:event_id>/discount-codes/validate",
        DiscountCodeValidateView.as_view(),
        name="discount-code-validate",
    ),
    path(
        "events/<str:event_id>/activities/<str:activity>/capacity",
        ActivityCapacityView.as_view(),
        name="activity-capacity",
    ),
    path("registrations", RegistrationCreateView.as_view(), name="registration-create"),
    path("registrations/<str:registration_id>", RegistrationDetailView.as_view(), name="registration-detail"),
    path(
        "registrations/<str:registration_id>/complete-payment",
        PaymentCompletionView.as_view(),
        name="registration-complete-payment",
    ),
    path(
        "registrations/<str:registration_id>/cancel-request",
        CancellationRequestView.as_view(),
        name="registration-cancel-request",
    ),
    path(
        "admin/registrations/<str:registration_id>",
        AdminRegistrationView.as_view(),
        name="admin-registration",
    ),
    path("admin/cancel-requests", AdminCancellationListView.as_view(), name="admin-cancel-requests"),
    path(
        "admin/cancel-requests/<int:request_id>/approve",
        AdminCancellationDecisionView.as_view(),
        {"decision": "approve"},
        name="admin-cancel-request-approve",
    ),
    path(
        "admin/cancel-requests/<int:request_id>/reject",
        AdminCancellationDecisionView.as_view(),
        {"decision": "reject"},
        name="admin-cancel-request-reject",
    ),
]
