"""HTTP tests for the registration API.

Event pricing here has no date bounds, so results do not depend on the
wall clock.
Run with: pytest tests/test_registration_api.py -v
"""

from decimal import Decimal

import pytest
from django.urls import reverse
from rest_framework.test import APIClient

from registrations import models as orm

pytestmark = pytest.mark.django_db


@pytest.fixture
def event_row():
    return orm.Event.objects.create(
        name="Annual Conference",
        default_price=Decimal("675"),
        registration_pricing=[{"label": "Regular", "price": 500}],
        spouse_pricing=[{"label": "Spouse", "price": 200}],
        child_pricing=[{"label": "Child", "price": 75}],
        breakfast_price=Decimal("40"),
        activities=[{"name": "Golf Tournament", "seatLimit": 1}, "Fishing"],
    )


@pytest.fixture
def admin_client(django_user_model):
    staff = django_user_model.objects.create_user(username="staff", password="pw", is_staff=True)
    client = APIClient()
    client.force_authenticate(user=staff)
    return client


def registration_payload(event_row, **overrides):
    payload = {
        "event_id": str(event_row.id),
        "first_name": "Ada",
        "last_name": "Lovelace",
        "email": "ada@example.com",
    }
    payload.update(overrides)
    return payload


def create_registration(client, event_row, **overrides):
    response = client.post(reverse("registration-create"), registration_payload(event_row, **overrides), format="json")
    assert response.status_code == 201, response.data
    return response.data


class TestPriceQuote:
    def test_quote_breakdown(self, api_client, event_row):
        url = reverse("price-quote", kwargs={"event_id": event_row.id})
        response = api_client.post(url, {"spouse_ticket": True, "children_count": 2}, format="json")

        assert response.status_code == 200
        assert response.data["total"] == "850.00"
        assert response.data["children"] == "150.00"
        assert response.data["tier"] == "Regular"

    def test_quote_with_discount(self, api_client, event_row):
        orm.DiscountCode.objects.create(event=event_row, code="SAVE20", discount_type="percentage", discount_value=20)
        url = reverse("price-quote", kwargs={"event_id": event_row.id})
        response = api_client.post(url, {"discount_code": "save20"}, format="json")
        assert response.data["total"] == "400.00"

    def test_expired_code_is_rejected(self, api_client, event_row):
        orm.DiscountCode.objects.create(
            event=event_row,
            code="OLD",
            discount_type="fixed",
            discount_value=50,
            expires_at="2020-01-01T00:00:00Z",
        )
        url = reverse("price-quote", kwargs={"event_id": event_row.id})
        response = api_client.post(url, {"discount_code": "OLD"}, format="json")
        assert response.status_code == 422
        assert response.data["error"]["message"] == "This discount code has expired"

    def test_tier_label_in_request_is_ignored(self, api_client, event_row):
        event_row.registration_pricing = [
            {"label": "Early Bird", "price": 100, "endDate": "2020-01-01"},
            {"label": "Regular", "price": 500},
        ]
        event_row.save()
        url = reverse("price-quote", kwargs={"event_id": event_row.id})

        response = api_client.post(url, {"registration_tier": "Early Bird"}, format="json")
        assert response.status_code == 200
        assert response.data["total"] == "500.00"
        assert response.data["tier"] == "Regular"

        data = create_registration(api_client, event_row, registration_tier="Early Bird")
        assert data["total_price"] == "500.00"
        assert data["registration_tier"] == "Regular"

    def test_unknown_event(self, api_client):
        url = reverse("price-quote", kwargs={"event_id": "00000000-0000-0000-0000-000000000000"})
        response = api_client.post(url, {}, format="json")
        assert response.status_code == 404
        assert response.data["error"]["code"] == "EVENT_NOT_FOUND"

    def test_invalid_event_id(self, api_client):
        response = api_client.post(reverse("price-quote", kwargs={"event_id": "nope"}), {}, format="json")
        assert response.status_code == 400

    def test_negative_children_rejected(self, api_client, event_row):
        url = reverse("price-quote", kwargs={"event_id": event_row.id})
        assert api_client.post(url, {"children_count": -1}, format="json").status_code == 400


class TestDiscountValidation:
    def test_validate_does_not_consume(self, api_client, event_row):
        code = orm.DiscountCode.objects.create(
            event=event_row, code="ONCE", discount_type="fixed", discount_value=50, usage_limit=1
        )
        url = reverse("discount-code-validate", kwargs={"event_id": event_row.id})

        for _ in range(2):
            response = api_client.post(url, {"code": "once"}, format="json")
            assert response.data == {"valid": True, "error": None}
        code.refresh_from_db()
        assert code.used_count == 0

    def test_malformed_code(self, api_client, event_row):
        url = reverse("discount-code-validate", kwargs={"event_id": event_row.id})
        response = api_client.post(url, {"code": "no spaces!"}, format="json")
        assert response.status_code == 400
        assert response.data["error"]["code"] == "INVALID_DISCOUNT_CODE"


class TestCreateRegistration:
    def test_public_registration(self, api_client, event_row):
        data = create_registration(api_client, event_row, spouse_ticket=True)
        assert data["total_price"] == "700.00"
        assert data["paid"] is False
        assert data["pending_payment_amount"] == "0.00"

    def test_public_paid_flag_needs_payment_reference(self, api_client, event_row):
        assert create_registration(api_client, event_row, paid=True)["paid"] is False
        assert create_registration(api_client, event_row, paid=True, payment_reference="pi_1")["paid"] is True

    def test_admin_created_registration_is_pending(self, admin_client, event_row):
        data = create_registration(admin_client, event_row)
        assert data["pending_payment_amount"] == "500.00"
        assert data["pending_payment_reason"] == "Registration created by administrator"

    def test_discount_counted_once(self, api_client, event_row):
        code = orm.DiscountCode.objects.create(
            event=event_row, code="SAVE20", discount_type="percentage", discount_value=20
        )
        data = create_registration(api_client, event_row, discount_code="SAVE20")
        assert data["total_price"] == "400.00"
        code.refresh_from_db()
        assert code.used_count == 1

    def test_full_activity(self, api_client, event_row):
        create_registration(api_client, event_row, activity="Golf Tournament")
        response = api_client.post(
            reverse("registration-create"),
            registration_payload(event_row, activity="Golf Tournament"),
            format="json",
        )
        assert response.status_code == 409
        assert response.data["error"]["message"] == "Golf Tournament is full"

    def test_capacity_endpoint(self, api_client, event_row):
        url = reverse("activity-capacity", kwargs={"event_id": event_row.id, "activity": "Golf Tournament"})
        assert api_client.get(url).data["available"] is True
        golfer = create_registration(api_client, event_row, activity="Golf Tournament")
        assert api_client.get(url).data["available"] is False
        assert api_client.get(url, {"exclude": golfer["id"]}).data["available"] is True


class TestPaymentFlow:
    def test_admin_created_then_user_pays(self, admin_client, api_client, event_row):
        created = create_registration(admin_client, event_row)
        url = reverse("registration-complete-payment", kwargs={"registration_id": created["id"]})

        response = api_client.post(url, {"payment_reference": "pi_9"}, format="json")
        assert response.status_code == 200
        assert response.data["paid"] is True
        assert response.data["paid_amount"] == "500.00"
        assert response.data["pending_payment_amount"] == "0.00"
        assert response.data["total_price"] == "500.00"

    def test_completion_requires_payment_reference(self, admin_client, api_client, event_row):
        created = create_registration(admin_client, event_row)
        url = reverse("registration-complete-payment", kwargs={"registration_id": created["id"]})

        assert api_client.post(url, {}, format="json").status_code == 400
        assert api_client.post(url, {"payment_reference": "  "}, format="json").status_code == 400
        row = orm.Registration.objects.get(pk=created["id"])
        assert row.paid is False
        assert row.pending_payment_amount == Decimal("500.00")

    def test_admin_adds_spouse_to_paid_registration(self, admin_client, event_row):
        created = create_registration(admin_client, event_row, paid=True)
        url = reverse("admin-registration", kwargs={"registration_id": created["id"]})

        response = admin_client.patch(url, {"spouse_ticket": True}, format="json")
        assert response.status_code == 200
        assert response.data["pending_delta"] == "200.00"
        registration = response.data["registration"]
        assert registration["total_price"] == "700.00"
        assert registration["original_total_price"] == "500.00"
        assert registration["paid_amount"] == "500.00"
        assert registration["pending_payment_amount"] == "200.00"
        assert registration["paid"] is False

    def test_admin_endpoint_requires_staff(self, api_client, event_row):
        created = create_registration(api_client, event_row)
        url = reverse("admin-registration", kwargs={"registration_id": created["id"]})
        assert api_client.patch(url, {"spouse_ticket": True}, format="json").status_code == 403

    def test_user_patch_ignores_pricing_fields(self, api_client, event_row):
        created = create_registration(api_client, event_row)
        url = reverse("registration-detail", kwargs={"registration_id": created["id"]})

        response = api_client.patch(url, {"first_name": "Grace", "spouse_ticket": True}, format="json")
        assert response.status_code == 200
        assert response.data["first_name"] == "Grace"
        assert response.data["spouse_ticket"] is False
        assert response.data["total_price"] == "500.00"

    def test_missing_registration(self, api_client):
        url = reverse("registration-detail", kwargs={"registration_id": "00000000-0000-0000-0000-000000000000"})
        assert api_client.get(url).status_code == 404


class TestCancellation:
    def test_request_and_approve_frees_seat(self, api_client, admin_client, event_row):
        golfer = create_registration(api_client, event_row, activity="Golf Tournament")
        response = api_client.post(
            reverse("registration-cancel-request", kwargs={"registration_id": golfer["id"]}),
            {"reason": "Injured"},
            format="json",
        )
        assert response.status_code == 201
        request_id = response.data["id"]

        listed = admin_client.get(reverse("admin-cancel-requests"))
        assert [item["id"] for item in listed.data] == [request_id]

        approved = admin_client.post(
            reverse("admin-cancel-request-approve", kwargs={"request_id": request_id}), {}, format="json"
        )
        assert approved.status_code == 200
        assert approved.data["status"] == "cancelled"

        create_registration(api_client, event_row, activity="Golf Tournament")

    def test_duplicate_request_conflicts(self, api_client, event_row):
        created = create_registration(api_client, event_row)
        url = reverse("registration-cancel-request", kwargs={"registration_id": created["id"]})
        api_client.post(url, {}, format="json")
        assert api_client.post(url, {}, format="json").status_code == 409

    def test_reject(self, api_client, admin_client, event_row):
        created = create_registration(api_client, event_row)
        request_id = api_client.post(
            reverse("registration-cancel-request", kwargs={"registration_id": created["id"]}), {}, format="json"
        ).data["id"]

        url = reverse("admin-cancel-request-reject", kwargs={"request_id": request_id})
        response = admin_client.post(url, {"admin_note": "Past the deadline"}, format="json")
        assert response.data["status"] == "rejected"
        assert admin_client.post(url, {}, format="json").status_code == 409
