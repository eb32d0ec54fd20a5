"""Unit tests for domain primitives.

These test invariants that must hold at construction time.
Run with: pytest tests/test_domain.py -v
"""

from datetime import datetime, timezone
from decimal import Decimal
from uuid import uuid4

import pytest
from conftest import build_event

from registrations.domain import (
    Activity,
    Capacity,
    EventId,
    FullyPaid,
    Money,
    PartiallyPaid,
    RegistrationId,
    Unpaid,
)
from registrations.domain.capacity import has_capacity, is_committed, seat_limit
from registrations.domain.errors import ActivityFullError, DomainError, ErrorCode
from registrations.domain.payments import payment_state_from_fields
from registrations.domain.value_objects import to_cents

PAID_AT = datetime(2026, 1, 10, 12, tzinfo=timezone.utc)


class TestMoney:
    """Tests for Money value object."""

    def test_money_accepts_positive_amount(self):
        """Money can be created with positive amount."""
        assert Money(Decimal("500")).amount == Decimal("500.00")

    def test_money_accepts_zero(self):
        """Money can be created with zero."""
        assert Money.zero().amount == Decimal("0.00")

    def test_money_rejects_negative_amount(self):
        """Money raises ValueError for negative amount."""
        with pytest.raises(ValueError):
            Money(Decimal("-0.01"))

    def test_money_str_format(self):
        """Money string representation is formatted to 2 decimal places."""
        assert str(Money(Decimal("42.5"))) == "42.50"

    def test_to_cents_rounds_half_up(self):
        assert to_cents(Decimal("2.345")) == Decimal("2.35")
        assert to_cents(0.1 + 0.2) == Decimal("0.30")


class TestCapacity:
    """Tests for Capacity value object."""

    def test_capacity_accepts_zero(self):
        assert Capacity(0).value == 0

    def test_capacity_rejects_negative_value(self):
        with pytest.raises(ValueError):
            Capacity(-1)


class TestIds:
    def test_from_string_valid_uuid(self):
        raw = uuid4()
        assert EventId.from_string(str(raw)) == EventId(raw)
        assert str(RegistrationId(raw)) == str(raw)

    def test_from_string_invalid_uuid(self):
        with pytest.raises(ValueError):
            EventId.from_string("not-a-uuid")


class TestErrors:
    def test_activity_full_message_names_the_activity(self):
        error = ActivityFullError("Golf Tournament")
        assert isinstance(error, DomainError)
        assert error.code is ErrorCode.ACTIVITY_FULL
        assert error.message == "Golf Tournament is full"
        assert error.activity == "Golf Tournament"


class TestCapacityRules:
    def test_unlimited_activity_always_fits(self, conference):
        assert seat_limit(conference, "Fishing") is None
        assert has_capacity(conference, "Fishing", 10_000)

    def test_unknown_activity_is_unlimited(self, conference):
        assert has_capacity(conference, "Kayaking", 50)

    def test_limit_reached(self, conference):
        assert has_capacity(conference, "Golf Tournament", 1)
        assert not has_capacity(conference, "Golf Tournament", 2)

    def test_zero_seat_activity_is_always_full(self):
        event = build_event(activities=(Activity(name="Closed", seat_limit=Capacity(0)),))
        assert not has_capacity(event, "Closed", 0)

    @pytest.mark.parametrize(
        "status, cancellation_at, expected",
        [
            ("active", None, True),
            ("cancelled", None, False),
            ("active", PAID_AT, False),
        ],
    )
    def test_is_committed(self, status, cancellation_at, expected):
        assert is_committed(status, cancellation_at) is expected


class TestPaymentStates:
    def test_unpaid_fields(self):
        fields = Unpaid().to_fields()
        assert fields["paid"] is False
        assert fields["paid_amount"] == Decimal("0.00")
        assert "paid_at" not in fields

    def test_partially_paid_writes_pending_columns(self):
        state = PartiallyPaid(Decimal("500"), Decimal("200"), "Spouse dinner ticket added ($200.00)", PAID_AT)
        fields = state.to_fields()
        assert fields["paid"] is False
        assert fields["pending_payment_amount"] == Decimal("200.00")
        assert fields["pending_payment_reason"] == "Spouse dinner ticket added ($200.00)"
        assert fields["pending_payment_created_at"] == PAID_AT

    def test_partially_paid_without_pending_clears_reason(self):
        fields = PartiallyPaid(Decimal("100"), Decimal("0"), "stale").to_fields()
        assert fields["pending_payment_reason"] is None

    def test_partially_paid_rejects_negative_amounts(self):
        with pytest.raises(ValueError):
            PartiallyPaid(Decimal("-1"), Decimal("0"))

    def test_fully_paid_has_nothing_pending(self):
        state = FullyPaid(Decimal("500"), PAID_AT)
        assert state.pending_amount == 0
        assert state.to_fields()["paid_at"] == PAID_AT

    def test_paid_row_without_pending_is_fully_paid(self):
        state = payment_state_from_fields(
            total_price=Decimal("500"),
            paid=True,
            paid_amount=Decimal("500"),
            pending_payment_amount=Decimal("0"),
            paid_at=PAID_AT,
        )
        assert state == FullyPaid(Decimal("500"), PAID_AT)

    def test_legacy_paid_row_counts_as_paid_in_full(self):
        state = payment_state_from_fields(
            total_price=Decimal("450"),
            paid=True,
            paid_amount=None,
            pending_payment_amount=None,
        )
        assert state.paid_amount == Decimal("450.00")

    def test_pending_amount_overrides_paid_flag(self):
        state = payment_state_from_fields(
            total_price=Decimal("700"),
            paid=True,
            paid_amount=Decimal("500"),
            pending_payment_amount=Decimal("200"),
        )
        assert isinstance(state, PartiallyPaid)
        assert state.pending_amount == Decimal("200.00")

    def test_nothing_paid_nothing_pending_is_unpaid(self):
        state = payment_state_from_fields(
            total_price=Decimal("500"),
            paid=False,
            paid_amount=Decimal("0"),
            pending_payment_amount=Decimal("0"),
        )
        assert state == Unpaid()
