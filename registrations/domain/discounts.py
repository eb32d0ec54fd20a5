"""Discount code rules.

Validation never changes a code. Usage is counted by the registration
service, once, after the registration that attaches the code is written.
"""

import re
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from registrations.domain.errors import InvalidDiscountCodeError
from registrations.domain.models import DiscountCode, DiscountType
from registrations.domain.value_objects import to_cents

CODE_PATTERN = re.compile(r"^[A-Z0-9_-]{1,50}$")

EXPIRED = "This discount code has expired"
LIMIT_REACHED = "This discount code has reached its usage limit"
UNKNOWN = "Invalid discount code"


@dataclass(frozen=True)
class DiscountValidation:
    valid: bool
    error: str | None = None


def normalize_code(raw: str | None) -> str:
    """Return the stored form of a code (trimmed, upper-cased).

    Raises:
        InvalidDiscountCodeError: If the code is empty or contains
            characters other than letters, digits, '-' and '_'.
    """
    code = (raw or "").strip().upper()
    if not CODE_PATTERN.match(code):
        raise InvalidDiscountCodeError()
    return code


def validate_discount(code: DiscountCode | None, now: datetime) -> DiscountValidation:
    if code is None:
        return DiscountValidation(valid=False, error=UNKNOWN)
    if code.expires_at is not None and now > code.expires_at:
        return DiscountValidation(valid=False, error=EXPIRED)
    if code.usage_limit is not None and code.used_count >= code.usage_limit:
        return DiscountValidation(valid=False, error=LIMIT_REACHED)
    return DiscountValidation(valid=True)


def discount_amount_for(code: DiscountCode | None, subtotal: Decimal) -> Decimal:
    """Return how much ``code`` takes off ``subtotal``, never more than it."""
    if code is None or subtotal <= 0:
        return Decimal("0.00")
    if code.discount_type is DiscountType.PERCENTAGE:
        amount = subtotal * code.discount_value / Decimal(100)
    else:
        amount = code.discount_value
    return to_cents(min(max(amount, Decimal(0)), subtotal))
