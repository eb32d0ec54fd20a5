"""Domain error codes for the registrations module."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    REGISTRATION_NOT_FOUND = "REGISTRATION_NOT_FOUND"
    INVALID_ID = "INVALID_ID"
    INVALID_DISCOUNT_CODE = "INVALID_DISCOUNT_CODE"
    DISCOUNT_CODE_REJECTED = "DISCOUNT_CODE_REJECTED"
    ACTIVITY_FULL = "ACTIVITY_FULL"
    REGISTRATION_CANCELLED = "REGISTRATION_CANCELLED"
    CANCELLATION_NOT_FOUND = "CANCELLATION_NOT_FOUND"
    CANCELLATION_ALREADY_PENDING = "CANCELLATION_ALREADY_PENDING"
    CANCELLATION_ALREADY_PROCESSED = "CANCELLATION_ALREADY_PROCESSED"
    PAYMENT_REFERENCE_REQUIRED = "PAYMENT_REFERENCE_REQUIRED"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class EventNotFoundError(DomainError):
    """Raised when an event is not found."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.EVENT_NOT_FOUND,
            message="Event not found",
        )
        self.event_id = event_id


class RegistrationNotFoundError(DomainError):
    """Raised when a registration is not found."""

    def __init__(self, registration_id: str) -> None:
        super().__init__(
            code=ErrorCode.REGISTRATION_NOT_FOUND,
            message="Registration not found",
        )
        self.registration_id = registration_id


class InvalidIdError(DomainError):
    """Raised when an identifier is not a valid UUID."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_ID,
            message="Invalid ID format",
        )


class InvalidDiscountCodeError(DomainError):
    """Raised when a discount code is malformed."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_DISCOUNT_CODE,
            message="Invalid discount code",
        )


class DiscountRejectedError(DomainError):
    """Raised when a registration tries to attach an unusable discount code."""

    def __init__(self, reason: str) -> None:
        super().__init__(
            code=ErrorCode.DISCOUNT_CODE_REJECTED,
            message=reason,
        )


class ActivityFullError(DomainError):
    """Raised when an activity has no seats left."""

    def __init__(self, activity: str) -> None:
        super().__init__(
            code=ErrorCode.ACTIVITY_FULL,
            message=f"{activity} is full",
        )
        self.activity = activity


class RegistrationCancelledError(DomainError):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.REGISTRATION_CANCELLED,
            message="Registration is already cancelled",
        )


class CancellationNotFoundError(DomainError):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.CANCELLATION_NOT_FOUND,
            message="Cancellation request not found",
        )


class CancellationAlreadyPendingError(DomainError):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.CANCELLATION_ALREADY_PENDING,
            message="Cancellation already pending",
        )


class CancellationAlreadyProcessedError(DomainError):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.CANCELLATION_ALREADY_PROCESSED,
            message="Cancellation request already processed",
        )


class PaymentReferenceRequiredError(DomainError):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.PAYMENT_REFERENCE_REQUIRED,
            message="A payment reference is required to complete payment",
        )
