"""Per-activity seat limits."""

from datetime import datetime

from registrations.domain.models import Event, RegistrationStatus


def is_committed(status: RegistrationStatus | str, cancellation_at: datetime | None) -> bool:
    """A registration holds a seat until it is cancelled."""
    if isinstance(status, str):
        status = RegistrationStatus(status)
    return status is not RegistrationStatus.CANCELLED and cancellation_at is None


def seat_limit(event: Event, activity_name: str) -> int | None:
    """Return the activity's seat limit, or None when unlimited or unknown."""
    activity = event.find_activity(activity_name)
    if activity is None or activity.seat_limit is None:
        return None
    return activity.seat_limit.value


def has_capacity(event: Event, activity_name: str, committed_count: int) -> bool:
    """Return True when one more registration fits the activity."""
    limit = seat_limit(event, activity_name)
    return limit is None or committed_count < limit
