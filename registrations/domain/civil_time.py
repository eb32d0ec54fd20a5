"""Civil-zone date boundaries.

All tier and add-on cut-offs are calendar dates in one fixed regional
timezone, independent of the server locale. These helpers turn those dates
into aware UTC instants so they can be compared against "now".
"""

import logging
from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo

from django.conf import settings

logger = logging.getLogger(__name__)

DEFAULT_CIVIL_TIME_ZONE = "America/New_York"
MAX_ITERATIONS = 10


def civil_zone() -> ZoneInfo:
    """Return the configured civil timezone."""
    if settings.configured:
        return ZoneInfo(getattr(settings, "CIVIL_TIME_ZONE", DEFAULT_CIVIL_TIME_ZONE))
    return ZoneInfo(DEFAULT_CIVIL_TIME_ZONE)


def _parse_calendar_date(value: str | date) -> tuple[date | None, bool]:
    """Return ``(day, in_civil_zone)``.

    ``in_civil_zone`` is False when the value was only readable through the
    naive UTC fallback.
    """
    if isinstance(value, datetime):
        return value.date(), True
    if isinstance(value, date):
        return value, True
    try:
        year, month, day = (int(part) for part in value.strip().split("-"))
        return date(year, month, day), True
    except (ValueError, AttributeError):
        pass

    # Availability over precision: read whatever we can as naive UTC.
    try:
        fallback = datetime.fromisoformat(value.strip()).date()
    except (ValueError, AttributeError, TypeError):
        logger.warning("Unparseable calendar date %r, treating bound as open", value)
        return None, False
    logger.warning("Malformed calendar date %r, falling back to UTC parsing", value)
    return fallback, False


def _resolve_midnight(day: date, zone: ZoneInfo) -> datetime:
    wanted = datetime.combine(day, time.min)
    guess = wanted.replace(tzinfo=timezone.utc)
    for _ in range(MAX_ITERATIONS):
        wall = guess.astimezone(zone).replace(tzinfo=None)
        if wall == wanted:
            break
        guess -= wall - wanted
    return guess


def _midnight(day: date, in_civil_zone: bool) -> datetime:
    if not in_civil_zone:
        return datetime.combine(day, time.min, tzinfo=timezone.utc)
    return _resolve_midnight(day, civil_zone())


def civil_midnight(value: str | date) -> datetime | None:
    """Return the UTC instant of civil 00:00 on the given date.

    Returns None only when the value cannot be read as a date at all.
    """
    day, in_civil_zone = _parse_calendar_date(value)
    if day is None:
        return None
    return _midnight(day, in_civil_zone)


def civil_end_of_day(value: str | date) -> datetime | None:
    """Return the start of the civil day after ``value``.

    This is an exclusive upper bound: a tier that ends on Dec 11 covers
    every instant of Dec 11 in the civil zone.
    """
    day, in_civil_zone = _parse_calendar_date(value)
    if day is None:
        return None
    return _midnight(day + timedelta(days=1), in_civil_zone)


def now_in_civil_zone(clock=None) -> datetime:
    """Return the current instant as an aware datetime in the civil zone."""
    now = clock.now_utc() if clock is not None else datetime.now(timezone.utc)
    return now.astimezone(civil_zone())


def civil_instant_for(value: str | datetime | None) -> datetime | None:
    """Turn a stored timestamp into an aware instant.

    Naive values are read as civil wall-clock time.
    """
    if value is None:
        return None
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            logger.warning("Unparseable timestamp %r", value)
            return None
    if value.tzinfo is None:
        return value.replace(tzinfo=civil_zone())
    return value
