"""Local-day arithmetic for companies that run on a fixed civil offset.

A record's day key is always the UTC instant of local midnight, and every
day-scoped query uses the half-open interval ``[midnight, next midnight)``.
Never bucket days with the server's own local clock.
"""

from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Tuple, Union

from ..core.exceptions import InvalidInputError

_OFFSET_RE = re.compile(r"^([+-])(\d{2}):?(\d{2})$")
_HHMM_RE = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")

DayLike = Union[str, date]


def parse_utc_offset(value: str) -> tzinfo:
    """Parse ``+05:30`` / ``-0400`` / ``Z`` into a fixed-offset tzinfo."""
    v = (value or "").strip()
    if v.upper() in {"Z", "UTC", "+00:00"}:
        return timezone.utc
    m = _OFFSET_RE.match(v)
    if not m:
        raise InvalidInputError(f"Invalid UTC offset: {value!r}")
    sign, hours, minutes = m.group(1), int(m.group(2)), int(m.group(3))
    if hours > 14 or minutes > 59:
        raise InvalidInputError(f"Invalid UTC offset: {value!r}")
    delta = timedelta(hours=hours, minutes=minutes)
    return timezone(-delta if sign == "-" else delta)


def parse_local_date(value: DayLike) -> date:
    """Parse YYYY-MM-DD string into date."""
    if isinstance(value, datetime):
        raise InvalidInputError("Expected a calendar date, got a datetime")
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime((value or "").strip(), "%Y-%m-%d").date()
    except ValueError:
        raise InvalidInputError(f"Invalid date (YYYY-MM-DD): {value!r}")


def parse_hhmm(value: Union[str, time]) -> time:
    if isinstance(value, time):
        return value
    m = _HHMM_RE.match((value or "").strip())
    if not m:
        raise InvalidInputError(f"Invalid time (HH:mm): {value!r}")
    return time(hour=int(m.group(1)), minute=int(m.group(2)))


def utc_now() -> datetime:
    """Current instant, timezone-aware.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(timezone.utc)


def ensure_aware(instant: datetime) -> datetime:
    # Naive datetimes coming from storage are UTC.
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(timezone.utc)


def local_midnight_to_utc(day: DayLike, tz: tzinfo) -> datetime:
    d = parse_local_date(day)
    return datetime.combine(d, time(0, 0), tzinfo=tz).astimezone(timezone.utc)


def next_local_midnight_to_utc(day: DayLike, tz: tzinfo) -> datetime:
    return local_midnight_to_utc(day, tz) + timedelta(hours=24)


def day_bounds(day: DayLike, tz: tzinfo) -> Tuple[datetime, datetime]:
    start = local_midnight_to_utc(day, tz)
    return start, start + timedelta(hours=24)


def local_day_of(instant: datetime, tz: tzinfo) -> date:
    return ensure_aware(instant).astimezone(tz).date()


def local_time_to_utc(day: DayLike, at: Union[str, time], tz: tzinfo) -> datetime:
    d = parse_local_date(day)
    return datetime.combine(d, parse_hhmm(at), tzinfo=tz).astimezone(timezone.utc)


def month_period(day: date) -> str:
    return f"{day.year:04d}-{day.month:02d}"


def month_bounds(day: date) -> Tuple[date, date]:
    """First day of the month and first day of the next month."""
    start = day.replace(day=1)
    end = date(day.year + 1, 1, 1) if day.month == 12 else date(day.year, day.month + 1, 1)
    return start, end


def parse_instant(value: str) -> datetime:
    """Parse an ISO-8601 timestamp (``...Z`` allowed) into aware UTC."""
    v = (value or "").strip()
    if v.endswith(("Z", "z")):
        v = v[:-1] + "+00:00"
    try:
        return ensure_aware(datetime.fromisoformat(v))
    except ValueError:
        raise InvalidInputError(f"Invalid timestamp: {value!r}")
