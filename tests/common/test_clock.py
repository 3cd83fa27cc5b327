from datetime import date, datetime, time, timedelta, timezone

import pytest

from src.attendance_tracker.attendance_tracker.common.clock import (
    day_bounds,
    local_day_of,
    local_midnight_to_utc,
    local_time_to_utc,
    month_bounds,
    month_period,
    next_local_midnight_to_utc,
    parse_hhmm,
    parse_instant,
    parse_local_date,
    parse_utc_offset,
)
from src.attendance_tracker.attendance_tracker.core.exceptions import InvalidInputError

IST = parse_utc_offset("+05:30")


def utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


def test_local_midnight_for_plus_0530_is_previous_utc_evening():
    assert local_midnight_to_utc("2025-10-01", IST) == utc(2025, 9, 30, 18, 30)
    assert next_local_midnight_to_utc("2025-10-01", IST) == utc(2025, 10, 1, 18, 30)


def test_day_bounds_is_half_open():
    start, end = day_bounds(date(2025, 10, 1), IST)

    assert end - start == timedelta(hours=24)
    assert local_day_of(start, IST) == date(2025, 10, 1)
    assert local_day_of(end, IST) == date(2025, 10, 2)
    assert local_day_of(end - timedelta(microseconds=1), IST) == date(2025, 10, 1)


def test_local_day_of_crosses_utc_date():
    # 23:59:59 local on Sep 30 and 00:00 local on Oct 1
    assert local_day_of(utc(2025, 9, 30, 18, 29, 59), IST) == date(2025, 9, 30)
    assert local_day_of(utc(2025, 9, 30, 18, 30), IST) == date(2025, 10, 1)


def test_local_time_to_utc():
    assert local_time_to_utc("2025-10-01", "09:00", IST) == utc(2025, 10, 1, 3, 30)
    assert local_time_to_utc(date(2025, 10, 1), time(18, 0), IST) == utc(2025, 10, 1, 12, 30)


def test_parse_utc_offset_variants():
    assert parse_utc_offset("Z") is timezone.utc
    assert parse_utc_offset("-04:00").utcoffset(None) == timedelta(hours=-4)
    assert parse_utc_offset("+0545").utcoffset(None) == timedelta(hours=5, minutes=45)


@pytest.mark.parametrize("value", ["", "05:30", "+5:30", "+15:00", "IST"])
def test_parse_utc_offset_rejects_garbage(value):
    with pytest.raises(InvalidInputError):
        parse_utc_offset(value)


def test_parse_local_date_and_hhmm_reject_malformed_input():
    with pytest.raises(InvalidInputError):
        parse_local_date("2025-13-01")
    with pytest.raises(InvalidInputError):
        parse_local_date(datetime(2025, 10, 1))
    with pytest.raises(InvalidInputError):
        parse_hhmm("24:00")
    assert parse_hhmm("07:05") == time(7, 5)


def test_parse_instant_accepts_z_suffix():
    assert parse_instant("2025-10-01T03:30:00Z") == utc(2025, 10, 1, 3, 30)
    assert parse_instant("2025-10-01T09:00:00+05:30") == utc(2025, 10, 1, 3, 30)
    with pytest.raises(InvalidInputError):
        parse_instant("yesterday")


def test_month_period_and_bounds():
    assert month_period(date(2025, 3, 9)) == "2025-03"
    assert month_bounds(date(2025, 12, 15)) == (date(2025, 12, 1), date(2026, 1, 1))
