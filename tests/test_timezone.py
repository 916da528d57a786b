"""Tests for timezone and time formatting helpers"""

from datetime import date, datetime, timezone

import pytest

from resto.booking.timezone import (
    add_minutes,
    format_long_date,
    get_zone,
    local_datetime,
    timezone_offset_minutes,
    to_12_hour,
    to_24_hour,
    to_restaurant_local,
    to_utc_instant,
    utc_naive,
)


@pytest.mark.parametrize("value, expected", [
    ("00:00", "12:00 AM"),
    ("09:05", "9:05 AM"),
    ("12:30", "12:30 PM"),
    ("14:30", "2:30 PM"),
    ("23:59", "11:59 PM"),
])
def test_to_12_hour(value, expected):
    assert to_12_hour(value) == expected


@pytest.mark.parametrize("value, expected", [
    ("2:30 PM", "14:30"),
    ("12:00 AM", "00:00"),
    ("12:15 pm", "12:15"),
    ("9:05", "09:05"),
    ("18:00", "18:00"),
])
def test_to_24_hour(value, expected):
    assert to_24_hour(value) == expected


@pytest.mark.parametrize("value", ["25:00", "13:00 PM", "noon", "7"])
def test_to_24_hour_rejects_garbage(value):
    with pytest.raises(ValueError):
        to_24_hour(value)


def test_offset_follows_dst():
    """New York is UTC-4 in summer and UTC-5 in winter"""
    assert timezone_offset_minutes("America/New_York", date(2026, 7, 1)) == -240
    assert timezone_offset_minutes("America/New_York", date(2026, 1, 15)) == -300
    assert timezone_offset_minutes("Asia/Singapore", date(2026, 1, 15)) == 480


def test_utc_round_trip_on_dst_start():
    """2026-03-08 is the first day of EDT"""
    instant = to_utc_instant(datetime(2026, 3, 8, 12, 0), "America/New_York")
    assert instant == datetime(2026, 3, 8, 16, 0, tzinfo=timezone.utc)

    local = to_restaurant_local(instant, "America/New_York")
    assert (local.hour, local.minute) == (12, 0)


def test_local_datetime_is_aware():
    moment = local_datetime(date(2026, 10, 21), "18:00", "America/New_York")
    assert moment.astimezone(timezone.utc) == datetime(2026, 10, 21, 22, 0, tzinfo=timezone.utc)


def test_utc_naive_strips_offset():
    aware = datetime(2026, 10, 21, 18, 0, tzinfo=get_zone("America/New_York"))
    assert utc_naive(aware) == datetime(2026, 10, 21, 22, 0)


def test_add_minutes_wraps_midnight():
    assert add_minutes("23:30", 60) == "00:30"
    assert add_minutes("17:00", 90) == "18:30"


def test_format_long_date():
    assert format_long_date(date(2026, 10, 21)) == "October 21, 2026"


def test_unknown_timezone():
    with pytest.raises(ValueError):
        get_zone("Mars/Olympus_Mons")
