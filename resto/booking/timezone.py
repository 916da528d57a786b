"""Timezone conversion and 12/24-hour formatting helpers

Reservations are stored as restaurant-local wall-clock strings on a local
calendar date. Absolute instants are only derived when needed, using the DST
rules in effect on that local date.
"""

import re
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

_24H_RE = re.compile(r"^(\d{1,2}):(\d{2})$")
_12H_RE = re.compile(r"^(\d{1,2}):(\d{2})\s*([AaPp][Mm])$")


def get_zone(tz: str) -> ZoneInfo:
    """Resolve an IANA timezone name"""
    try:
        return ZoneInfo(tz)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValueError(f"Unknown timezone: {tz}")


def to_restaurant_local(instant: datetime, tz: str) -> datetime:
    """Convert an absolute instant to the restaurant's local time"""
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(get_zone(tz))


def to_utc_instant(local_wall_clock: datetime, tz: str) -> datetime:
    """Interpret a naive wall-clock time in the restaurant's timezone.

    Ambiguous and nonexistent times resolve with fold=0, i.e. the offset in
    effect before the transition.
    """
    if local_wall_clock.tzinfo is None:
        local_wall_clock = local_wall_clock.replace(tzinfo=get_zone(tz))
    return local_wall_clock.astimezone(timezone.utc)


def parse_hhmm(value: str) -> time:
    """Parse a 24-hour "HH:MM" string"""
    match = _24H_RE.match(value.strip())
    if not match:
        raise ValueError(f"Invalid time: {value!r}")
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        raise ValueError(f"Invalid time: {value!r}")
    return time(hour, minute)


def format_hhmm(value) -> str:
    return f"{value.hour:02d}:{value.minute:02d}"


def local_datetime(on_date: date, hhmm: str, tz: str) -> datetime:
    """Combine a local calendar date and "HH:MM" into an aware local datetime"""
    return datetime.combine(on_date, parse_hhmm(hhmm)).replace(tzinfo=get_zone(tz))


def timezone_offset_minutes(tz: str, on_date: Optional[date] = None) -> int:
    """UTC offset of the timezone at local noon on the given date"""
    zone = get_zone(tz)
    if on_date is None:
        moment = datetime.now(zone)
    else:
        moment = datetime.combine(on_date, time(12, 0)).replace(tzinfo=zone)
    return int(moment.utcoffset().total_seconds() // 60)


def to_12_hour(value: str) -> str:
    """Format "14:30" as "2:30 PM"."""
    parsed = parse_hhmm(value)
    period = "AM" if parsed.hour < 12 else "PM"
    hour = parsed.hour % 12 or 12
    return f"{hour}:{parsed.minute:02d} {period}"


def to_24_hour(value: str) -> str:
    """Parse "2:30 PM" as "14:30". 24-hour input is normalized and returned."""
    value = value.strip()
    match = _12H_RE.match(value)
    if not match:
        return format_hhmm(parse_hhmm(value))

    hour, minute, period = int(match.group(1)), int(match.group(2)), match.group(3).upper()
    if not 1 <= hour <= 12 or minute > 59:
        raise ValueError(f"Invalid time: {value!r}")
    if period == "PM" and hour != 12:
        hour += 12
    elif period == "AM" and hour == 12:
        hour = 0
    return f"{hour:02d}:{minute:02d}"


def utc_naive(instant: datetime) -> datetime:
    """Aware instant -> naive UTC, the storage convention for timestamps"""
    if instant.tzinfo is None:
        return instant
    return instant.astimezone(timezone.utc).replace(tzinfo=None)


def as_utc(stored: datetime) -> datetime:
    """Naive UTC from storage -> aware UTC"""
    if stored.tzinfo is None:
        return stored.replace(tzinfo=timezone.utc)
    return stored.astimezone(timezone.utc)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def format_long_date(on_date: date) -> str:
    """October 21, 2026"""
    return f"{on_date.strftime('%B')} {on_date.day}, {on_date.year}"


def add_minutes(hhmm: str, minutes: int) -> str:
    """Wall-clock arithmetic, wrapping past midnight"""
    start = datetime.combine(date(2000, 1, 1), parse_hhmm(hhmm))
    return format_hhmm(start + timedelta(minutes=minutes))
