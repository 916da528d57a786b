"""Time slot generation and availability

Availability is decided per candidate slot by replaying the reservations that
overlap it onto a fresh copy of the table inventory, smallest parties first,
and checking whether a table for the new party is still free afterwards.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Optional, Sequence

from resto.booking.capacity import Allocation, TableType, allocate
from resto.booking.errors import CapacityError
from resto.booking.timezone import format_hhmm, get_zone, local_datetime, parse_hhmm, to_12_hour


@dataclass(frozen=True)
class TimeRange:
    """Local wall-clock window during which bookings are accepted"""
    start: str
    end: str

    @classmethod
    def parse_many(cls, raw: Iterable[Dict[str, Any]]) -> List["TimeRange"]:
        return [cls(start=item["start"], end=item["end"]) for item in raw or []]


@dataclass(frozen=True)
class BookedInterval:
    """An existing reservation as an absolute interval"""
    start: datetime
    end: datetime
    party_size: int

    @classmethod
    def from_wall_clock(
        cls,
        on_date: date,
        start: str,
        end: str,
        party_size: int,
        tz: str,
    ) -> "BookedInterval":
        starts_at = local_datetime(on_date, start, tz)
        end_date = on_date
        if parse_hhmm(end) <= parse_hhmm(start):
            end_date = on_date + timedelta(days=1)
        ends_at = local_datetime(end_date, end, tz)
        return cls(
            start=starts_at.astimezone(timezone.utc),
            end=ends_at.astimezone(timezone.utc),
            party_size=party_size,
        )


@dataclass(frozen=True)
class TimeSlot:
    """Candidate booking window; start/end are "HH:MM" restaurant-local"""
    start: str
    end: str
    available: bool
    starts_at: datetime
    ends_at: datetime

    @property
    def start_12h(self) -> str:
        return to_12_hour(self.start)

    @property
    def end_12h(self) -> str:
        return to_12_hour(self.end)


@dataclass
class SlotSearch:
    """Slots for one date, or the capacity error that ruled the date out"""
    slots: List[TimeSlot] = field(default_factory=list)
    error: Optional[CapacityError] = None
    timeslot_length: Optional[int] = None

    @property
    def available_slots(self) -> List[TimeSlot]:
        return [slot for slot in self.slots if slot.available]

    def find(self, start: str) -> Optional[TimeSlot]:
        return next((slot for slot in self.slots if slot.start == start), None)


class _WindowCache:
    """Allocation windows per party size against one inventory"""

    def __init__(self, inventory: List[TableType], threshold: int):
        self.inventory = inventory
        self.threshold = threshold
        self._windows: Dict[int, Optional[Allocation]] = {}

    def get(self, party_size: int) -> Optional[Allocation]:
        if party_size not in self._windows:
            try:
                self._windows[party_size] = allocate(party_size, self.inventory, self.threshold)
            except (CapacityError, ValueError):
                self._windows[party_size] = None
        return self._windows[party_size]


def _has_free_table(
    slot_start: datetime,
    slot_end: datetime,
    existing: Sequence[BookedInterval],
    allocation: Allocation,
    windows: _WindowCache,
) -> bool:
    overlapping = [
        booked for booked in existing
        if slot_start < booked.end and slot_end > booked.start
    ]
    overlapping.sort(key=lambda booked: (booked.party_size, booked.start, booked.end))

    remaining = {table.capacity: table.quantity for table in windows.inventory}

    for booked in overlapping:
        window = windows.get(booked.party_size)
        if window is None:
            continue
        seat = next(
            (capacity for capacity in sorted(remaining) if window.fits(capacity)),
            None,
        )
        if seat is None:
            # Historical data may hold more parties than tables
            continue
        remaining[seat] -= 1
        if remaining[seat] == 0:
            del remaining[seat]

    return any(allocation.fits(capacity) for capacity in remaining)


def generate_time_slots(
    target_date: date,
    timeslot_length: int,
    time_ranges: Sequence[TimeRange],
    existing_reservations: Sequence[BookedInterval],
    party_size: int,
    tz: str,
    inventory: List[TableType],
    threshold: int = 1,
    now: Optional[datetime] = None,
) -> SlotSearch:
    """Expand the configured ranges of a date into slots with availability"""
    if timeslot_length <= 0:
        raise ValueError("timeslot_length must be positive")

    try:
        allocation = allocate(party_size, inventory, threshold)
    except CapacityError as e:
        return SlotSearch(slots=[], error=e, timeslot_length=timeslot_length)

    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    zone = get_zone(tz)
    step = timedelta(minutes=timeslot_length)
    windows = _WindowCache(inventory, threshold)
    slots: Dict[tuple, TimeSlot] = {}

    for time_range in time_ranges:
        range_start = local_datetime(target_date, time_range.start, tz).astimezone(timezone.utc)
        end_date = target_date
        if parse_hhmm(time_range.end) <= parse_hhmm(time_range.start):
            end_date = target_date + timedelta(days=1)
        range_end = local_datetime(end_date, time_range.end, tz).astimezone(timezone.utc)

        slot_start = range_start
        while slot_start + step <= range_end:
            slot_end = slot_start + step
            key = (slot_start, slot_end)

            if slot_end > now and key not in slots:
                slots[key] = TimeSlot(
                    start=format_hhmm(slot_start.astimezone(zone)),
                    end=format_hhmm(slot_end.astimezone(zone)),
                    available=_has_free_table(
                        slot_start, slot_end, existing_reservations, allocation, windows,
                    ),
                    starts_at=slot_start,
                    ends_at=slot_end,
                )

            slot_start = slot_end

    return SlotSearch(
        slots=[slots[key] for key in sorted(slots)],
        timeslot_length=timeslot_length,
    )
