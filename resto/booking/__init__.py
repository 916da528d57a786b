"""Reservation availability and lifecycle engine"""

from resto.booking.capacity import Allocation, TableType, allocate, parse_inventory
from resto.booking.codes import ReservationLinkSigner, allocate_confirmation_code, generate_confirmation_code
from resto.booking.slots import BookedInterval, SlotSearch, TimeRange, TimeSlot, generate_time_slots

__all__ = [
    "Allocation",
    "TableType",
    "allocate",
    "parse_inventory",
    "ReservationLinkSigner",
    "allocate_confirmation_code",
    "generate_confirmation_code",
    "BookedInterval",
    "SlotSearch",
    "TimeRange",
    "TimeSlot",
    "generate_time_slots",
]
