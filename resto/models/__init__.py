"""Database models"""

from resto.models.restaurant import Restaurant, ReservationSetting
from resto.models.customer import Customer
from resto.models.reservation import Reservation, ReservationStatus

__all__ = [
    "Restaurant",
    "ReservationSetting",
    "Customer",
    "Reservation",
    "ReservationStatus",
]
