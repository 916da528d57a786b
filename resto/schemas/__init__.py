"""Pydantic schemas for request/response validation"""

from resto.schemas.reservation import (
    ReservationCreate,
    ReservationModify,
    ReservationResponse,
    BookingResponse,
    TimeSlotResponse,
    AvailabilityResponse,
    ReminderSweepResponse,
)
from resto.schemas.restaurant import (
    RestaurantResponse,
    DepositAuthorizeRequest,
    DepositAuthorizeResponse,
)

__all__ = [
    "ReservationCreate",
    "ReservationModify",
    "ReservationResponse",
    "BookingResponse",
    "TimeSlotResponse",
    "AvailabilityResponse",
    "ReminderSweepResponse",
    "RestaurantResponse",
    "DepositAuthorizeRequest",
    "DepositAuthorizeResponse",
]
