"""Reservation schemas"""

from datetime import date as date_type
from datetime import datetime
from typing import Optional, List
from uuid import UUID
from pydantic import BaseModel, EmailStr, Field, field_validator

from resto.booking.timezone import to_24_hour


def _normalize_slot_start(value: str) -> str:
    try:
        return to_24_hour(value)
    except ValueError:
        raise ValueError("Time slot must look like 14:30 or 2:30 PM")


class ReservationCreate(BaseModel):
    """Create reservation request"""
    customer_name: str
    customer_email: EmailStr
    customer_phone: str = Field(min_length=8)
    party_size: int = Field(ge=1)
    date: date_type
    time_slot_start: str
    dietary_restrictions: Optional[str] = None
    special_occasion: Optional[str] = None
    special_requests: Optional[str] = None
    payment_intent_id: Optional[str] = None

    @field_validator("customer_name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Name is required")
        return value

    @field_validator("customer_phone", mode="before")
    @classmethod
    def strip_phone(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("time_slot_start")
    @classmethod
    def normalize_time(cls, value: str) -> str:
        return _normalize_slot_start(value)


class ReservationModify(BaseModel):
    """Modify reservation request"""
    party_size: int = Field(ge=1)
    date: date_type
    time_slot_start: str
    payment_intent_id: Optional[str] = None

    @field_validator("time_slot_start")
    @classmethod
    def normalize_time(cls, value: str) -> str:
        return _normalize_slot_start(value)


class ReservationResponse(BaseModel):
    """Reservation response"""
    confirmation_code: str
    restaurant_id: UUID
    customer_name: str
    customer_email: str
    customer_phone: str
    date: date_type
    timeslot_start: str
    timeslot_end: str
    party_size: int
    status: str
    dietary_restrictions: Optional[str]
    special_occasion: Optional[str]
    special_requests: Optional[str]
    deposit_payment_intent_id: Optional[str]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class BookingResponse(BaseModel):
    """Result of create / modify / cancel"""
    message: str
    reservation: ReservationResponse
    reservation_link: Optional[str] = None
    warnings: List[str] = []

    @classmethod
    def from_result(cls, result) -> "BookingResponse":
        return cls(
            message=result.message,
            reservation=ReservationResponse.model_validate(result.reservation),
            reservation_link=result.link,
            warnings=result.warnings,
        )


class TimeSlotResponse(BaseModel):
    """Bookable time slot"""
    start: str
    end: str
    start_12h: str
    end_12h: str
    available: bool


class AvailabilityResponse(BaseModel):
    """Availability for one date"""
    date: date_type
    party_size: int
    timeslot_length_minutes: Optional[int] = None
    slots: List[TimeSlotResponse] = []
    error: Optional[str] = None
    max_capacity: Optional[int] = None


class ReminderSweepResponse(BaseModel):
    """Reminder sweep outcome"""
    success: bool
    reminder_type: str
    processed_count: int
    sent_count: int
