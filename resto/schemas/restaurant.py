"""Restaurant schemas"""

from typing import List, Optional
from uuid import UUID
from pydantic import BaseModel, EmailStr


class RestaurantResponse(BaseModel):
    """Public restaurant details"""
    id: UUID
    slug: str
    name: str
    address: Optional[str]
    images: List[str]
    timezone: str
    min_booking_advance_hours: int
    max_booking_advance_hours: int
    cancellation_window_hours: int
    deposit_required: bool
    deposit_amount_cents: int
    deposit_currency: str

    class Config:
        from_attributes = True


class DepositAuthorizeRequest(BaseModel):
    """Start a deposit hold for a booking"""
    customer_email: EmailStr


class DepositAuthorizeResponse(BaseModel):
    """Deposit hold to be confirmed client-side"""
    payment_intent_id: str
    client_secret: Optional[str]
    amount_cents: int
    currency: str
