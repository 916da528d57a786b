"""Restaurant-related models"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Boolean, Date, DateTime, ForeignKey, Integer, JSON, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from resto.database import Base


class Restaurant(Base):
    """Restaurant taking reservations"""
    __tablename__ = "restaurants"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    slug = Column(String(100), unique=True, nullable=False)
    name = Column(String(255), nullable=False)
    address = Column(Text, default="")
    images = Column(JSON, default=list)  # First image is used as the notification thumbnail
    timezone = Column(String(50), default="America/New_York")
    is_active = Column(Boolean, default=True)

    # Booking policy
    min_booking_advance_hours = Column(Integer, default=0)
    max_booking_advance_hours = Column(Integer, default=720)
    cancellation_window_hours = Column(Integer, default=24)

    # Deposit policy
    deposit_required = Column(Boolean, default=False)
    deposit_amount_cents = Column(Integer, default=0)
    deposit_currency = Column(String(3), default="USD")

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    reservation_settings = relationship("ReservationSetting", back_populates="restaurant")
    reservations = relationship("Reservation", back_populates="restaurant")

    @property
    def thumbnail(self) -> str:
        return self.images[0] if self.images else ""


class ReservationSetting(Base):
    """Bookable hours and table inventory for a weekday or a specific date"""
    __tablename__ = "reservation_settings"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    restaurant_id = Column(UUID(as_uuid=True), ForeignKey("restaurants.id"), nullable=False)

    # Either a default for a weekday (0 = Monday) or an override for one date
    day_of_week = Column(Integer)
    specific_date = Column(Date)
    is_default = Column(Boolean, default=True)

    timeslot_length_minutes = Column(Integer, nullable=False, default=30)

    # [{"start": "17:00", "end": "22:00"}, ...] in restaurant-local time
    time_ranges = Column(JSON, default=list)

    # [{"table_capacity": 2, "quantity": 4}, ...]
    table_inventory = Column(JSON, default=list)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    restaurant = relationship("Restaurant", back_populates="reservation_settings")
