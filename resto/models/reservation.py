"""Reservation model"""

import enum
import uuid
from datetime import datetime
from sqlalchemy import Column, String, Integer, Boolean, Date, DateTime, ForeignKey, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from resto.database import Base


class ReservationStatus(str, enum.Enum):
    """Reservation lifecycle states"""
    NEW = "new"
    CONFIRMED = "confirmed"
    SEATED = "seated"
    ARRIVING_SOON = "arriving-soon"
    LATE = "late"
    NO_SHOW = "no-show"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (ReservationStatus.CANCELLED, ReservationStatus.COMPLETED)


class Reservation(Base):
    """Table reservations"""
    __tablename__ = "reservations"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    restaurant_id = Column(UUID(as_uuid=True), ForeignKey("restaurants.id"), nullable=False)
    customer_id = Column(UUID(as_uuid=True), ForeignKey("customers.id"))
    confirmation_code = Column(String(8), unique=True, nullable=False)

    # Customer snapshot at booking time
    customer_name = Column(String(255), nullable=False)
    customer_email = Column(String(255), nullable=False)
    customer_phone = Column(String(20), nullable=False)

    # Reservation details, wall-clock times in the restaurant's timezone
    date = Column(Date, nullable=False)
    timeslot_start = Column(String(5), nullable=False)  # "HH:MM"
    timeslot_end = Column(String(5), nullable=False)
    party_size = Column(Integer, nullable=False)

    dietary_restrictions = Column(Text)
    special_occasion = Column(Text)
    special_requests = Column(Text)

    # Status
    status = Column(String(20), nullable=False, default=ReservationStatus.NEW.value)

    # Deposit hold at the payment gateway
    deposit_payment_intent_id = Column(String(255))

    # Reminders (naive UTC)
    reminder_1_week_at = Column(DateTime)
    reminder_1_week_sent = Column(Boolean, default=False, nullable=False)
    reminder_1_day_at = Column(DateTime)
    reminder_1_day_sent = Column(Boolean, default=False, nullable=False)

    # Metadata
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    restaurant = relationship("Restaurant", back_populates="reservations")
    customer = relationship("Customer", back_populates="reservations")

    @property
    def status_enum(self) -> ReservationStatus:
        return ReservationStatus(self.status)
