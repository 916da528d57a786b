"""Persistence for restaurants, customers and reservations"""

from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
import structlog

from resto.booking.errors import ConflictError, NotFoundError, PersistenceError
from resto.booking.timezone import utc_naive
from resto.models.customer import Customer
from resto.models.reservation import Reservation, ReservationStatus
from resto.models.restaurant import Restaurant, ReservationSetting

logger = structlog.get_logger()


class ReservationRepository:
    """Database access for the reservation engine; the caller owns commit"""

    def __init__(self, db: AsyncSession):
        self.db = db

    # Restaurants

    async def get_restaurant(self, restaurant_id: UUID) -> Restaurant:
        result = await self.db.execute(
            select(Restaurant).where(Restaurant.id == restaurant_id)
        )
        restaurant = result.scalar_one_or_none()
        if not restaurant:
            raise NotFoundError("Restaurant not found")
        return restaurant

    async def get_restaurant_by_slug(self, slug: str) -> Restaurant:
        result = await self.db.execute(
            select(Restaurant).where(Restaurant.slug == slug, Restaurant.is_active == True)
        )
        restaurant = result.scalar_one_or_none()
        if not restaurant:
            raise NotFoundError("Restaurant not found")
        return restaurant

    async def lock_restaurant(self, restaurant_id: UUID) -> None:
        """Serialize bookings for one restaurant until the transaction ends"""
        await self.db.execute(
            select(Restaurant.id).where(Restaurant.id == restaurant_id).with_for_update()
        )

    async def get_setting_for_date(
        self,
        restaurant_id: UUID,
        on_date: date,
    ) -> Optional[ReservationSetting]:
        """The specific-date override if any, else the weekday default"""
        result = await self.db.execute(
            select(ReservationSetting)
            .where(
                ReservationSetting.restaurant_id == restaurant_id,
                ReservationSetting.specific_date == on_date,
            )
            .order_by(ReservationSetting.created_at)
            .limit(1)
        )
        setting = result.scalar_one_or_none()
        if setting:
            return setting

        result = await self.db.execute(
            select(ReservationSetting)
            .where(
                ReservationSetting.restaurant_id == restaurant_id,
                ReservationSetting.specific_date.is_(None),
                ReservationSetting.is_default == True,
                ReservationSetting.day_of_week == on_date.weekday(),
            )
            .order_by(ReservationSetting.created_at)
            .limit(1)
        )
        return result.scalar_one_or_none()

    # Reservations

    async def get_by_code(self, confirmation_code: str, lock: bool = False) -> Optional[Reservation]:
        query = (
            select(Reservation)
            .where(Reservation.confirmation_code == confirmation_code)
            .options(selectinload(Reservation.restaurant))
        )
        if lock:
            # Refresh a row already loaded by this session with the locked values
            query = query.with_for_update().execution_options(populate_existing=True)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def list_reservations(
        self,
        restaurant_id: UUID,
        start_date: date,
        end_date: date,
        exclude_statuses: Iterable[ReservationStatus] = (),
    ) -> List[Reservation]:
        query = select(Reservation).where(
            Reservation.restaurant_id == restaurant_id,
            Reservation.date >= start_date,
            Reservation.date <= end_date,
        )
        excluded = [status.value for status in exclude_statuses]
        if excluded:
            query = query.where(Reservation.status.notin_(excluded))
        query = query.order_by(Reservation.date, Reservation.timeslot_start)

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def insert_reservation(self, reservation: Reservation, confirmation_code: str) -> None:
        """Insert under the given code; a taken code raises ConflictError"""
        reservation.confirmation_code = confirmation_code
        try:
            async with self.db.begin_nested():
                self.db.add(reservation)
                await self.db.flush()
        except IntegrityError as e:
            if "confirmation_code" in str(e.orig):
                logger.info("Confirmation code collision", confirmation_code=confirmation_code)
                raise ConflictError("Confirmation code already in use")
            raise PersistenceError("Database Error: Failed to Create Reservation")

    # Customers

    async def upsert_customer(self, email: str, name: str, phone: str) -> Customer:
        """One customer per email; new name/phone variants are appended"""
        result = await self.db.execute(select(Customer).where(Customer.email == email))
        customer = result.scalar_one_or_none()

        if customer is None:
            customer = Customer(email=email, names=[name], phones=[phone])
            self.db.add(customer)
            await self.db.flush()
            return customer

        names = list(customer.names or [])
        phones = list(customer.phones or [])
        if name not in names:
            customer.names = names + [name]
        if phone not in phones:
            customer.phones = phones + [phone]
        return customer

    # Reminders

    async def due_reminders(
        self,
        at_column: str,
        sent_column: str,
        now: datetime,
        earliest_date: date,
    ) -> List[Reservation]:
        at_col = getattr(Reservation, at_column)
        sent_col = getattr(Reservation, sent_column)
        result = await self.db.execute(
            select(Reservation)
            .where(
                at_col.is_not(None),
                at_col <= utc_naive(now),
                sent_col == False,
                Reservation.status.notin_([
                    ReservationStatus.CANCELLED.value,
                    ReservationStatus.COMPLETED.value,
                ]),
                Reservation.date >= earliest_date - timedelta(days=1),
            )
            .options(selectinload(Reservation.restaurant))
            .order_by(at_col)
        )
        return list(result.scalars().all())

    async def set_reminder_sent(
        self,
        reservation_id: UUID,
        sent_column: str,
        sent: bool,
    ) -> bool:
        """Flip a reminder flag; False when it already had that value"""
        sent_col = getattr(Reservation, sent_column)
        result = await self.db.execute(
            update(Reservation)
            .where(Reservation.id == reservation_id, sent_col == (not sent))
            .values({sent_column: sent, "updated_at": datetime.utcnow()})
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    # Transactions

    async def flush(self) -> None:
        await self.db.flush()

    async def commit(self) -> None:
        await self.db.commit()

    async def rollback(self) -> None:
        await self.db.rollback()
