"""Reservation lifecycle: create, modify, cancel and operational status changes"""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
import structlog

from resto.booking.capacity import parse_inventory
from resto.booking.codes import ReservationLinkSigner, allocate_confirmation_code
from resto.booking.errors import (
    ConfirmationCodeExhaustedError,
    InvalidTransitionError,
    NotFoundError,
    NotificationError,
    PaymentError,
    PersistenceError,
    ReservationError,
    SecurityError,
    SlotUnavailableError,
    ValidationError,
)
from resto.booking.repository import ReservationRepository
from resto.booking.slots import BookedInterval, SlotSearch, TimeRange, TimeSlot, generate_time_slots
from resto.booking.timezone import (
    format_long_date,
    local_datetime,
    to_12_hour,
    to_restaurant_local,
    to_utc_instant,
    utc_naive,
    utcnow,
)
from resto.models.reservation import Reservation, ReservationStatus
from resto.models.restaurant import Restaurant, ReservationSetting
from resto.notifications.base import BaseNotifier
from resto.notifications.templates import NotificationTemplate
from resto.payments.deposit import DepositHold, DepositService
from resto.schemas.reservation import ReservationCreate, ReservationModify

logger = structlog.get_logger()

# Statuses set by the host stand; cancellation has its own operation
OPERATIONAL_STATUSES = (
    ReservationStatus.CONFIRMED,
    ReservationStatus.SEATED,
    ReservationStatus.ARRIVING_SOON,
    ReservationStatus.LATE,
    ReservationStatus.NO_SHOW,
    ReservationStatus.COMPLETED,
)


@dataclass
class BookingResult:
    """A committed lifecycle change plus any non-fatal warnings"""
    reservation: Reservation
    message: str
    link: Optional[str] = None
    warnings: List[str] = field(default_factory=list)


def slot_start_instant(reservation: Reservation, tz: str) -> datetime:
    """Aware UTC instant at which the reservation begins"""
    return local_datetime(reservation.date, reservation.timeslot_start, tz).astimezone(timezone.utc)


def reminder_times(starts_at: datetime, tz: str) -> Tuple[datetime, datetime]:
    """Naive UTC instants one week and one day before a slot, in local wall-clock"""
    local_start = to_restaurant_local(starts_at, tz).replace(tzinfo=None)
    week = to_utc_instant(local_start - timedelta(days=7), tz)
    day = to_utc_instant(local_start - timedelta(days=1), tz)
    return utc_naive(week), utc_naive(day)


def notification_params(
    reservation: Reservation,
    restaurant: Restaurant,
    reservation_link: Optional[str],
    restaurant_url: str,
) -> Dict[str, Any]:
    return {
        "restaurant_name": restaurant.name,
        "restaurant_address": restaurant.address or "",
        "restaurant_thumbnail": restaurant.thumbnail,
        "restaurant_timezone": restaurant.timezone,
        "restaurant_url": restaurant_url,
        "customer_name": reservation.customer_name,
        "date": format_long_date(reservation.date),
        "time": to_12_hour(reservation.timeslot_start),
        "end_time": to_12_hour(reservation.timeslot_end),
        "guests": reservation.party_size,
        "reservation_link": reservation_link,
    }


class ReservationService:
    """
    Owns the reservation state machine.

    Every mutating operation runs in one transaction on the repository's
    session. Validation and security checks happen before any side effect;
    notification failures are reported as warnings on the result.
    """

    def __init__(
        self,
        repository: ReservationRepository,
        deposits: DepositService,
        notifier: BaseNotifier,
        signer: ReservationLinkSigner,
        threshold: int = 1,
        max_code_attempts: int = 5,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.repository = repository
        self.deposits = deposits
        self.notifier = notifier
        self.signer = signer
        self.threshold = threshold
        self.max_code_attempts = max_code_attempts
        self.clock = clock

    # Queries

    async def get_restaurant(self, slug: str) -> Restaurant:
        return await self.repository.get_restaurant_by_slug(slug)

    async def available_slots(self, restaurant_id: UUID, on_date: date, party_size: int) -> SlotSearch:
        if party_size < 1:
            raise ValidationError.single("party_size", "Party size must be at least 1")
        restaurant = await self.repository.get_restaurant(restaurant_id)
        search, _ = await self._search(restaurant, on_date, party_size)
        return search

    async def get_by_link(self, confirmation_code: str, mac: str) -> Reservation:
        """Resolve a management link; bad codes and bad MACs look the same"""
        reservation = await self.repository.get_by_code(confirmation_code)
        if reservation is None:
            raise SecurityError()
        if not self.signer.verify(confirmation_code, reservation.customer_email, mac):
            logger.warning("Reservation link rejected", confirmation_code=confirmation_code)
            raise SecurityError()
        return reservation

    async def list_active(self, restaurant_id: UUID, start: date, end: date) -> List[Reservation]:
        return await self.repository.list_reservations(
            restaurant_id, start, end, exclude_statuses=[ReservationStatus.CANCELLED],
        )

    async def list_all(self, restaurant_id: UUID, start: date, end: date) -> List[Reservation]:
        return await self.repository.list_reservations(restaurant_id, start, end)

    # Deposits

    async def authorize_deposit(self, restaurant_id: UUID, customer_email: str) -> DepositHold:
        restaurant = await self.repository.get_restaurant(restaurant_id)
        if not restaurant.deposit_required:
            raise ValidationError.single("deposit", "This restaurant does not require a deposit")
        return await self.deposits.authorize(
            amount_cents=restaurant.deposit_amount_cents,
            currency=restaurant.deposit_currency,
            restaurant_id=restaurant.id,
            customer_email=customer_email,
        )

    # Lifecycle

    async def create(self, restaurant_id: UUID, request: ReservationCreate) -> BookingResult:
        restaurant = await self.repository.get_restaurant(restaurant_id)
        if not restaurant.is_active:
            raise NotFoundError("Restaurant not found")

        if restaurant.deposit_required:
            await self._require_active_hold(request.payment_intent_id)

        try:
            await self.repository.lock_restaurant(restaurant.id)
            slot = await self._validate_slot(
                restaurant, request.date, request.time_slot_start, request.party_size,
            )

            customer = await self.repository.upsert_customer(
                request.customer_email, request.customer_name, request.customer_phone,
            )
            week_at, day_at = reminder_times(slot.starts_at, restaurant.timezone)

            reservation = Reservation(
                restaurant_id=restaurant.id,
                customer_id=customer.id,
                customer_name=request.customer_name,
                customer_email=request.customer_email,
                customer_phone=request.customer_phone,
                date=request.date,
                timeslot_start=slot.start,
                timeslot_end=slot.end,
                party_size=request.party_size,
                dietary_restrictions=request.dietary_restrictions,
                special_occasion=request.special_occasion,
                special_requests=request.special_requests,
                status=ReservationStatus.NEW.value,
                deposit_payment_intent_id=request.payment_intent_id,
                reminder_1_week_at=week_at,
                reminder_1_week_sent=False,
                reminder_1_day_at=day_at,
                reminder_1_day_sent=False,
            )

            allocation = await allocate_confirmation_code(
                lambda code: self.repository.insert_reservation(reservation, code),
                max_attempts=self.max_code_attempts,
            )
            if not allocation.ok:
                raise ConfirmationCodeExhaustedError(allocation.attempts)

            link = self.signer.url(reservation.confirmation_code, reservation.customer_email)
            await self.repository.commit()
        except ReservationError:
            await self.repository.rollback()
            raise
        except SQLAlchemyError as e:
            await self.repository.rollback()
            logger.error("Failed to create reservation", restaurant_id=str(restaurant_id), error=str(e))
            raise PersistenceError("Database Error: Failed to Create Reservation")

        logger.info(
            "Reservation created",
            confirmation_code=reservation.confirmation_code,
            restaurant_id=str(restaurant.id),
            date=str(reservation.date),
            timeslot_start=reservation.timeslot_start,
            party_size=reservation.party_size,
            code_attempts=allocation.attempts,
        )

        warnings = await self._notify(NotificationTemplate.CREATED, reservation, restaurant, link)
        return BookingResult(
            reservation=reservation,
            message="Reservation Created Successfully!",
            link=link,
            warnings=warnings,
        )

    async def modify(self, confirmation_code: str, request: ReservationModify) -> BookingResult:
        reservation = await self._get_mutable(confirmation_code)
        restaurant = reservation.restaurant

        self._ensure_modifiable(reservation, restaurant)

        verified_hold = request.payment_intent_id or reservation.deposit_payment_intent_id
        if restaurant.deposit_required:
            await self._require_active_hold(verified_hold)

        try:
            await self.repository.lock_restaurant(restaurant.id)

            # Another request may have cancelled or moved it since the first read
            reservation = await self._get_mutable(confirmation_code, lock=True)
            self._ensure_modifiable(reservation, restaurant)
            previous_hold = reservation.deposit_payment_intent_id
            hold = request.payment_intent_id or previous_hold
            if restaurant.deposit_required and hold != verified_hold:
                await self._require_active_hold(hold)

            slot = await self._validate_slot(
                restaurant,
                request.date,
                request.time_slot_start,
                request.party_size,
                exclude_id=reservation.id,
            )
            week_at, day_at = reminder_times(slot.starts_at, restaurant.timezone)

            reservation.date = request.date
            reservation.timeslot_start = slot.start
            reservation.timeslot_end = slot.end
            reservation.party_size = request.party_size
            reservation.status = ReservationStatus.NEW.value
            reservation.deposit_payment_intent_id = hold
            reservation.reminder_1_week_at = week_at
            reservation.reminder_1_week_sent = False
            reservation.reminder_1_day_at = day_at
            reservation.reminder_1_day_sent = False
            reservation.updated_at = datetime.utcnow()

            link = self.signer.url(reservation.confirmation_code, reservation.customer_email)
            await self.repository.commit()
        except ReservationError:
            await self.repository.rollback()
            raise
        except SQLAlchemyError as e:
            await self.repository.rollback()
            logger.error("Failed to modify reservation", confirmation_code=confirmation_code, error=str(e))
            raise PersistenceError("Database Error: Failed to Modify Reservation")

        logger.info(
            "Reservation modified",
            confirmation_code=confirmation_code,
            date=str(reservation.date),
            timeslot_start=reservation.timeslot_start,
            party_size=reservation.party_size,
        )

        warnings: List[str] = []
        if previous_hold and previous_hold != hold:
            warnings.extend(await self._release_hold(previous_hold))
        warnings.extend(
            await self._notify(NotificationTemplate.MODIFIED, reservation, restaurant, link)
        )
        return BookingResult(
            reservation=reservation,
            message="Reservation Modified Successfully!",
            link=link,
            warnings=warnings,
        )

    async def cancel(self, confirmation_code: str) -> BookingResult:
        reservation = await self._get_mutable(confirmation_code, lock=True)
        restaurant = reservation.restaurant
        within_window = self._within_cancellation_window(reservation, restaurant)
        hold = reservation.deposit_payment_intent_id

        warnings: List[str] = []
        try:
            reservation.status = ReservationStatus.CANCELLED.value
            reservation.updated_at = datetime.utcnow()
            await self.repository.flush()

            if hold and within_window:
                # Late cancellation forfeits the deposit
                if await self.deposits.verify(hold):
                    await self.deposits.capture(hold)
            elif hold:
                warnings.extend(await self._release_hold(hold))

            await self.repository.commit()
        except ReservationError:
            await self.repository.rollback()
            raise
        except SQLAlchemyError as e:
            await self.repository.rollback()
            logger.error("Failed to cancel reservation", confirmation_code=confirmation_code, error=str(e))
            raise PersistenceError("Database Error: Failed to Cancel Reservation")

        logger.info(
            "Reservation cancelled",
            confirmation_code=confirmation_code,
            within_window=within_window,
            deposit_captured=bool(hold) and within_window,
        )

        warnings.extend(
            await self._notify(NotificationTemplate.CANCELLED, reservation, restaurant, None)
        )
        return BookingResult(
            reservation=reservation,
            message="Reservation Cancelled Successfully!",
            warnings=warnings,
        )

    async def update_status(self, confirmation_code: str, status: str) -> BookingResult:
        try:
            new_status = ReservationStatus(status)
        except ValueError:
            new_status = None
        if new_status not in OPERATIONAL_STATUSES:
            allowed = ", ".join(s.value for s in OPERATIONAL_STATUSES)
            raise ValidationError.single("status", f"Status must be one of: {allowed}")

        reservation = await self._get_mutable(confirmation_code, lock=True)
        hold = reservation.deposit_payment_intent_id

        warnings: List[str] = []
        try:
            reservation.status = new_status.value
            reservation.updated_at = datetime.utcnow()
            await self.repository.flush()

            if hold and new_status in (ReservationStatus.NO_SHOW, ReservationStatus.COMPLETED):
                if new_status == ReservationStatus.NO_SHOW:
                    if await self.deposits.verify(hold):
                        await self.deposits.capture(hold)
                else:
                    warnings.extend(await self._release_hold(hold))

            await self.repository.commit()
        except ReservationError:
            await self.repository.rollback()
            raise
        except SQLAlchemyError as e:
            await self.repository.rollback()
            logger.error("Failed to update reservation status", confirmation_code=confirmation_code, error=str(e))
            raise PersistenceError("Database Error: Failed to Update Reservation")

        logger.info("Reservation status updated", confirmation_code=confirmation_code, status=new_status.value)
        return BookingResult(
            reservation=reservation,
            message=f"Reservation marked {new_status.value}",
            warnings=warnings,
        )

    # Helpers

    async def _get_mutable(self, confirmation_code: str, lock: bool = False) -> Reservation:
        reservation = await self.repository.get_by_code(confirmation_code, lock=lock)
        if reservation is None:
            raise NotFoundError("Reservation not found")
        if reservation.status_enum.is_terminal:
            raise InvalidTransitionError(
                f"Reservation is {reservation.status} and can no longer be changed"
            )
        return reservation

    async def _search(
        self,
        restaurant: Restaurant,
        on_date: date,
        party_size: int,
        exclude_id: Optional[UUID] = None,
    ) -> Tuple[SlotSearch, Optional[ReservationSetting]]:
        setting = await self.repository.get_setting_for_date(restaurant.id, on_date)
        if setting is None:
            return SlotSearch(), None

        # Neighbouring dates can hold bookings that cross midnight
        booked = await self.repository.list_reservations(
            restaurant.id,
            on_date - timedelta(days=1),
            on_date + timedelta(days=1),
            exclude_statuses=[ReservationStatus.CANCELLED],
        )
        intervals = [
            BookedInterval.from_wall_clock(
                r.date, r.timeslot_start, r.timeslot_end, r.party_size, restaurant.timezone,
            )
            for r in booked
            if r.id != exclude_id
        ]

        search = generate_time_slots(
            target_date=on_date,
            timeslot_length=setting.timeslot_length_minutes,
            time_ranges=TimeRange.parse_many(setting.time_ranges),
            existing_reservations=intervals,
            party_size=party_size,
            tz=restaurant.timezone,
            inventory=parse_inventory(setting.table_inventory),
            threshold=self.threshold,
            now=self.clock(),
        )
        return search, setting

    async def _validate_slot(
        self,
        restaurant: Restaurant,
        on_date: date,
        time_slot_start: str,
        party_size: int,
        exclude_id: Optional[UUID] = None,
    ) -> TimeSlot:
        search, setting = await self._search(restaurant, on_date, party_size, exclude_id)
        if setting is None:
            raise ValidationError.single("date", "The restaurant is not taking reservations on this date")
        if search.error is not None:
            raise search.error

        slot = search.find(time_slot_start)
        if slot is None:
            raise ValidationError.single("time_slot_start", "Please select one of the available time slots")

        lead = slot.starts_at - self.clock()
        min_hours = restaurant.min_booking_advance_hours or 0
        max_hours = restaurant.max_booking_advance_hours or 0
        if lead < timedelta(hours=min_hours):
            raise ValidationError.single(
                "time_slot_start",
                f"Reservations must be made at least {min_hours} hours in advance",
            )
        if max_hours and lead > timedelta(hours=max_hours):
            raise ValidationError.single(
                "date",
                f"Reservations can be made at most {max_hours} hours in advance",
            )

        if not slot.available:
            raise SlotUnavailableError("The selected time slot is no longer available")
        return slot

    def _within_cancellation_window(self, reservation: Reservation, restaurant: Restaurant) -> bool:
        starts_at = slot_start_instant(reservation, restaurant.timezone)
        window = timedelta(hours=restaurant.cancellation_window_hours or 0)
        return starts_at - self.clock() <= window

    def _ensure_modifiable(self, reservation: Reservation, restaurant: Restaurant) -> None:
        if self._within_cancellation_window(reservation, restaurant):
            raise ValidationError.single(
                "date",
                f"Reservations cannot be modified within {restaurant.cancellation_window_hours} "
                "hours of the booking. Please contact the restaurant directly.",
            )

    async def _require_active_hold(self, intent_id: Optional[str]) -> None:
        if not intent_id:
            raise ValidationError.single(
                "payment_intent_id", "A deposit is required to book at this restaurant",
            )
        if not await self.deposits.verify(intent_id):
            raise PaymentError(
                "The deposit authorization is no longer active. Please authorize the deposit again."
            )

    async def _release_hold(self, intent_id: str) -> List[str]:
        """Void a hold nothing will capture; gateway failures become warnings"""
        try:
            if await self.deposits.verify(intent_id):
                await self.deposits.void(intent_id)
        except PaymentError as e:
            logger.warning("Failed to release deposit", intent_id=intent_id, error=e.detail)
            return [e.detail]
        return []

    async def _notify(
        self,
        template: NotificationTemplate,
        reservation: Reservation,
        restaurant: Restaurant,
        link: Optional[str],
    ) -> List[str]:
        params = notification_params(
            reservation, restaurant, link, f"{self.signer.base_url}/{restaurant.slug}",
        )
        recipient = self.notifier.recipient_for(reservation.customer_email, reservation.customer_phone)
        try:
            delivered = await self.notifier.send(template, params, recipient)
        except Exception as e:
            logger.error(
                "Notifier raised",
                template=template.value,
                confirmation_code=reservation.confirmation_code,
                error=str(e),
            )
            delivered = False

        if delivered:
            return []

        warning = NotificationError(template.value, "Your booking is saved, but the confirmation message could not be sent")
        logger.warning(
            "Notification not delivered",
            template=template.value,
            confirmation_code=reservation.confirmation_code,
        )
        return [warning.detail]
