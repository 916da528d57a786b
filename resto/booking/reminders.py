"""Reminder sweep for upcoming reservations"""

import enum
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable

import structlog

from resto.booking.codes import ReservationLinkSigner
from resto.booking.lifecycle import notification_params, slot_start_instant
from resto.booking.repository import ReservationRepository
from resto.booking.timezone import utcnow
from resto.notifications.base import BaseNotifier
from resto.notifications.templates import NotificationTemplate

logger = structlog.get_logger()


class ReminderKind(str, enum.Enum):
    ONE_WEEK = "1_week"
    ONE_DAY = "1_day"

    @property
    def template(self) -> NotificationTemplate:
        if self == ReminderKind.ONE_WEEK:
            return NotificationTemplate.REMINDER_1_WEEK
        return NotificationTemplate.REMINDER_1_DAY

    @property
    def min_lead(self) -> timedelta:
        """Reminders for bookings closer than this are pointless"""
        if self == ReminderKind.ONE_WEEK:
            return timedelta(days=5)
        return timedelta(hours=12)

    @property
    def at_column(self) -> str:
        return f"reminder_{self.value}_at"

    @property
    def sent_column(self) -> str:
        return f"reminder_{self.value}_sent"


@dataclass(frozen=True)
class SweepResult:
    kind: ReminderKind
    processed: int
    sent: int


class ReminderSweep:
    """
    Sends due reminders of one kind.

    Each reservation's flag is claimed with a conditional update and committed
    before dispatch, so overlapping sweeps never send twice. A failed dispatch
    releases the claim for the next run.
    """

    def __init__(
        self,
        repository: ReservationRepository,
        notifier: BaseNotifier,
        signer: ReservationLinkSigner,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.repository = repository
        self.notifier = notifier
        self.signer = signer
        self.clock = clock

    async def run(self, kind: ReminderKind) -> SweepResult:
        now = self.clock()
        candidates = await self.repository.due_reminders(
            kind.at_column,
            kind.sent_column,
            now=now,
            earliest_date=(now + kind.min_lead).date(),
        )

        sent = 0
        for reservation in candidates:
            restaurant = reservation.restaurant
            if slot_start_instant(reservation, restaurant.timezone) - now < kind.min_lead:
                continue

            code = reservation.confirmation_code
            try:
                if await self._dispatch(kind, reservation, restaurant):
                    sent += 1
            except Exception as e:
                await self.repository.rollback()
                logger.error(
                    "Failed to send reservation reminder",
                    confirmation_code=code,
                    kind=kind.value,
                    error=str(e),
                )

        logger.info(
            "Reminder sweep finished",
            kind=kind.value,
            processed=len(candidates),
            sent=sent,
        )
        return SweepResult(kind=kind, processed=len(candidates), sent=sent)

    async def _dispatch(self, kind: ReminderKind, reservation, restaurant) -> bool:
        code = reservation.confirmation_code
        link = self.signer.url(code, reservation.customer_email)
        params = notification_params(
            reservation, restaurant, link, f"{self.signer.base_url}/{restaurant.slug}",
        )
        recipient = self.notifier.recipient_for(reservation.customer_email, reservation.customer_phone)

        claimed = await self.repository.set_reminder_sent(reservation.id, kind.sent_column, True)
        await self.repository.commit()
        if not claimed:
            return False

        if await self.notifier.send(kind.template, params, recipient):
            logger.info("Reminder sent", confirmation_code=code, kind=kind.value)
            return True

        logger.warning("Reminder not delivered", confirmation_code=code, kind=kind.value)
        await self.repository.set_reminder_sent(reservation.id, kind.sent_column, False)
        await self.repository.commit()
        return False
