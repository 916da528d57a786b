"""Dependency wiring for the reservation engine"""

from datetime import datetime
from typing import Callable

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from resto.booking.codes import ReservationLinkSigner
from resto.booking.lifecycle import ReservationService
from resto.booking.reminders import ReminderSweep
from resto.booking.repository import ReservationRepository
from resto.booking.timezone import utcnow
from resto.config import settings
from resto.database import get_db
from resto.notifications.base import BaseNotifier
from resto.notifications.twilio import TwilioNotifier
from resto.payments.deposit import DepositService
from resto.payments.gateways.base import BasePaymentGateway
from resto.payments.gateways.stripe import StripeGateway


def get_link_signer() -> ReservationLinkSigner:
    return ReservationLinkSigner(settings.reservation_secret_key, settings.public_base_url)


def get_payment_gateway() -> BasePaymentGateway:
    return StripeGateway()


def get_notifier() -> BaseNotifier:
    return TwilioNotifier()


def get_clock() -> Callable[[], datetime]:
    return utcnow


def get_reservation_service(
    db: AsyncSession = Depends(get_db),
    gateway: BasePaymentGateway = Depends(get_payment_gateway),
    notifier: BaseNotifier = Depends(get_notifier),
    signer: ReservationLinkSigner = Depends(get_link_signer),
    clock: Callable[[], datetime] = Depends(get_clock),
) -> ReservationService:
    """Build the lifecycle service for one request"""
    return ReservationService(
        repository=ReservationRepository(db),
        deposits=DepositService(gateway, verify_attempts=settings.payment_verify_attempts),
        notifier=notifier,
        signer=signer,
        threshold=settings.capacity_slack_threshold,
        max_code_attempts=settings.confirmation_code_attempts,
        clock=clock,
    )


def get_reminder_sweep(
    db: AsyncSession = Depends(get_db),
    notifier: BaseNotifier = Depends(get_notifier),
    signer: ReservationLinkSigner = Depends(get_link_signer),
    clock: Callable[[], datetime] = Depends(get_clock),
) -> ReminderSweep:
    return ReminderSweep(ReservationRepository(db), notifier, signer, clock=clock)
