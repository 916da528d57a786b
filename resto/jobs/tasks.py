"""Background job tasks"""

import asyncio
import structlog

from resto.jobs.celery_app import celery_app

logger = structlog.get_logger()


def run_async(coro):
    """Helper to run async functions in sync context"""
    return asyncio.run(coro)


@celery_app.task(name="send_reservation_reminders")
def send_reservation_reminders(kind: str):
    """Send due 1_week or 1_day reminders"""
    logger.info("Sending reservation reminders", kind=kind)

    async def _send_reminders():
        from resto.api.deps import get_link_signer
        from resto.booking.reminders import ReminderKind, ReminderSweep
        from resto.booking.repository import ReservationRepository
        from resto.database import SessionLocal, engine
        from resto.notifications.twilio import TwilioNotifier

        try:
            async with SessionLocal() as db:
                sweep = ReminderSweep(ReservationRepository(db), TwilioNotifier(), get_link_signer())
                result = await sweep.run(ReminderKind(kind))
        finally:
            # Pooled connections are bound to this event loop
            await engine.dispose()

        return {"kind": result.kind.value, "processed": result.processed, "sent": result.sent}

    return run_async(_send_reminders())
