"""Scheduled job endpoints for external cron triggers"""

import hmac
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query, status
import structlog

from resto.api.deps import get_reminder_sweep
from resto.booking.reminders import ReminderKind, ReminderSweep
from resto.config import settings
from resto.schemas.reservation import ReminderSweepResponse

router = APIRouter()
logger = structlog.get_logger()


def verify_cron_secret(authorization: Optional[str] = Header(None)) -> None:
    """Require `Authorization: Bearer <cron_secret>`"""
    expected = f"Bearer {settings.cron_secret}"
    if not settings.cron_secret or not authorization or not hmac.compare_digest(
        authorization.encode(), expected.encode()
    ):
        logger.warning("Rejected cron request")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )


@router.post("/reminders", response_model=ReminderSweepResponse)
async def send_reminders(
    reminder_type: ReminderKind = Query(..., alias="type"),
    _: None = Depends(verify_cron_secret),
    sweep: ReminderSweep = Depends(get_reminder_sweep),
):
    """Send due reminders of one kind"""
    result = await sweep.run(reminder_type)
    return ReminderSweepResponse(
        success=True,
        reminder_type=result.kind.value,
        processed_count=result.processed,
        sent_count=result.sent,
    )
