"""Twilio SMS notifier"""

import asyncio
from typing import Any, Dict, Optional

from twilio.rest import Client as TwilioClient
import structlog

from resto.config import settings
from resto.notifications.base import BaseNotifier
from resto.notifications.templates import NotificationTemplate, render, subject

logger = structlog.get_logger()


class TwilioNotifier(BaseNotifier):
    """Sends reservation messages as SMS"""

    def __init__(
        self,
        client: Optional[TwilioClient] = None,
        from_number: Optional[str] = None,
    ):
        self._client = client
        self.from_number = from_number or settings.twilio_phone_number

    @property
    def client(self) -> TwilioClient:
        if self._client is None:
            self._client = TwilioClient(settings.twilio_account_sid, settings.twilio_auth_token)
        return self._client

    def recipient_for(self, email: str, phone: str) -> str:
        return phone

    async def send(
        self,
        template: NotificationTemplate,
        params: Dict[str, Any],
        recipient: str,
    ) -> bool:
        body = f"{subject(template, params)}\n{render(template, params)}"

        try:
            message = await asyncio.to_thread(
                self.client.messages.create,
                body=body,
                from_=self.from_number,
                to=recipient,
            )
        except Exception as e:
            logger.error(
                "Failed to send reservation SMS",
                template=template.value,
                to=recipient[-4:],  # Log last 4 digits only
                error=str(e),
            )
            return False

        logger.info(
            "Sent reservation SMS",
            template=template.value,
            to=recipient[-4:],
            message_sid=message.sid,
        )
        return True
