"""Base notifier interface"""

from abc import ABC, abstractmethod
from typing import Any, Dict

from resto.notifications.templates import NotificationTemplate


class BaseNotifier(ABC):
    """
    Delivers a rendered reservation message to a diner.
    Implementations report failure through the return value and never raise.
    """

    def recipient_for(self, email: str, phone: str) -> str:
        """Pick the address this channel delivers to"""
        return email

    @abstractmethod
    async def send(
        self,
        template: NotificationTemplate,
        params: Dict[str, Any],
        recipient: str,
    ) -> bool:
        """Send a notification, returning whether it was accepted"""
        pass
