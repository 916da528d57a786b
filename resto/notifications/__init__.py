"""Diner notifications"""

from resto.notifications.base import BaseNotifier
from resto.notifications.templates import NotificationTemplate, render, subject
from resto.notifications.twilio import TwilioNotifier

__all__ = [
    "BaseNotifier",
    "NotificationTemplate",
    "TwilioNotifier",
    "render",
    "subject",
]
