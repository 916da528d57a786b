"""Notification message templates"""

import enum
from typing import Any, Dict


class NotificationTemplate(str, enum.Enum):
    CREATED = "created"
    MODIFIED = "modified"
    CANCELLED = "cancelled"
    REMINDER_1_WEEK = "reminder-1-week"
    REMINDER_1_DAY = "reminder-1-day"

    @property
    def is_reminder(self) -> bool:
        return self in (NotificationTemplate.REMINDER_1_WEEK, NotificationTemplate.REMINDER_1_DAY)


def subject(template: NotificationTemplate, params: Dict[str, Any]) -> str:
    restaurant = params.get("restaurant_name", "")
    if template == NotificationTemplate.CREATED:
        return f"Reservation Confirmed - {restaurant}"
    if template == NotificationTemplate.MODIFIED:
        return f"Reservation Modified - {restaurant}"
    if template == NotificationTemplate.CANCELLED:
        return f"Reservation Cancelled - {restaurant}"
    return f"Reservation Reminder - {restaurant}"


def render(template: NotificationTemplate, params: Dict[str, Any]) -> str:
    """Plain-text body for a notification"""
    name = params.get("customer_name", "")
    restaurant = params.get("restaurant_name", "")
    guests = params.get("guests")
    when = f"{params.get('date')} at {params.get('time')}"

    if template == NotificationTemplate.CANCELLED:
        message = f"Hi {name}, your reservation at {restaurant} for {guests} guests "
        message += f"on {when} has been cancelled. "
        if params.get("restaurant_url"):
            message += f"Book again: {params['restaurant_url']}"
        return message.strip()

    if template.is_reminder:
        lead = "next week" if template == NotificationTemplate.REMINDER_1_WEEK else "tomorrow"
        message = f"Reminder: {name}, your reservation at {restaurant} is {lead}! "
        message += f"{guests} guests on {params.get('date')}, "
        message += f"{params.get('time')} - {params.get('end_time')}. "
    elif template == NotificationTemplate.MODIFIED:
        message = f"Hi {name}, your reservation at {restaurant} has been updated. "
        message += f"{guests} guests on {when}. "
    else:
        message = f"Hi {name}, your reservation at {restaurant} is confirmed! "
        message += f"{guests} guests on {when}. "

    if params.get("restaurant_address"):
        message += f"Address: {params['restaurant_address']}. "
    message += f"Manage your booking: {params.get('reservation_link')}"
    return message
