"""Tests for notification templates and the SMS notifier"""

from unittest.mock import MagicMock

import pytest

from resto.notifications.templates import NotificationTemplate, render, subject
from resto.notifications.twilio import TwilioNotifier

PARAMS = {
    "restaurant_name": "Test Bistro",
    "restaurant_address": "123 Test St, New York, NY",
    "restaurant_url": "https://book.example.com/test-bistro",
    "customer_name": "Ada Lovelace",
    "date": "October 21, 2026",
    "time": "6:00 PM",
    "end_time": "7:00 PM",
    "guests": 2,
    "reservation_link": "https://book.example.com/reservations/ABCD1234/deadbeef",
}


def test_subjects():
    assert subject(NotificationTemplate.CREATED, PARAMS) == "Reservation Confirmed - Test Bistro"
    assert subject(NotificationTemplate.MODIFIED, PARAMS) == "Reservation Modified - Test Bistro"
    assert subject(NotificationTemplate.CANCELLED, PARAMS) == "Reservation Cancelled - Test Bistro"
    assert subject(NotificationTemplate.REMINDER_1_DAY, PARAMS) == "Reservation Reminder - Test Bistro"


def test_confirmation_body_has_link_and_address():
    body = render(NotificationTemplate.CREATED, PARAMS)

    assert "is confirmed" in body
    assert "2 guests on October 21, 2026 at 6:00 PM" in body
    assert "Address: 123 Test St, New York, NY" in body
    assert body.endswith(PARAMS["reservation_link"])


def test_cancelled_body_links_back_to_restaurant():
    body = render(NotificationTemplate.CANCELLED, PARAMS)

    assert "has been cancelled" in body
    assert "Book again: https://book.example.com/test-bistro" in body
    assert PARAMS["reservation_link"] not in body


def test_reminder_bodies():
    week = render(NotificationTemplate.REMINDER_1_WEEK, PARAMS)
    day = render(NotificationTemplate.REMINDER_1_DAY, PARAMS)

    assert "is next week!" in week
    assert "is tomorrow!" in day
    assert "6:00 PM - 7:00 PM" in day


@pytest.mark.asyncio
async def test_twilio_sends_sms_to_phone():
    client = MagicMock()
    client.messages.create.return_value = MagicMock(sid="SM123")
    notifier = TwilioNotifier(client=client, from_number="+15550000000")

    recipient = notifier.recipient_for("ada@example.com", "+15551234567")
    sent = await notifier.send(NotificationTemplate.CREATED, PARAMS, recipient)

    assert sent is True
    kwargs = client.messages.create.call_args.kwargs
    assert kwargs["to"] == "+15551234567"
    assert kwargs["from_"] == "+15550000000"
    assert kwargs["body"].startswith("Reservation Confirmed - Test Bistro\n")


@pytest.mark.asyncio
async def test_twilio_failure_returns_false():
    client = MagicMock()
    client.messages.create.side_effect = RuntimeError("Twilio unavailable")
    notifier = TwilioNotifier(client=client, from_number="+15550000000")

    sent = await notifier.send(NotificationTemplate.REMINDER_1_DAY, PARAMS, "+15551234567")

    assert sent is False
