"""Test configuration and fixtures"""

from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool
from uuid import uuid4

from resto.main import app
from resto.database import Base, get_db
from resto.api.deps import get_clock, get_link_signer, get_notifier, get_payment_gateway
from resto.booking.codes import ReservationLinkSigner
from resto.booking.lifecycle import ReservationService
from resto.booking.repository import ReservationRepository
from resto.models import Restaurant, ReservationSetting
from resto.notifications.base import BaseNotifier
from resto.notifications.templates import NotificationTemplate
from resto.payments.deposit import DepositService
from resto.payments.gateways.base import BasePaymentGateway, GatewayError, GatewayIntent
from resto.schemas.reservation import ReservationCreate


# Test database URL (use in-memory SQLite for tests)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Monday 2026-10-19, 18:00 in New York (EDT, UTC-4)
NOW = datetime(2026, 10, 19, 22, 0, tzinfo=timezone.utc)

TEST_SECRET = "test-reservation-secret"
TEST_BASE_URL = "https://book.example.com"

DEFAULT_INVENTORY = [
    {"table_capacity": 2, "quantity": 1},
    {"table_capacity": 4, "quantity": 1},
]
DEFAULT_HOURS = [{"start": "06:00", "end": "23:00"}]


class FrozenClock:
    """Injectable clock that only moves when told to"""

    def __init__(self, now: datetime = NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)


class FakeGateway(BasePaymentGateway):
    """In-memory payment gateway recording every capture and void"""

    def __init__(self):
        self.intents: Dict[str, GatewayIntent] = {}
        self.captured: List[str] = []
        self.cancelled: List[str] = []
        self.idempotency_keys: List[str] = []
        self.retrieve_failures = 0
        self.capture_error: Optional[GatewayError] = None
        self.cancel_error: Optional[GatewayError] = None

    async def create_hold(self, amount, currency, metadata, receipt_email=None) -> GatewayIntent:
        intent_id = f"pi_test_{len(self.intents) + 1}"
        intent = GatewayIntent(
            id=intent_id,
            status="requires_capture",
            amount=amount,
            currency=currency.upper(),
            client_secret=f"{intent_id}_secret",
            metadata=metadata,
        )
        self.intents[intent_id] = intent
        return intent

    async def capture(self, intent_id, idempotency_key=None) -> GatewayIntent:
        if self.capture_error:
            raise self.capture_error
        intent = self.intents[intent_id]
        self.captured.append(intent_id)
        self.idempotency_keys.append(idempotency_key)
        intent.status = "succeeded"
        return intent

    async def cancel(self, intent_id, idempotency_key=None) -> GatewayIntent:
        if self.cancel_error:
            raise self.cancel_error
        intent = self.intents[intent_id]
        self.cancelled.append(intent_id)
        self.idempotency_keys.append(idempotency_key)
        intent.status = "canceled"
        return intent

    async def retrieve(self, intent_id) -> GatewayIntent:
        if self.retrieve_failures:
            self.retrieve_failures -= 1
            raise GatewayError("Request timed out")
        if intent_id not in self.intents:
            raise GatewayError(f"No such payment_intent: '{intent_id}'", code="resource_missing")
        return self.intents[intent_id]


class RecordingNotifier(BaseNotifier):
    """Notifier that records messages instead of sending them"""

    def __init__(self, deliver: bool = True):
        self.deliver = deliver
        self.sent: List[Tuple[NotificationTemplate, Dict[str, Any], str]] = []

    async def send(self, template, params, recipient) -> bool:
        self.sent.append((template, params, recipient))
        return self.deliver

    @property
    def templates(self) -> List[NotificationTemplate]:
        return [template for template, _, _ in self.sent]


async def add_weekly_settings(
    db,
    restaurant: Restaurant,
    time_ranges=None,
    inventory=None,
    timeslot_length: int = 60,
):
    for day_of_week in range(7):
        db.add(ReservationSetting(
            restaurant_id=restaurant.id,
            day_of_week=day_of_week,
            is_default=True,
            timeslot_length_minutes=timeslot_length,
            time_ranges=time_ranges or DEFAULT_HOURS,
            table_inventory=inventory or DEFAULT_INVENTORY,
        ))
    await db.commit()


def booking_request(**overrides) -> ReservationCreate:
    data = {
        "customer_name": "Ada Lovelace",
        "customer_email": "ada@example.com",
        "customer_phone": "+15551234567",
        "party_size": 2,
        "date": date(2026, 10, 21),
        "time_slot_start": "18:00",
    }
    data.update(overrides)
    return ReservationCreate(**data)


@pytest.fixture
async def test_db():
    """Create test database"""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=StaticPool)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with session_factory() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def test_restaurant(test_db):
    """Restaurant in New York with no deposit, open 06:00-23:00 every day"""
    restaurant = Restaurant(
        id=uuid4(),
        slug="test-bistro",
        name="Test Bistro",
        address="123 Test St, New York, NY",
        images=["https://images.example.com/bistro.jpg"],
        timezone="America/New_York",
        min_booking_advance_hours=0,
        max_booking_advance_hours=720,
        cancellation_window_hours=24,
        deposit_required=False,
    )
    test_db.add(restaurant)
    await test_db.flush()
    await add_weekly_settings(test_db, restaurant)
    return restaurant


@pytest.fixture
async def deposit_restaurant(test_db):
    """Restaurant that holds a 20.00 USD deposit per booking"""
    restaurant = Restaurant(
        id=uuid4(),
        slug="deposit-house",
        name="Deposit House",
        address="1 Hold Ave, New York, NY",
        images=[],
        timezone="America/New_York",
        min_booking_advance_hours=0,
        max_booking_advance_hours=720,
        cancellation_window_hours=24,
        deposit_required=True,
        deposit_amount_cents=2000,
        deposit_currency="USD",
    )
    test_db.add(restaurant)
    await test_db.flush()
    await add_weekly_settings(test_db, restaurant)
    return restaurant


@pytest.fixture
def clock():
    return FrozenClock()


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def signer():
    return ReservationLinkSigner(TEST_SECRET, TEST_BASE_URL)


@pytest.fixture
def service(test_db, gateway, notifier, signer, clock):
    """Lifecycle service on the test database with fake collaborators"""
    return ReservationService(
        repository=ReservationRepository(test_db),
        deposits=DepositService(gateway),
        notifier=notifier,
        signer=signer,
        threshold=1,
        max_code_attempts=5,
        clock=clock,
    )


@pytest.fixture
async def client(test_db, gateway, notifier, signer, clock):
    """Create test client with overridden database and collaborators"""
    async def override_get_db():
        yield test_db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    app.dependency_overrides[get_notifier] = lambda: notifier
    app.dependency_overrides[get_link_signer] = lambda: signer
    app.dependency_overrides[get_clock] = lambda: clock

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
