#!/usr/bin/env python3
"""
Seed script to create a demo restaurant with weekly reservation settings
"""

import asyncio
import uuid


async def seed_demo_data():
    """Seed demo data for development"""
    from resto.config import settings
    from resto.database import SessionLocal, engine, Base
    from resto.models import Restaurant, ReservationSetting

    # Create tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with SessionLocal() as db:
        # Check if demo restaurant already exists
        from sqlalchemy import select
        result = await db.execute(
            select(Restaurant).where(Restaurant.slug == "marios-kitchen")
        )
        existing = result.scalar_one_or_none()

        if existing:
            print("Demo data already exists. Skipping...")
            return

        print("Creating demo restaurant...")

        restaurant = Restaurant(
            id=uuid.uuid4(),
            slug="marios-kitchen",
            name="Mario's Italian Kitchen",
            address="123 Main Street, New York, NY 10001",
            images=["https://images.example.com/marios-kitchen.jpg"],
            timezone="America/New_York",
            min_booking_advance_hours=2,
            max_booking_advance_hours=60 * 24,
            cancellation_window_hours=24,
            deposit_required=True,
            deposit_amount_cents=2000,
            deposit_currency="USD",
        )
        db.add(restaurant)
        await db.flush()

        print(f"Created restaurant: {restaurant.name} (ID: {restaurant.id})")

        inventory = [
            {"table_capacity": 2, "quantity": 6},
            {"table_capacity": 4, "quantity": 4},
            {"table_capacity": 6, "quantity": 2},
            {"table_capacity": 10, "quantity": 1},
        ]
        weekday_hours = [
            {"start": "11:30", "end": "14:30"},
            {"start": "17:00", "end": "22:00"},
        ]
        weekend_hours = [
            {"start": "12:00", "end": "15:00"},
            {"start": "17:00", "end": "23:00"},
        ]

        # 0 = Monday ... 6 = Sunday; closed Mondays
        for day_of_week in range(1, 7):
            db.add(ReservationSetting(
                restaurant_id=restaurant.id,
                day_of_week=day_of_week,
                is_default=True,
                timeslot_length_minutes=90 if day_of_week >= 5 else 60,
                time_ranges=weekend_hours if day_of_week >= 4 else weekday_hours,
                table_inventory=inventory,
            ))

        await db.commit()

        print(f"""
Demo data created successfully!

Restaurant: {restaurant.name}
  ID: {restaurant.id}
  Slug: {restaurant.slug}
  Booking page: {settings.public_base_url}/{restaurant.slug}
  Deposit: {restaurant.deposit_amount_cents / 100:.2f} {restaurant.deposit_currency}

Open Tuesday to Sunday; Friday to Sunday use the weekend hours.
""")


if __name__ == "__main__":
    asyncio.run(seed_demo_data())
