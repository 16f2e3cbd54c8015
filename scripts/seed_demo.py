#!/usr/bin/env python3
"""
Seed script to create a demo restaurant with opening hours and a floor plan
"""

import asyncio
import uuid

from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def table(element_id: str, table_id: str, x: int, y: int, seats: int) -> dict:
    return {
        "id": element_id,
        "type": "table",
        "tableId": table_id,
        "x": x,
        "y": y,
        "width": 80,
        "height": 80,
        "seats": seats,
    }


async def seed_demo_data():
    """Seed demo data for development"""
    from sqlalchemy import select

    from app.database import SessionLocal, engine, Base
    from app.models import FloorPlan, OpeningHours, Restaurant, User, UserRole
    from app.scheduling.layout import sync_table_layout

    # Create tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with SessionLocal() as db:
        # Check if demo restaurant already exists
        result = await db.execute(
            select(Restaurant).where(Restaurant.name == "Trattoria Demo")
        )
        if result.scalar_one_or_none():
            print("Demo data already exists. Skipping...")
            return

        print("Creating demo users...")

        admin_user = User(
            id=uuid.uuid4(),
            email="admin@tablebook.local",
            hashed_password=pwd_context.hash("admin123"),
            full_name="System Admin",
            role=UserRole.ADMIN,
            is_active=True,
        )
        db.add(admin_user)

        owner = User(
            id=uuid.uuid4(),
            email="owner@trattoria.local",
            hashed_password=pwd_context.hash("owner123"),
            full_name="Giulia Bianchi",
            role=UserRole.RESTAURANT_OWNER,
            is_active=True,
        )
        db.add(owner)
        await db.flush()

        print("Creating demo restaurant...")

        restaurant = Restaurant(
            id=uuid.uuid4(),
            owner_id=owner.id,
            name="Trattoria Demo",
            address="12 Market Square",
            description="Neighbourhood trattoria with a garden terrace",
            is_public=True,
            max_simultaneous_reservations=8,
            reservation_duration=120,
            slot_granularity=15,
            min_advance_minutes=30,
            auto_confirm_reservations=False,
        )
        db.add(restaurant)
        await db.flush()

        # Sunday closed, Friday and Saturday open late
        hours = {
            0: None,
            1: ("11:00", "22:00"),
            2: ("11:00", "22:00"),
            3: ("11:00", "22:00"),
            4: ("11:00", "22:00"),
            5: ("11:00", "23:30"),
            6: ("12:00", "23:30"),
        }
        for day, window in hours.items():
            db.add(
                OpeningHours(
                    restaurant_id=restaurant.id,
                    day_of_week=day,
                    is_open=window is not None,
                    open_time=window[0] if window else None,
                    close_time=window[1] if window else None,
                )
            )

        print("Creating floor plans...")

        db.add(
            FloorPlan(
                restaurant_id=restaurant.id,
                name="Main Room",
                order=0,
                width=800,
                height=600,
                elements=[
                    table("el-1", "T1", 40, 40, 2),
                    table("el-2", "T2", 160, 40, 2),
                    table("el-3", "T3", 280, 40, 4),
                    table("el-4", "T4", 40, 200, 4),
                    table("el-5", "T5", 160, 200, 6),
                    {"id": "el-6", "type": "wall", "x": 0, "y": 400, "width": 800, "height": 10},
                ],
            )
        )
        db.add(
            FloorPlan(
                restaurant_id=restaurant.id,
                name="Terrace",
                order=1,
                width=600,
                height=400,
                elements=[
                    table("el-1", "G1", 40, 40, 4),
                    table("el-2", "G2", 160, 40, 4),
                ],
            )
        )

        layout = await sync_table_layout(db, restaurant)
        await db.commit()

        print(f"""
Demo data created successfully!

Restaurant: Trattoria Demo
  ID: {restaurant.id}
  Tables: {', '.join(layout)}

Users:
  Admin:
    Email: admin@tablebook.local
    Password: admin123

  Restaurant Owner:
    Email: owner@trattoria.local
    Password: owner123
""")


if __name__ == "__main__":
    asyncio.run(seed_demo_data())
