"""Test configuration and fixtures"""

import pytest
from datetime import date, datetime, time, timedelta
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool
from uuid import uuid4

from app.main import app
from app.database import Base, get_db
from app.models.restaurant import Restaurant, OpeningHours
from app.models.reservation import Reservation, ReservationStatus
from app.models.user import User, UserRole
from app.api.auth import get_password_hash


# Test database URL (use in-memory SQLite for tests)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


def next_weekday(weekday: int, weeks_ahead: int = 1) -> date:
    """A date at least ``weeks_ahead`` weeks out falling on ``weekday`` (0=Monday, as date.weekday)"""
    start = date.today() + timedelta(weeks=weeks_ahead)
    return start + timedelta(days=(weekday - start.weekday()) % 7)


def at(day: date, hhmm: str) -> datetime:
    hours, minutes = hhmm.split(":")
    return datetime.combine(day, time(int(hours), int(minutes)))


@pytest.fixture
def monday() -> date:
    """A Monday far enough ahead that no slot is cut by the lead time"""
    return next_weekday(0)


@pytest.fixture
def saturday() -> date:
    return next_weekday(5)


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
async def test_owner(test_db):
    """Create a restaurant owner"""
    user = User(
        id=uuid4(),
        email="owner@example.com",
        hashed_password=get_password_hash("ownerpass123"),
        full_name="Owner User",
        role=UserRole.RESTAURANT_OWNER,
        is_active=True,
    )
    test_db.add(user)
    await test_db.commit()

    return user


@pytest.fixture
async def test_admin_user(test_db):
    """Create an admin user"""
    user = User(
        id=uuid4(),
        email="admin@example.com",
        hashed_password=get_password_hash("adminpass123"),
        full_name="Admin User",
        role=UserRole.ADMIN,
        is_active=True,
    )
    test_db.add(user)
    await test_db.commit()

    return user


@pytest.fixture
async def test_restaurant(test_db, test_owner):
    """Restaurant open Monday to Friday 09:00-22:00, closed on weekends, two bookings at a time"""
    restaurant = Restaurant(
        id=uuid4(),
        owner_id=test_owner.id,
        name="Test Restaurant",
        address="123 Test St",
        is_public=True,
        table_layout=["T1", "T2", "T3"],
        has_visual_layout=False,
        max_simultaneous_reservations=2,
        reservation_duration=120,
        slot_granularity=15,
        min_advance_minutes=30,
        auto_confirm_reservations=False,
    )
    test_db.add(restaurant)
    await test_db.flush()

    for day in range(7):
        weekday = 1 <= day <= 5
        test_db.add(
            OpeningHours(
                restaurant_id=restaurant.id,
                day_of_week=day,
                is_open=weekday,
                open_time="09:00" if weekday else None,
                close_time="22:00" if weekday else None,
            )
        )
    await test_db.commit()

    return restaurant


@pytest.fixture
def make_reservation(test_db, test_restaurant):
    """Factory adding a reservation to the test restaurant"""
    async def _make(
        time_from: datetime,
        time_to: datetime,
        table_id=None,
        status: ReservationStatus = ReservationStatus.CONFIRMED,
        guest_name: str = "Guest",
    ) -> Reservation:
        reservation = Reservation(
            restaurant_id=test_restaurant.id,
            table_id=table_id,
            guest_name=guest_name,
            guest_contact="+15550001111",
            number_of_people=2,
            time_from=time_from,
            time_to=time_to,
            status=status.value,
        )
        test_db.add(reservation)
        await test_db.commit()
        return reservation

    return _make


@pytest.fixture
async def client(test_db):
    """Create test client with overridden database"""
    async def override_get_db():
        yield test_db

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
async def authenticated_client(client, test_owner):
    """Create test client authenticated as the restaurant owner"""
    from app.api.auth import create_access_token

    token = create_access_token(test_owner)
    client.headers["Authorization"] = f"Bearer {token}"

    return client


@pytest.fixture
async def admin_client(client, test_admin_user):
    """Create admin authenticated test client"""
    from app.api.auth import create_access_token

    token = create_access_token(test_admin_user)
    client.headers["Authorization"] = f"Bearer {token}"

    return client
