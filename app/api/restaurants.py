"""Restaurant management API endpoints"""

from datetime import date, datetime
from typing import List, Optional
from uuid import UUID

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import get_db
from app.models.restaurant import Restaurant, OpeningHours, ExceptionalDate
from app.models.user import User, UserRole
from app.schemas.restaurant import (
    RestaurantCreate,
    RestaurantConfigUpdate,
    RestaurantResponse,
    OpeningHoursUpdate,
    OpeningHoursResponse,
    ExceptionalDateCreate,
    ExceptionalDateResponse,
    AvailableTablesResponse,
)
from app.api.auth import get_current_active_user, require_role, verify_restaurant_access
from app.scheduling.capacity import validate_time_range
from app.scheduling.errors import SchedulingError
from app.scheduling.locks import lock_restaurant
from app.scheduling.migration import migrate_reservations, removed_table_ids
from app.scheduling.tables import occupied_tables
from app.scheduling.timeutils import as_local_naive

router = APIRouter()
logger = structlog.get_logger()


def default_opening_hours(restaurant_id: UUID) -> List[OpeningHours]:
    """One explicit open row per weekday using the configured default window"""
    return [
        OpeningHours(
            restaurant_id=restaurant_id,
            day_of_week=day,
            is_open=True,
            open_time=settings.default_open_time,
            close_time=settings.default_close_time,
        )
        for day in range(7)
    ]


@router.get("", response_model=List[RestaurantResponse])
async def list_restaurants(
    skip: int = 0,
    limit: int = 100,
    current_user: User = Depends(require_role(UserRole.ADMIN)),
    db: AsyncSession = Depends(get_db),
):
    """List all restaurants (Admin only)"""
    result = await db.execute(
        select(Restaurant)
        .where(Restaurant.is_active == True)
        .order_by(Restaurant.name)
        .offset(skip)
        .limit(limit)
    )
    return result.scalars().all()


@router.post("", response_model=RestaurantResponse, status_code=status.HTTP_201_CREATED)
async def create_restaurant(
    restaurant_data: RestaurantCreate,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Create the current owner's restaurant with default opening hours"""
    result = await db.execute(select(Restaurant).where(Restaurant.owner_id == current_user.id))
    if result.scalar_one_or_none():
        raise HTTPException(status_code=409, detail="You already have a restaurant")

    restaurant = Restaurant(
        owner_id=current_user.id,
        name=restaurant_data.name,
        address=restaurant_data.address,
        description=restaurant_data.description,
        is_public=restaurant_data.is_public,
        table_layout=[],
        has_visual_layout=False,
        max_simultaneous_reservations=(
            restaurant_data.max_simultaneous_reservations
            or settings.default_max_simultaneous_reservations
        ),
        reservation_duration=(
            restaurant_data.reservation_duration or settings.default_reservation_duration
        ),
        slot_granularity=restaurant_data.slot_granularity or settings.default_slot_granularity,
        min_advance_minutes=settings.default_min_advance_minutes,
    )
    db.add(restaurant)
    await db.flush()

    db.add_all(default_opening_hours(restaurant.id))
    await db.commit()
    await db.refresh(restaurant)

    logger.info("Restaurant created", restaurant_id=str(restaurant.id), owner_id=str(current_user.id))
    return restaurant


@router.get("/{restaurant_id}", response_model=RestaurantResponse)
async def get_restaurant(
    restaurant_id: UUID,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Get restaurant details"""
    return await verify_restaurant_access(restaurant_id, current_user, db)


@router.patch("/{restaurant_id}/config", response_model=RestaurantResponse)
async def update_restaurant_config(
    restaurant_id: UUID,
    config_data: RestaurantConfigUpdate,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Update booking configuration"""
    await verify_restaurant_access(restaurant_id, current_user, db)
    restaurant = await lock_restaurant(db, restaurant_id)

    changes = config_data.model_dump(exclude_unset=True)
    new_layout = changes.pop("table_layout", None)

    if new_layout is not None:
        if restaurant.has_visual_layout:
            raise HTTPException(
                status_code=400,
                detail="Tables are managed by the floor plans of this restaurant",
            )
        new_layout = [table_id.strip() for table_id in new_layout]
        if any(not table_id for table_id in new_layout):
            raise HTTPException(status_code=400, detail="Table IDs cannot be empty")
        if len(set(new_layout)) != len(new_layout):
            raise HTTPException(status_code=400, detail="Table IDs must be unique")

        deleted = removed_table_ids(restaurant.table_layout or [], new_layout)
        migration = await migrate_reservations(db, restaurant.id, deleted, new_layout)
        if migration.blocked:
            raise HTTPException(
                status_code=409,
                detail={
                    "message": (
                        f"Cannot remove tables {', '.join(migration.blocked_table_ids)} - "
                        "they have ongoing reservations."
                    ),
                    "blocked_table_ids": migration.blocked_table_ids,
                },
            )
        restaurant.table_layout = new_layout

    for field, value in changes.items():
        setattr(restaurant, field, value)

    await db.commit()
    await db.refresh(restaurant)

    return restaurant


@router.get("/{restaurant_id}/opening_hours", response_model=List[OpeningHoursResponse])
async def get_opening_hours(
    restaurant_id: UUID,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Weekly opening hours, Sunday first"""
    await verify_restaurant_access(restaurant_id, current_user, db)

    result = await db.execute(
        select(OpeningHours)
        .where(OpeningHours.restaurant_id == restaurant_id)
        .order_by(OpeningHours.day_of_week)
    )
    return result.scalars().all()


@router.put("/{restaurant_id}/opening_hours", response_model=List[OpeningHoursResponse])
async def update_opening_hours(
    restaurant_id: UUID,
    hours_data: OpeningHoursUpdate,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Upsert opening hours by weekday"""
    await verify_restaurant_access(restaurant_id, current_user, db)

    result = await db.execute(
        select(OpeningHours).where(OpeningHours.restaurant_id == restaurant_id)
    )
    existing = {entry.day_of_week: entry for entry in result.scalars().all()}

    for hour in hours_data.hours:
        entry = existing.get(hour.day_of_week)
        if entry is None:
            entry = OpeningHours(restaurant_id=restaurant_id, day_of_week=hour.day_of_week)
            db.add(entry)
            existing[hour.day_of_week] = entry
        entry.is_open = hour.is_open
        entry.open_time = hour.open_time if hour.is_open else None
        entry.close_time = hour.close_time if hour.is_open else None

    await db.commit()

    return sorted(existing.values(), key=lambda entry: entry.day_of_week)


@router.get("/{restaurant_id}/exceptional_dates", response_model=List[ExceptionalDateResponse])
async def list_exceptional_dates(
    restaurant_id: UUID,
    from_date: Optional[date] = None,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Exceptional dates sorted by date"""
    await verify_restaurant_access(restaurant_id, current_user, db)

    query = select(ExceptionalDate).where(ExceptionalDate.restaurant_id == restaurant_id)
    if from_date:
        query = query.where(ExceptionalDate.date >= from_date)

    result = await db.execute(query.order_by(ExceptionalDate.date))
    return result.scalars().all()


@router.post("/{restaurant_id}/exceptional_dates", response_model=ExceptionalDateResponse)
async def save_exceptional_date(
    restaurant_id: UUID,
    date_data: ExceptionalDateCreate,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Add or replace the override of one date"""
    await verify_restaurant_access(restaurant_id, current_user, db)

    result = await db.execute(
        select(ExceptionalDate).where(
            ExceptionalDate.restaurant_id == restaurant_id,
            ExceptionalDate.date == date_data.date,
        )
    )
    exceptional = result.scalar_one_or_none()

    if exceptional is None:
        exceptional = ExceptionalDate(restaurant_id=restaurant_id, date=date_data.date)
        db.add(exceptional)

    exceptional.is_open = date_data.is_open
    exceptional.open_time = date_data.open_time if date_data.is_open else None
    exceptional.close_time = date_data.close_time if date_data.is_open else None
    exceptional.note = date_data.note

    await db.commit()
    await db.refresh(exceptional)

    return exceptional


@router.delete("/{restaurant_id}/exceptional_dates", status_code=status.HTTP_204_NO_CONTENT)
async def delete_exceptional_date(
    restaurant_id: UUID,
    day: date = Query(..., alias="date"),
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Remove the override of one date"""
    await verify_restaurant_access(restaurant_id, current_user, db)

    result = await db.execute(
        select(ExceptionalDate).where(
            ExceptionalDate.restaurant_id == restaurant_id,
            ExceptionalDate.date == day,
        )
    )
    exceptional = result.scalar_one_or_none()

    if not exceptional:
        raise HTTPException(status_code=404, detail="Exceptional date not found")

    await db.delete(exceptional)
    await db.commit()


@router.get("/{restaurant_id}/available_tables", response_model=AvailableTablesResponse)
async def get_available_tables(
    restaurant_id: UUID,
    time_from: datetime,
    time_to: datetime,
    exclude_reservation_id: Optional[UUID] = None,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Tables free and taken for an interval"""
    restaurant = await verify_restaurant_access(restaurant_id, current_user, db)

    time_from = as_local_naive(time_from)
    time_to = as_local_naive(time_to)
    try:
        validate_time_range(time_from, time_to)
    except SchedulingError as e:
        raise HTTPException(status_code=400, detail=str(e))

    layout = list(restaurant.table_layout or [])
    taken = await occupied_tables(
        db, restaurant.id, layout, time_from, time_to, exclude_reservation_id
    )

    return AvailableTablesResponse(
        all_tables=layout,
        available_tables=[table_id for table_id in layout if table_id not in taken],
        occupied_tables=[table_id for table_id in layout if table_id in taken],
    )
