"""Floor plan API endpoints

Every write here recomputes the restaurant's table layout in the same
transaction, and any edit that drops tables first moves their reservations.
"""

from collections import Counter
from typing import List
from uuid import UUID

import structlog
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.models.floor_plan import FloorPlan
from app.models.user import User
from app.schemas.floor_plan import (
    FloorPlanCreate,
    FloorPlanUpdate,
    FloorPlanResponse,
    FloorPlanChangeResponse,
)
from app.api.auth import get_current_active_user, verify_restaurant_access
from app.scheduling.layout import active_table_ids, find_duplicate_table_ids, sync_table_layout
from app.scheduling.locks import lock_restaurant
from app.scheduling.migration import (
    MigrationResult,
    extract_table_ids,
    migrate_reservations,
    removed_table_ids,
)

router = APIRouter()
logger = structlog.get_logger()


def _check_table_ids(elements: List[dict], other_table_ids: List[str]) -> List[str]:
    """Table IDs of ``elements``; rejects repeats within the plan or across active plans"""
    counts = Counter(
        element.get("tableId")
        for element in elements
        if element.get("type") == "table" and element.get("tableId")
    )
    repeated = [table_id for table_id, count in counts.items() if count > 1]
    if repeated:
        raise HTTPException(
            status_code=400,
            detail=f"Table IDs used more than once: {', '.join(repeated)}",
        )

    table_ids = extract_table_ids(elements)
    clashing = find_duplicate_table_ids(table_ids, other_table_ids)
    if clashing:
        raise HTTPException(
            status_code=400,
            detail=f"Table IDs already used on another floor plan: {', '.join(clashing)}",
        )
    return table_ids


def _blocked(result: MigrationResult, action: str) -> HTTPException:
    tables = ", ".join(result.blocked_table_ids)
    return HTTPException(
        status_code=409,
        detail={
            "message": (
                f"Cannot {action} - tables {tables} have ongoing reservations. "
                "Please wait until those reservations are completed."
            ),
            "blocked_table_ids": result.blocked_table_ids,
        },
    )


async def _get_floor_plan(db: AsyncSession, restaurant_id: UUID, floor_plan_id: UUID) -> FloorPlan:
    result = await db.execute(
        select(FloorPlan).where(
            FloorPlan.id == floor_plan_id,
            FloorPlan.restaurant_id == restaurant_id,
        )
    )
    floor_plan = result.scalar_one_or_none()

    if not floor_plan:
        raise HTTPException(status_code=404, detail="Floor plan not found")

    return floor_plan


@router.get("", response_model=List[FloorPlanResponse])
async def list_floor_plans(
    restaurant_id: UUID,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """List floor plans in display order"""
    await verify_restaurant_access(restaurant_id, current_user, db)

    result = await db.execute(
        select(FloorPlan)
        .where(FloorPlan.restaurant_id == restaurant_id)
        .order_by(FloorPlan.order.asc(), FloorPlan.created_at.asc())
    )
    return result.scalars().all()


@router.post("", response_model=FloorPlanResponse, status_code=status.HTTP_201_CREATED)
async def create_floor_plan(
    restaurant_id: UUID,
    floor_plan_data: FloorPlanCreate,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Create a floor plan"""
    await verify_restaurant_access(restaurant_id, current_user, db)
    restaurant = await lock_restaurant(db, restaurant_id)

    if floor_plan_data.is_active:
        other_ids = await active_table_ids(db, restaurant_id)
        _check_table_ids(floor_plan_data.elements, other_ids)

    order = floor_plan_data.order
    if order is None:
        result = await db.execute(
            select(func.max(FloorPlan.order)).where(FloorPlan.restaurant_id == restaurant_id)
        )
        max_order = result.scalar()
        order = 0 if max_order is None else max_order + 1

    floor_plan = FloorPlan(
        restaurant_id=restaurant_id,
        name=floor_plan_data.name,
        order=order,
        width=floor_plan_data.width,
        height=floor_plan_data.height,
        elements=floor_plan_data.elements,
        is_active=floor_plan_data.is_active,
    )
    db.add(floor_plan)

    # The first active plan replaces a layout typed in by hand
    new_layout = await active_table_ids(db, restaurant_id) if floor_plan.is_active else []
    deleted = removed_table_ids(restaurant.table_layout or [], new_layout) if new_layout else []
    if deleted:
        migration = await migrate_reservations(db, restaurant_id, deleted, new_layout)
        if migration.blocked:
            raise _blocked(migration, "replace the table layout")

    await sync_table_layout(db, restaurant)
    await db.commit()
    await db.refresh(floor_plan)

    return floor_plan


@router.get("/{floor_plan_id}", response_model=FloorPlanResponse)
async def get_floor_plan(
    restaurant_id: UUID,
    floor_plan_id: UUID,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Get floor plan details"""
    await verify_restaurant_access(restaurant_id, current_user, db)
    return await _get_floor_plan(db, restaurant_id, floor_plan_id)


@router.patch("/{floor_plan_id}", response_model=FloorPlanChangeResponse)
async def update_floor_plan(
    restaurant_id: UUID,
    floor_plan_id: UUID,
    floor_plan_data: FloorPlanUpdate,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Update a floor plan, moving reservations off any table it drops"""
    await verify_restaurant_access(restaurant_id, current_user, db)
    restaurant = await lock_restaurant(db, restaurant_id)
    floor_plan = await _get_floor_plan(db, restaurant_id, floor_plan_id)

    changes = floor_plan_data.model_dump(exclude_unset=True)
    will_be_active = changes.get("is_active", floor_plan.is_active)
    new_elements = changes.get("elements", floor_plan.elements) or []

    other_ids = await active_table_ids(db, restaurant_id, exclude_floor_plan_id=floor_plan.id)
    new_ids = _check_table_ids(new_elements, other_ids) if will_be_active else []

    old_layout = list(restaurant.table_layout or [])
    if will_be_active or other_ids:
        new_layout = new_ids + other_ids
    elif restaurant.has_visual_layout:
        new_layout = []
    else:
        new_layout = old_layout

    migration = MigrationResult()
    deleted = removed_table_ids(old_layout, new_layout)
    if deleted:
        migration = await migrate_reservations(db, restaurant_id, deleted, new_layout)
        if migration.blocked:
            raise _blocked(migration, f"remove tables from floor plan '{floor_plan.name}'")

    for field, value in changes.items():
        setattr(floor_plan, field, value)

    layout = await sync_table_layout(db, restaurant)
    await db.commit()
    await db.refresh(floor_plan)

    logger.info(
        "Floor plan updated",
        restaurant_id=str(restaurant_id),
        floor_plan_id=str(floor_plan.id),
        removed_tables=deleted,
        migrated=migration.migrated_count,
    )
    return FloorPlanChangeResponse(
        floor_plan=FloorPlanResponse.model_validate(floor_plan),
        table_layout=layout,
        migrated_count=migration.migrated_count,
        unassigned_reservation_ids=migration.unassigned,
    )


@router.delete("/{floor_plan_id}", response_model=FloorPlanChangeResponse)
async def delete_floor_plan(
    restaurant_id: UUID,
    floor_plan_id: UUID,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Delete a floor plan, moving reservations off its tables"""
    await verify_restaurant_access(restaurant_id, current_user, db)
    restaurant = await lock_restaurant(db, restaurant_id)
    floor_plan = await _get_floor_plan(db, restaurant_id, floor_plan_id)

    deleted = extract_table_ids(floor_plan.elements) if floor_plan.is_active else []
    migration = MigrationResult()
    if deleted:
        other_ids = await active_table_ids(db, restaurant_id, exclude_floor_plan_id=floor_plan.id)
        migration = await migrate_reservations(db, restaurant_id, deleted, other_ids)
        if migration.blocked:
            raise _blocked(migration, "delete floor plan")

    await db.delete(floor_plan)

    layout = await sync_table_layout(db, restaurant)
    await db.commit()

    logger.info(
        "Floor plan deleted",
        restaurant_id=str(restaurant_id),
        floor_plan_id=str(floor_plan_id),
        migrated=migration.migrated_count,
    )
    return FloorPlanChangeResponse(
        table_layout=layout,
        migrated_count=migration.migrated_count,
        unassigned_reservation_ids=migration.unassigned,
    )
