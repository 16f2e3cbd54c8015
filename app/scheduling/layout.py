"""Restaurant table layout derived from the active floor plans"""

from typing import List, Optional, Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.floor_plan import FloorPlan
from app.scheduling.migration import extract_table_ids


async def active_table_ids(
    db: AsyncSession,
    restaurant_id: UUID,
    exclude_floor_plan_id: Optional[UUID] = None,
) -> List[str]:
    """Union of table IDs across active floor plans, in floor-plan order"""
    query = select(FloorPlan).where(
        FloorPlan.restaurant_id == restaurant_id,
        FloorPlan.is_active == True,
    )
    if exclude_floor_plan_id is not None:
        query = query.where(FloorPlan.id != exclude_floor_plan_id)
    result = await db.execute(query.order_by(FloorPlan.order.asc(), FloorPlan.created_at.asc()))

    table_ids: List[str] = []
    for floor_plan in result.scalars().all():
        for table_id in extract_table_ids(floor_plan.elements):
            if table_id not in table_ids:
                table_ids.append(table_id)
    return table_ids


def find_duplicate_table_ids(new_ids: Sequence[str], other_ids: Sequence[str]) -> List[str]:
    """Table IDs of a floor plan that another active floor plan already uses"""
    others = set(other_ids)
    return [table_id for table_id in new_ids if table_id in others]


async def sync_table_layout(db: AsyncSession, restaurant) -> List[str]:
    """
    Recompute ``restaurant.table_layout`` from the active floor plans.

    Without any active plan a hand-entered layout is left alone; a layout that
    came from plans that are now all gone becomes empty.
    """
    await db.flush()
    table_ids = await active_table_ids(db, restaurant.id)
    has_plans = await db.execute(
        select(FloorPlan.id).where(
            FloorPlan.restaurant_id == restaurant.id,
            FloorPlan.is_active == True,
        ).limit(1)
    )
    if has_plans.scalar_one_or_none() is not None:
        restaurant.table_layout = table_ids
        restaurant.has_visual_layout = True
    elif restaurant.has_visual_layout:
        restaurant.table_layout = []
        restaurant.has_visual_layout = False
    return list(restaurant.table_layout or [])
