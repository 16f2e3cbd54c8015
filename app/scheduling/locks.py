"""Restaurant-scoped row lock"""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.restaurant import Restaurant


async def lock_restaurant(db: AsyncSession, restaurant_id: UUID):
    """
    Lock the restaurant row for the rest of the current transaction.

    Every capacity-check-then-write and every floor-plan edit takes this lock
    first, so concurrent bookings and layout changes of one restaurant run one
    after another. Returns the refreshed restaurant, or None if it does not exist.
    """
    result = await db.execute(
        select(Restaurant)
        .where(Restaurant.id == restaurant_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()
