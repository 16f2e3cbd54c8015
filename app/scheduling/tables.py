"""Table assignment for a reservation interval"""

import enum
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional, Sequence, Set
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.reservation import Reservation
from app.scheduling.capacity import active_overlapping, validate_time_range


class TableConflict(str, enum.Enum):
    NOT_IN_LAYOUT = "not_in_layout"
    OCCUPIED = "occupied"


@dataclass(frozen=True)
class TableAssignment:
    """Outcome of assign_table; table_id None without a conflict means unassigned"""
    table_id: Optional[str] = None
    conflict: Optional[TableConflict] = None

    @property
    def ok(self) -> bool:
        return self.conflict is None


async def occupied_tables(
    db: AsyncSession,
    restaurant_id: UUID,
    table_ids: Iterable[str],
    time_from: datetime,
    time_to: datetime,
    exclude_reservation_id: Optional[UUID] = None,
) -> Set[str]:
    """Tables among ``table_ids`` held by an active reservation overlapping the interval"""
    table_ids = list(table_ids)
    if not table_ids:
        return set()
    result = await db.execute(
        select(Reservation.table_id).where(
            *active_overlapping(restaurant_id, time_from, time_to, exclude_reservation_id),
            Reservation.table_id.in_(table_ids),
        )
    )
    return {table_id for table_id in result.scalars().all() if table_id}


def first_free_table(layout: Sequence[str], occupied: Set[str]) -> Optional[str]:
    """First table of the layout, in layout order, that is not occupied"""
    for table_id in layout:
        if table_id not in occupied:
            return table_id
    return None


async def assign_table(
    db: AsyncSession,
    restaurant_id: UUID,
    table_layout: Sequence[str],
    time_from: datetime,
    time_to: datetime,
    preferred_table_id: Optional[str] = None,
    exclude_reservation_id: Optional[UUID] = None,
) -> TableAssignment:
    """
    Pick a table for [time_from, time_to).

    With ``preferred_table_id`` the table must belong to the layout and be
    free, otherwise the conflict is reported. Without it the first free table
    in layout order is chosen, or None when every table is taken.
    """
    validate_time_range(time_from, time_to)
    layout = list(table_layout or [])

    if preferred_table_id:
        if preferred_table_id not in layout:
            return TableAssignment(conflict=TableConflict.NOT_IN_LAYOUT)
        taken = await occupied_tables(
            db, restaurant_id, [preferred_table_id], time_from, time_to, exclude_reservation_id
        )
        if taken:
            return TableAssignment(conflict=TableConflict.OCCUPIED)
        return TableAssignment(table_id=preferred_table_id)

    taken = await occupied_tables(
        db, restaurant_id, layout, time_from, time_to, exclude_reservation_id
    )
    return TableAssignment(table_id=first_free_table(layout, taken))
