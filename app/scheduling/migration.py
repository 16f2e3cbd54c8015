"""Reservation migration when tables disappear from the floor plan

Removing a table from the layout must not strand guests. Reservations in
progress on a removed table block the edit; future ones move to a free table
or become unassigned for staff to handle.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Sequence
from uuid import UUID

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.reservation import Reservation, ReservationStatus
from app.scheduling.capacity import ACTIVE_STATUS_VALUES
from app.scheduling.tables import first_free_table, occupied_tables
from app.scheduling.timeutils import local_now

logger = structlog.get_logger()


@dataclass
class MigrationResult:
    migrated_count: int = 0
    blocked_table_ids: List[str] = field(default_factory=list)
    reassigned: Dict[UUID, str] = field(default_factory=dict)
    unassigned: List[UUID] = field(default_factory=list)

    @property
    def blocked(self) -> bool:
        return bool(self.blocked_table_ids)


def extract_table_ids(elements: Optional[Iterable[dict]]) -> List[str]:
    """Table IDs of the table elements of a floor plan, in element order, without repeats"""
    table_ids = []
    for element in elements or []:
        if not isinstance(element, dict) or element.get("type") != "table":
            continue
        table_id = element.get("tableId")
        if table_id and table_id not in table_ids:
            table_ids.append(table_id)
    return table_ids


def removed_table_ids(old_ids: Sequence[str], new_ids: Sequence[str]) -> List[str]:
    kept = set(new_ids)
    return [table_id for table_id in old_ids if table_id not in kept]


def is_ongoing(reservation, now: datetime) -> bool:
    if reservation.status == ReservationStatus.SEATED.value:
        return True
    return reservation.time_from <= now <= reservation.time_to


async def migrate_reservations(
    db: AsyncSession,
    restaurant_id: UUID,
    deleted_table_ids: Sequence[str],
    available_table_ids: Sequence[str],
    now: Optional[datetime] = None,
) -> MigrationResult:
    """
    Move active reservations off ``deleted_table_ids``.

    If any of them is ongoing nothing is written and the blocking table IDs
    are returned. Otherwise each future reservation, earliest first, moves to
    the first table of ``available_table_ids`` free for its interval, or is
    left without a table. Changes are flushed but not committed; the caller
    commits them together with the layout change. Running it again after a
    partial failure is safe.
    """
    result = MigrationResult()
    if not deleted_table_ids:
        return result

    now = now or local_now()
    deleted = list(deleted_table_ids)
    pool = [table_id for table_id in dict.fromkeys(available_table_ids) if table_id not in deleted]

    rows = await db.execute(
        select(Reservation)
        .where(
            Reservation.restaurant_id == restaurant_id,
            Reservation.table_id.in_(deleted),
            Reservation.status.in_(ACTIVE_STATUS_VALUES),
        )
        .order_by(Reservation.time_from.asc())
    )
    affected = rows.scalars().all()

    ongoing = [r for r in affected if is_ongoing(r, now)]
    if ongoing:
        result.blocked_table_ids = list(dict.fromkeys(r.table_id for r in ongoing))
        logger.warning(
            "Table removal blocked by ongoing reservations",
            restaurant_id=str(restaurant_id),
            blocked_table_ids=result.blocked_table_ids,
        )
        return result

    for reservation in affected:
        if reservation.time_from <= now:
            continue

        taken = await occupied_tables(
            db,
            restaurant_id,
            pool,
            reservation.time_from,
            reservation.time_to,
            exclude_reservation_id=reservation.id,
        )
        target = first_free_table(pool, taken)
        reservation.table_id = target
        # later reservations of this pass must see the move
        await db.flush()

        if target:
            result.reassigned[reservation.id] = target
        else:
            result.unassigned.append(reservation.id)
        result.migrated_count += 1

    logger.info(
        "Reservations migrated off removed tables",
        restaurant_id=str(restaurant_id),
        deleted_table_ids=deleted,
        migrated=result.migrated_count,
        unassigned=len(result.unassigned),
    )
    return result
