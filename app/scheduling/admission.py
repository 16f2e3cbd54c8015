"""Booking admission: capacity policy plus table choice"""

import enum
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.scheduling.capacity import GlobalCapacity, can_admit, validate_time_range
from app.scheduling.tables import TableConflict, assign_table

logger = structlog.get_logger()


class RejectionReason(str, enum.Enum):
    FULLY_BOOKED = "fully_booked"
    TABLE_UNAVAILABLE = "table_unavailable"
    TABLE_NOT_IN_LAYOUT = "table_not_in_layout"

    @property
    def message(self) -> str:
        return _MESSAGES[self]


_MESSAGES = {
    RejectionReason.FULLY_BOOKED: "This time slot is fully booked. Please choose a different time.",
    RejectionReason.TABLE_UNAVAILABLE: "The selected table is not available at this time.",
    RejectionReason.TABLE_NOT_IN_LAYOUT: "Invalid table ID",
}

_CONFLICT_REASONS = {
    TableConflict.NOT_IN_LAYOUT: RejectionReason.TABLE_NOT_IN_LAYOUT,
    TableConflict.OCCUPIED: RejectionReason.TABLE_UNAVAILABLE,
}


@dataclass(frozen=True)
class Admission:
    admitted: bool
    table_id: Optional[str] = None
    reason: Optional[RejectionReason] = None


async def admit_reservation(
    db: AsyncSession,
    restaurant,
    time_from: datetime,
    time_to: datetime,
    table_id: Optional[str] = None,
    exclude_reservation_id: Optional[UUID] = None,
    auto_assign: bool = True,
    enforce_ceiling: bool = False,
) -> Admission:
    """
    Decide whether a booking fits and which table it gets.

    A booking for a specific table is governed by that table alone. A booking
    without a table must fit under the restaurant's simultaneous-reservation
    ceiling and is then given the first free table (unless ``auto_assign`` is
    off), or left unassigned. Guest bookings set ``enforce_ceiling`` so the
    ceiling applies even when the guest picked a table.

    The caller must hold the restaurant lock until the reservation is written.
    """
    validate_time_range(time_from, time_to)

    if table_id and enforce_ceiling:
        fits = await can_admit(
            db,
            restaurant.id,
            time_from,
            time_to,
            GlobalCapacity(restaurant.max_simultaneous_reservations),
            exclude_reservation_id=exclude_reservation_id,
        )
        if not fits:
            return Admission(admitted=False, reason=RejectionReason.FULLY_BOOKED)

    if table_id:
        assignment = await assign_table(
            db,
            restaurant.id,
            restaurant.table_layout or [],
            time_from,
            time_to,
            preferred_table_id=table_id,
            exclude_reservation_id=exclude_reservation_id,
        )
        if not assignment.ok:
            return Admission(admitted=False, reason=_CONFLICT_REASONS[assignment.conflict])
        return Admission(admitted=True, table_id=assignment.table_id)

    fits = await can_admit(
        db,
        restaurant.id,
        time_from,
        time_to,
        GlobalCapacity(restaurant.max_simultaneous_reservations),
        exclude_reservation_id=exclude_reservation_id,
    )
    if not fits:
        return Admission(admitted=False, reason=RejectionReason.FULLY_BOOKED)
    if not auto_assign:
        return Admission(admitted=True)

    assignment = await assign_table(
        db,
        restaurant.id,
        restaurant.table_layout or [],
        time_from,
        time_to,
        exclude_reservation_id=exclude_reservation_id,
    )
    if assignment.table_id is None and restaurant.table_layout:
        logger.info(
            "No free table, reservation left unassigned",
            restaurant_id=str(restaurant.id),
            time_from=time_from.isoformat(),
        )
    return Admission(admitted=True, table_id=assignment.table_id)
