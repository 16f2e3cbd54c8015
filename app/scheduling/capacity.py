"""Capacity checks over overlapping reservations

Two admission policies exist: a restaurant-wide ceiling on simultaneous
reservations, and exclusive use of a single table. Both count only active
reservations and use half-open intervals, so a booking ending at 16:00 does
not collide with one starting at 16:00.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional, Union
from uuid import UUID

import structlog
from sqlalchemy import and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.reservation import Reservation, ReservationStatus
from app.scheduling.errors import InvalidTimeRangeError

logger = structlog.get_logger()

ACTIVE_STATUSES = frozenset(
    {ReservationStatus.PENDING, ReservationStatus.CONFIRMED, ReservationStatus.SEATED}
)
ACTIVE_STATUS_VALUES = sorted(status.value for status in ACTIVE_STATUSES)


@dataclass(frozen=True)
class GlobalCapacity:
    """At most ``max_simultaneous`` active reservations may overlap"""
    max_simultaneous: int


@dataclass(frozen=True)
class TableExclusive:
    """No two active reservations may overlap on ``table_id``"""
    table_id: str


CapacityPolicy = Union[GlobalCapacity, TableExclusive]


def validate_time_range(time_from: datetime, time_to: datetime) -> None:
    if time_from is None or time_to is None or time_to <= time_from:
        raise InvalidTimeRangeError(time_from, time_to)


def intervals_overlap(a_from: datetime, a_to: datetime, b_from: datetime, b_to: datetime) -> bool:
    return a_from < b_to and b_from < a_to


def is_active(reservation) -> bool:
    return reservation.status in ACTIVE_STATUS_VALUES


def overlap_filter(time_from: datetime, time_to: datetime):
    """SQL condition selecting reservations that overlap [time_from, time_to)"""
    return and_(Reservation.time_from < time_to, Reservation.time_to > time_from)


def active_overlapping(
    restaurant_id: UUID,
    time_from: datetime,
    time_to: datetime,
    exclude_reservation_id: Optional[UUID] = None,
):
    """WHERE clauses for active reservations of a restaurant overlapping the interval"""
    clauses = [
        Reservation.restaurant_id == restaurant_id,
        Reservation.status.in_(ACTIVE_STATUS_VALUES),
        overlap_filter(time_from, time_to),
    ]
    if exclude_reservation_id is not None:
        clauses.append(Reservation.id != exclude_reservation_id)
    return clauses


async def count_overlapping(
    db: AsyncSession,
    restaurant_id: UUID,
    time_from: datetime,
    time_to: datetime,
    table_id: Optional[str] = None,
    exclude_reservation_id: Optional[UUID] = None,
) -> int:
    """Number of active reservations overlapping the interval, optionally on one table"""
    query = select(func.count(Reservation.id)).where(
        *active_overlapping(restaurant_id, time_from, time_to, exclude_reservation_id)
    )
    if table_id is not None:
        query = query.where(Reservation.table_id == table_id)
    result = await db.execute(query)
    return result.scalar() or 0


def count_overlapping_in(reservations: Iterable, time_from: datetime, time_to: datetime) -> int:
    """In-memory variant of count_overlapping over already loaded reservations"""
    return sum(
        1
        for r in reservations
        if is_active(r) and intervals_overlap(r.time_from, r.time_to, time_from, time_to)
    )


async def can_admit(
    db: AsyncSession,
    restaurant_id: UUID,
    time_from: datetime,
    time_to: datetime,
    policy: CapacityPolicy,
    exclude_reservation_id: Optional[UUID] = None,
) -> bool:
    """
    Decide whether a reservation over [time_from, time_to) fits the policy.

    Read-only. Raises InvalidTimeRangeError for a degenerate interval; a full
    restaurant or a taken table is reported as False.
    """
    validate_time_range(time_from, time_to)

    if isinstance(policy, TableExclusive):
        taken = await count_overlapping(
            db,
            restaurant_id,
            time_from,
            time_to,
            table_id=policy.table_id,
            exclude_reservation_id=exclude_reservation_id,
        )
        admitted = taken == 0
    elif isinstance(policy, GlobalCapacity):
        taken = await count_overlapping(
            db,
            restaurant_id,
            time_from,
            time_to,
            exclude_reservation_id=exclude_reservation_id,
        )
        admitted = taken < policy.max_simultaneous
    else:
        raise TypeError(f"Unknown capacity policy: {policy!r}")

    if not admitted:
        logger.info(
            "Capacity check rejected reservation",
            restaurant_id=str(restaurant_id),
            policy=type(policy).__name__,
            overlapping=taken,
            time_from=time_from.isoformat(),
            time_to=time_to.isoformat(),
        )
    return admitted
