"""Reservation management API endpoints"""

import secrets
from datetime import date, datetime, time, timedelta
from typing import Optional
from uuid import UUID

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.models.restaurant import OpeningHours
from app.models.reservation import Reservation, ReservationStatus
from app.models.user import User
from app.schemas.reservation import (
    ManualReservationCreate,
    ReservationUpdate,
    ReservationResponse,
    ReservationListResponse,
)
from app.api.auth import get_current_active_user, verify_restaurant_access
from app.scheduling.admission import Admission, admit_reservation
from app.scheduling.capacity import ACTIVE_STATUS_VALUES
from app.scheduling.errors import SchedulingError
from app.scheduling.locks import lock_restaurant
from app.scheduling.timeutils import as_local_naive, local_now

router = APIRouter()
logger = structlog.get_logger()

CONFIRMATION_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"


def generate_confirmation_code() -> str:
    """Eight characters without look-alikes (no 0/O, 1/I)"""
    return "".join(secrets.choice(CONFIRMATION_ALPHABET) for _ in range(8))


async def admit_or_raise(db: AsyncSession, restaurant, time_from, time_to, **kwargs) -> Admission:
    """Run admission and turn a rejection into the matching HTTP error"""
    try:
        admission = await admit_reservation(db, restaurant, time_from, time_to, **kwargs)
    except SchedulingError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if not admission.admitted:
        raise HTTPException(status_code=409, detail=admission.reason.message)

    return admission


async def _get_reservation(db: AsyncSession, restaurant_id: UUID, reservation_id: UUID) -> Reservation:
    result = await db.execute(
        select(Reservation).where(
            Reservation.id == reservation_id,
            Reservation.restaurant_id == restaurant_id,
        )
    )
    reservation = result.scalar_one_or_none()

    if not reservation:
        raise HTTPException(status_code=404, detail="Reservation not found")

    return reservation


@router.get("", response_model=ReservationListResponse)
async def list_reservations(
    restaurant_id: UUID,
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    status: Optional[ReservationStatus] = None,
    day: Optional[date] = Query(None, alias="date"),
    unassigned: bool = False,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """List reservations with pagination; ``unassigned=true`` lists those waiting for a table"""
    await verify_restaurant_access(restaurant_id, current_user, db)

    filters = [Reservation.restaurant_id == restaurant_id]

    if status:
        filters.append(Reservation.status == status.value)

    if day:
        start_of_day = datetime.combine(day, time.min)
        filters.append(Reservation.time_from >= start_of_day)
        filters.append(Reservation.time_from < start_of_day + timedelta(days=1))

    if unassigned:
        filters.append(Reservation.table_id.is_(None))
        filters.append(Reservation.status.in_(ACTIVE_STATUS_VALUES))

    # Get total
    total_result = await db.execute(select(func.count(Reservation.id)).where(*filters))
    total = total_result.scalar()

    unassigned_result = await db.execute(
        select(func.count(Reservation.id)).where(
            Reservation.restaurant_id == restaurant_id,
            Reservation.table_id.is_(None),
            Reservation.status.in_(ACTIVE_STATUS_VALUES),
            Reservation.time_to > local_now(),
        )
    )
    unassigned_count = unassigned_result.scalar()

    # Get paginated results
    offset = (page - 1) * page_size
    result = await db.execute(
        select(Reservation)
        .where(*filters)
        .order_by(Reservation.time_from.asc())
        .offset(offset)
        .limit(page_size)
    )
    reservations = result.scalars().all()

    return ReservationListResponse(
        items=reservations,
        total=total,
        page=page,
        page_size=page_size,
        unassigned_count=unassigned_count,
    )


@router.post("", response_model=ReservationResponse, status_code=201)
async def create_manual_reservation(
    restaurant_id: UUID,
    reservation_data: ManualReservationCreate,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Create a reservation on behalf of a guest (staff entry, always confirmed)"""
    await verify_restaurant_access(restaurant_id, current_user, db)
    restaurant = await lock_restaurant(db, restaurant_id)

    open_days = await db.execute(
        select(func.count(OpeningHours.id)).where(
            OpeningHours.restaurant_id == restaurant_id,
            OpeningHours.is_open == True,
        )
    )
    if not open_days.scalar():
        raise HTTPException(
            status_code=400,
            detail="Cannot create reservations until you have configured your opening hours.",
        )

    time_from = as_local_naive(reservation_data.time_from)
    time_to = as_local_naive(reservation_data.time_to)
    admission = await admit_or_raise(
        db, restaurant, time_from, time_to, table_id=reservation_data.table_id
    )

    reservation = Reservation(
        restaurant_id=restaurant_id,
        table_id=admission.table_id,
        guest_name=reservation_data.guest_name,
        guest_contact=reservation_data.guest_contact,
        number_of_people=reservation_data.number_of_people,
        time_from=time_from,
        time_to=time_to,
        status=ReservationStatus.CONFIRMED.value,
        confirmation_code=generate_confirmation_code(),
        notes=reservation_data.notes,
    )

    db.add(reservation)
    await db.commit()
    await db.refresh(reservation)

    logger.info(
        "Manual reservation created",
        restaurant_id=str(restaurant_id),
        reservation_id=str(reservation.id),
        table_id=reservation.table_id,
    )
    return reservation


@router.get("/{reservation_id}", response_model=ReservationResponse)
async def get_reservation(
    restaurant_id: UUID,
    reservation_id: UUID,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Get reservation details"""
    await verify_restaurant_access(restaurant_id, current_user, db)
    return await _get_reservation(db, restaurant_id, reservation_id)


@router.patch("/{reservation_id}", response_model=ReservationResponse)
async def update_reservation(
    restaurant_id: UUID,
    reservation_id: UUID,
    reservation_data: ReservationUpdate,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Update a reservation; an active result is re-checked against capacity"""
    await verify_restaurant_access(restaurant_id, current_user, db)
    restaurant = await lock_restaurant(db, restaurant_id)
    reservation = await _get_reservation(db, restaurant_id, reservation_id)

    changes = reservation_data.model_dump(exclude_unset=True)
    if "time_from" in changes and changes["time_from"] is not None:
        changes["time_from"] = as_local_naive(changes["time_from"])
    if "time_to" in changes and changes["time_to"] is not None:
        changes["time_to"] = as_local_naive(changes["time_to"])
    if changes.get("status") is not None:
        changes["status"] = changes["status"].value
    if "table_id" in changes:
        changes["table_id"] = changes["table_id"] or None

    for required in ("time_from", "time_to", "number_of_people", "status"):
        if required in changes and changes[required] is None:
            raise HTTPException(status_code=400, detail=f"{required} cannot be null")

    time_from = changes.get("time_from", reservation.time_from)
    time_to = changes.get("time_to", reservation.time_to)
    table_id = changes.get("table_id", reservation.table_id)
    new_status = changes.get("status", reservation.status)

    if changes and new_status in ACTIVE_STATUS_VALUES:
        await admit_or_raise(
            db,
            restaurant,
            time_from,
            time_to,
            table_id=table_id,
            exclude_reservation_id=reservation.id,
            auto_assign=False,
        )

    for field, value in changes.items():
        setattr(reservation, field, value)

    await db.commit()
    await db.refresh(reservation)

    return reservation


@router.post("/{reservation_id}/approve", response_model=ReservationResponse)
async def approve_reservation(
    restaurant_id: UUID,
    reservation_id: UUID,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Confirm a pending reservation"""
    await verify_restaurant_access(restaurant_id, current_user, db)
    reservation = await _get_reservation(db, restaurant_id, reservation_id)

    if reservation.status != ReservationStatus.PENDING.value:
        raise HTTPException(
            status_code=400,
            detail=f"Cannot approve a reservation that is {reservation.status}",
        )

    reservation.status = ReservationStatus.CONFIRMED.value
    if not reservation.confirmation_code:
        reservation.confirmation_code = generate_confirmation_code()

    await db.commit()
    await db.refresh(reservation)

    return reservation


@router.post("/{reservation_id}/decline", response_model=ReservationResponse)
async def decline_reservation(
    restaurant_id: UUID,
    reservation_id: UUID,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Decline a pending reservation"""
    await verify_restaurant_access(restaurant_id, current_user, db)
    reservation = await _get_reservation(db, restaurant_id, reservation_id)

    if reservation.status != ReservationStatus.PENDING.value:
        raise HTTPException(
            status_code=400,
            detail=f"Cannot decline a reservation that is {reservation.status}",
        )

    reservation.status = ReservationStatus.CANCELLED.value
    await db.commit()
    await db.refresh(reservation)

    return reservation


@router.delete("/{reservation_id}", status_code=204)
async def cancel_reservation(
    restaurant_id: UUID,
    reservation_id: UUID,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Cancel a reservation"""
    await verify_restaurant_access(restaurant_id, current_user, db)
    reservation = await _get_reservation(db, restaurant_id, reservation_id)

    reservation.status = ReservationStatus.CANCELLED.value
    await db.commit()
