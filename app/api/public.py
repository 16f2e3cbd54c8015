"""Public guest-facing endpoints (no authentication)"""

from collections import defaultdict
from datetime import date, datetime, time, timedelta
from typing import Optional
from uuid import UUID

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import get_db
from app.models.floor_plan import FloorPlan
from app.models.restaurant import Restaurant, OpeningHours, ExceptionalDate
from app.models.reservation import (
    Reservation,
    ReservationInvitation,
    ReservationStatus,
    InvitationStatus,
)
from app.schemas.reservation import (
    AvailabilityResponse,
    AvailabilitySlot,
    PublicFloorPlan,
    PublicFloorPlansResponse,
    PublicReservationCreate,
    PublicReservationResponse,
    PublicRestaurantListResponse,
    PublicRestaurantSummary,
    ReservationResponse,
    SlotsResponse,
)
from app.api.reservations import admit_or_raise, generate_confirmation_code
from app.scheduling.capacity import ACTIVE_STATUS_VALUES, overlap_filter
from app.scheduling.errors import SchedulingError
from app.scheduling.hours import HoursWindow, resolve_hours
from app.scheduling.locks import lock_restaurant
from app.scheduling.slots import annotate_slots, generate_slots, slot_interval
from app.scheduling.timeutils import as_local_naive, format_hhmm, local_now

router = APIRouter()
logger = structlog.get_logger()


async def _get_invitation(db: AsyncSession, token: str) -> ReservationInvitation:
    """Load a usable invitation or fail with the reason it cannot be used"""
    result = await db.execute(
        select(ReservationInvitation).where(ReservationInvitation.token == token)
    )
    invitation = result.scalar_one_or_none()

    if not invitation:
        raise HTTPException(status_code=404, detail="Invalid invitation token")

    if invitation.status == InvitationStatus.COMPLETED.value:
        raise HTTPException(status_code=400, detail="This invitation has already been used")

    if invitation.expires_at and invitation.expires_at < datetime.now():
        raise HTTPException(status_code=400, detail="This invitation has expired")

    return invitation


async def _get_bookable_restaurant(
    db: AsyncSession,
    restaurant_id: Optional[UUID] = None,
    token: Optional[str] = None,
) -> Restaurant:
    """Restaurant reachable by a guest: through an invitation, or listed publicly"""
    if token:
        invitation = await _get_invitation(db, token)
        restaurant_id = invitation.restaurant_id
    elif restaurant_id is None:
        raise HTTPException(status_code=400, detail="Restaurant ID or invitation token is required")

    result = await db.execute(select(Restaurant).where(Restaurant.id == restaurant_id))
    restaurant = result.scalar_one_or_none()

    if not restaurant or not restaurant.is_active or (not token and not restaurant.is_public):
        raise HTTPException(status_code=404, detail="Restaurant not found")

    return restaurant


async def _resolve_day(db: AsyncSession, restaurant: Restaurant, day: date) -> HoursWindow:
    weekly = await db.execute(
        select(OpeningHours).where(OpeningHours.restaurant_id == restaurant.id)
    )
    exceptional = await db.execute(
        select(ExceptionalDate).where(
            ExceptionalDate.restaurant_id == restaurant.id,
            ExceptionalDate.date == day,
        )
    )
    return resolve_hours(
        day,
        weekly.scalars().all(),
        exceptional.scalars().all(),
        default_open=settings.default_open_time,
        default_close=settings.default_close_time,
    )


async def _availability(db: AsyncSession, restaurant: Restaurant) -> AvailabilityResponse:
    weekly = await db.execute(
        select(OpeningHours)
        .where(OpeningHours.restaurant_id == restaurant.id)
        .order_by(OpeningHours.day_of_week)
    )
    upcoming = await db.execute(
        select(ExceptionalDate)
        .where(
            ExceptionalDate.restaurant_id == restaurant.id,
            ExceptionalDate.date >= local_now().date(),
        )
        .order_by(ExceptionalDate.date)
    )
    return AvailabilityResponse(
        restaurant_id=restaurant.id,
        restaurant_name=restaurant.name,
        reservation_duration=restaurant.reservation_duration,
        slot_granularity=restaurant.slot_granularity,
        min_advance_minutes=restaurant.min_advance_minutes,
        max_simultaneous_reservations=restaurant.max_simultaneous_reservations,
        table_layout=restaurant.table_layout or [],
        opening_hours=weekly.scalars().all(),
        exceptional_dates=upcoming.scalars().all(),
    )


@router.get("/restaurants/{restaurant_id}", response_model=AvailabilityResponse)
async def get_public_restaurant(
    restaurant_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    """Booking configuration of a publicly listed restaurant"""
    restaurant = await _get_bookable_restaurant(db, restaurant_id=restaurant_id)
    return await _availability(db, restaurant)


@router.get("/availability", response_model=AvailabilityResponse)
async def get_invitation_availability(
    token: str,
    db: AsyncSession = Depends(get_db),
):
    """Booking configuration behind an invitation link"""
    restaurant = await _get_bookable_restaurant(db, token=token)
    return await _availability(db, restaurant)


@router.get("/restaurants", response_model=PublicRestaurantListResponse)
async def list_public_restaurants(
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(12, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    """Publicly listed restaurants by name, with whether each is open right now"""
    filters = [Restaurant.is_public == True, Restaurant.is_active == True]
    if search:
        filters.append(Restaurant.name.ilike(f"%{search}%"))

    total_result = await db.execute(select(func.count(Restaurant.id)).where(*filters))
    total = total_result.scalar()

    result = await db.execute(
        select(Restaurant)
        .where(*filters)
        .order_by(Restaurant.name.asc())
        .offset((page - 1) * page_size)
        .limit(page_size)
    )
    restaurants = result.scalars().all()

    now = local_now()
    ids = [restaurant.id for restaurant in restaurants]
    weekly = defaultdict(list)
    exceptional = defaultdict(list)
    if ids:
        rows = await db.execute(select(OpeningHours).where(OpeningHours.restaurant_id.in_(ids)))
        for entry in rows.scalars().all():
            weekly[entry.restaurant_id].append(entry)
        rows = await db.execute(
            select(ExceptionalDate).where(
                ExceptionalDate.restaurant_id.in_(ids),
                ExceptionalDate.date == now.date(),
            )
        )
        for entry in rows.scalars().all():
            exceptional[entry.restaurant_id].append(entry)

    items = []
    for restaurant in restaurants:
        window = resolve_hours(
            now.date(),
            weekly[restaurant.id],
            exceptional[restaurant.id],
            default_open=settings.default_open_time,
            default_close=settings.default_close_time,
        )
        current = format_hhmm(now)
        items.append(
            PublicRestaurantSummary(
                id=restaurant.id,
                name=restaurant.name,
                address=restaurant.address,
                description=restaurant.description,
                is_open_now=window.is_open and window.open_time <= current < window.close_time,
            )
        )

    return PublicRestaurantListResponse(items=items, total=total, page=page, page_size=page_size)


@router.get("/floor_plans", response_model=PublicFloorPlansResponse)
async def get_invitation_floor_plans(
    token: str,
    db: AsyncSession = Depends(get_db),
):
    """Active floor plans behind an invitation link, for picking a table"""
    restaurant = await _get_bookable_restaurant(db, token=token)
    response = PublicFloorPlansResponse(
        has_visual_layout=bool(restaurant.has_visual_layout),
        restaurant_name=restaurant.name,
    )
    if not restaurant.has_visual_layout:
        return response

    result = await db.execute(
        select(FloorPlan)
        .where(FloorPlan.restaurant_id == restaurant.id, FloorPlan.is_active == True)
        .order_by(FloorPlan.order.asc(), FloorPlan.created_at.asc())
    )
    response.floor_plans = [PublicFloorPlan.model_validate(plan) for plan in result.scalars().all()]
    return response


@router.get("/restaurants/{restaurant_id}/slots", response_model=SlotsResponse)
async def get_slots(
    restaurant_id: UUID,
    day: date = Query(..., alias="date"),
    token: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
):
    """Bookable start times of one date, each flagged with remaining capacity"""
    restaurant = await _get_bookable_restaurant(db, restaurant_id=restaurant_id, token=token)
    if restaurant.id != restaurant_id:
        raise HTTPException(status_code=404, detail="Restaurant not found")

    window = await _resolve_day(db, restaurant, day)
    response = SlotsResponse(
        date=day,
        is_open=window.is_open,
        open_time=window.open_time,
        close_time=window.close_time,
        reservation_duration=restaurant.reservation_duration,
        slot_granularity=restaurant.slot_granularity,
    )
    if not window.is_open:
        return response

    slots = generate_slots(
        day,
        window,
        restaurant.reservation_duration,
        restaurant.slot_granularity,
        restaurant.min_advance_minutes,
        now=local_now(),
    )

    day_start = datetime.combine(day, time.min)
    result = await db.execute(
        select(Reservation).where(
            Reservation.restaurant_id == restaurant.id,
            Reservation.status.in_(ACTIVE_STATUS_VALUES),
            overlap_filter(day_start, day_start + timedelta(days=1)),
        )
    )
    reservations = result.scalars().all()

    response.slots = [
        AvailabilitySlot(time=start, available=available)
        for start, available in annotate_slots(
            day,
            slots,
            restaurant.reservation_duration,
            reservations,
            restaurant.max_simultaneous_reservations,
        )
    ]
    return response


@router.post("/reservations", response_model=PublicReservationResponse, status_code=201)
async def create_public_reservation(
    reservation_data: PublicReservationCreate,
    db: AsyncSession = Depends(get_db),
):
    """Book a table as a guest, through an invitation link or the public listing"""
    restaurant = await _get_bookable_restaurant(
        db,
        restaurant_id=reservation_data.restaurant_id,
        token=reservation_data.invitation_token,
    )
    restaurant = await lock_restaurant(db, restaurant.id)

    invitation = None
    if reservation_data.invitation_token:
        invitation = await _get_invitation(db, reservation_data.invitation_token)
        existing = await db.execute(
            select(Reservation.id).where(Reservation.invitation_id == invitation.id)
        )
        if existing.scalar_one_or_none():
            raise HTTPException(
                status_code=400,
                detail="A reservation already exists for this invitation",
            )

    time_from = as_local_naive(reservation_data.time_from)
    day = time_from.date()

    try:
        window = await _resolve_day(db, restaurant, day)
        bookable = (
            window.is_open
            and time_from.second == 0
            and time_from.microsecond == 0
            and format_hhmm(time_from) in generate_slots(
                day,
                window,
                restaurant.reservation_duration,
                restaurant.slot_granularity,
                restaurant.min_advance_minutes,
                now=local_now(),
            )
        )
        time_to = slot_interval(day, format_hhmm(time_from), restaurant.reservation_duration)[1]
    except SchedulingError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if not bookable:
        raise HTTPException(
            status_code=400,
            detail="The restaurant does not take reservations at the requested time",
        )

    if reservation_data.time_to is not None and as_local_naive(reservation_data.time_to) != time_to:
        raise HTTPException(
            status_code=400,
            detail=f"Reservations last {restaurant.reservation_duration} minutes",
        )

    admission = await admit_or_raise(
        db,
        restaurant,
        time_from,
        time_to,
        table_id=reservation_data.table_id,
        enforce_ceiling=True,
    )

    status = (
        ReservationStatus.CONFIRMED
        if restaurant.auto_confirm_reservations
        else ReservationStatus.PENDING
    )
    reservation = Reservation(
        restaurant_id=restaurant.id,
        invitation_id=invitation.id if invitation else None,
        table_id=admission.table_id,
        guest_name=reservation_data.guest_name,
        guest_contact=reservation_data.guest_contact,
        number_of_people=reservation_data.number_of_people,
        time_from=time_from,
        time_to=time_to,
        status=status.value,
        confirmation_code=generate_confirmation_code(),
    )
    db.add(reservation)

    if invitation:
        invitation.status = InvitationStatus.COMPLETED.value

    await db.commit()
    await db.refresh(reservation)

    logger.info(
        "Guest reservation created",
        restaurant_id=str(restaurant.id),
        reservation_id=str(reservation.id),
        status=reservation.status,
        table_id=reservation.table_id,
        via_invitation=invitation is not None,
    )
    return PublicReservationResponse(
        reservation=ReservationResponse.model_validate(reservation),
        requires_approval=status == ReservationStatus.PENDING,
    )
