"""Reservation schemas"""

from datetime import date, datetime
from typing import Any, Dict, Optional, List
from uuid import UUID
from pydantic import BaseModel, Field

from app.models.reservation import ReservationStatus


class ManualReservationCreate(BaseModel):
    """Reservation entered by restaurant staff"""
    guest_name: str = Field(min_length=2, max_length=255)
    guest_contact: str = Field(min_length=5, max_length=255)
    number_of_people: int = Field(ge=1, le=100)
    time_from: datetime
    time_to: datetime
    table_id: Optional[str] = None
    notes: Optional[str] = None


class PublicReservationCreate(BaseModel):
    """Reservation submitted by a guest through a link or the public listing"""
    invitation_token: Optional[str] = None
    restaurant_id: Optional[UUID] = None
    guest_name: str = Field(min_length=1, max_length=255)
    guest_contact: str = Field(min_length=1, max_length=255)
    number_of_people: int = Field(ge=1, le=100)
    time_from: datetime
    time_to: Optional[datetime] = None  # derived from the reservation duration
    table_id: Optional[str] = None


class ReservationUpdate(BaseModel):
    """Update reservation request"""
    time_from: Optional[datetime] = None
    time_to: Optional[datetime] = None
    table_id: Optional[str] = None
    number_of_people: Optional[int] = Field(default=None, ge=1, le=100)
    status: Optional[ReservationStatus] = None
    notes: Optional[str] = None


class ReservationResponse(BaseModel):
    """Reservation response"""
    id: UUID
    restaurant_id: UUID
    invitation_id: Optional[UUID]
    table_id: Optional[str]
    guest_name: str
    guest_contact: str
    number_of_people: int
    time_from: datetime
    time_to: datetime
    status: str
    confirmation_code: Optional[str]
    notes: Optional[str]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ReservationListResponse(BaseModel):
    """Paginated reservation list"""
    items: List[ReservationResponse]
    total: int
    page: int
    page_size: int
    unassigned_count: int = 0


class InvitationCreate(BaseModel):
    """Create a guest booking link"""
    guest_contact: Optional[str] = None
    expires_in_days: Optional[int] = Field(default=None, ge=1, le=90)


class InvitationResponse(BaseModel):
    id: UUID
    restaurant_id: UUID
    token: str
    guest_contact: Optional[str]
    status: str
    expires_at: Optional[datetime]
    created_at: datetime

    class Config:
        from_attributes = True


class AvailabilitySlot(BaseModel):
    """Available time slot"""
    time: str
    available: bool


class SlotsResponse(BaseModel):
    """Bookable slots of one date"""
    date: date
    is_open: bool
    open_time: Optional[str] = None
    close_time: Optional[str] = None
    reservation_duration: int
    slot_granularity: int
    slots: List[AvailabilitySlot] = []


class PublicOpeningHours(BaseModel):
    day_of_week: int
    is_open: bool
    open_time: Optional[str]
    close_time: Optional[str]

    class Config:
        from_attributes = True


class PublicExceptionalDate(BaseModel):
    date: date
    is_open: bool
    open_time: Optional[str]
    close_time: Optional[str]
    note: Optional[str]

    class Config:
        from_attributes = True


class AvailabilityResponse(BaseModel):
    """Booking configuration for a guest link or public listing"""
    restaurant_id: UUID
    restaurant_name: str
    reservation_duration: int
    slot_granularity: int
    min_advance_minutes: int
    max_simultaneous_reservations: int
    table_layout: List[str] = []
    opening_hours: List[PublicOpeningHours] = []
    exceptional_dates: List[PublicExceptionalDate] = []


class PublicReservationResponse(BaseModel):
    reservation: ReservationResponse
    requires_approval: bool


class PublicRestaurantSummary(BaseModel):
    id: UUID
    name: str
    address: Optional[str] = None
    description: Optional[str] = None
    is_open_now: bool = False


class PublicRestaurantListResponse(BaseModel):
    """Paginated public restaurant listing"""
    items: List[PublicRestaurantSummary]
    total: int
    page: int
    page_size: int


class PublicFloorPlan(BaseModel):
    id: UUID
    name: str
    order: int
    width: int
    height: int
    elements: List[Dict[str, Any]]

    class Config:
        from_attributes = True


class PublicFloorPlansResponse(BaseModel):
    """Active floor plans a guest can pick a table from"""
    has_visual_layout: bool
    restaurant_name: str
    floor_plans: List[PublicFloorPlan] = []
