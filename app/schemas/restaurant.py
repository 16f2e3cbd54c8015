"""Restaurant schemas"""

from datetime import date, datetime
from typing import Optional, List
from uuid import UUID
from pydantic import BaseModel, Field, model_validator

from app.scheduling.hours import validate_window

HHMM_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class RestaurantCreate(BaseModel):
    """Create restaurant request"""
    name: str = Field(min_length=1, max_length=255)
    address: Optional[str] = None
    description: Optional[str] = None
    is_public: bool = True
    max_simultaneous_reservations: Optional[int] = Field(default=None, ge=1)
    reservation_duration: Optional[int] = Field(default=None, ge=30, le=480)
    slot_granularity: Optional[int] = Field(default=None, ge=5, le=60)


class RestaurantConfigUpdate(BaseModel):
    """Update booking configuration"""
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    address: Optional[str] = None
    description: Optional[str] = None
    is_public: Optional[bool] = None
    max_simultaneous_reservations: Optional[int] = Field(default=None, ge=1)
    reservation_duration: Optional[int] = Field(default=None, ge=30, le=480)
    slot_granularity: Optional[int] = Field(default=None, ge=5, le=60)
    min_advance_minutes: Optional[int] = Field(default=None, ge=0, le=1440)
    auto_confirm_reservations: Optional[bool] = None
    # Only accepted while the restaurant has no active floor plan
    table_layout: Optional[List[str]] = None


class RestaurantResponse(BaseModel):
    """Restaurant response"""
    id: UUID
    owner_id: UUID
    name: str
    address: Optional[str]
    description: Optional[str]
    is_public: bool
    table_layout: List[str]
    has_visual_layout: bool
    max_simultaneous_reservations: int
    reservation_duration: int
    slot_granularity: int
    min_advance_minutes: int
    auto_confirm_reservations: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class HoursFields(BaseModel):
    is_open: bool
    open_time: Optional[str] = Field(default=None, pattern=HHMM_PATTERN)
    close_time: Optional[str] = Field(default=None, pattern=HHMM_PATTERN)

    @model_validator(mode="after")
    def check_window(self):
        validate_window(self.is_open, self.open_time, self.close_time)
        return self


class OpeningHoursEntry(HoursFields):
    """Opening hours of one weekday (0=Sunday .. 6=Saturday)"""
    day_of_week: int = Field(ge=0, le=6)


class OpeningHoursUpdate(BaseModel):
    """Upsert opening hours by weekday"""
    hours: List[OpeningHoursEntry]


class OpeningHoursResponse(BaseModel):
    day_of_week: int
    is_open: bool
    open_time: Optional[str]
    close_time: Optional[str]

    class Config:
        from_attributes = True


class ExceptionalDateCreate(HoursFields):
    """Add or replace the override of one date"""
    date: date
    note: Optional[str] = Field(default=None, max_length=255)


class ExceptionalDateResponse(BaseModel):
    id: UUID
    date: date
    is_open: bool
    open_time: Optional[str]
    close_time: Optional[str]
    note: Optional[str]

    class Config:
        from_attributes = True


class AvailableTablesResponse(BaseModel):
    """Tables free and taken for an interval"""
    all_tables: List[str]
    available_tables: List[str]
    occupied_tables: List[str]
