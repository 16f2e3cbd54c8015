"""Restaurant-related models"""

import uuid
from datetime import datetime
from sqlalchemy import (
    Column,
    String,
    Integer,
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    JSON,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from app.database import Base


class Restaurant(Base):
    """Restaurant and the booking configuration the scheduler reads"""
    __tablename__ = "restaurants"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    owner_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), unique=True, nullable=False)
    name = Column(String(255), nullable=False)
    address = Column(Text)
    description = Column(Text)
    is_public = Column(Boolean, default=True)
    is_active = Column(Boolean, default=True)

    # Table identifiers, derived from the active floor plans when a visual layout exists
    table_layout = Column(JSON, default=list)
    has_visual_layout = Column(Boolean, default=False)

    # Booking rules
    max_simultaneous_reservations = Column(Integer, nullable=False, default=10)
    reservation_duration = Column(Integer, nullable=False, default=120)  # minutes
    slot_granularity = Column(Integer, nullable=False, default=15)  # minutes
    min_advance_minutes = Column(Integer, nullable=False, default=30)
    auto_confirm_reservations = Column(Boolean, default=False)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    owner = relationship("User", back_populates="restaurant")
    opening_hours = relationship(
        "OpeningHours",
        back_populates="restaurant",
        cascade="all, delete-orphan",
        order_by="OpeningHours.day_of_week",
    )
    exceptional_dates = relationship(
        "ExceptionalDate",
        back_populates="restaurant",
        cascade="all, delete-orphan",
        order_by="ExceptionalDate.date",
    )
    floor_plans = relationship("FloorPlan", back_populates="restaurant", cascade="all, delete-orphan")
    reservations = relationship("Reservation", back_populates="restaurant")
    invitations = relationship("ReservationInvitation", back_populates="restaurant")


class OpeningHours(Base):
    """Weekly opening hours, one row per weekday (0=Sunday .. 6=Saturday)"""
    __tablename__ = "opening_hours"
    __table_args__ = (UniqueConstraint("restaurant_id", "day_of_week"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    restaurant_id = Column(UUID(as_uuid=True), ForeignKey("restaurants.id"), nullable=False)
    day_of_week = Column(Integer, nullable=False)
    is_open = Column(Boolean, nullable=False, default=True)
    open_time = Column(String(5))  # "HH:MM"
    close_time = Column(String(5))

    # Relationships
    restaurant = relationship("Restaurant", back_populates="opening_hours")


class ExceptionalDate(Base):
    """Per-date override of the weekly schedule (holidays, private events)"""
    __tablename__ = "exceptional_dates"
    __table_args__ = (UniqueConstraint("restaurant_id", "date"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    restaurant_id = Column(UUID(as_uuid=True), ForeignKey("restaurants.id"), nullable=False)
    date = Column(Date, nullable=False)
    is_open = Column(Boolean, nullable=False, default=False)
    open_time = Column(String(5))
    close_time = Column(String(5))
    note = Column(String(255))
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    restaurant = relationship("Restaurant", back_populates="exceptional_dates")
