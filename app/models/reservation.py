"""Reservation models"""

import enum
import uuid
from datetime import datetime
from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, Text, Index
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from app.database import Base


class ReservationStatus(str, enum.Enum):
    """Reservation lifecycle states"""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    SEATED = "seated"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class InvitationStatus(str, enum.Enum):
    PENDING = "pending"
    COMPLETED = "completed"


class Reservation(Base):
    """Table reservations"""
    __tablename__ = "reservations"
    __table_args__ = (
        Index("ix_reservations_restaurant_time", "restaurant_id", "time_from", "time_to"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    restaurant_id = Column(UUID(as_uuid=True), ForeignKey("restaurants.id"), nullable=False)
    invitation_id = Column(UUID(as_uuid=True), ForeignKey("reservation_invitations.id"), unique=True)

    # Null means unassigned: staff must pick a table manually
    table_id = Column(String(50))

    # Guest information
    guest_name = Column(String(255), nullable=False)
    guest_contact = Column(String(255), nullable=False)
    number_of_people = Column(Integer, nullable=False)

    # Booked interval, half-open [time_from, time_to)
    time_from = Column(DateTime, nullable=False)
    time_to = Column(DateTime, nullable=False)

    status = Column(String(20), nullable=False, default=ReservationStatus.PENDING.value)
    confirmation_code = Column(String(8))
    notes = Column(Text)

    # Metadata
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    restaurant = relationship("Restaurant", back_populates="reservations")
    invitation = relationship("ReservationInvitation", back_populates="reservation")


class ReservationInvitation(Base):
    """Single-use booking link handed to a guest"""
    __tablename__ = "reservation_invitations"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    restaurant_id = Column(UUID(as_uuid=True), ForeignKey("restaurants.id"), nullable=False)
    token = Column(String(64), unique=True, nullable=False)
    guest_contact = Column(String(255))
    status = Column(String(20), nullable=False, default=InvitationStatus.PENDING.value)
    expires_at = Column(DateTime)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    restaurant = relationship("Restaurant", back_populates="invitations")
    reservation = relationship("Reservation", back_populates="invitation", uselist=False)
