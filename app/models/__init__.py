"""Database models"""

from app.models.user import User, UserRole
from app.models.restaurant import Restaurant, OpeningHours, ExceptionalDate
from app.models.floor_plan import FloorPlan
from app.models.reservation import (
    Reservation,
    ReservationInvitation,
    ReservationStatus,
    InvitationStatus,
)

__all__ = [
    "User",
    "UserRole",
    "Restaurant",
    "OpeningHours",
    "ExceptionalDate",
    "FloorPlan",
    "Reservation",
    "ReservationInvitation",
    "ReservationStatus",
    "InvitationStatus",
]
