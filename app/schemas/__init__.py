"""Pydantic schemas for request/response validation"""

from app.schemas.auth import (
    Token,
    RefreshRequest,
    UserCreate,
    UserResponse,
)
from app.schemas.restaurant import (
    RestaurantCreate,
    RestaurantConfigUpdate,
    RestaurantResponse,
    OpeningHoursEntry,
    OpeningHoursUpdate,
    OpeningHoursResponse,
    ExceptionalDateCreate,
    ExceptionalDateResponse,
    AvailableTablesResponse,
)
from app.schemas.floor_plan import (
    FloorPlanCreate,
    FloorPlanUpdate,
    FloorPlanResponse,
    FloorPlanChangeResponse,
)
from app.schemas.reservation import (
    ManualReservationCreate,
    PublicReservationCreate,
    ReservationUpdate,
    ReservationResponse,
    ReservationListResponse,
    InvitationCreate,
    InvitationResponse,
    AvailabilitySlot,
    SlotsResponse,
    AvailabilityResponse,
    PublicReservationResponse,
    PublicRestaurantSummary,
    PublicRestaurantListResponse,
    PublicFloorPlan,
    PublicFloorPlansResponse,
)

__all__ = [
    "Token",
    "RefreshRequest",
    "UserCreate",
    "UserResponse",
    "RestaurantCreate",
    "RestaurantConfigUpdate",
    "RestaurantResponse",
    "OpeningHoursEntry",
    "OpeningHoursUpdate",
    "OpeningHoursResponse",
    "ExceptionalDateCreate",
    "ExceptionalDateResponse",
    "AvailableTablesResponse",
    "FloorPlanCreate",
    "FloorPlanUpdate",
    "FloorPlanResponse",
    "FloorPlanChangeResponse",
    "ManualReservationCreate",
    "PublicReservationCreate",
    "ReservationUpdate",
    "ReservationResponse",
    "ReservationListResponse",
    "InvitationCreate",
    "InvitationResponse",
    "AvailabilitySlot",
    "SlotsResponse",
    "AvailabilityResponse",
    "PublicReservationResponse",
    "PublicRestaurantSummary",
    "PublicRestaurantListResponse",
    "PublicFloorPlan",
    "PublicFloorPlansResponse",
]
