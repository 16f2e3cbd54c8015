"""Floor plan schemas"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID
from pydantic import BaseModel, Field


class FloorPlanCreate(BaseModel):
    """Create floor plan request"""
    name: str = Field(min_length=1, max_length=50)
    order: Optional[int] = Field(default=None, ge=0)
    width: int = Field(default=800, ge=400, le=2000)
    height: int = Field(default=600, ge=300, le=1500)
    elements: List[Dict[str, Any]] = []
    is_active: bool = True


class FloorPlanUpdate(BaseModel):
    """Update floor plan request"""
    name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    order: Optional[int] = Field(default=None, ge=0)
    width: Optional[int] = Field(default=None, ge=400, le=2000)
    height: Optional[int] = Field(default=None, ge=300, le=1500)
    elements: Optional[List[Dict[str, Any]]] = None
    is_active: Optional[bool] = None


class FloorPlanResponse(BaseModel):
    """Floor plan response"""
    id: UUID
    restaurant_id: UUID
    name: str
    order: int
    width: int
    height: int
    elements: List[Dict[str, Any]]
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class FloorPlanChangeResponse(BaseModel):
    """Floor plan after an edit, with the reservations moved by it"""
    floor_plan: Optional[FloorPlanResponse] = None
    table_layout: List[str]
    migrated_count: int = 0
    unassigned_reservation_ids: List[UUID] = []
