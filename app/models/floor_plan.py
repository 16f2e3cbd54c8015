"""Floor plan model"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Integer, Boolean, DateTime, ForeignKey, JSON
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from app.database import Base


class FloorPlan(Base):
    """A room of the restaurant with its visual elements"""
    __tablename__ = "floor_plans"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    restaurant_id = Column(UUID(as_uuid=True), ForeignKey("restaurants.id"), nullable=False)
    name = Column(String(50), nullable=False)
    order = Column(Integer, default=0)
    width = Column(Integer, default=800)
    height = Column(Integer, default=600)

    # [{"id": "el-1", "type": "table", "tableId": "T1", "x": 10, "y": 20, ...}, ...]
    elements = Column(JSON, default=list)
    is_active = Column(Boolean, default=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    restaurant = relationship("Restaurant", back_populates="floor_plans")
