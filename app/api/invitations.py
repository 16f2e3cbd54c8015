"""Guest invitation API endpoints"""

import secrets
from datetime import datetime, timedelta
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import get_db
from app.models.reservation import ReservationInvitation, InvitationStatus
from app.models.user import User
from app.schemas.reservation import InvitationCreate, InvitationResponse
from app.api.auth import get_current_active_user, verify_restaurant_access

router = APIRouter()


@router.get("", response_model=List[InvitationResponse])
async def list_invitations(
    restaurant_id: UUID,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """List booking links, newest first"""
    await verify_restaurant_access(restaurant_id, current_user, db)

    result = await db.execute(
        select(ReservationInvitation)
        .where(ReservationInvitation.restaurant_id == restaurant_id)
        .order_by(ReservationInvitation.created_at.desc())
    )
    return result.scalars().all()


@router.post("", response_model=InvitationResponse, status_code=201)
async def create_invitation(
    restaurant_id: UUID,
    invitation_data: InvitationCreate,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Create a single-use booking link token"""
    await verify_restaurant_access(restaurant_id, current_user, db)

    expires_in_days = invitation_data.expires_in_days or settings.invitation_expire_days
    invitation = ReservationInvitation(
        restaurant_id=restaurant_id,
        token=secrets.token_urlsafe(24),
        guest_contact=invitation_data.guest_contact,
        status=InvitationStatus.PENDING.value,
        expires_at=datetime.now() + timedelta(days=expires_in_days),
    )

    db.add(invitation)
    await db.commit()
    await db.refresh(invitation)

    return invitation
