"""Club membership routes: list, join, admin add and leave."""

import uuid
from typing import Optional

from fastapi import APIRouter, Body, Depends, Query, Response, status
from libs.common.config import get_settings
from libs.db.session import get_async_db
from services.members_service.models import ClubRole, User
from services.members_service.schemas import (
    MemberListResponse,
    MembershipEnvelope,
    MembershipRequest,
    MembershipResponse,
    MessageResponse,
)
from services.members_service.services import membership as membership_service
from services.members_service.services.users import get_caller
from sqlalchemy.ext.asyncio import AsyncSession

settings = get_settings()
router = APIRouter(prefix="/clubs/{club_id}", tags=["members"])


@router.get("/members", response_model=MemberListResponse)
async def list_club_members(
    club_id: uuid.UUID,
    role: Optional[ClubRole] = None,
    search: Optional[str] = Query(None, max_length=100),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    db: AsyncSession = Depends(get_async_db),
):
    """List a club's active members, owners and admins first."""
    members, pagination = await membership_service.list_members(
        db, club_id, role=role, search=search or None, page=page, limit=limit
    )
    return MemberListResponse(
        data=[MembershipResponse.model_validate(m) for m in members],
        pagination=pagination,
    )


@router.post("/members", response_model=MembershipEnvelope)
async def add_club_member(
    club_id: uuid.UUID,
    response: Response,
    payload: Optional[MembershipRequest] = Body(None),
    caller: User = Depends(get_caller),
    db: AsyncSession = Depends(get_async_db),
):
    """
    Join the club, or (as OWNER/ADMIN) add a user or change their role.

    Responds 201 when a membership row was created and 200 when an existing
    row was updated or reactivated.
    """
    payload = payload or MembershipRequest()
    result = await membership_service.join_or_add(
        db, club_id, caller, target_user_id=payload.user_id, role=payload.role
    )
    response.status_code = (
        status.HTTP_201_CREATED if result.created else status.HTTP_200_OK
    )
    return MembershipEnvelope(
        data=MembershipResponse.model_validate(result.membership),
        message=result.message,
    )


@router.post("/join", response_model=MembershipEnvelope)
async def join_club(
    club_id: uuid.UUID,
    response: Response,
    caller: User = Depends(get_caller),
    db: AsyncSession = Depends(get_async_db),
):
    result = await membership_service.join(db, club_id, caller)
    response.status_code = (
        status.HTTP_201_CREATED if result.created else status.HTTP_200_OK
    )
    return MembershipEnvelope(
        data=MembershipResponse.model_validate(result.membership),
        message=result.message,
    )


@router.delete("/leave", response_model=MessageResponse)
async def leave_club(
    club_id: uuid.UUID,
    caller: User = Depends(get_caller),
    db: AsyncSession = Depends(get_async_db),
):
    await membership_service.leave(db, club_id, caller)
    return MessageResponse(message="Left club successfully")
