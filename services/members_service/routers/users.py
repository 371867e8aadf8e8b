"""Caller profile routes."""

from typing import Optional

from fastapi import APIRouter, Body, Depends, Response, status
from libs.auth.dependencies import get_current_user
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.members_service.models import User
from services.members_service.schemas import UserProfileUpdate, UserResponse
from services.members_service.services.users import get_caller, upsert_profile
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserResponse)
async def get_my_profile(caller: User = Depends(get_caller)):
    return caller


@router.put("/me", response_model=UserResponse)
async def sync_my_profile(
    response: Response,
    profile_in: Optional[UserProfileUpdate] = Body(None),
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Create or refresh the caller's profile from token claims and the body."""
    user, created = await upsert_profile(db, current_user, profile_in)
    if created:
        response.status_code = status.HTTP_201_CREATED
    return user
