"""Mapping from token identities to directory users."""

from typing import Optional

from fastapi import Depends
from libs.auth.dependencies import get_current_user
from libs.auth.models import AuthUser
from libs.common.errors import NotFoundError
from libs.common.logging import get_logger
from libs.db.session import atomic, get_async_db
from services.members_service.models import User
from services.members_service.schemas import UserProfileUpdate
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


async def get_user_by_auth_id(db: AsyncSession, auth_id: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.auth_id == auth_id))
    return result.scalar_one_or_none()


async def resolve_caller(db: AsyncSession, current_user: AuthUser) -> User:
    """Return the User row for the token subject, or 404 if never synced."""
    user = await get_user_by_auth_id(db, current_user.user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


async def upsert_profile(
    db: AsyncSession,
    current_user: AuthUser,
    profile_in: Optional[UserProfileUpdate] = None,
) -> tuple[User, bool]:
    """Create or refresh the caller's User row.

    Token claims seed the row; explicit fields in ``profile_in`` win over
    claims. Returns ``(user, created)``.
    """
    claims = {
        "email": current_user.email,
        "username": current_user.username,
        "first_name": current_user.first_name,
        "last_name": current_user.last_name,
        "image_url": current_user.image_url,
    }
    explicit = {}
    if profile_in is not None:
        explicit = profile_in.model_dump(mode="json", exclude_unset=True)

    async with atomic(db):
        user = await get_user_by_auth_id(db, current_user.user_id)
        created = user is None
        if created:
            user = User(auth_id=current_user.user_id)
            db.add(user)
        for field, value in claims.items():
            if value is not None:
                setattr(user, field, value)
        for field, value in explicit.items():
            setattr(user, field, value)

    if created:
        logger.info("Created user for auth subject %s", current_user.user_id)
    await db.refresh(user)
    return user, created


async def get_caller(
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
) -> User:
    """FastAPI dependency: the authenticated caller's User row."""
    return await resolve_caller(db, current_user)
