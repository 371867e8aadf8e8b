"""Club membership lifecycle and role checks.

Roles are looked up from the store on every call. Nothing is cached between
requests, so a demotion takes effect on the caller's next request.
"""

import uuid
from dataclasses import dataclass
from typing import Optional

from libs.common.errors import ConflictError, NotFoundError, ValidationError
from libs.common.logging import get_logger
from libs.common.pagination import Pagination, offset_for, paginate
from libs.db.session import atomic
from services.clubs_service.models import Club
from services.members_service.models import (
    ADMIN_ROLES,
    ROLE_RANK,
    ClubMember,
    ClubRole,
    User,
)
from sqlalchemy import case, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


@dataclass
class MembershipResult:
    membership: ClubMember
    created: bool
    message: str


async def get_club_or_404(db: AsyncSession, club_id: uuid.UUID) -> Club:
    club = await db.get(Club, club_id)
    if club is None:
        raise NotFoundError("Club not found")
    return club


async def load_membership(
    db: AsyncSession, club_id: uuid.UUID, user_id: uuid.UUID
) -> Optional[ClubMember]:
    """The (user, club) row whether active or not."""
    result = await db.execute(
        select(ClubMember).where(
            ClubMember.club_id == club_id, ClubMember.user_id == user_id
        )
    )
    return result.scalar_one_or_none()


async def load_caller_membership(
    db: AsyncSession, club_id: uuid.UUID, user_id: uuid.UUID
) -> Optional[ClubMember]:
    """The caller's *active* membership, or None."""
    membership = await load_membership(db, club_id, user_id)
    if membership is None or not membership.is_active:
        return None
    return membership


async def caller_role(
    db: AsyncSession, club_id: uuid.UUID, user_id: uuid.UUID
) -> Optional[ClubRole]:
    membership = await load_caller_membership(db, club_id, user_id)
    return membership.role if membership else None


async def has_role(
    db: AsyncSession,
    club_id: uuid.UUID,
    user_id: uuid.UUID,
    roles: frozenset,
) -> bool:
    return await caller_role(db, club_id, user_id) in roles


async def join(db: AsyncSession, club_id: uuid.UUID, caller: User) -> MembershipResult:
    """Self-service join: create a MEMBER row or reactivate an inactive one."""
    club = await get_club_or_404(db, club_id)
    if not club.is_active:
        raise ConflictError("Club is not accepting members")

    async with atomic(db):
        membership = await load_membership(db, club_id, caller.id)
        if membership is not None and membership.is_active:
            raise ConflictError("You are already a member of this club")

        if membership is None:
            membership = ClubMember(
                club_id=club_id,
                user_id=caller.id,
                role=ClubRole.MEMBER,
                is_active=True,
            )
            db.add(membership)
            created = True
        else:
            # Rejoining keeps the previous role.
            membership.is_active = True
            created = False

    logger.info(
        "User %s joined club %s (%s)",
        caller.id,
        club_id,
        "new" if created else "reactivated",
    )
    return MembershipResult(
        membership=await _reload(db, membership.id),
        created=created,
        message="Joined club successfully",
    )


async def admin_add(
    db: AsyncSession,
    club_id: uuid.UUID,
    target_user_id: Optional[uuid.UUID],
    role: Optional[ClubRole] = None,
) -> MembershipResult:
    """Add a user to the club, or change an existing member's role.

    The caller must already have been checked for OWNER/ADMIN. An existing
    row is updated in place and forced active.
    """
    if target_user_id is None:
        raise ValidationError(
            "user_id is required", errors={"user_id": ["Field required"]}
        )
    role = role or ClubRole.MEMBER

    if await db.get(User, target_user_id) is None:
        raise NotFoundError("User not found")

    async with atomic(db):
        membership = await load_membership(db, club_id, target_user_id)
        if membership is None:
            membership = ClubMember(
                club_id=club_id,
                user_id=target_user_id,
                role=role,
                is_active=True,
            )
            db.add(membership)
            created = True
        else:
            membership.role = role
            membership.is_active = True
            created = False

    logger.info("Set user %s to %s in club %s", target_user_id, role.value, club_id)
    return MembershipResult(
        membership=await _reload(db, membership.id),
        created=created,
        message="Member added" if created else "Member updated",
    )


async def join_or_add(
    db: AsyncSession,
    club_id: uuid.UUID,
    caller: User,
    target_user_id: Optional[uuid.UUID] = None,
    role: Optional[ClubRole] = None,
) -> MembershipResult:
    """``POST /clubs/{id}/members``.

    Club admins add or update other users; everyone else joins themselves
    and the body is ignored.
    """
    await get_club_or_404(db, club_id)
    caller_membership = await load_caller_membership(db, club_id, caller.id)

    if caller_membership is not None and caller_membership.role in ADMIN_ROLES:
        return await admin_add(db, club_id, target_user_id, role)
    return await join(db, club_id, caller)


async def leave(db: AsyncSession, club_id: uuid.UUID, caller: User) -> ClubMember:
    await get_club_or_404(db, club_id)

    async with atomic(db):
        membership = await load_membership(db, club_id, caller.id)
        if membership is None:
            raise NotFoundError("You are not a member of this club")
        if not membership.is_active:
            raise ConflictError("You have already left this club")
        if membership.role == ClubRole.OWNER:
            raise ConflictError(
                "Club owners cannot leave; transfer ownership first"
            )
        membership.is_active = False

    logger.info("User %s left club %s", caller.id, club_id)
    return membership


async def list_members(
    db: AsyncSession,
    club_id: uuid.UUID,
    role: Optional[ClubRole] = None,
    search: Optional[str] = None,
    page: int = 1,
    limit: int = 20,
) -> tuple[list[ClubMember], Pagination]:
    """Active members, most senior role first, then by join date."""
    await get_club_or_404(db, club_id)

    query = (
        select(ClubMember)
        .join(User, User.id == ClubMember.user_id)
        .where(ClubMember.club_id == club_id, ClubMember.is_active.is_(True))
    )
    if role is not None:
        query = query.where(ClubMember.role == role)
    if search:
        query = query.where(
            or_(
                User.username.icontains(search, autoescape=True),
                User.first_name.icontains(search, autoescape=True),
                User.last_name.icontains(search, autoescape=True),
                User.email.icontains(search, autoescape=True),
            )
        )

    total = await db.scalar(select(func.count()).select_from(query.subquery()))

    rank = case(
        {member_role.value: rank for member_role, rank in ROLE_RANK.items()},
        value=ClubMember.role,
    )
    result = await db.execute(
        query.order_by(rank, ClubMember.joined_at, ClubMember.id)
        .offset(offset_for(page, limit))
        .limit(limit)
    )
    return list(result.scalars().all()), paginate(page, limit, total or 0)


async def _reload(db: AsyncSession, membership_id: uuid.UUID) -> ClubMember:
    result = await db.execute(
        select(ClubMember)
        .where(ClubMember.id == membership_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one()
