"""Club create, read, update and delete."""

import uuid

from libs.common.errors import AuthorizationError, ConflictError
from libs.common.geo import round_to_tenth
from libs.common.logging import get_logger
from libs.db.session import atomic
from services.clubs_service.models import Club, Review
from services.clubs_service.schemas import ClubCreate, ClubDetail, ClubUpdate
from services.clubs_service.services.search import rating_stats
from services.clubs_service.services.slugs import unique_slug
from services.equipment_service.models import Equipment, EquipmentCheckout
from services.members_service.models import ADMIN_ROLES, ClubMember, ClubRole, User
from services.members_service.services.membership import caller_role, get_club_or_404
from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


async def club_detail(db: AsyncSession, club: Club) -> ClubDetail:
    stats = await rating_stats(db, [club.id])
    member_count = await db.scalar(
        select(func.count(ClubMember.id)).where(
            ClubMember.club_id == club.id, ClubMember.is_active.is_(True)
        )
    )

    detail = ClubDetail.model_validate(club)
    detail.member_count = member_count or 0
    if club.id in stats:
        average, count = stats[club.id]
        detail.average_rating = round_to_tenth(average)
        detail.review_count = count
    return detail


async def create_club(db: AsyncSession, caller: User, club_in: ClubCreate) -> Club:
    """Create a club; the caller becomes its OWNER in the same transaction."""
    values = club_in.model_dump(mode="json")
    # Read before the loop: a rolled-back attempt expires the caller.
    caller_id = caller.id

    # A concurrent create of the same name can commit our slug first; the
    # second attempt sees it and takes the next suffix.
    for attempt in range(2):
        try:
            async with atomic(db):
                club = Club(**values, slug=await unique_slug(db, club_in.name))
                db.add(club)
                await db.flush()
                db.add(
                    ClubMember(
                        club_id=club.id,
                        user_id=caller_id,
                        role=ClubRole.OWNER,
                        is_active=True,
                    )
                )
        except ConflictError:
            if attempt:
                raise
            logger.info("Slug for %r was taken concurrently, retrying", club_in.name)
        else:
            break

    logger.info("Club %s created by user %s", club.slug, caller_id)
    return club


async def update_club(
    db: AsyncSession, club_id: uuid.UUID, caller: User, club_in: ClubUpdate
) -> Club:
    club = await get_club_or_404(db, club_id)
    if await caller_role(db, club_id, caller.id) not in ADMIN_ROLES:
        raise AuthorizationError("Only club owners and admins can edit the club")

    update_data = club_in.model_dump(mode="json", exclude_unset=True)

    async with atomic(db):
        new_name = update_data.get("name")
        if new_name and new_name != club.name:
            club.slug = await unique_slug(db, new_name, exclude_id=club.id)
        for field, value in update_data.items():
            setattr(club, field, value)

    await db.refresh(club)
    return club


async def delete_club(db: AsyncSession, club_id: uuid.UUID, caller: User) -> None:
    """Hard-delete the club and everything hanging off it. OWNER only."""
    await get_club_or_404(db, club_id)
    if await caller_role(db, club_id, caller.id) != ClubRole.OWNER:
        raise AuthorizationError("Only the club owner can delete the club")

    equipment_ids = select(Equipment.id).where(Equipment.club_id == club_id)
    async with atomic(db):
        await db.execute(
            delete(EquipmentCheckout).where(
                EquipmentCheckout.equipment_id.in_(equipment_ids)
            )
        )
        await db.execute(delete(Equipment).where(Equipment.club_id == club_id))
        await db.execute(delete(ClubMember).where(ClubMember.club_id == club_id))
        await db.execute(delete(Review).where(Review.club_id == club_id))
        await db.execute(delete(Club).where(Club.id == club_id))

    logger.info("Club %s deleted by user %s", club_id, caller.id)
