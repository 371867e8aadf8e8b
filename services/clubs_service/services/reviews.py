"""Club reviews and their rating summary."""

import uuid
from typing import Optional

from libs.common.errors import ConflictError
from libs.common.geo import round_to_tenth
from libs.common.logging import get_logger
from libs.common.pagination import Pagination, offset_for, paginate
from libs.db.session import atomic
from services.clubs_service.models import Review, ReviewSortField, SortOrder
from services.clubs_service.schemas import ReviewCreate, ReviewStats
from services.members_service.models import User
from services.members_service.services.membership import get_club_or_404
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


async def review_stats(db: AsyncSession, club_id: uuid.UUID) -> ReviewStats:
    result = await db.execute(
        select(Review.rating, func.count(Review.id))
        .where(Review.club_id == club_id)
        .group_by(Review.rating)
    )
    distribution = {str(star): 0 for star in range(1, 6)}
    for rating, count in result.all():
        distribution[str(rating)] = count

    total = sum(distribution.values())
    average = None
    if total:
        weighted = sum(int(star) * count for star, count in distribution.items())
        average = round_to_tenth(weighted / total)
    return ReviewStats(
        average_rating=average, total_reviews=total, distribution=distribution
    )


async def list_reviews(
    db: AsyncSession,
    club_id: uuid.UUID,
    rating: Optional[int] = None,
    sort_by: ReviewSortField = ReviewSortField.CREATED_AT,
    sort_order: SortOrder = SortOrder.DESC,
    page: int = 1,
    limit: int = 20,
) -> tuple[list[Review], Pagination, ReviewStats]:
    await get_club_or_404(db, club_id)

    query = select(Review).where(Review.club_id == club_id)
    if rating is not None:
        query = query.where(Review.rating == rating)

    total = await db.scalar(select(func.count()).select_from(query.subquery()))

    column = Review.rating if sort_by == ReviewSortField.RATING else Review.created_at
    ordering = column.desc() if sort_order == SortOrder.DESC else column.asc()
    result = await db.execute(
        query.order_by(ordering, Review.id)
        .offset(offset_for(page, limit))
        .limit(limit)
    )

    return (
        list(result.scalars().all()),
        paginate(page, limit, total or 0),
        await review_stats(db, club_id),
    )


async def create_review(
    db: AsyncSession, club_id: uuid.UUID, caller: User, review_in: ReviewCreate
) -> Review:
    """One review per user per club; a second attempt is a conflict."""
    await get_club_or_404(db, club_id)

    existing = await db.scalar(
        select(Review.id).where(Review.club_id == club_id, Review.user_id == caller.id)
    )
    if existing is not None:
        raise ConflictError(
            "You have already reviewed this club. Update your existing review instead."
        )

    async with atomic(db):
        review = Review(
            club_id=club_id,
            user_id=caller.id,
            rating=review_in.rating,
            content=review_in.content,
        )
        db.add(review)

    await db.refresh(review, ["user"])
    logger.info("User %s reviewed club %s (%d)", caller.id, club_id, review.rating)
    return review
