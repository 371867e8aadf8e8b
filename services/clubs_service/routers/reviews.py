"""Club review routes."""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from libs.common.config import get_settings
from libs.db.session import get_async_db
from services.clubs_service.models import ReviewSortField, SortOrder
from services.clubs_service.schemas import (
    ReviewCreate,
    ReviewEnvelope,
    ReviewListResponse,
    ReviewResponse,
)
from services.clubs_service.services import reviews as review_service
from services.members_service.models import User
from services.members_service.services.users import get_caller
from sqlalchemy.ext.asyncio import AsyncSession

settings = get_settings()
router = APIRouter(prefix="/clubs/{club_id}/reviews", tags=["reviews"])


@router.get("", response_model=ReviewListResponse)
async def list_club_reviews(
    club_id: uuid.UUID,
    rating: Optional[int] = Query(None, ge=1, le=5),
    sort_by: ReviewSortField = Query(ReviewSortField.CREATED_AT, alias="sortBy"),
    sort_order: SortOrder = Query(SortOrder.DESC, alias="sortOrder"),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    db: AsyncSession = Depends(get_async_db),
):
    reviews, pagination, stats = await review_service.list_reviews(
        db,
        club_id,
        rating=rating,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        limit=limit,
    )
    return ReviewListResponse(
        data=[ReviewResponse.model_validate(r) for r in reviews],
        pagination=pagination,
        stats=stats,
    )


@router.post("", response_model=ReviewEnvelope, status_code=status.HTTP_201_CREATED)
async def create_club_review(
    club_id: uuid.UUID,
    review_in: ReviewCreate,
    caller: User = Depends(get_caller),
    db: AsyncSession = Depends(get_async_db),
):
    review = await review_service.create_review(db, club_id, caller, review_in)
    return ReviewEnvelope(
        data=ReviewResponse.model_validate(review),
        message="Review created successfully",
    )
