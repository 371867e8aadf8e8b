"""Pydantic schemas for club reviews."""

import uuid
from datetime import datetime
from typing import Optional

from libs.common.pagination import Pagination
from pydantic import BaseModel, ConfigDict, Field
from services.members_service.schemas import UserSummary


class ReviewCreate(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    content: Optional[str] = Field(None, max_length=2000)


class ReviewResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    club_id: uuid.UUID
    rating: int
    content: Optional[str] = None
    created_at: datetime
    user: UserSummary


class ReviewStats(BaseModel):
    average_rating: Optional[float] = None
    total_reviews: int = 0
    # Keys are "1".."5"; every star is present even when zero.
    distribution: dict[str, int]


class ReviewListResponse(BaseModel):
    data: list[ReviewResponse]
    pagination: Pagination
    stats: ReviewStats


class ReviewEnvelope(BaseModel):
    data: ReviewResponse
    message: str
