"""Pydantic schemas for clubs."""

import uuid
from datetime import datetime
from typing import Optional

from libs.common.pagination import Pagination
from pydantic import BaseModel, ConfigDict, EmailStr, Field, HttpUrl, field_validator

# ============================================================================
# CLUB SCHEMAS
# ============================================================================


class ClubBase(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)
    description: Optional[str] = Field(None, max_length=5000)
    country: str = Field(..., min_length=2, max_length=100)
    city: str = Field(..., min_length=1, max_length=100)
    address: Optional[str] = Field(None, max_length=500)
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    founded_year: Optional[int] = Field(None, ge=1800, le=2100)
    website: Optional[HttpUrl] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=20)
    governing_body: Optional[str] = Field(None, max_length=100)
    image_url: Optional[HttpUrl] = None
    welcomes_beginners: bool = True


class ClubCreate(ClubBase):
    pass


class ClubUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    description: Optional[str] = Field(None, max_length=5000)
    country: Optional[str] = Field(None, min_length=2, max_length=100)
    city: Optional[str] = Field(None, min_length=1, max_length=100)
    address: Optional[str] = Field(None, max_length=500)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    founded_year: Optional[int] = Field(None, ge=1800, le=2100)
    website: Optional[HttpUrl] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=20)
    governing_body: Optional[str] = Field(None, max_length=100)
    image_url: Optional[HttpUrl] = None
    welcomes_beginners: Optional[bool] = None
    is_active: Optional[bool] = None

    @field_validator(
        "name",
        "country",
        "city",
        "latitude",
        "longitude",
        "welcomes_beginners",
        "is_active",
    )
    @classmethod
    def reject_null(cls, value):
        # Omit a field to leave it unchanged; these columns cannot be cleared.
        if value is None:
            raise ValueError("May not be null")
        return value


class ClubResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    slug: str
    description: Optional[str] = None
    country: str
    city: str
    address: Optional[str] = None
    latitude: float
    longitude: float
    founded_year: Optional[int] = None
    website: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    governing_body: Optional[str] = None
    image_url: Optional[str] = None
    welcomes_beginners: bool
    is_verified: bool
    is_active: bool
    created_at: datetime
    updated_at: datetime


class ClubSearchItem(ClubResponse):
    """A club as it appears in search results."""

    average_rating: Optional[float] = None
    distance: Optional[float] = None  # km, only when a center point was given


class ClubDetail(ClubResponse):
    average_rating: Optional[float] = None
    review_count: int = 0
    member_count: int = 0


class ClubListResponse(BaseModel):
    data: list[ClubSearchItem]
    pagination: Pagination


class NearbyClubsResponse(BaseModel):
    data: list[ClubSearchItem]
    count: int


class ClubEnvelope(BaseModel):
    data: ClubDetail
    message: str


class MessageResponse(BaseModel):
    message: str
