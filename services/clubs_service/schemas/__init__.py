"""Clubs Service schemas package."""

from services.clubs_service.schemas.club import (  # noqa: F401
    ClubCreate,
    ClubDetail,
    ClubEnvelope,
    ClubListResponse,
    ClubResponse,
    ClubSearchItem,
    ClubUpdate,
    MessageResponse,
    NearbyClubsResponse,
)
from services.clubs_service.schemas.review import (  # noqa: F401
    ReviewCreate,
    ReviewEnvelope,
    ReviewListResponse,
    ReviewResponse,
    ReviewStats,
)
