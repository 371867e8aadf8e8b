"""Clubs Service models package."""

from services.clubs_service.models.club import Club, Review  # noqa: F401
from services.clubs_service.models.enums import (  # noqa: F401
    ClubSortField,
    ReviewSortField,
    SkillLevel,
    SortOrder,
)

__all__ = [
    "Club",
    "ClubSortField",
    "Review",
    "ReviewSortField",
    "SkillLevel",
    "SortOrder",
]
