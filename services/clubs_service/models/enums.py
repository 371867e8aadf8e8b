"""Enum definitions for clubs service models."""

import enum


class SkillLevel(str, enum.Enum):
    BEGINNER = "BEGINNER"
    INTERMEDIATE = "INTERMEDIATE"
    ADVANCED = "ADVANCED"
    ELITE = "ELITE"


class ClubSortField(str, enum.Enum):
    NAME = "name"
    CREATED_AT = "createdAt"
    DISTANCE = "distance"


class SortOrder(str, enum.Enum):
    ASC = "asc"
    DESC = "desc"


class ReviewSortField(str, enum.Enum):
    CREATED_AT = "createdAt"
    RATING = "rating"
