"""Club search: text and attribute filters, geo radius, sorting, paging.

Two execution paths share one predicate:

- name/createdAt ordering runs entirely in the database with OFFSET/LIMIT.
- distance ordering needs the exact great-circle distance, so every club
  that passes the predicate (and the bounding-box pre-filter) is fetched,
  measured, trimmed to the radius, sorted and sliced in memory. Its
  ``total`` is the pre-filter count, which may slightly overcount clubs in
  the corners of the box.
"""

import uuid
from dataclasses import dataclass, field
from typing import Optional

from libs.common.config import get_settings
from libs.common.errors import ValidationError
from libs.common.geo import bounding_box, haversine_km, round_to_tenth
from libs.common.logging import get_logger
from libs.common.pagination import Pagination, offset_for, paginate
from services.clubs_service.models import (
    Club,
    ClubSortField,
    Review,
    SkillLevel,
    SortOrder,
)
from services.clubs_service.schemas import ClubSearchItem
from sqlalchemy import Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

settings = get_settings()
logger = get_logger(__name__)


@dataclass
class ClubSearchQuery:
    search: Optional[str] = None
    country: Optional[str] = None
    city: Optional[str] = None
    skill_level: Optional[SkillLevel] = None
    welcomes_beginners: Optional[bool] = None
    is_verified: Optional[bool] = None
    lat: Optional[float] = None
    lng: Optional[float] = None
    radius: float = field(default_factory=lambda: settings.DEFAULT_RADIUS_KM)
    page: int = 1
    limit: int = field(default_factory=lambda: settings.DEFAULT_PAGE_SIZE)
    sort_by: ClubSortField = ClubSortField.NAME
    sort_order: SortOrder = SortOrder.ASC

    def __post_init__(self):
        # Blank query-string values mean "no filter".
        self.search = (self.search or "").strip() or None
        self.country = (self.country or "").strip() or None
        self.city = (self.city or "").strip() or None

    @property
    def has_center(self) -> bool:
        return self.lat is not None and self.lng is not None

    def validate(self) -> None:
        """Raise ValidationError listing every bad field."""
        errors: dict[str, list[str]] = {}

        if self.page < 1:
            errors.setdefault("page", []).append("Must be at least 1")
        if self.limit < 1 or self.limit > settings.MAX_PAGE_SIZE:
            errors.setdefault("limit", []).append(
                f"Must be between 1 and {settings.MAX_PAGE_SIZE}"
            )
        if self.lat is not None and not -90 <= self.lat <= 90:
            errors.setdefault("lat", []).append("Must be between -90 and 90")
        if self.lng is not None and not -180 <= self.lng <= 180:
            errors.setdefault("lng", []).append("Must be between -180 and 180")
        if (self.lat is None) != (self.lng is None):
            missing = "lng" if self.lng is None else "lat"
            errors.setdefault(missing, []).append(
                "lat and lng must be supplied together"
            )
        if self.radius <= 0:
            errors.setdefault("radius", []).append("Must be greater than 0")
        if self.sort_by == ClubSortField.DISTANCE and not self.has_center:
            errors.setdefault("sortBy", []).append(
                "Sorting by distance requires lat and lng"
            )

        if errors:
            raise ValidationError("Invalid search parameters", errors=errors)


class ClubSearchEngine:
    """Stateless; one instance can serve every request."""

    async def search(
        self, db: AsyncSession, query: ClubSearchQuery
    ) -> tuple[list[ClubSearchItem], Pagination]:
        query.validate()
        stmt = self._filtered(query)

        if query.sort_by == ClubSortField.DISTANCE:
            return await self._search_by_distance(db, stmt, query)
        return await self._search_in_store(db, stmt, query)

    async def nearby(
        self,
        db: AsyncSession,
        lat: float,
        lng: float,
        radius: float,
        limit: int,
    ) -> list[ClubSearchItem]:
        """Closest active clubs within ``radius`` km, nearest first."""
        query = ClubSearchQuery(
            lat=lat,
            lng=lng,
            radius=radius,
            limit=limit,
            sort_by=ClubSortField.DISTANCE,
        )
        items, _ = await self.search(db, query)
        return items

    def _filtered(self, query: ClubSearchQuery) -> Select:
        stmt = select(Club).where(Club.is_active.is_(True))

        if query.search:
            term = query.search
            stmt = stmt.where(
                or_(
                    Club.name.icontains(term, autoescape=True),
                    Club.description.icontains(term, autoescape=True),
                    Club.city.icontains(term, autoescape=True),
                    Club.country.icontains(term, autoescape=True),
                )
            )
        if query.country:
            stmt = stmt.where(func.lower(Club.country) == query.country.lower())
        if query.city:
            stmt = stmt.where(Club.city.icontains(query.city, autoescape=True))
        if query.welcomes_beginners is not None:
            stmt = stmt.where(Club.welcomes_beginners.is_(query.welcomes_beginners))
        if query.is_verified is not None:
            stmt = stmt.where(Club.is_verified.is_(query.is_verified))
        # skill_level is accepted for API compatibility; clubs carry none.

        if query.has_center:
            box = bounding_box(query.lat, query.lng, query.radius)
            stmt = stmt.where(
                Club.latitude.between(box.min_lat, box.max_lat),
                Club.longitude.between(box.min_lng, box.max_lng),
            )
        return stmt

    async def _search_in_store(
        self, db: AsyncSession, stmt: Select, query: ClubSearchQuery
    ) -> tuple[list[ClubSearchItem], Pagination]:
        total = await db.scalar(select(func.count()).select_from(stmt.subquery()))

        column = Club.created_at if query.sort_by == ClubSortField.CREATED_AT else Club.name
        if query.sort_order == SortOrder.DESC:
            ordering = (column.desc(), Club.id.desc())
        else:
            ordering = (column.asc(), Club.id.asc())

        result = await db.execute(
            stmt.order_by(*ordering)
            .offset(offset_for(query.page, query.limit))
            .limit(query.limit)
        )
        clubs = list(result.scalars().all())

        distances = {}
        if query.has_center:
            distances = {
                club.id: haversine_km(query.lat, query.lng, club.latitude, club.longitude)
                for club in clubs
            }

        items = await self._enrich(db, clubs, distances)
        return items, paginate(query.page, query.limit, total or 0)

    async def _search_by_distance(
        self, db: AsyncSession, stmt: Select, query: ClubSearchQuery
    ) -> tuple[list[ClubSearchItem], Pagination]:
        candidates = list((await db.execute(stmt)).scalars().all())
        total = len(candidates)

        measured = []
        for club in candidates:
            km = haversine_km(query.lat, query.lng, club.latitude, club.longitude)
            if km <= query.radius:
                measured.append((km, club))

        measured.sort(
            key=lambda pair: (pair[0], pair[1].name),
            reverse=query.sort_order == SortOrder.DESC,
        )
        start = offset_for(query.page, query.limit)
        page = measured[start : start + query.limit]

        logger.debug(
            "Distance search: %d candidates, %d within %.1f km",
            total,
            len(measured),
            query.radius,
        )
        items = await self._enrich(
            db,
            [club for _, club in page],
            {club.id: km for km, club in page},
            max_distance=query.radius,
        )
        return items, paginate(query.page, query.limit, total)

    async def _enrich(
        self,
        db: AsyncSession,
        clubs: list[Club],
        distances: dict[uuid.UUID, float],
        max_distance: Optional[float] = None,
    ) -> list[ClubSearchItem]:
        ratings = await average_ratings(db, [club.id for club in clubs])
        items = []
        for club in clubs:
            item = ClubSearchItem.model_validate(club)
            item.average_rating = ratings.get(club.id)
            if club.id in distances:
                item.distance = round_to_tenth(distances[club.id])
                # Rounding up must not push a club past the radius it matched.
                if max_distance is not None and item.distance > max_distance:
                    item.distance = max_distance
            items.append(item)
        return items


async def rating_stats(
    db: AsyncSession, club_ids: list[uuid.UUID]
) -> dict[uuid.UUID, tuple[float, int]]:
    """``{club_id: (mean rating, review count)}`` for clubs that have reviews."""
    if not club_ids:
        return {}
    result = await db.execute(
        select(Review.club_id, func.avg(Review.rating), func.count(Review.id))
        .where(Review.club_id.in_(club_ids))
        .group_by(Review.club_id)
    )
    return {club_id: (float(avg), count) for club_id, avg, count in result.all()}


async def average_ratings(
    db: AsyncSession, club_ids: list[uuid.UUID]
) -> dict[uuid.UUID, float]:
    """Mean rating per club, half-up to one decimal. Unreviewed clubs are absent."""
    stats = await rating_stats(db, club_ids)
    return {club_id: round_to_tenth(avg) for club_id, (avg, _) in stats.items()}
