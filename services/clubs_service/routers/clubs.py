"""Club directory routes: search, nearby, CRUD."""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from libs.common.config import get_settings
from libs.db.session import get_async_db
from services.clubs_service.models import ClubSortField, SkillLevel, SortOrder
from services.clubs_service.schemas import (
    ClubCreate,
    ClubEnvelope,
    ClubListResponse,
    ClubUpdate,
    MessageResponse,
    NearbyClubsResponse,
)
from services.clubs_service.services import club_ops
from services.clubs_service.services.search import ClubSearchEngine, ClubSearchQuery
from services.members_service.models import User
from services.members_service.services.membership import get_club_or_404
from services.members_service.services.users import get_caller
from sqlalchemy.ext.asyncio import AsyncSession

settings = get_settings()
router = APIRouter(prefix="/clubs", tags=["clubs"])
search_engine = ClubSearchEngine()


def search_params(
    search: Optional[str] = Query(None, max_length=200),
    country: Optional[str] = Query(None, max_length=100),
    city: Optional[str] = Query(None, max_length=100),
    skill_level: Optional[SkillLevel] = Query(None, alias="skillLevel"),
    welcomes_beginners: Optional[bool] = Query(None, alias="welcomesBeginners"),
    is_verified: Optional[bool] = Query(None, alias="isVerified"),
    lat: Optional[float] = Query(None, ge=-90, le=90),
    lng: Optional[float] = Query(None, ge=-180, le=180),
    radius: float = Query(settings.DEFAULT_RADIUS_KM, gt=0),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    sort_by: ClubSortField = Query(ClubSortField.NAME, alias="sortBy"),
    sort_order: SortOrder = Query(SortOrder.ASC, alias="sortOrder"),
) -> ClubSearchQuery:
    return ClubSearchQuery(
        search=search,
        country=country,
        city=city,
        skill_level=skill_level,
        welcomes_beginners=welcomes_beginners,
        is_verified=is_verified,
        lat=lat,
        lng=lng,
        radius=radius,
        page=page,
        limit=limit,
        sort_by=sort_by,
        sort_order=sort_order,
    )


@router.get("", response_model=ClubListResponse)
async def search_clubs(
    query: ClubSearchQuery = Depends(search_params),
    db: AsyncSession = Depends(get_async_db),
):
    """
    Search active clubs.

    Supply ``lat`` and ``lng`` to limit results to ``radius`` km and get a
    ``distance`` on each club; ``sortBy=distance`` then orders nearest first.
    """
    items, pagination = await search_engine.search(db, query)
    return ClubListResponse(data=items, pagination=pagination)


@router.get("/nearby", response_model=NearbyClubsResponse)
async def nearby_clubs(
    lat: float = Query(..., ge=-90, le=90),
    lng: float = Query(..., ge=-180, le=180),
    radius: float = Query(
        settings.DEFAULT_RADIUS_KM, gt=0, le=settings.NEARBY_MAX_RADIUS_KM
    ),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    db: AsyncSession = Depends(get_async_db),
):
    items = await search_engine.nearby(db, lat=lat, lng=lng, radius=radius, limit=limit)
    return NearbyClubsResponse(data=items, count=len(items))


@router.post("", response_model=ClubEnvelope, status_code=status.HTTP_201_CREATED)
async def create_club(
    club_in: ClubCreate,
    caller: User = Depends(get_caller),
    db: AsyncSession = Depends(get_async_db),
):
    club = await club_ops.create_club(db, caller, club_in)
    return ClubEnvelope(
        data=await club_ops.club_detail(db, club),
        message="Club created successfully",
    )


@router.get("/{club_id}", response_model=ClubEnvelope)
async def get_club(club_id: uuid.UUID, db: AsyncSession = Depends(get_async_db)):
    club = await get_club_or_404(db, club_id)
    return ClubEnvelope(data=await club_ops.club_detail(db, club), message="OK")


@router.patch("/{club_id}", response_model=ClubEnvelope)
async def update_club(
    club_id: uuid.UUID,
    club_in: ClubUpdate,
    caller: User = Depends(get_caller),
    db: AsyncSession = Depends(get_async_db),
):
    club = await club_ops.update_club(db, club_id, caller, club_in)
    return ClubEnvelope(
        data=await club_ops.club_detail(db, club),
        message="Club updated successfully",
    )


@router.delete("/{club_id}", response_model=MessageResponse)
async def delete_club(
    club_id: uuid.UUID,
    caller: User = Depends(get_caller),
    db: AsyncSession = Depends(get_async_db),
):
    await club_ops.delete_club(db, club_id, caller)
    return MessageResponse(message="Club deleted successfully")
