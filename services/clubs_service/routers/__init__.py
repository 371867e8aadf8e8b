"""Clubs service routers package."""

from services.clubs_service.routers.clubs import router as clubs_router
from services.clubs_service.routers.reviews import router as reviews_router

__all__ = [
    "clubs_router",
    "reviews_router",
]
