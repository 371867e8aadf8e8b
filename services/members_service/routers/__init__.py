"""Members service routers package."""

from services.members_service.routers.members import router as members_router
from services.members_service.routers.users import router as users_router

__all__ = [
    "members_router",
    "users_router",
]
