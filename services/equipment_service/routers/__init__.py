"""Equipment service routers package."""

from services.equipment_service.routers.checkouts import router as checkouts_router
from services.equipment_service.routers.equipment import (
    club_router as club_equipment_router,
)
from services.equipment_service.routers.equipment import router as equipment_router

__all__ = [
    "checkouts_router",
    "club_equipment_router",
    "equipment_router",
]
