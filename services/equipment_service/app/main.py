"""FastAPI application for the Equipment Service."""

from fastapi import FastAPI
from libs.common.error_handler import add_exception_handlers
from libs.common.middleware import add_observability_middleware
from services.equipment_service.routers import (
    checkouts_router,
    club_equipment_router,
    equipment_router,
)


def create_app() -> FastAPI:
    """Create and configure the Equipment Service FastAPI app."""
    app = FastAPI(
        title="Club Directory Equipment Service",
        version="0.1.0",
        description="Club equipment inventory, checkout and return.",
    )
    add_observability_middleware(app)
    add_exception_handlers(app)

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok", "service": "equipment"}

    app.include_router(club_equipment_router)
    app.include_router(equipment_router)
    app.include_router(checkouts_router)

    return app


app = create_app()
