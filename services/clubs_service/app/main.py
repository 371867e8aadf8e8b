"""FastAPI application for the Clubs Service."""

from fastapi import FastAPI
from libs.common.error_handler import add_exception_handlers
from libs.common.middleware import add_observability_middleware
from services.clubs_service.routers import clubs_router, reviews_router


def create_app() -> FastAPI:
    """Create and configure the Clubs Service FastAPI app."""
    app = FastAPI(
        title="Club Directory Clubs Service",
        version="0.1.0",
        description="Club profiles, geospatial search and reviews.",
    )
    add_observability_middleware(app)
    add_exception_handlers(app)

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok", "service": "clubs"}

    app.include_router(clubs_router)
    app.include_router(reviews_router)

    return app


app = create_app()
