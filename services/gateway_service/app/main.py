"""FastAPI application entrypoint for the club directory gateway.

The gateway owns no data. It maps each ``/api/v1/*`` path onto the service
that owns it and forwards the request unchanged.
"""

from __future__ import annotations

import re

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from slowapi.errors import RateLimitExceeded

from libs.common.config import get_settings
from libs.common.error_handler import add_exception_handlers
from libs.common.errors import NotFoundError
from libs.common.logging import get_logger, get_request_id
from libs.common.middleware import add_observability_middleware
from libs.common.rate_limit import limiter, rate_limit_exceeded_handler
from services.gateway_service.app import clients

settings = get_settings()
logger = get_logger(__name__)

# Checked in order; club sub-resources owned by other services come first.
_ROUTES: list[tuple[re.Pattern, str]] = [
    (re.compile(r"^clubs/[^/]+/(members|join|leave)/?$"), "members_client"),
    (re.compile(r"^clubs/[^/]+/equipment/?$"), "equipment_client"),
    (re.compile(r"^clubs(/.*)?$"), "clubs_client"),
    (re.compile(r"^users(/.*)?$"), "members_client"),
    (re.compile(r"^equipment(/.*)?$"), "equipment_client"),
]

_HOP_BY_HOP = {
    "connection",
    "keep-alive",
    "proxy-authenticate",
    "proxy-authorization",
    "te",
    "trailers",
    "transfer-encoding",
    "upgrade",
    "content-length",
    "content-encoding",
    "host",
    "content-type",
}


def resolve_client(path: str) -> clients.ServiceClient:
    """Service client for an API path (without the ``/api/v1/`` prefix)."""
    for pattern, client_name in _ROUTES:
        if pattern.match(path):
            # Looked up at call time so tests can swap clients.
            return getattr(clients, client_name)
    raise NotFoundError(f"No service handles /api/v1/{path}")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance."""
    app = FastAPI(
        title="Club Directory Gateway",
        version="0.1.0",
        description="Public entrypoint that fronts the clubs, members and equipment services.",
    )

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    add_observability_middleware(app)
    add_exception_handlers(app)

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Simple readiness endpoint."""
        return {"status": "ok"}

    @app.api_route(
        "/api/v1/{path:path}", methods=["GET", "POST", "PUT", "PATCH", "DELETE"]
    )
    @limiter.limit(settings.RATE_LIMIT_DEFAULT)
    async def proxy_api(path: str, request: Request):
        """Forward /api/v1/* to the owning service."""
        client = resolve_client(path)
        return await proxy_request(client, f"/{path}", request)

    return app


def _filter_service_headers(headers: httpx.Headers) -> list[tuple[str, str]]:
    """Strip hop-by-hop headers that FastAPI/starlette manages."""
    return [(k, v) for k, v in headers.items() if k.lower() not in _HOP_BY_HOP]


async def proxy_request(client: clients.ServiceClient, path: str, request: Request):
    """Forward the request body as raw bytes and relay the service response."""
    content_body = None
    if request.method in ("POST", "PATCH", "PUT"):
        content_body = await request.body() or None

    headers = {
        k: v
        for k, v in request.headers.items()
        if k.lower() not in ("content-length", "host")
    }
    request_id = get_request_id()
    if request_id:
        headers["x-request-id"] = request_id

    if request.url.query:
        path = f"{path}?{request.url.query}"

    try:
        service_response = await client.request(
            request.method, path, content=content_body, headers=headers
        )
    except httpx.RequestError as exc:
        logger.error("%s service unreachable: %s", client.name, exc)
        return JSONResponse(
            status_code=503,
            content={
                "detail": f"{client.name} service unavailable",
                "code": "SERVICE_UNAVAILABLE",
            },
        )

    forward_headers = dict(_filter_service_headers(service_response.headers))

    if service_response.status_code == 204:
        return Response(status_code=204, headers=forward_headers)

    content_type = service_response.headers.get("content-type", "")
    if "application/json" in content_type:
        try:
            return JSONResponse(
                content=service_response.json(),
                status_code=service_response.status_code,
                headers=forward_headers,
            )
        except ValueError:
            pass

    return Response(
        content=service_response.content,
        status_code=service_response.status_code,
        media_type=content_type or None,
        headers=forward_headers,
    )


app = create_app()
