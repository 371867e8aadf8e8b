"""Global exception handlers for consistent JSON error responses."""

from collections import defaultdict

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from libs.common.errors import AppError, StoreError
from libs.common.logging import get_logger, get_request_id

logger = get_logger(__name__)


def _field_errors(exc: RequestValidationError) -> dict[str, list[str]]:
    """Flatten pydantic errors into ``{field: [messages]}``."""
    fields: dict[str, list[str]] = defaultdict(list)
    for err in exc.errors():
        # loc is ("query", "lat") / ("body", "role") / ("path", "club_id")
        loc = [str(part) for part in err.get("loc", ()) if part not in ("query", "body", "path")]
        fields[".".join(loc) or "__root__"].append(err.get("msg", "Invalid value"))
    return dict(fields)


def add_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        if isinstance(exc, StoreError):
            logger.error("Store failure on %s %s: %s", request.method, request.url.path, exc)

        content = {"detail": exc.detail, "code": exc.code}
        errors = getattr(exc, "errors", None)
        if errors:
            content["errors"] = errors
        request_id = get_request_id()
        if request_id:
            content["request_id"] = request_id
        return JSONResponse(status_code=exc.status_code, content=content)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={
                "detail": "Invalid request data",
                "code": "VALIDATION_ERROR",
                "errors": _field_errors(exc),
            },
        )
