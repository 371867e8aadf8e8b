"""Error taxonomy shared by every service.

Services raise these instead of building HTTP responses themselves; the
handlers installed by ``libs.common.error_handler`` turn them into JSON.
"""

from typing import Optional

from fastapi import status


class AppError(Exception):
    """Base class for expected, client-visible failures."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    code: str = "APP_ERROR"
    detail: str = "Request failed"

    def __init__(self, detail: Optional[str] = None) -> None:
        super().__init__(detail or self.detail)
        if detail:
            self.detail = detail


class ValidationError(AppError):
    """Malformed or out-of-range input. Raised before any store access."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "VALIDATION_ERROR"
    detail = "Invalid request data"

    def __init__(
        self,
        detail: Optional[str] = None,
        errors: Optional[dict[str, list[str]]] = None,
    ) -> None:
        super().__init__(detail)
        self.errors = errors or {}


class AuthenticationError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "AUTHENTICATION_REQUIRED"
    detail = "Authentication required"


class AuthorizationError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "FORBIDDEN"
    detail = "You do not have permission to perform this action"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"
    detail = "Resource not found"


class ConflictError(AppError):
    """The current state already satisfies, or rules out, the request."""

    status_code = status.HTTP_409_CONFLICT
    code = "CONFLICT"
    detail = "Request conflicts with the current state"


class StoreError(AppError):
    """Unexpected persistence failure. The unit of work has been rolled back."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "STORE_ERROR"
    detail = "Failed to complete the request"
