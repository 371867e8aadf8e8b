from typing import Annotated, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from pydantic import ValidationError

from libs.auth.models import AuthUser
from libs.common.config import get_settings
from libs.common.errors import AuthenticationError

settings = get_settings()
security = HTTPBearer(auto_error=False)


def decode_token(token: str) -> AuthUser:
    """Verify a bearer JWT and map its claims onto ``AuthUser``."""
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            options={"verify_aud": False},
        )
        return AuthUser(**payload)
    except (JWTError, ValidationError) as exc:
        raise AuthenticationError("Could not validate credentials") from exc


async def get_current_user(
    token: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
) -> AuthUser:
    """
    Return the authenticated caller or fail with 401.
    """
    if token is None or not token.credentials:
        raise AuthenticationError()
    return decode_token(token.credentials)
