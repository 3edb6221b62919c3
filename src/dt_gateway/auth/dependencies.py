"""FastAPI dependency: get_current_user.

Usage in any protected router:
    from src.dt_gateway.auth.dependencies import CurrentUser, get_current_user

    @router.get("/protected")
    async def protected(user: CurrentUser = Depends(get_current_user)):
        ...

Stateless: identity comes from the verified token claims only.
"""

from dataclasses import dataclass

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from src.dt_common.errors import InvalidTokenError
from src.dt_gateway.auth.jwt_handler import decode_token

# tokenUrl tells Swagger UI where to get a token (used for the "Authorize" button).
# auto_error=False so a missing header gets the same 401 body as a bad token.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login", auto_error=False)

# Reusable 401 exception with WWW-Authenticate header (OAuth2 standard)
_CREDENTIALS_EXCEPTION = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Invalid or expired token",
    headers={"WWW-Authenticate": "Bearer"},
)


@dataclass(frozen=True)
class CurrentUser:
    user_id: int
    email: str


def authenticate(token: str | None) -> CurrentUser:
    """Turn a raw bearer token into a CurrentUser.

    Raises InvalidTokenError when the token is absent, malformed, forged or expired.
    """
    if not token:
        raise InvalidTokenError()
    payload = decode_token(token)
    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError):
        raise InvalidTokenError() from None
    return CurrentUser(user_id=user_id, email=str(payload["email"]))


async def get_current_user(token: str | None = Depends(oauth2_scheme)) -> CurrentUser:
    """Extract and validate the JWT Bearer token, return the caller's identity.

    Raises HTTP 401 if the token is missing, invalid, or expired.
    """
    try:
        return authenticate(token)
    except InvalidTokenError:
        raise _CREDENTIALS_EXCEPTION from None
