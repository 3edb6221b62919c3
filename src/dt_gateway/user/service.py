"""User domain service: register, login.

All DB operations use the injected AsyncSession. Transactions are managed
by the caller (router layer) via `async with db.begin()`.
"""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.dt_common.errors import EmailExistsError, InvalidEmailError, InvalidPasswordError
from src.dt_gateway.auth.jwt_handler import create_access_token
from src.dt_gateway.auth.password import hash_password, verify_password
from src.dt_gateway.user.repository import UserRepository, UserRepositoryProtocol
from src.dt_gateway.user.schemas import LoginResponse, RegisterResponse

logger = logging.getLogger(__name__)


class UserService:
    """Stateless service — instantiate once, reuse across requests."""

    def __init__(self, repo: UserRepositoryProtocol | None = None) -> None:
        self._repo: UserRepositoryProtocol = repo or UserRepository()

    async def register(
        self,
        name: str,
        email: str,
        password: str,
        db: AsyncSession,
    ) -> RegisterResponse:
        """Create a user with a bcrypt-hashed password. No token is issued.

        The DB UNIQUE constraint on email is the final guard against races.
        """
        if await self._repo.find_by_email(db, email) is not None:
            raise EmailExistsError()

        try:
            user = await self._repo.create(db, name, email, hash_password(password))
        except IntegrityError:
            # Lost a race with a concurrent registration of the same email
            raise EmailExistsError() from None
        logger.info("User registered: id=%s", user.id)
        return RegisterResponse()

    async def login(
        self,
        email: str,
        password: str,
        db: AsyncSession,
    ) -> LoginResponse:
        """Authenticate and issue an access token."""
        user = await self._repo.find_by_email(db, email)
        if user is None:
            raise InvalidEmailError()

        if not verify_password(password, user.password_hash):
            raise InvalidPasswordError()

        return LoginResponse(
            token=create_access_token(user.id, user.email),
            email=user.email,
            user=user.name,
            expires_in=settings.JWT_EXPIRE_MINUTES * 60,
        )
