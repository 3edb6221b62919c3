"""Credential store — user persistence.

UserService depends on UserRepositoryProtocol; unit tests inject a fake.
Transaction ownership stays with the caller.
"""

from typing import Protocol

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.dt_gateway.user.db_models import UserModel


class UserRepositoryProtocol(Protocol):
    async def find_by_email(self, db: AsyncSession, email: str) -> UserModel | None: ...

    async def create(
        self, db: AsyncSession, name: str, email: str, password_hash: str
    ) -> UserModel: ...


class UserRepository:
    async def find_by_email(self, db: AsyncSession, email: str) -> UserModel | None:
        result = await db.execute(select(UserModel).where(UserModel.email == email))
        return result.scalar_one_or_none()

    async def create(
        self, db: AsyncSession, name: str, email: str, password_hash: str
    ) -> UserModel:
        user = UserModel(name=name, email=email, password_hash=password_hash)
        db.add(user)
        # Flush to get the generated id (still inside the caller's transaction)
        await db.flush()
        return user
