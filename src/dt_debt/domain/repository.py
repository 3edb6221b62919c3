# src/dt_debt/domain/repository.py
"""Repository Protocol — dependency inversion for testability.

Unit tests inject a mock that conforms to this Protocol.
Infrastructure layer provides the real implementation.

Every method is scoped by the owning user; a debt owned by someone else is
simply not there.
"""

from decimal import Decimal
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.dt_debt.domain.models import Debt


class DebtRepositoryProtocol(Protocol):
    async def insert(
        self,
        db: AsyncSession,
        user_id: int,
        description: str,
        amount: Decimal,
    ) -> Debt: ...

    async def find_by_owner(
        self,
        db: AsyncSession,
        user_id: int,
        paid: bool | None,
    ) -> list[Debt]: ...

    async def find_by_id(
        self,
        db: AsyncSession,
        debt_id: int,
        user_id: int,
    ) -> Debt | None: ...

    async def save(self, db: AsyncSession, debt: Debt) -> Debt | None:
        """Update an unpaid row; None when the row is already paid or missing."""
        ...

    async def delete(self, db: AsyncSession, debt: Debt) -> None: ...

    async def sum_amount(
        self,
        db: AsyncSession,
        user_id: int,
        paid: bool | None,
    ) -> Decimal | None: ...
