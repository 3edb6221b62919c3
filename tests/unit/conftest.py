"""In-memory collaborators for unit tests: no PostgreSQL, no Redis.

InMemoryDebtRepository follows the same contract as the SQL repository
(owner scoping, newest-first ordering, frozen paid rows, SUM -> None on no
rows) and counts calls so tests can assert cache hits skipped the store.
"""

import dataclasses
from collections import Counter
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pytest

from src.dt_debt.domain.models import Debt
from src.dt_debt.infrastructure.memory_cache import MemoryDebtCache
from src.dt_gateway.user.db_models import UserModel


class FakeSession:
    """Stands in for AsyncSession: records commits/rollbacks, executes nothing."""

    def __init__(self) -> None:
        self.commits = 0
        self.rollbacks = 0

    async def commit(self) -> None:
        self.commits += 1

    async def rollback(self) -> None:
        self.rollbacks += 1

    @asynccontextmanager
    async def begin(self) -> AsyncIterator["FakeSession"]:
        yield self
        self.commits += 1


class InMemoryDebtRepository:
    def __init__(self) -> None:
        self.rows: dict[int, Debt] = {}
        self.calls: Counter[str] = Counter()
        self._next_id = 1
        self._now = datetime(2025, 1, 1, tzinfo=UTC)

    def _tick(self) -> datetime:
        self._now += timedelta(seconds=1)
        return self._now

    async def insert(self, db, user_id: int, description: str, amount: Decimal) -> Debt:
        self.calls["insert"] += 1
        now = self._tick()
        debt = Debt(
            id=self._next_id, user_id=user_id, description=description,
            amount=amount, paid=False, created_at=now, updated_at=now,
        )
        self._next_id += 1
        self.rows[debt.id] = debt
        return dataclasses.replace(debt)

    async def find_by_owner(self, db, user_id: int, paid: bool | None) -> list[Debt]:
        self.calls["find_by_owner"] += 1
        rows = [
            d for d in self.rows.values()
            if d.user_id == user_id and (paid is None or d.paid == paid)
        ]
        rows.sort(key=lambda d: (d.created_at, d.id), reverse=True)
        return [dataclasses.replace(d) for d in rows]

    async def find_by_id(self, db, debt_id: int, user_id: int) -> Debt | None:
        self.calls["find_by_id"] += 1
        debt = self.rows.get(debt_id)
        if debt is None or debt.user_id != user_id:
            return None
        return dataclasses.replace(debt)

    async def save(self, db, debt: Debt) -> Debt | None:
        self.calls["save"] += 1
        stored = self.rows.get(debt.id)
        if stored is None or stored.user_id != debt.user_id or stored.paid:
            return None
        stored.description = debt.description
        stored.amount = debt.amount
        stored.paid = debt.paid
        stored.updated_at = self._tick()
        return dataclasses.replace(stored)

    async def delete(self, db, debt: Debt) -> None:
        self.calls["delete"] += 1
        stored = self.rows.get(debt.id)
        if stored is not None and stored.user_id == debt.user_id:
            del self.rows[debt.id]

    async def sum_amount(self, db, user_id: int, paid: bool | None) -> Decimal | None:
        self.calls["sum_amount"] += 1
        amounts = [
            d.amount for d in self.rows.values()
            if d.user_id == user_id and (paid is None or d.paid == paid)
        ]
        return sum(amounts, Decimal("0")) if amounts else None


class InMemoryUserRepository:
    def __init__(self) -> None:
        self.users: dict[int, UserModel] = {}
        self._next_id = 1

    async def find_by_email(self, db, email: str) -> UserModel | None:
        return next((u for u in self.users.values() if u.email == email), None)

    async def create(self, db, name: str, email: str, password_hash: str) -> UserModel:
        user = UserModel(name=name, email=email, password_hash=password_hash)
        user.id = self._next_id
        self._next_id += 1
        self.users[user.id] = user
        return user


@pytest.fixture
def db() -> FakeSession:
    return FakeSession()


@pytest.fixture
def debt_repo() -> InMemoryDebtRepository:
    return InMemoryDebtRepository()


@pytest.fixture
def user_repo() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def memory_cache() -> MemoryDebtCache:
    return MemoryDebtCache()
