"""DebtApplicationService — business rules + read-through cache orchestration.

Reads:  cache → repository on miss → populate cache.
Writes: repository → commit → invalidate every affected cache key.
        On failure the session is rolled back and the cache is left alone.

Ownership: every call is scoped by (debt_id, user_id). A debt owned by another
user raises exactly the same DebtNotFoundError as a missing one.

No locking: a read racing a write may repopulate a stale entry; it lives at
most one TTL.
"""

import logging
from collections.abc import Callable
from decimal import Decimal
from typing import Any, TypeVar

from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.dt_common.enums import DebtStatus, ExportFormat
from src.dt_common.errors import (
    AppError,
    DebtAlreadyPaidError,
    DebtNotFoundError,
    InvalidDebtAmountError,
    PaidDebtImmutableError,
    UnsupportedExportFormatError,
)
from src.dt_common.money import is_positive, to_money
from src.dt_debt.application.schemas import (
    DebtOut,
    SummaryOut,
    UpdateDebtRequest,
    debts_to_csv,
)
from src.dt_debt.domain.cache import (
    DebtCacheProtocol,
    list_key,
    single_key,
    summary_key,
    user_scope_keys,
)
from src.dt_debt.domain.models import Debt, DebtSummary
from src.dt_debt.domain.repository import DebtRepositoryProtocol
from src.dt_debt.infrastructure.persistence import DebtRepository

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DebtApplicationService:
    def __init__(
        self,
        cache: DebtCacheProtocol,
        repo: DebtRepositoryProtocol | None = None,
        list_ttl_ms: int | None = None,
        summary_ttl_ms: int | None = None,
    ) -> None:
        self._cache = cache
        self._repo: DebtRepositoryProtocol = repo or DebtRepository()
        self._list_ttl_ms = (
            settings.DEBT_CACHE_TTL_MS if list_ttl_ms is None else list_ttl_ms
        )
        self._summary_ttl_ms = (
            settings.SUMMARY_CACHE_TTL_MS if summary_ttl_ms is None else summary_ttl_ms
        )

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def create(
        self, db: AsyncSession, user_id: int, description: str, amount: Decimal
    ) -> DebtOut:
        if not is_positive(amount):
            raise InvalidDebtAmountError()
        try:
            debt = await self._repo.insert(db, user_id, description, to_money(amount))
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        # A new debt changes every list view and the summary
        await self._invalidate(user_id)
        logger.info("Debt created: id=%s user=%s", debt.id, user_id)
        return DebtOut.from_domain(debt)

    async def update(
        self, db: AsyncSession, debt_id: int, user_id: int, patch: UpdateDebtRequest
    ) -> DebtOut:
        current = await self.find_one(db, debt_id, user_id)
        if current.paid:
            raise PaidDebtImmutableError()
        if patch.amount is not None and not is_positive(patch.amount):
            raise InvalidDebtAmountError()

        debt = current.to_domain(user_id)
        if patch.description is not None:
            debt.description = patch.description
        if patch.amount is not None:
            debt.amount = to_money(patch.amount)

        saved = await self._save_unpaid(db, debt, PaidDebtImmutableError())
        await self._invalidate(user_id, debt_id)
        return DebtOut.from_domain(saved)

    async def mark_as_paid(self, db: AsyncSession, debt_id: int, user_id: int) -> DebtOut:
        current = await self.find_one(db, debt_id, user_id)
        if current.paid:
            raise DebtAlreadyPaidError()

        debt = current.to_domain(user_id)
        debt.paid = True
        saved = await self._save_unpaid(db, debt, DebtAlreadyPaidError())
        await self._invalidate(user_id, debt_id)
        logger.info("Debt paid: id=%s user=%s", debt_id, user_id)
        return DebtOut.from_domain(saved)

    async def remove(self, db: AsyncSession, debt_id: int, user_id: int) -> DebtOut:
        current = await self.find_one(db, debt_id, user_id)
        try:
            await self._repo.delete(db, current.to_domain(user_id))
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        await self._invalidate(user_id, debt_id)
        logger.info("Debt removed: id=%s user=%s", debt_id, user_id)
        return current

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def find_all(
        self, db: AsyncSession, user_id: int, status: DebtStatus | str = DebtStatus.ALL
    ) -> list[DebtOut]:
        status = DebtStatus(status)
        key = list_key(user_id, status)
        cached = await self._from_cache(
            key, lambda raw: [DebtOut.model_validate(item) for item in raw]
        )
        if cached is not None:
            return cached

        logger.debug("Cache miss: %s", key)
        debts = await self._repo.find_by_owner(db, user_id, status.paid_filter)
        items = [DebtOut.from_domain(d) for d in debts]
        await self._cache.set(
            key, [item.model_dump(mode="json") for item in items], self._list_ttl_ms
        )
        return items

    async def find_one(self, db: AsyncSession, debt_id: int, user_id: int) -> DebtOut:
        key = single_key(debt_id, user_id)
        cached = await self._from_cache(key, DebtOut.model_validate)
        if cached is not None:
            return cached

        logger.debug("Cache miss: %s", key)
        debt = await self._repo.find_by_id(db, debt_id, user_id)
        if debt is None:
            raise DebtNotFoundError()
        item = DebtOut.from_domain(debt)
        await self._cache.set(key, item.model_dump(mode="json"), self._list_ttl_ms)
        return item

    async def get_summary(self, db: AsyncSession, user_id: int) -> SummaryOut:
        key = summary_key(user_id)
        cached = await self._from_cache(key, SummaryOut.model_validate)
        if cached is not None:
            return cached

        logger.debug("Cache miss: %s", key)
        # One AsyncSession cannot serve concurrent queries, so the three
        # aggregates run back to back; any failure aborts the whole summary.
        total = await self._repo.sum_amount(db, user_id, None)
        paid = await self._repo.sum_amount(db, user_id, True)
        pending = await self._repo.sum_amount(db, user_id, False)

        summary = SummaryOut.from_domain(
            DebtSummary(total=to_money(total), paid=to_money(paid), pending=to_money(pending))
        )
        await self._cache.set(key, summary.model_dump(mode="json"), self._summary_ttl_ms)
        return summary

    async def export_debts(
        self, db: AsyncSession, user_id: int, fmt: ExportFormat | str
    ) -> list[DebtOut] | str:
        try:
            fmt = ExportFormat(fmt)
        except ValueError:
            raise UnsupportedExportFormatError(str(fmt)) from None

        debts = await self.find_all(db, user_id, DebtStatus.ALL)
        if fmt is ExportFormat.CSV:
            return debts_to_csv(debts)
        return debts

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _from_cache(self, key: str, parse: Callable[[Any], T]) -> T | None:
        """Parse a cache hit; an entry of the wrong shape counts as a miss."""
        raw = await self._cache.get(key)
        if raw is None:
            return None
        try:
            value = parse(raw)
        except (ValidationError, TypeError):
            logger.warning("Discarding malformed cache entry: key=%s", key)
            return None
        logger.debug("Cache hit: %s", key)
        return value

    async def _save_unpaid(self, db: AsyncSession, debt: Debt, paid_error: AppError) -> Debt:
        """Persist a debt that must still be unpaid in the DB.

        The loaded copy may come from a stale cache entry; the repository only
        updates unpaid rows, so a row that was paid (or deleted) meanwhile is
        reported with the proper error instead of being overwritten.
        """
        try:
            saved = await self._repo.save(db, debt)
            if saved is None:
                existing = await self._repo.find_by_id(db, debt.id, debt.user_id)
                await self._invalidate(debt.user_id, debt.id)
                if existing is None:
                    raise DebtNotFoundError()
                raise paid_error
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return saved

    async def _invalidate(self, user_id: int, debt_id: int | None = None) -> None:
        keys = user_scope_keys(user_id)
        if debt_id is not None:
            keys.append(single_key(debt_id, user_id))
        await self._cache.delete(*keys)
        logger.debug("Cache invalidated: %s", keys)
