"""DebtRepository — concrete implementation of DebtRepositoryProtocol.

All queries use raw text() SQL and are scoped by user_id.
asyncpg NULL parameter pattern: CAST(:param AS TYPE) IS NULL required for None values.

Transaction ownership: the CALLER (application service) commits or rolls back.
"""

from decimal import Decimal

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.dt_debt.domain.models import Debt

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_COLUMNS = "id, user_id, description, amount, paid, created_at, updated_at"

_INSERT_SQL = text(f"""
    INSERT INTO debts (user_id, description, amount, paid)
    VALUES (:user_id, :description, :amount, FALSE)
    RETURNING {_COLUMNS}
""")

_FIND_BY_OWNER_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM debts
    WHERE user_id = :user_id
      AND (CAST(:paid AS BOOLEAN) IS NULL OR paid = CAST(:paid AS BOOLEAN))
    ORDER BY created_at DESC, id DESC
""")

_FIND_BY_ID_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM debts
    WHERE id = :debt_id AND user_id = :user_id
""")

_SAVE_SQL = text(f"""
    UPDATE debts
    SET description = :description,
        amount = :amount,
        paid = :paid,
        updated_at = NOW()
    WHERE id = :debt_id AND user_id = :user_id AND paid = FALSE
    RETURNING {_COLUMNS}
""")

_DELETE_SQL = text("""
    DELETE FROM debts
    WHERE id = :debt_id AND user_id = :user_id
""")

_SUM_AMOUNT_SQL = text("""
    SELECT SUM(amount) AS total
    FROM debts
    WHERE user_id = :user_id
      AND (CAST(:paid AS BOOLEAN) IS NULL OR paid = CAST(:paid AS BOOLEAN))
""")

# ---------------------------------------------------------------------------
# Row mapper
# ---------------------------------------------------------------------------


def _row_to_debt(row: object) -> Debt:
    return Debt(
        id=row.id,  # type: ignore[attr-defined]
        user_id=row.user_id,  # type: ignore[attr-defined]
        description=row.description,  # type: ignore[attr-defined]
        amount=row.amount,  # type: ignore[attr-defined]
        paid=row.paid,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class DebtRepository:
    """Pure storage adapter — no caching, no business rules."""

    async def insert(
        self, db: AsyncSession, user_id: int, description: str, amount: Decimal
    ) -> Debt:
        result = await db.execute(
            _INSERT_SQL,
            {"user_id": user_id, "description": description, "amount": amount},
        )
        return _row_to_debt(result.one())

    async def find_by_owner(
        self, db: AsyncSession, user_id: int, paid: bool | None
    ) -> list[Debt]:
        result = await db.execute(_FIND_BY_OWNER_SQL, {"user_id": user_id, "paid": paid})
        return [_row_to_debt(row) for row in result.fetchall()]

    async def find_by_id(
        self, db: AsyncSession, debt_id: int, user_id: int
    ) -> Debt | None:
        result = await db.execute(_FIND_BY_ID_SQL, {"debt_id": debt_id, "user_id": user_id})
        row = result.fetchone()
        return _row_to_debt(row) if row else None

    async def save(self, db: AsyncSession, debt: Debt) -> Debt | None:
        """Persist mutable fields of an unpaid debt.

        Paid rows are frozen: returns None if the row is paid or gone.
        """
        result = await db.execute(
            _SAVE_SQL,
            {
                "debt_id": debt.id,
                "user_id": debt.user_id,
                "description": debt.description,
                "amount": debt.amount,
                "paid": debt.paid,
            },
        )
        row = result.fetchone()
        return _row_to_debt(row) if row else None

    async def delete(self, db: AsyncSession, debt: Debt) -> None:
        await db.execute(_DELETE_SQL, {"debt_id": debt.id, "user_id": debt.user_id})

    async def sum_amount(
        self, db: AsyncSession, user_id: int, paid: bool | None
    ) -> Decimal | None:
        """SUM(amount) over the filter; None when no rows match."""
        result = await db.execute(_SUM_AMOUNT_SQL, {"user_id": user_id, "paid": paid})
        return result.scalar_one_or_none()
