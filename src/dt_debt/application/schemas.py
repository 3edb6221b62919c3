"""Pydantic schemas and export serializers for dt_debt.

The schemas enforce only the NUMERIC(10, 2) shape of amounts. The sign rule
is checked by the service, which raises InvalidDebtAmountError.

The same DebtOut/SummaryOut JSON documents are what the cache stores.
"""

import csv
import io
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from src.dt_common.money import money_to_str, to_money
from src.dt_debt.domain.models import Debt, DebtSummary

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class CreateDebtRequest(BaseModel):
    description: str = Field(..., min_length=1, max_length=255)
    amount: Decimal = Field(..., max_digits=10, decimal_places=2)


class UpdateDebtRequest(BaseModel):
    """Partial update: omitted (or null) fields are left untouched."""

    description: str | None = Field(None, min_length=1, max_length=255)
    amount: Decimal | None = Field(None, max_digits=10, decimal_places=2)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class DebtOut(BaseModel):
    id: int
    description: str
    amount: Decimal
    paid: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, d: Debt) -> "DebtOut":
        return cls(
            id=d.id,
            description=d.description,
            amount=to_money(d.amount),
            paid=d.paid,
            created_at=d.created_at,
            updated_at=d.updated_at,
        )

    def to_domain(self, user_id: int) -> Debt:
        return Debt(
            id=self.id,
            user_id=user_id,
            description=self.description,
            amount=self.amount,
            paid=self.paid,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


class SummaryOut(BaseModel):
    total: Decimal
    paid: Decimal
    pending: Decimal

    @classmethod
    def from_domain(cls, s: DebtSummary) -> "SummaryOut":
        return cls(
            total=to_money(s.total),
            paid=to_money(s.paid),
            pending=to_money(s.pending),
        )


# ---------------------------------------------------------------------------
# CSV export
# ---------------------------------------------------------------------------

CSV_HEADER = ("id", "description", "amount", "paid", "createdAt")


def debts_to_csv(debts: list[DebtOut]) -> str:
    """Deterministic CSV: fixed header, one row per debt, input order kept."""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for d in debts:
        writer.writerow(
            [
                d.id,
                d.description,
                money_to_str(d.amount),
                "true" if d.paid else "false",
                d.created_at.isoformat(),
            ]
        )
    return buf.getvalue()
