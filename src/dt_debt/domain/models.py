"""Domain models for dt_debt — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass
class Debt:
    id: int
    user_id: int                 # owner, immutable after creation
    description: str
    amount: Decimal              # > 0, 2 decimal places
    paid: bool
    created_at: datetime
    updated_at: datetime


@dataclass
class DebtSummary:
    total: Decimal
    paid: Decimal
    pending: Decimal
