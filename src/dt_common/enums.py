"""Global enums — values are part of the public API and cache key scheme."""

from enum import Enum


class DebtStatus(str, Enum):
    """List filter for debts. Values appear verbatim in list cache keys."""

    ALL = "all"
    COMPLETED = "completed"
    PENDING = "pending"

    @property
    def paid_filter(self) -> bool | None:
        """Repository filter: None = no filter, True = paid only, False = unpaid only."""
        if self is DebtStatus.COMPLETED:
            return True
        if self is DebtStatus.PENDING:
            return False
        return None


class ExportFormat(str, Enum):
    JSON = "json"
    CSV = "csv"
