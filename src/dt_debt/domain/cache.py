"""Debt cache contract and key scheme.

  - Read: cache-aside (check cache → DB on miss → populate cache)
  - Write: DB first, commit, then delete every key the write can affect
  - Cache is advisory: a miss, an eviction or a backend failure only means a
    DB read, never an error

Key formats are read by external tooling (inspection, pre-warming) and must
not change:
  list:    debts_user_<user_id>_<status>   status in {all, completed, pending}
  single:  debt_<debt_id>_user_<user_id>
  summary: summary_user_<user_id>
"""

from typing import Any, Protocol

from src.dt_common.enums import DebtStatus


class DebtCacheProtocol(Protocol):
    async def get(self, key: str) -> Any | None:
        """Return the cached JSON-compatible value, or None on miss."""
        ...

    async def set(self, key: str, value: Any, ttl_ms: int) -> None:
        """Store a JSON-compatible value for ttl_ms milliseconds."""
        ...

    async def delete(self, *keys: str) -> None:
        """Remove keys; unknown keys are ignored."""
        ...


def list_key(user_id: int, status: DebtStatus | str) -> str:
    return f"debts_user_{user_id}_{DebtStatus(status).value}"


def single_key(debt_id: int, user_id: int) -> str:
    return f"debt_{debt_id}_user_{user_id}"


def summary_key(user_id: int) -> str:
    return f"summary_user_{user_id}"


def user_scope_keys(user_id: int) -> list[str]:
    """All list views plus the summary: what any write to this user's debts can change."""
    return [list_key(user_id, status) for status in DebtStatus] + [summary_key(user_id)]
