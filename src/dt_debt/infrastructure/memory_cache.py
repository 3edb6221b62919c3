"""In-process DebtCacheProtocol with passive TTL expiry.

Single-process only (local dev, tests). Entries are kept as JSON text so
callers never share mutable objects with the cache, same as with Redis.
"""

import json
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any


@dataclass
class _CacheEntry:
    payload: str
    expires_at: float  # monotonic seconds

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


class MemoryDebtCache:
    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: dict[str, _CacheEntry] = {}

    async def get(self, key: str) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.is_expired(self._clock()):
            del self._entries[key]
            return None
        return json.loads(entry.payload)

    async def set(self, key: str, value: Any, ttl_ms: int) -> None:
        now = self._clock()
        self._prune(now)
        self._entries[key] = _CacheEntry(
            payload=json.dumps(value),
            expires_at=now + ttl_ms / 1000,
        )

    async def delete(self, *keys: str) -> None:
        for key in keys:
            self._entries.pop(key, None)

    def __len__(self) -> int:
        return len(self._entries)

    def _prune(self, now: float) -> None:
        """Drop every expired entry, read or not."""
        expired = [k for k, e in self._entries.items() if e.is_expired(now)]
        for key in expired:
            del self._entries[key]

    def __contains__(self, key: str) -> bool:
        entry = self._entries.get(key)
        return entry is not None and not entry.is_expired(self._clock())
