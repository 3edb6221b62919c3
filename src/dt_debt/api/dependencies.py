"""FastAPI dependencies wiring the debt cache and service.

The cache backend is chosen by settings.CACHE_BACKEND. Tests replace
get_debt_cache / get_debt_service through app.dependency_overrides.
"""

from typing import Annotated

from fastapi import Depends

from config.settings import settings
from src.dt_common.redis_client import get_redis
from src.dt_debt.application.service import DebtApplicationService
from src.dt_debt.domain.cache import DebtCacheProtocol
from src.dt_debt.infrastructure.memory_cache import MemoryDebtCache
from src.dt_debt.infrastructure.redis_cache import RedisDebtCache

_memory_cache: MemoryDebtCache | None = None


async def get_debt_cache() -> DebtCacheProtocol:
    global _memory_cache  # noqa: PLW0603
    if settings.CACHE_BACKEND == "memory":
        if _memory_cache is None:
            _memory_cache = MemoryDebtCache()
        return _memory_cache
    return RedisDebtCache(await get_redis())


def get_debt_service(
    cache: Annotated[DebtCacheProtocol, Depends(get_debt_cache)],
) -> DebtApplicationService:
    return DebtApplicationService(cache=cache)
