"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text
from starlette.exceptions import HTTPException as StarletteHTTPException

from config.settings import settings
from src.dt_common.database import create_tables, engine
from src.dt_common.errors import AppError, InvalidTokenError
from src.dt_common.redis_client import close_redis, get_redis
from src.dt_common.response import error_response
from src.dt_debt.api.router import router as debt_router
from src.dt_debt.infrastructure.db_models import DebtORM  # noqa: F401  -- registers table
from src.dt_gateway.api.router import router as auth_router
from src.dt_gateway.middleware.request_log import RequestLogMiddleware
from src.dt_gateway.user.db_models import UserModel  # noqa: F401  -- registers table

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: verify DB, create tables, open Redis pool. Shutdown: dispose."""
    # Startup
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    if settings.DB_AUTO_CREATE:
        await create_tables()
    if settings.CACHE_BACKEND == "redis":
        await get_redis()
    logger.info("%s started (cache=%s)", settings.APP_NAME, settings.CACHE_BACKEND)
    yield
    # Shutdown
    await engine.dispose()
    await close_redis()


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    lifespan=lifespan,
)


app.add_middleware(RequestLogMiddleware)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    resp = error_response(exc.code, exc.message, request)
    return JSONResponse(
        status_code=exc.http_status,
        content=resp.model_dump(),
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render framework HTTP errors (401 from the auth guard, 404, 405) in the envelope."""
    code = InvalidTokenError().code if exc.status_code == 401 else exc.status_code
    resp = error_response(code, str(exc.detail), request)
    return JSONResponse(
        status_code=exc.status_code,
        content=resp.model_dump(),
        headers=exc.headers,
    )


app.include_router(auth_router, prefix="/api/v1")
app.include_router(debt_router, prefix="/api/v1")


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": "0.1.0"}
