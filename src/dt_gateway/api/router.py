"""Auth API router: register, login.

All endpoints return ApiResponse. request_id is read from
request.state (injected by RequestLogMiddleware).
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.dt_common.database import get_db_session
from src.dt_common.response import ApiResponse, success_response
from src.dt_gateway.user.schemas import LoginRequest, RegisterRequest
from src.dt_gateway.user.service import UserService

router = APIRouter(prefix="/auth", tags=["auth"])
_service = UserService()


def get_user_service() -> UserService:
    """Overridable in tests via app.dependency_overrides."""
    return _service


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse,
    summary="User registration",
)
async def register(
    request: Request,
    body: RegisterRequest,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> ApiResponse:
    async with db.begin():
        data = await service.register(body.name, body.email, body.password, db)
    return success_response(data.model_dump(), request, message=data.message)


@router.post(
    "/login",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse,
    summary="User login",
)
async def login(
    request: Request,
    body: LoginRequest,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> ApiResponse:
    data = await service.login(body.email, body.password, db)
    return success_response(data.model_dump(), request, message="Login successful")
