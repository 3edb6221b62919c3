"""dt_debt REST endpoints — all require JWT authentication.

POST   /debts                   — create
GET    /debts?status=           — list (all | completed | pending)
GET    /debts/summary           — totals: total / paid / pending
GET    /debts/export/{format}   — json envelope or raw text/csv
GET    /debts/{debt_id}         — detail
PATCH  /debts/{debt_id}         — partial update (unpaid only)
PATCH  /debts/{debt_id}/pay     — mark as paid
DELETE /debts/{debt_id}         — remove
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.dt_common.database import get_db_session
from src.dt_common.enums import DebtStatus, ExportFormat
from src.dt_common.response import ApiResponse, success_response
from src.dt_debt.api.dependencies import get_debt_service
from src.dt_debt.application.schemas import CreateDebtRequest, UpdateDebtRequest
from src.dt_debt.application.service import DebtApplicationService
from src.dt_gateway.auth.dependencies import CurrentUser, get_current_user

router = APIRouter(prefix="/debts", tags=["debts"])

UserDep = Annotated[CurrentUser, Depends(get_current_user)]
DbDep = Annotated[AsyncSession, Depends(get_db_session)]
ServiceDep = Annotated[DebtApplicationService, Depends(get_debt_service)]


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_debt(
    request: Request,
    body: CreateDebtRequest,
    current_user: UserDep,
    db: DbDep,
    service: ServiceDep,
) -> ApiResponse:
    debt = await service.create(db, current_user.user_id, body.description, body.amount)
    return success_response(debt.model_dump(mode="json"), request)


@router.get("")
async def list_debts(
    request: Request,
    current_user: UserDep,
    db: DbDep,
    service: ServiceDep,
    debt_status: DebtStatus = Query(DebtStatus.ALL, alias="status"),
) -> ApiResponse:
    debts = await service.find_all(db, current_user.user_id, debt_status)
    return success_response([d.model_dump(mode="json") for d in debts], request)


@router.get("/summary")
async def get_summary(
    request: Request,
    current_user: UserDep,
    db: DbDep,
    service: ServiceDep,
) -> ApiResponse:
    summary = await service.get_summary(db, current_user.user_id)
    return success_response(summary.model_dump(mode="json"), request)


@router.get("/export/{fmt}", response_model=None)
async def export_debts(
    fmt: ExportFormat,
    request: Request,
    current_user: UserDep,
    db: DbDep,
    service: ServiceDep,
) -> ApiResponse | Response:
    result = await service.export_debts(db, current_user.user_id, fmt)
    if isinstance(result, str):
        return Response(
            content=result,
            media_type="text/csv",
            headers={"Content-Disposition": 'attachment; filename="debts.csv"'},
        )
    return success_response([d.model_dump(mode="json") for d in result], request)


@router.get("/{debt_id}")
async def get_debt(
    debt_id: int,
    request: Request,
    current_user: UserDep,
    db: DbDep,
    service: ServiceDep,
) -> ApiResponse:
    debt = await service.find_one(db, debt_id, current_user.user_id)
    return success_response(debt.model_dump(mode="json"), request)


@router.patch("/{debt_id}")
async def update_debt(
    debt_id: int,
    request: Request,
    body: UpdateDebtRequest,
    current_user: UserDep,
    db: DbDep,
    service: ServiceDep,
) -> ApiResponse:
    debt = await service.update(db, debt_id, current_user.user_id, body)
    return success_response(debt.model_dump(mode="json"), request)


@router.patch("/{debt_id}/pay")
async def mark_debt_paid(
    debt_id: int,
    request: Request,
    current_user: UserDep,
    db: DbDep,
    service: ServiceDep,
) -> ApiResponse:
    debt = await service.mark_as_paid(db, debt_id, current_user.user_id)
    return success_response(debt.model_dump(mode="json"), request)


@router.delete("/{debt_id}")
async def delete_debt(
    debt_id: int,
    request: Request,
    current_user: UserDep,
    db: DbDep,
    service: ServiceDep,
) -> ApiResponse:
    debt = await service.remove(db, debt_id, current_user.user_id)
    return success_response(debt.model_dump(mode="json"), request, message="Debt deleted")
