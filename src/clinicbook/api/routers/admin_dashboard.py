"""Admin dashboard statistics endpoint."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from ...application.use_cases.dashboard_stats import DashboardStatsUseCase
from ..deps import get_dashboard_use_case
from ..schemas.appointments import DashboardSchema
from ..schemas.common import ApiResponse
from ..utils.responses import ok

router = APIRouter(prefix="/admin", tags=["admin: dashboard"])


@router.get("/dashboard", response_model=ApiResponse[DashboardSchema])
async def dashboard(
    request: Request,
    use_case: Annotated[DashboardStatsUseCase, Depends(get_dashboard_use_case)],
):
    stats = await use_case.execute()
    return ok(request, data=DashboardSchema.from_dto(stats))
