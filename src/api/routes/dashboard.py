"""Dashboard statistics."""

from fastapi import APIRouter, Depends

from src.api.dependencies import AuthenticatedRoute, get_current_user, get_dashboard_use_case
from src.application.dto.responses import DashboardResponse, ErrorResponse
from src.application.use_cases.get_dashboard import GetDashboardUseCase
from src.core.interfaces import AuthUser

router = APIRouter(tags=["dashboard"], route_class=AuthenticatedRoute)


@router.get("/dashboard", response_model=DashboardResponse, responses={401: {"model": ErrorResponse}})
async def get_dashboard(
    user: AuthUser = Depends(get_current_user),
    use_case: GetDashboardUseCase = Depends(get_dashboard_use_case),
) -> DashboardResponse:
    """Quotation and invoice counts and totals; overdue is computed now."""
    return await use_case.execute(user.id)
