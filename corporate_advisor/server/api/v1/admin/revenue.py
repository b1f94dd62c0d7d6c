"""
Admin Revenue Endpoint.
"""

from fastapi import APIRouter, Depends, Query

from corporate_advisor.core.models.io.admin import RevenueReport
from corporate_advisor.server.services.deps import SessionDep, get_admin_user
from corporate_advisor.services.revenue import RevenueService

router = APIRouter(dependencies=[Depends(get_admin_user)])


@router.get(
    "",
    response_model=RevenueReport,
    summary="Revenue Report",
    description=(
        "Payment totals by status, and completed revenue by month and by payment method "
        "for all time, the current month or the current year."
    ),
    responses={400: {"description": "Invalid period"}},
)
async def revenue_report(session: SessionDep, period: str = Query("all")) -> RevenueReport:
    return await RevenueService(session).report(period)
