"""Dashboard endpoints: headline counts, recent activity and chart series."""

from fastapi import APIRouter, Depends

from finstatements.dependencies import get_dashboard_service
from finstatements.logging_config import get_logger
from finstatements.schemas.analytics import DashboardCharts, DashboardSummary
from finstatements.services.dashboard_service import DashboardService

logger = get_logger(__name__)
router = APIRouter()


@router.get("/summary", response_model=DashboardSummary)
def dashboard_summary(
    service: DashboardService = Depends(get_dashboard_service),
) -> DashboardSummary:
    """Company, statement and high-severity inconsistency counts plus recent statements."""
    summary = service.summary()
    logger.info(
        "dashboard_summary_served",
        companies=summary.companies,
        statements=summary.statements,
        high_severity=summary.high_severity_inconsistencies,
    )
    return summary


@router.get("/charts", response_model=DashboardCharts)
def dashboard_charts(
    service: DashboardService = Depends(get_dashboard_service),
) -> DashboardCharts:
    """Revenue points, inconsistencies by severity and companies by industry."""
    return service.charts()
