"""Analytics endpoints: comparative series over a selection of companies."""

from typing import List

from fastapi import APIRouter, Depends, Query

from finstatements.dependencies import get_dashboard_service
from finstatements.logging_config import get_logger
from finstatements.schemas.analytics import CompanyAnalytics, CompanyStatementCount
from finstatements.services.dashboard_service import DashboardService

logger = get_logger(__name__)
router = APIRouter()


@router.get("/companies", response_model=List[CompanyStatementCount])
def analysable_companies(
    service: DashboardService = Depends(get_dashboard_service),
) -> List[CompanyStatementCount]:
    """Companies that have at least one statement, with their statement counts."""
    return service.companies_with_statements()


@router.get("/", response_model=CompanyAnalytics)
def company_analytics(
    company_ids: List[int] = Query(default=[]),
    service: DashboardService = Depends(get_dashboard_service),
) -> CompanyAnalytics:
    """Revenue, profitability, inconsistency and ratio series.

    Pass ``company_ids`` once per company: ``?company_ids=1&company_ids=2``.
    """
    logger.info("analytics_requested", company_ids=company_ids)
    return service.company_analytics(company_ids)
