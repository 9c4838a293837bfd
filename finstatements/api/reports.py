"""Report endpoints: list past reports and generate new report datasets."""

from typing import List

from fastapi import APIRouter, Depends, Query

from finstatements.dependencies import get_current_user, get_report_service
from finstatements.logging_config import get_logger
from finstatements.models.user import UserModel
from finstatements.schemas.report import GeneratedReport, Report, ReportRequest
from finstatements.services.report_service import ReportService

logger = get_logger(__name__)
router = APIRouter()


@router.get("/", response_model=List[Report])
def list_reports(
    limit: int = Query(default=100, ge=1, le=500),
    service: ReportService = Depends(get_report_service),
) -> List[Report]:
    return service.list_reports(limit=limit)


@router.post("/", response_model=GeneratedReport, status_code=201)
def generate_report(
    body: ReportRequest,
    user: UserModel = Depends(get_current_user),
    service: ReportService = Depends(get_report_service),
) -> GeneratedReport:
    """Gather the report dataset and record the report.

    The response carries the rows; turning them into a spreadsheet, PDF or
    CSV (``format``) is done by the client.
    """
    logger.info(
        "report_generation_started",
        name=body.name,
        type=body.type.value,
        companies=len(body.company_ids),
        user_id=user.id,
    )
    generated = service.generate(body, created_by=user.id)
    logger.info("report_generation_completed", report_id=generated.report.id)
    return generated
