"""Statement endpoints: upload, list, inspect and delete financial statements.

Uploading runs the ingestion pipeline synchronously: archive (or fetch the
URL), extract text, create the statement, extract metrics, check for
inconsistencies and mark it processed.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, Response, UploadFile
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from finstatements.database import get_db
from finstatements.dependencies import get_current_user, get_ingestion_service
from finstatements.domain.errors import (
    AcquisitionFailed,
    ExtractionFailed,
    IngestionError,
    PersistenceFailed,
    UnknownCompany,
)
from finstatements.logging_config import get_logger, ingestion_context
from finstatements.models.statement import StatementModel
from finstatements.models.user import UserModel
from finstatements.repositories.statement_repo import StatementRepository
from finstatements.schemas.inconsistency import Inconsistency
from finstatements.schemas.metric import Metric
from finstatements.schemas.statement import (
    IngestionResult,
    Statement,
    StatementDetail,
    StatementIngestRequest,
    StatementSummary,
    StatementType,
    derive_status,
)
from finstatements.services.ingestion_service import StatementIngestionService

logger = get_logger(__name__)
router = APIRouter()

# Most specific first: UnknownCompany is an AcquisitionFailed
_ERROR_STATUS = (
    (UnknownCompany, 404),
    (AcquisitionFailed, 400),
    (ExtractionFailed, 422),
    (PersistenceFailed, 503),
)


def ingestion_error_status(exc: IngestionError) -> int:
    for error_type, status in _ERROR_STATUS:
        if isinstance(exc, error_type):
            return status
    return 500


def _summary(
    statement: StatementModel, company_name: str, metrics_count: int, inconsistency_count: int
) -> StatementSummary:
    return StatementSummary(
        **Statement.model_validate(statement).model_dump(),
        company_name=company_name,
        metrics_count=metrics_count,
        inconsistency_count=inconsistency_count,
        status=derive_status(statement.processed_at, inconsistency_count),
    )


@router.get("/", response_model=List[StatementSummary])
def list_statements(
    search: Optional[str] = Query(default=None, max_length=200),
    company_id: Optional[int] = None,
    limit: int = Query(default=100, ge=1, le=500),
    db: Session = Depends(get_db),
) -> List[StatementSummary]:
    """List statements with counts and status.

    Newest processed first; statements still processing come last.
    ``search`` matches company name or statement type.
    """
    logger.info("statements_list_requested", search=search, company_id=company_id, limit=limit)

    try:
        rows = StatementRepository(db).list_summaries(
            search=search, company_id=company_id, limit=limit
        )
    except SQLAlchemyError as e:
        logger.error("statements_list_failed", error=str(e))
        raise HTTPException(status_code=500, detail=f"Failed to list statements: {e}")

    return [_summary(*row) for row in rows]


@router.get("/{statement_id}", response_model=StatementDetail)
def get_statement(statement_id: int, db: Session = Depends(get_db)) -> StatementDetail:
    statement = StatementRepository(db).get_detail(statement_id)
    if statement is None:
        logger.warning("statement_not_found", statement_id=statement_id)
        raise HTTPException(status_code=404, detail=f"Statement {statement_id} not found")

    summary = _summary(
        statement,
        statement.company.name,
        len(statement.metrics),
        len(statement.inconsistencies),
    )
    return StatementDetail(
        **summary.model_dump(),
        metrics=[Metric.model_validate(m) for m in statement.metrics],
        inconsistencies=[Inconsistency.model_validate(i) for i in statement.inconsistencies],
    )


@router.post("/upload", response_model=IngestionResult, status_code=201)
def upload_statement(
    company_id: int = Form(...),
    statement_type: StatementType = Form(StatementType.INCOME_STATEMENT),
    year: int = Form(...),
    quarter: Optional[int] = Form(None),
    url: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
    user: UserModel = Depends(get_current_user),
    service: StatementIngestionService = Depends(get_ingestion_service),
) -> IngestionResult:
    """Upload a PDF (or give a URL) and run the full ingestion pipeline.

    Exactly one of ``file`` and ``url`` must be supplied.
    """
    try:
        request = StatementIngestRequest(
            company_id=company_id,
            statement_type=statement_type,
            year=year,
            quarter=quarter,
        )
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors(include_url=False, include_context=False))

    payload = file.file.read() if file is not None else None
    filename = file.filename if file is not None else None

    with ingestion_context(company_id=company_id, user_id=user.id):
        logger.info(
            "statement_upload_started",
            statement_type=statement_type,
            year=year,
            quarter=quarter,
            source="file" if file is not None else "url",
        )

        try:
            result = service.ingest(
                request,
                uploaded_by=user.id,
                payload=payload,
                filename=filename,
                url=url or None,
            )
        except IngestionError as e:
            status = ingestion_error_status(e)
            logger.error(
                "statement_upload_failed",
                state=e.state,
                statement_id=e.statement_id,
                error=e.reason,
                status=status,
            )
            raise HTTPException(status_code=status, detail=e.user_message)

        logger.info(
            "statement_upload_completed",
            statement_id=result.statement_id,
            state=result.state,
            metrics=result.metrics_saved,
            inconsistencies=result.inconsistencies_saved,
            detection_degraded=result.detection_degraded,
        )
    return result


@router.delete("/{statement_id}", status_code=204)
def delete_statement(
    statement_id: int,
    db: Session = Depends(get_db),
    user: UserModel = Depends(get_current_user),
) -> Response:
    if not StatementRepository(db).delete(statement_id):
        raise HTTPException(status_code=404, detail=f"Statement {statement_id} not found")
    db.commit()
    logger.info("statement_deleted", statement_id=statement_id, user_id=user.id)
    return Response(status_code=204)
