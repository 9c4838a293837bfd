"""Orchestrates ingestion of one financial statement.

Pipeline (one request, strictly sequential)::

    ACQUIRING → TEXT_EXTRACTED → DATA_EXTRACTED → INCONSISTENCIES_CHECKED → PERSISTED
                                     └──────────── any fatal error ───────────┴→ FAILED

Order is extract, then persist, then enrich: the statement row is committed
before the structured extractor runs, each metric and inconsistency is
committed on its own, and ``processed_at`` is stamped last. Nothing already
committed is rolled back when a later step fails.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional

import httpx
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from finstatements.clients.archive_client import ArchiveClient
from finstatements.clients.base_client import ServiceError
from finstatements.clients.url_text_client import UrlTextClient
from finstatements.domain.errors import (
    AcquisitionFailed,
    DetectionFailed,
    ExtractionFailed,
    IngestionError,
    PersistenceFailed,
    UnknownCompany,
)
from finstatements.domain.ingestion import IngestionState, advance
from finstatements.engines.inconsistency_detector import InconsistencyDetector
from finstatements.engines.metric_extractor import MetricExtractor
from finstatements.engines.pdf_text_extractor import PdfTextExtractor
from finstatements.models.statement import StatementModel
from finstatements.repositories.company_repo import CompanyRepository
from finstatements.repositories.inconsistency_repo import InconsistencyRepository
from finstatements.repositories.metric_repo import MetricRepository
from finstatements.repositories.statement_repo import StatementRepository
from finstatements.schemas.inconsistency import DetectedInconsistency
from finstatements.schemas.metric import ExtractedMetric
from finstatements.schemas.statement import IngestionResult, StatementIngestRequest

logger = logging.getLogger(__name__)

DEFAULT_FILENAME = "statement.pdf"

_REMOTE_ERRORS = (ServiceError, httpx.HTTPError)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StatementIngestionService:
    """Runs the ingestion state machine for one statement at a time.

    Construct one per request: it holds the clients it was given and the
    session, nothing else.
    """

    def __init__(
        self,
        db: Session,
        archive_client: ArchiveClient,
        url_client: UrlTextClient,
        text_extractor: PdfTextExtractor,
        metric_extractor: MetricExtractor,
        inconsistency_detector: InconsistencyDetector,
        company_repo: CompanyRepository,
        statement_repo: StatementRepository,
        metric_repo: MetricRepository,
        inconsistency_repo: InconsistencyRepository,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.db = db
        self.archive = archive_client
        self.urls = url_client
        self.text_extractor = text_extractor
        self.metric_extractor = metric_extractor
        self.detector = inconsistency_detector
        self.companies = company_repo
        self.statements = statement_repo
        self.metrics = metric_repo
        self.inconsistencies = inconsistency_repo
        self._clock = clock

    def ingest(
        self,
        request: StatementIngestRequest,
        *,
        uploaded_by: int,
        payload: Optional[bytes] = None,
        filename: Optional[str] = None,
        url: Optional[str] = None,
    ) -> IngestionResult:
        """Ingest one statement from uploaded bytes or from a URL.

        Raises:
            AcquisitionFailed: bad input, unknown company, archive or fetch failure.
            ExtractionFailed: unreadable PDF or structured extraction failure.
            PersistenceFailed: a write to the metric store failed.
        """
        state = IngestionState.ACQUIRING
        statement_id: Optional[int] = None
        logger.info(
            "Ingesting %s %s %d for company %d (%s)",
            request.statement_type.value,
            request.period_label,
            request.year,
            request.company_id,
            "file" if payload is not None else "url",
        )

        try:
            source, text = self._acquire(request, payload, filename, url)
            state = self._move(state, IngestionState.TEXT_EXTRACTED, statement_id)

            statement = self._create_statement(request, source, uploaded_by)
            statement_id = statement.id

            metrics = self._extract_metrics(text, statement_id)
            state = self._move(state, IngestionState.DATA_EXTRACTED, statement_id)

            found, degraded = self._detect(metrics, statement_id)
            state = self._move(state, IngestionState.INCONSISTENCIES_CHECKED, statement_id)

            self._finish(statement, state)
            state = self._move(state, IngestionState.PERSISTED, statement_id)
        except IngestionError as exc:
            if exc.statement_id is None:
                exc.statement_id = statement_id
            self._move(state, IngestionState.FAILED, exc.statement_id)
            logger.error(
                "Ingestion failed in state %s (statement %s): %s",
                exc.state.value,
                exc.statement_id,
                exc.reason,
            )
            raise

        return IngestionResult(
            statement_id=statement_id,
            state=state,
            metrics_saved=len(metrics),
            inconsistencies_saved=len(found),
            detection_degraded=degraded,
            source=source,
        )

    # ── steps ────────────────────────────────────────────────────────

    def _acquire(
        self,
        request: StatementIngestRequest,
        payload: Optional[bytes],
        filename: Optional[str],
        url: Optional[str],
    ) -> tuple[str, str]:
        """Return ``(source, text)``; source is the archive handle or the URL."""
        if (payload is None) == (url is None):
            raise AcquisitionFailed("Provide either a file or a URL, not both or neither")

        try:
            company_known = self.companies.exists(request.company_id)
        except SQLAlchemyError as exc:
            raise PersistenceFailed(f"Could not look up company: {exc}") from exc
        if not company_known:
            raise UnknownCompany(f"Company {request.company_id} not found")

        if payload is not None:
            if not payload:
                raise AcquisitionFailed("Uploaded file is empty")
            name = filename or DEFAULT_FILENAME
            try:
                handle = self.archive.store(name, payload)
            except _REMOTE_ERRORS as exc:
                raise AcquisitionFailed(f"Failed to upload file to archive: {exc}") from exc
            return handle, self.text_extractor.extract(payload)

        url = url.strip()
        if not url:
            raise AcquisitionFailed("URL is empty")
        try:
            text = self.urls.fetch_text(url)
        except _REMOTE_ERRORS as exc:
            raise AcquisitionFailed(f"Failed to fetch document from URL: {exc}") from exc
        return url, text

    def _create_statement(
        self, request: StatementIngestRequest, source: str, uploaded_by: int
    ) -> StatementModel:
        statement = StatementModel(
            company_id=request.company_id,
            statement_type=request.statement_type.value,
            period=request.period_label,
            year=request.year,
            quarter=request.quarter,
            file_path=source,
            processed_at=None,
            uploaded_by=uploaded_by,
        )
        self._write(
            lambda: self.statements.create(statement),
            IngestionState.TEXT_EXTRACTED,
            None,
            "statement record",
        )
        logger.info("Created statement %d from %s", statement.id, source)
        return statement

    def _extract_metrics(self, text: str, statement_id: int) -> List[ExtractedMetric]:
        try:
            metrics = self.metric_extractor.extract(text)
        except ExtractionFailed as exc:
            exc.statement_id = statement_id
            raise

        for metric in metrics:
            self._write(
                lambda m=metric: self.metrics.add(statement_id, m),
                IngestionState.TEXT_EXTRACTED,
                statement_id,
                f"metric {metric.name}",
            )
        logger.info("Statement %d: saved %d metrics", statement_id, len(metrics))
        return metrics

    def _detect(
        self, metrics: List[ExtractedMetric], statement_id: int
    ) -> tuple[List[DetectedInconsistency], bool]:
        """Return ``(saved inconsistencies, detection_degraded)``."""
        try:
            found = self.detector.detect(metrics, statement_id=statement_id)
        except DetectionFailed as exc:
            logger.warning(
                "Statement %d: %s; continuing with no inconsistencies",
                statement_id,
                exc.reason,
            )
            return [], True

        for item in found:
            self._write(
                lambda i=item: self.inconsistencies.add(statement_id, i),
                IngestionState.DATA_EXTRACTED,
                statement_id,
                f"inconsistency {item.inconsistency_type}",
            )
        logger.info("Statement %d: saved %d inconsistencies", statement_id, len(found))
        return found, False

    def _finish(self, statement: StatementModel, state: IngestionState) -> None:
        self._write(
            lambda: self.statements.mark_processed(statement, self._clock()),
            state,
            statement.id,
            "processed timestamp",
        )

    # ── helpers ──────────────────────────────────────────────────────

    def _write(
        self,
        action: Callable[[], object],
        state: IngestionState,
        statement_id: Optional[int],
        what: str,
    ) -> None:
        """Run one store write and commit it on its own."""
        try:
            action()
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise PersistenceFailed(
                f"Failed to save {what}: {exc}",
                state=state,
                statement_id=statement_id,
            ) from exc

    @staticmethod
    def _move(
        current: IngestionState, target: IngestionState, statement_id: Optional[int]
    ) -> IngestionState:
        state = advance(current, target)
        logger.info(
            "Statement %s: %s -> %s",
            statement_id if statement_id is not None else "-",
            current.value,
            target.value,
        )
        return state
