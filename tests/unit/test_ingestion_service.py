"""Tests for the statement ingestion pipeline.

Real repositories on in-memory SQLite; remote collaborators are mocks.
"""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import httpx
import pytest
from sqlalchemy.exc import OperationalError

from finstatements.clients.base_client import ServiceError
from finstatements.clients.llm_client import LLMClient
from finstatements.domain.errors import (
    AcquisitionFailed,
    ExtractionFailed,
    PersistenceFailed,
    UnknownCompany,
)
from finstatements.domain.ingestion import IngestionState
from finstatements.engines.inconsistency_detector import InconsistencyDetector
from finstatements.engines.metric_extractor import MetricExtractor
from finstatements.engines.pdf_text_extractor import PdfTextExtractor
from finstatements.models.inconsistency import InconsistencyModel
from finstatements.models.metric import MetricModel
from finstatements.models.statement import StatementModel
from finstatements.repositories.company_repo import CompanyRepository
from finstatements.repositories.inconsistency_repo import InconsistencyRepository
from finstatements.repositories.metric_repo import MetricRepository
from finstatements.repositories.statement_repo import StatementRepository
from finstatements.schemas.statement import StatementIngestRequest, StatementType
from finstatements.services.ingestion_service import StatementIngestionService
from tests.fixtures import load_fixture, make_pdf

FIXED_NOW = datetime(2024, 8, 1, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def backend():
    mock = MagicMock()
    mock.extract_financial_data.return_value = [
        {"metric_name": "total_revenue", "metric_value": 100000000, "metric_category": "revenue"},
        {"metric_name": "net_income", "metric_value": 12500000, "metric_category": "profitability"},
    ]
    mock.detect_inconsistencies.return_value = [
        {"type": "sum_mismatch", "description": "Segments do not add up", "severity": "high"},
    ]
    return mock


@pytest.fixture
def archive():
    mock = MagicMock()
    mock.store.side_effect = lambda filename, data: filename
    return mock


@pytest.fixture
def urls():
    mock = MagicMock()
    mock.fetch_text.return_value = "Revenue: 100\nCosts: 40\n"
    return mock


@pytest.fixture
def text_extractor():
    mock = MagicMock(spec=PdfTextExtractor)
    mock.extract.return_value = "Revenue: 100\nCosts: 40\n"
    return mock


@pytest.fixture
def make_service(db, archive, urls, text_extractor, backend):
    def _make(**overrides):
        parts = dict(
            db=db,
            archive_client=archive,
            url_client=urls,
            text_extractor=text_extractor,
            metric_extractor=MetricExtractor(backend),
            inconsistency_detector=InconsistencyDetector(backend),
            company_repo=CompanyRepository(db),
            statement_repo=StatementRepository(db),
            metric_repo=MetricRepository(db),
            inconsistency_repo=InconsistencyRepository(db),
            clock=lambda: FIXED_NOW,
        )
        parts.update(overrides)
        return StatementIngestionService(**parts)

    return _make


@pytest.fixture
def request_q2(sample_company):
    return StatementIngestRequest(
        company_id=sample_company.id,
        statement_type=StatementType.INCOME_STATEMENT,
        year=2024,
        quarter=2,
    )


def _statement_count(db) -> int:
    return db.query(StatementModel).count()


# ── Happy path ───────────────────────────────────────────────────────────


class TestSuccessfulIngestion:
    def test_file_upload_persists_everything(self, db, make_service, request_q2, sample_user, archive):
        result = make_service().ingest(
            request_q2, uploaded_by=sample_user.id, payload=b"%PDF-1.4", filename="acme_q2.pdf"
        )

        assert result.state is IngestionState.PERSISTED
        assert result.metrics_saved == 2
        assert result.inconsistencies_saved == 1
        assert result.detection_degraded is False
        assert result.source == "acme_q2.pdf"
        archive.store.assert_called_once_with("acme_q2.pdf", b"%PDF-1.4")

        statements = db.query(StatementModel).all()
        assert len(statements) == 1
        statement = statements[0]
        assert statement.id == result.statement_id
        assert statement.period == "Q2"
        assert statement.statement_type == "income_statement"
        assert statement.file_path == "acme_q2.pdf"
        assert statement.uploaded_by == sample_user.id
        assert statement.processed_at is not None
        assert [m.metric_name for m in statement.metrics] == ["total_revenue", "net_income"]
        assert statement.inconsistencies[0].severity == "high"

    def test_annual_statement_period(self, db, make_service, sample_company, sample_user):
        request = StatementIngestRequest(
            company_id=sample_company.id, statement_type=StatementType.ANNUAL_REPORT, year=2023
        )

        result = make_service().ingest(request, uploaded_by=sample_user.id, payload=b"%PDF")

        statement = db.get(StatementModel, result.statement_id)
        assert statement.period == "Annual"
        assert statement.quarter is None
        assert statement.file_path == "statement.pdf"

    def test_url_source_skips_archive(self, db, make_service, request_q2, sample_user, archive, urls, backend):
        url = "https://example.com/acme-q2.pdf"

        result = make_service().ingest(request_q2, uploaded_by=sample_user.id, url=f"  {url} ")

        archive.store.assert_not_called()
        urls.fetch_text.assert_called_once_with(url)
        backend.extract_financial_data.assert_called_once_with("Revenue: 100\nCosts: 40\n")
        assert result.source == url
        assert db.get(StatementModel, result.statement_id).file_path == url

    def test_real_pdf_text_reaches_extractor(self, make_service, request_q2, sample_user, backend):
        service = make_service(text_extractor=PdfTextExtractor())

        service.ingest(
            request_q2, uploaded_by=sample_user.id, payload=make_pdf(["Revenue: 100", "Costs: 40"])
        )

        sent = backend.extract_financial_data.call_args.args[0]
        assert "Revenue: 100" in sent
        assert "Costs: 40" in sent

    def test_statement_unprocessed_while_extracting(self, db, make_service, request_q2, sample_user, backend):
        seen = {}

        def extract(text):
            statement = db.query(StatementModel).one()
            seen["processed_at"] = statement.processed_at
            return [{"metric_name": "total_revenue", "metric_value": 1}]

        backend.extract_financial_data.side_effect = extract

        result = make_service().ingest(request_q2, uploaded_by=sample_user.id, payload=b"%PDF")

        assert seen["processed_at"] is None
        assert db.get(StatementModel, result.statement_id).processed_at is not None

    def test_only_valid_metrics_are_persisted(self, db, make_service, request_q2, sample_user, backend):
        backend.extract_financial_data.return_value = [
            {"name": "total_revenue", "value": 100000000},
            {"name": "", "value": 5},
        ]

        result = make_service().ingest(request_q2, uploaded_by=sample_user.id, payload=b"%PDF")

        rows = db.query(MetricModel).filter_by(statement_id=result.statement_id).all()
        assert [(r.metric_name, r.metric_value) for r in rows] == [("total_revenue", 100000000.0)]
        assert result.metrics_saved == 1

    def test_detector_receives_validated_metrics(self, make_service, request_q2, sample_user, backend):
        backend.extract_financial_data.return_value = load_fixture("extraction_response.json")["value"]

        make_service().ingest(request_q2, uploaded_by=sample_user.id, payload=b"%PDF")

        sent = backend.detect_inconsistencies.call_args.args[0]
        assert [m["metric_name"] for m in sent] == [
            "total_revenue",
            "gross_profit",
            "net_income",
            "current_ratio",
        ]

    def test_detector_called_even_with_no_metrics(self, make_service, request_q2, sample_user, backend):
        backend.extract_financial_data.return_value = []
        backend.detect_inconsistencies.return_value = []

        result = make_service().ingest(request_q2, uploaded_by=sample_user.id, payload=b"%PDF")

        backend.detect_inconsistencies.assert_called_once_with([])
        assert result.metrics_saved == 0
        assert result.state is IngestionState.PERSISTED


# ── Detection failures degrade ───────────────────────────────────────────


class TestDetectionFailure:
    def test_timeout_still_completes(self, db, make_service, request_q2, sample_user, backend):
        backend.detect_inconsistencies.side_effect = httpx.ReadTimeout("timed out")

        result = make_service().ingest(request_q2, uploaded_by=sample_user.id, payload=b"%PDF")

        assert result.state is IngestionState.PERSISTED
        assert result.detection_degraded is True
        assert result.inconsistencies_saved == 0
        assert result.metrics_saved == 2
        statement = db.get(StatementModel, result.statement_id)
        assert statement.processed_at is not None
        assert db.query(InconsistencyModel).count() == 0

    def test_empty_claude_reply_still_completes(self, db, make_service, request_q2, sample_user):
        anthropic_client = MagicMock()
        metrics_json = '[{"metric_name": "total_revenue", "metric_value": 100}]'
        extraction = MagicMock(content=[MagicMock(type="text", text=metrics_json)])
        detection = MagicMock(content=[])
        for reply in (extraction, detection):
            reply.usage.input_tokens = 10
            reply.usage.output_tokens = 5
        anthropic_client.messages.create.side_effect = [extraction, detection]
        llm = LLMClient(api_key="test", client=anthropic_client)

        result = make_service(
            metric_extractor=MetricExtractor(llm),
            inconsistency_detector=InconsistencyDetector(llm),
        ).ingest(request_q2, uploaded_by=sample_user.id, payload=b"%PDF")

        assert result.state is IngestionState.PERSISTED
        assert result.detection_degraded is True
        assert result.metrics_saved == 1
        assert db.get(StatementModel, result.statement_id).processed_at is not None


# ── Acquisition failures ─────────────────────────────────────────────────


class TestAcquisitionFailure:
    def test_archive_failure_creates_nothing(self, db, make_service, request_q2, sample_user, archive, backend):
        archive.store.side_effect = ServiceError("Archive rejected upload of q2.pdf")

        with pytest.raises(AcquisitionFailed) as exc_info:
            make_service().ingest(request_q2, uploaded_by=sample_user.id, payload=b"%PDF")

        assert exc_info.value.statement_id is None
        assert exc_info.value.state is IngestionState.ACQUIRING
        assert "archive" in exc_info.value.user_message
        assert _statement_count(db) == 0
        backend.extract_financial_data.assert_not_called()

    def test_unreadable_pdf_creates_nothing(self, db, make_service, request_q2, sample_user):
        service = make_service(text_extractor=PdfTextExtractor())

        with pytest.raises(ExtractionFailed):
            service.ingest(request_q2, uploaded_by=sample_user.id, payload=b"this is not a pdf")

        assert _statement_count(db) == 0

    def test_url_fetch_failure(self, db, make_service, request_q2, sample_user, urls):
        urls.fetch_text.side_effect = httpx.ConnectError("connection refused")

        with pytest.raises(AcquisitionFailed, match="fetch"):
            make_service().ingest(request_q2, uploaded_by=sample_user.id, url="https://example.com/x.pdf")

        assert _statement_count(db) == 0

    @pytest.mark.parametrize(
        "sources",
        [
            {},
            {"payload": b"%PDF", "url": "https://example.com/x.pdf"},
        ],
    )
    def test_exactly_one_source_required(self, db, make_service, request_q2, sample_user, sources):
        with pytest.raises(AcquisitionFailed, match="either a file or a URL"):
            make_service().ingest(request_q2, uploaded_by=sample_user.id, **sources)

        assert _statement_count(db) == 0

    def test_empty_payload(self, make_service, request_q2, sample_user, archive):
        with pytest.raises(AcquisitionFailed, match="empty"):
            make_service().ingest(request_q2, uploaded_by=sample_user.id, payload=b"")

        archive.store.assert_not_called()

    def test_blank_url(self, make_service, request_q2, sample_user, urls):
        with pytest.raises(AcquisitionFailed, match="URL is empty"):
            make_service().ingest(request_q2, uploaded_by=sample_user.id, url="   ")

        urls.fetch_text.assert_not_called()

    def test_unknown_company(self, db, make_service, sample_user, archive):
        request = StatementIngestRequest(company_id=999, year=2024, quarter=1)

        with pytest.raises(UnknownCompany):
            make_service().ingest(request, uploaded_by=sample_user.id, payload=b"%PDF")

        archive.store.assert_not_called()
        assert _statement_count(db) == 0


# ── Extraction and persistence failures ──────────────────────────────────


class TestLaterFailures:
    def test_extraction_failure_leaves_unprocessed_statement(
        self, db, make_service, request_q2, sample_user, backend
    ):
        backend.extract_financial_data.side_effect = ServiceError("502 from gateway", status_code=502)

        with pytest.raises(ExtractionFailed) as exc_info:
            make_service().ingest(request_q2, uploaded_by=sample_user.id, payload=b"%PDF")

        statement = db.query(StatementModel).one()
        assert exc_info.value.statement_id == statement.id
        assert statement.processed_at is None
        assert statement.metrics == []

    def test_metric_write_failure(self, db, make_service, request_q2, sample_user):
        metric_repo = MagicMock()
        metric_repo.add.side_effect = OperationalError("INSERT", {}, Exception("disk I/O error"))

        with pytest.raises(PersistenceFailed) as exc_info:
            make_service(metric_repo=metric_repo).ingest(
                request_q2, uploaded_by=sample_user.id, payload=b"%PDF"
            )

        statement = db.query(StatementModel).one()
        assert exc_info.value.statement_id == statement.id
        assert "metric total_revenue" in exc_info.value.reason
        assert statement.processed_at is None

    def test_statement_write_failure(self, db, make_service, request_q2, sample_user):
        statement_repo = MagicMock()
        statement_repo.create.side_effect = OperationalError("INSERT", {}, Exception("database is locked"))

        with pytest.raises(PersistenceFailed) as exc_info:
            make_service(statement_repo=statement_repo).ingest(
                request_q2, uploaded_by=sample_user.id, payload=b"%PDF"
            )

        assert exc_info.value.statement_id is None
        assert exc_info.value.state is IngestionState.TEXT_EXTRACTED

    def test_fatal_error_moves_pipeline_to_failed(
        self, make_service, request_q2, sample_user, backend, caplog
    ):
        backend.extract_financial_data.side_effect = ServiceError("502 from gateway", status_code=502)

        with caplog.at_level("INFO", logger="finstatements.services.ingestion_service"):
            with pytest.raises(ExtractionFailed) as exc_info:
                make_service().ingest(request_q2, uploaded_by=sample_user.id, payload=b"%PDF")

        transitions = [r.getMessage() for r in caplog.records if " -> " in r.getMessage()]
        assert transitions[-1] == f"Statement {exc_info.value.statement_id}: text_extracted -> failed"
