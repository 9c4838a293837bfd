"""Dependency injection / factory functions for FastAPI.

Every service is constructed here with its full dependency tree. HTTP
clients are built per request and closed when the request ends, so no
client state is shared between ingestions.
"""

from functools import lru_cache
from typing import Iterator, List, Optional

from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from finstatements.clients.archive_client import ArchiveClient
from finstatements.clients.llm_client import LLMClient
from finstatements.clients.prompt_client import PromptClient
from finstatements.clients.url_text_client import UrlTextClient
from finstatements.config import Settings
from finstatements.database import get_db
from finstatements.engines.backend import ExtractionBackend
from finstatements.engines.inconsistency_detector import InconsistencyDetector
from finstatements.engines.metric_extractor import MetricExtractor
from finstatements.engines.pdf_text_extractor import PdfTextExtractor
from finstatements.models.user import UserModel
from finstatements.repositories.analytics_repo import AnalyticsRepository
from finstatements.repositories.company_repo import CompanyRepository
from finstatements.repositories.inconsistency_repo import InconsistencyRepository
from finstatements.repositories.metric_repo import MetricRepository
from finstatements.repositories.report_repo import ReportRepository
from finstatements.repositories.statement_repo import StatementRepository
from finstatements.repositories.user_repo import UserRepository
from finstatements.services.dashboard_service import DashboardService
from finstatements.services.ingestion_service import StatementIngestionService
from finstatements.services.report_service import ReportService

EXTRACTION_BACKENDS = ("prompt_api", "anthropic")


@lru_cache
def get_settings() -> Settings:
    return Settings()


# ── Remote clients (one set per ingestion) ──────────────────────────────

def _tools_client_kwargs(settings: Settings) -> dict:
    return dict(
        base_url=settings.ai_tools_base_url,
        api_key=settings.ai_tools_api_key,
        app_id=settings.ai_tools_app_id,
        usage_key=settings.ai_tools_usage_key,
        timeout=settings.http_timeout,
        retry_max_attempts=settings.http_retry_max_attempts,
    )


def build_extraction_backend(settings: Settings) -> ExtractionBackend:
    """Return the structured extractor selected by ``extraction_backend``."""
    if settings.extraction_backend == "anthropic":
        return LLMClient(
            api_key=settings.anthropic_api_key,
            model=settings.claude_model,
            retry_max_attempts=settings.http_retry_max_attempts,
        )
    if settings.extraction_backend == "prompt_api":
        return PromptClient(**_tools_client_kwargs(settings))
    raise ValueError(
        f"Unknown extraction backend {settings.extraction_backend!r}; "
        f"expected one of {', '.join(EXTRACTION_BACKENDS)}"
    )


def build_ingestion_service(
    db: Session, settings: Settings
) -> tuple[StatementIngestionService, List]:
    """Wire a fresh ingestion service; also returns the clients to close afterwards."""
    # Backend first: it is the part that rejects bad configuration
    backend = build_extraction_backend(settings)
    built: List = [backend]
    try:
        archive = ArchiveClient(archive_id=settings.archive_id, **_tools_client_kwargs(settings))
        built.append(archive)
        urls = UrlTextClient(**_tools_client_kwargs(settings))
    except Exception:
        close_clients(built)
        raise

    service = StatementIngestionService(
        db=db,
        archive_client=archive,
        url_client=urls,
        text_extractor=PdfTextExtractor(),
        metric_extractor=MetricExtractor(backend),
        inconsistency_detector=InconsistencyDetector(backend),
        company_repo=CompanyRepository(db),
        statement_repo=StatementRepository(db),
        metric_repo=MetricRepository(db),
        inconsistency_repo=InconsistencyRepository(db),
    )
    return service, [archive, urls, backend]


def close_clients(clients: List) -> None:
    for client in clients:
        client.close()


# ── Per-request (need a DB session) ─────────────────────────────────────

def get_ingestion_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> Iterator[StatementIngestionService]:
    service, clients = build_ingestion_service(db, settings)
    try:
        yield service
    finally:
        close_clients(clients)


def get_dashboard_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> DashboardService:
    return DashboardService(
        AnalyticsRepository(db),
        recent_activity_limit=settings.recent_activity_limit,
    )


def get_report_service(db: Session = Depends(get_db)) -> ReportService:
    return ReportService(db, ReportRepository(db))


def get_current_user(
    x_user_id: Optional[int] = Header(default=None),
    db: Session = Depends(get_db),
) -> UserModel:
    """Caller identity forwarded by the upstream auth proxy in ``X-User-ID``."""
    if x_user_id is None:
        raise HTTPException(status_code=401, detail="Missing X-User-ID header")
    user = UserRepository(db).get(x_user_id)
    if user is None:
        raise HTTPException(status_code=401, detail=f"Unknown user {x_user_id}")
    return user


def require_admin(user: UserModel = Depends(get_current_user)) -> UserModel:
    """User management is restricted to admins."""
    if user.role != "admin":
        raise HTTPException(status_code=403, detail="Admin role required")
    return user
