"""Dependency Injection Container.

Centralized definition of all application dependencies using dependency-injector.
The FastAPI app wires per request in ``dependencies.py``; the container serves
the CLI and tests, where one container lives for one unit of work.

Usage::

    from finstatements.container import AppContainer

    container = AppContainer()
    container.init_resources()  # create tables, open session and clients

    service = container.ingestion_service()
    service.ingest(request, uploaded_by=1, payload=data, filename="q2.pdf")

    container.shutdown_resources()  # close clients and session
"""

from typing import Iterator

from dependency_injector import containers, providers

from finstatements.clients.archive_client import ArchiveClient
from finstatements.clients.llm_client import LLMClient
from finstatements.clients.prompt_client import PromptClient
from finstatements.clients.url_text_client import UrlTextClient
from finstatements.config import Settings
from finstatements.database import Base, build_engine, build_session_factory
from finstatements.engines.inconsistency_detector import InconsistencyDetector
from finstatements.engines.metric_extractor import MetricExtractor
from finstatements.engines.pdf_text_extractor import PdfTextExtractor
from finstatements.prompts.manager import PromptManager
from finstatements.repositories.analytics_repo import AnalyticsRepository
from finstatements.repositories.company_repo import CompanyRepository
from finstatements.repositories.inconsistency_repo import InconsistencyRepository
from finstatements.repositories.metric_repo import MetricRepository
from finstatements.repositories.report_repo import ReportRepository
from finstatements.repositories.statement_repo import StatementRepository
from finstatements.repositories.user_repo import TeamRepository, UserRepository
from finstatements.services.dashboard_service import DashboardService
from finstatements.services.ingestion_service import StatementIngestionService
from finstatements.services.report_service import ReportService


def _init_database(engine):
    """Create missing tables."""
    import finstatements.models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    return engine


def _open_session(factory) -> Iterator:
    session = factory()
    try:
        yield session
    finally:
        session.close()


def _open_client(client_cls, **kwargs) -> Iterator:
    client = client_cls(**kwargs)
    try:
        yield client
    finally:
        client.close()


class AppContainer(containers.DeclarativeContainer):
    """Application Dependency Injection Container.

    Layers, bottom-up: configuration, database, repositories, remote
    clients, engines, services.
    """

    # ══════════════════════════════════════════════════════════════════
    # CONFIGURATION
    # ══════════════════════════════════════════════════════════════════

    settings = providers.Singleton(Settings)

    # ══════════════════════════════════════════════════════════════════
    # DATABASE
    # ══════════════════════════════════════════════════════════════════

    db_engine = providers.Singleton(
        build_engine,
        database_url=settings.provided.database_url,
        echo=False,
    )

    db_initialized = providers.Resource(
        _init_database,
        engine=db_engine,
    )

    session_factory = providers.Singleton(
        build_session_factory,
        engine=db_engine,
    )

    # One session per container; closed by shutdown_resources()
    db_session = providers.Resource(
        _open_session,
        factory=session_factory,
    )

    # ══════════════════════════════════════════════════════════════════
    # REPOSITORIES (Data Access Layer)
    # ══════════════════════════════════════════════════════════════════

    company_repo = providers.Factory(CompanyRepository, db=db_session)
    statement_repo = providers.Factory(StatementRepository, db=db_session)
    metric_repo = providers.Factory(MetricRepository, db=db_session)
    inconsistency_repo = providers.Factory(InconsistencyRepository, db=db_session)
    user_repo = providers.Factory(UserRepository, db=db_session)
    team_repo = providers.Factory(TeamRepository, db=db_session)
    report_repo = providers.Factory(ReportRepository, db=db_session)
    analytics_repo = providers.Factory(AnalyticsRepository, db=db_session)

    # ══════════════════════════════════════════════════════════════════
    # EXTERNAL CLIENTS (Infrastructure)
    # ══════════════════════════════════════════════════════════════════

    archive_client = providers.Resource(
        _open_client,
        ArchiveClient,
        base_url=settings.provided.ai_tools_base_url,
        archive_id=settings.provided.archive_id,
        api_key=settings.provided.ai_tools_api_key,
        app_id=settings.provided.ai_tools_app_id,
        usage_key=settings.provided.ai_tools_usage_key,
        timeout=settings.provided.http_timeout,
        retry_max_attempts=settings.provided.http_retry_max_attempts,
    )

    url_client = providers.Resource(
        _open_client,
        UrlTextClient,
        base_url=settings.provided.ai_tools_base_url,
        api_key=settings.provided.ai_tools_api_key,
        app_id=settings.provided.ai_tools_app_id,
        usage_key=settings.provided.ai_tools_usage_key,
        timeout=settings.provided.http_timeout,
        retry_max_attempts=settings.provided.http_retry_max_attempts,
    )

    prompt_client = providers.Resource(
        _open_client,
        PromptClient,
        base_url=settings.provided.ai_tools_base_url,
        api_key=settings.provided.ai_tools_api_key,
        app_id=settings.provided.ai_tools_app_id,
        usage_key=settings.provided.ai_tools_usage_key,
        timeout=settings.provided.http_timeout,
        retry_max_attempts=settings.provided.http_retry_max_attempts,
    )

    prompt_manager = providers.Singleton(PromptManager)

    llm_client = providers.Resource(
        _open_client,
        LLMClient,
        api_key=settings.provided.anthropic_api_key,
        model=settings.provided.claude_model,
        retry_max_attempts=settings.provided.http_retry_max_attempts,
        prompt_manager=prompt_manager,
    )

    # EXTRACTION_BACKEND picks which client the engines talk to
    extraction_backend = providers.Selector(
        settings.provided.extraction_backend,
        prompt_api=prompt_client,
        anthropic=llm_client,
    )

    # ══════════════════════════════════════════════════════════════════
    # ENGINES (Business Logic Layer)
    # ══════════════════════════════════════════════════════════════════

    text_extractor = providers.Factory(PdfTextExtractor)

    metric_extractor = providers.Factory(
        MetricExtractor,
        backend=extraction_backend,
    )

    inconsistency_detector = providers.Factory(
        InconsistencyDetector,
        backend=extraction_backend,
    )

    # ══════════════════════════════════════════════════════════════════
    # SERVICES (Orchestration Layer)
    # ══════════════════════════════════════════════════════════════════

    ingestion_service = providers.Factory(
        StatementIngestionService,
        db=db_session,
        archive_client=archive_client,
        url_client=url_client,
        text_extractor=text_extractor,
        metric_extractor=metric_extractor,
        inconsistency_detector=inconsistency_detector,
        company_repo=company_repo,
        statement_repo=statement_repo,
        metric_repo=metric_repo,
        inconsistency_repo=inconsistency_repo,
    )

    dashboard_service = providers.Factory(
        DashboardService,
        analytics_repo=analytics_repo,
        recent_activity_limit=settings.provided.recent_activity_limit,
    )

    report_service = providers.Factory(
        ReportService,
        db=db_session,
        report_repo=report_repo,
    )
