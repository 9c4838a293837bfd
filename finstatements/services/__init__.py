"""Service-layer orchestration modules."""

from finstatements.services.dashboard_service import DashboardService
from finstatements.services.ingestion_service import StatementIngestionService
from finstatements.services.report_service import ReportService

__all__ = [
    "StatementIngestionService",
    "DashboardService",
    "ReportService",
]
