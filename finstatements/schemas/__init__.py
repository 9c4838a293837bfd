"""Pydantic schemas for request/response validation and domain types."""

from finstatements.schemas.analytics import (
    CompanyAnalytics,
    CompanySeverityCount,
    CompanyStatementCount,
    DashboardCharts,
    DashboardSummary,
    LabelledCount,
    MetricPoint,
    RecentActivity,
)
from finstatements.schemas.company import Company, CompanyCreate, CompanyUpdate, CompanyWithStats
from finstatements.schemas.inconsistency import DetectedInconsistency, Inconsistency, Severity
from finstatements.schemas.metric import ExtractedMetric, Metric
from finstatements.schemas.report import (
    GeneratedReport,
    Report,
    ReportData,
    ReportFormat,
    ReportRequest,
    ReportType,
)
from finstatements.schemas.statement import (
    IngestionResult,
    Statement,
    StatementDetail,
    StatementIngestRequest,
    StatementStatus,
    StatementSummary,
    StatementType,
)
from finstatements.schemas.user import Team, TeamCreate, User, UserCreate, UserRole, UserUpdate

__all__ = [
    "Company", "CompanyCreate", "CompanyUpdate", "CompanyWithStats",
    "Statement", "StatementSummary", "StatementDetail", "StatementIngestRequest",
    "StatementType", "StatementStatus", "IngestionResult",
    "ExtractedMetric", "Metric",
    "DetectedInconsistency", "Inconsistency", "Severity",
    "User", "UserCreate", "UserUpdate", "UserRole", "Team", "TeamCreate",
    "Report", "ReportRequest", "ReportData", "ReportType", "ReportFormat", "GeneratedReport",
    "DashboardSummary", "DashboardCharts", "RecentActivity", "LabelledCount",
    "MetricPoint", "CompanySeverityCount", "CompanyStatementCount", "CompanyAnalytics",
]
