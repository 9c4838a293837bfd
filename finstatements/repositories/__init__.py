"""Data access repositories."""

from finstatements.repositories.analytics_repo import AnalyticsRepository
from finstatements.repositories.base import BaseRepository
from finstatements.repositories.company_repo import CompanyRepository
from finstatements.repositories.inconsistency_repo import InconsistencyRepository
from finstatements.repositories.metric_repo import MetricRepository
from finstatements.repositories.report_repo import ReportRepository
from finstatements.repositories.statement_repo import StatementRepository
from finstatements.repositories.user_repo import TeamRepository, UserRepository

__all__ = [
    "BaseRepository",
    "CompanyRepository",
    "StatementRepository",
    "MetricRepository",
    "InconsistencyRepository",
    "UserRepository",
    "TeamRepository",
    "ReportRepository",
    "AnalyticsRepository",
]
