"""Read-side aggregation for the dashboard and the analytics view."""

import logging
from typing import List, Sequence

from finstatements.repositories.analytics_repo import (
    PROFITABILITY_METRICS,
    RATIO_METRICS,
    REVENUE_METRICS,
    AnalyticsRepository,
)
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
from finstatements.schemas.inconsistency import Severity

logger = logging.getLogger(__name__)

DASHBOARD_REVENUE_POINTS = 20


def _points(rows) -> List[MetricPoint]:
    return [
        MetricPoint(company=company, metric_name=name, value=value, year=year, quarter=quarter)
        for company, name, value, year, quarter in rows
    ]


class DashboardService:
    def __init__(self, analytics_repo: AnalyticsRepository, recent_activity_limit: int = 5):
        self.analytics = analytics_repo
        self.recent_activity_limit = recent_activity_limit

    def summary(self) -> DashboardSummary:
        recent = [
            RecentActivity(
                statement_id=statement.id,
                company_name=company_name,
                statement_type=statement.statement_type,
                year=statement.year,
                quarter=statement.quarter,
                processed_at=statement.processed_at,
            )
            for statement, company_name in self.analytics.recent_statements(
                self.recent_activity_limit
            )
        ]
        return DashboardSummary(
            companies=self.analytics.count_companies(),
            statements=self.analytics.count_statements(),
            high_severity_inconsistencies=self.analytics.count_inconsistencies(
                Severity.HIGH.value
            ),
            recent_activity=recent,
        )

    def charts(self) -> DashboardCharts:
        revenue = self.analytics.metric_series(
            REVENUE_METRICS, newest_first=True, limit=DASHBOARD_REVENUE_POINTS
        )
        return DashboardCharts(
            revenue=_points(revenue),
            inconsistencies_by_severity=[
                LabelledCount(label=severity, count=count)
                for severity, count in self.analytics.severity_counts()
            ],
            companies_by_industry=[
                LabelledCount(label=industry, count=count)
                for industry, count in self.analytics.industry_counts()
            ],
        )

    def companies_with_statements(self) -> List[CompanyStatementCount]:
        return [
            CompanyStatementCount(id=cid, name=name, statement_count=count)
            for cid, name, count in self.analytics.companies_with_statements()
        ]

    def company_analytics(self, company_ids: Sequence[int]) -> CompanyAnalytics:
        """Revenue, profitability, inconsistency and ratio series for the selected companies."""
        ids = sorted(set(company_ids))
        if not ids:
            return CompanyAnalytics(
                company_ids=[], revenue=[], profitability=[], inconsistencies=[], ratios=[]
            )

        result = CompanyAnalytics(
            company_ids=ids,
            revenue=_points(self.analytics.metric_series(REVENUE_METRICS, ids)),
            profitability=_points(self.analytics.metric_series(PROFITABILITY_METRICS, ids)),
            inconsistencies=[
                CompanySeverityCount(company=company, severity=severity, count=count)
                for company, severity, count in self.analytics.inconsistency_counts_by_company(ids)
            ],
            ratios=_points(self.analytics.metric_series(RATIO_METRICS, ids)),
        )
        logger.info(
            "Analytics for %d companies: %d revenue, %d profitability, %d ratio points",
            len(ids),
            len(result.revenue),
            len(result.profitability),
            len(result.ratios),
        )
        return result
