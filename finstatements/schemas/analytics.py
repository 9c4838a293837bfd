"""Read-side aggregation schemas for the dashboard and analytics views."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel


class RecentActivity(BaseModel):
    statement_id: int
    company_name: str
    statement_type: str
    year: int
    quarter: Optional[int] = None
    processed_at: Optional[datetime] = None


class DashboardSummary(BaseModel):
    companies: int
    statements: int
    high_severity_inconsistencies: int
    recent_activity: List[RecentActivity]


class LabelledCount(BaseModel):
    label: str
    count: int


class MetricPoint(BaseModel):
    company: str
    metric_name: str
    value: Optional[float] = None
    year: int
    quarter: Optional[int] = None


class CompanySeverityCount(BaseModel):
    company: str
    severity: str
    count: int


class DashboardCharts(BaseModel):
    revenue: List[MetricPoint]
    inconsistencies_by_severity: List[LabelledCount]
    companies_by_industry: List[LabelledCount]


class CompanyStatementCount(BaseModel):
    id: int
    name: str
    statement_count: int


class CompanyAnalytics(BaseModel):
    company_ids: List[int]
    revenue: List[MetricPoint]
    profitability: List[MetricPoint]
    inconsistencies: List[CompanySeverityCount]
    ratios: List[MetricPoint]
