"""Report request / response schemas."""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class ReportType(str, Enum):
    COMPANY_ANALYSIS = "company_analysis"
    COMPARATIVE_ANALYSIS = "comparative_analysis"
    INCONSISTENCY_REPORT = "inconsistency_report"
    FINANCIAL_SUMMARY = "financial_summary"


class ReportFormat(str, Enum):
    EXCEL = "excel"
    PDF = "pdf"
    CSV = "csv"


class ReportRequest(BaseModel):
    """Report configuration; stored verbatim as the report's parameters."""

    name: str = Field(min_length=1, max_length=200)
    type: ReportType = ReportType.COMPANY_ANALYSIS
    company_ids: List[int] = Field(default_factory=list)
    date_range: str = "all"
    include_inconsistencies: bool = True
    format: ReportFormat = ReportFormat.EXCEL


class Report(BaseModel):
    id: int
    name: str
    type: ReportType
    parameters: Dict[str, Any]
    created_by: int
    created_by_email: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class ReportData(BaseModel):
    """Rows gathered for a report; rendering them to a file happens client-side."""

    companies: List[Dict[str, Any]] = []
    statements: List[Dict[str, Any]] = []
    metrics: List[Dict[str, Any]] = []
    inconsistencies: Optional[List[Dict[str, Any]]] = None


class GeneratedReport(BaseModel):
    report: Report
    data: ReportData
