"""Financial statement schemas and supporting enums."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from finstatements.domain.ingestion import IngestionState
from finstatements.schemas.inconsistency import Inconsistency
from finstatements.schemas.metric import Metric


class StatementType(str, Enum):
    INCOME_STATEMENT = "income_statement"
    BALANCE_SHEET = "balance_sheet"
    CASH_FLOW = "cash_flow"
    ANNUAL_REPORT = "annual_report"


class StatementStatus(str, Enum):
    PROCESSING = "processing"  # processed_at still null
    ISSUES = "issues"  # processed, with at least one inconsistency
    PROCESSED = "processed"


class StatementIngestRequest(BaseModel):
    """Metadata submitted alongside an uploaded document or URL."""

    company_id: int = Field(gt=0)
    statement_type: StatementType = StatementType.INCOME_STATEMENT
    year: int = Field(ge=2000, le=2030)
    quarter: Optional[int] = Field(default=None, ge=1, le=4)

    @property
    def period_label(self) -> str:
        return f"Q{self.quarter}" if self.quarter else "Annual"


class Statement(BaseModel):
    id: int
    company_id: int
    statement_type: StatementType
    period: str
    year: int
    quarter: Optional[int] = None
    file_path: Optional[str] = None
    processed_at: Optional[datetime] = None
    uploaded_by: int

    model_config = {"from_attributes": True}


class StatementSummary(Statement):
    """Statement row for list views, with counts and derived status."""

    company_name: str
    metrics_count: int = 0
    inconsistency_count: int = 0
    status: StatementStatus = StatementStatus.PROCESSING


class StatementDetail(StatementSummary):
    metrics: List[Metric] = []
    inconsistencies: List[Inconsistency] = []


class IngestionResult(BaseModel):
    """Outcome of one successful ingestion run."""

    statement_id: int
    state: IngestionState
    metrics_saved: int
    inconsistencies_saved: int
    detection_degraded: bool = False
    source: Optional[str] = None


def derive_status(processed_at: Optional[datetime], inconsistency_count: int) -> StatementStatus:
    if processed_at is None:
        return StatementStatus.PROCESSING
    if inconsistency_count > 0:
        return StatementStatus.ISSUES
    return StatementStatus.PROCESSED
