"""Aggregate queries behind the dashboard and analytics views.

Read-only; every method returns plain tuples or scalars and never touches
the session state.
"""

from typing import Any, List, Optional, Sequence

from sqlalchemy import func
from sqlalchemy.orm import Session

from finstatements.models.company import CompanyModel
from finstatements.models.inconsistency import InconsistencyModel
from finstatements.models.metric import MetricModel
from finstatements.models.statement import StatementModel

REVENUE_METRICS = ("total_revenue",)
PROFITABILITY_METRICS = ("net_income", "gross_profit", "operating_profit")
RATIO_METRICS = ("current_ratio", "debt_to_equity", "return_on_equity", "return_on_assets")


class AnalyticsRepository:
    def __init__(self, db: Session):
        self.db = db

    # ── dashboard ────────────────────────────────────────────────────

    def count_companies(self) -> int:
        return self.db.query(func.count(CompanyModel.id)).scalar()

    def count_statements(self) -> int:
        return self.db.query(func.count(StatementModel.id)).scalar()

    def count_inconsistencies(self, severity: str) -> int:
        return (
            self.db.query(func.count(InconsistencyModel.id))
            .filter(InconsistencyModel.severity == severity)
            .scalar()
        )

    def recent_statements(self, limit: int) -> List[Any]:
        """Rows of ``(statement, company_name)``, most recently processed first."""
        return (
            self.db.query(StatementModel, CompanyModel.name)
            .join(CompanyModel, StatementModel.company_id == CompanyModel.id)
            .order_by(
                StatementModel.processed_at.is_(None),
                StatementModel.processed_at.desc(),
                StatementModel.id.desc(),
            )
            .limit(limit)
            .all()
        )

    def severity_counts(self) -> List[Any]:
        """Rows of ``(severity, count)``."""
        return (
            self.db.query(InconsistencyModel.severity, func.count(InconsistencyModel.id))
            .group_by(InconsistencyModel.severity)
            .order_by(InconsistencyModel.severity)
            .all()
        )

    def industry_counts(self) -> List[Any]:
        """Rows of ``(industry, count)``; companies without an industry are skipped."""
        return (
            self.db.query(CompanyModel.industry, func.count(CompanyModel.id))
            .filter(CompanyModel.industry.isnot(None))
            .group_by(CompanyModel.industry)
            .order_by(func.count(CompanyModel.id).desc(), CompanyModel.industry)
            .all()
        )

    # ── analytics ────────────────────────────────────────────────────

    def companies_with_statements(self) -> List[Any]:
        """Rows of ``(id, name, statement_count)`` for companies with at least one statement."""
        return (
            self.db.query(
                CompanyModel.id,
                CompanyModel.name,
                func.count(StatementModel.id),
            )
            .join(StatementModel, StatementModel.company_id == CompanyModel.id)
            .group_by(CompanyModel.id, CompanyModel.name)
            .order_by(CompanyModel.name)
            .all()
        )

    def metric_series(
        self,
        metric_names: Sequence[str],
        company_ids: Optional[Sequence[int]] = None,
        *,
        newest_first: bool = False,
        limit: Optional[int] = None,
    ) -> List[Any]:
        """Rows of ``(company_name, metric_name, value, year, quarter)`` in period order.

        ``company_ids=None`` means every company; an empty list means none.
        """
        query = (
            self.db.query(
                CompanyModel.name,
                MetricModel.metric_name,
                MetricModel.metric_value,
                StatementModel.year,
                StatementModel.quarter,
            )
            .join(StatementModel, MetricModel.statement_id == StatementModel.id)
            .join(CompanyModel, StatementModel.company_id == CompanyModel.id)
            .filter(MetricModel.metric_name.in_(list(metric_names)))
        )
        if company_ids is not None:
            query = query.filter(CompanyModel.id.in_(list(company_ids)))
        if newest_first:
            query = query.order_by(
                StatementModel.year.desc(),
                StatementModel.quarter.desc(),
                CompanyModel.name,
            )
        else:
            query = query.order_by(
                StatementModel.year,
                StatementModel.quarter.is_(None),
                StatementModel.quarter,
                CompanyModel.name,
                MetricModel.metric_name,
            )
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def inconsistency_counts_by_company(self, company_ids: Sequence[int]) -> List[Any]:
        """Rows of ``(company_name, severity, count)``."""
        return (
            self.db.query(
                CompanyModel.name,
                InconsistencyModel.severity,
                func.count(InconsistencyModel.id),
            )
            .join(StatementModel, InconsistencyModel.statement_id == StatementModel.id)
            .join(CompanyModel, StatementModel.company_id == CompanyModel.id)
            .filter(CompanyModel.id.in_(list(company_ids)))
            .group_by(CompanyModel.name, InconsistencyModel.severity)
            .order_by(CompanyModel.name, InconsistencyModel.severity)
            .all()
        )
