"""Financial statement repository."""

from datetime import datetime
from typing import Any, List, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session, joinedload, selectinload

from finstatements.models.company import CompanyModel
from finstatements.models.inconsistency import InconsistencyModel
from finstatements.models.metric import MetricModel
from finstatements.models.statement import StatementModel
from finstatements.repositories.base import BaseRepository

_metrics_count = (
    select(func.count(MetricModel.id))
    .where(MetricModel.statement_id == StatementModel.id)
    .correlate(StatementModel)
    .scalar_subquery()
)

_inconsistency_count = (
    select(func.count(InconsistencyModel.id))
    .where(InconsistencyModel.statement_id == StatementModel.id)
    .correlate(StatementModel)
    .scalar_subquery()
)


class StatementRepository(BaseRepository[StatementModel]):
    def __init__(self, db: Session):
        super().__init__(db, StatementModel)

    def list_summaries(
        self,
        *,
        search: Optional[str] = None,
        company_id: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> List[Any]:
        """Rows of ``(statement, company_name, metrics_count, inconsistency_count)``.

        Newest processed first, unprocessed statements last, then by
        year and quarter descending.
        """
        query = (
            self.db.query(
                self.model,
                CompanyModel.name.label("company_name"),
                _metrics_count.label("metrics_count"),
                _inconsistency_count.label("inconsistency_count"),
            )
            .join(CompanyModel, self.model.company_id == CompanyModel.id)
        )
        if company_id is not None:
            query = query.filter(self.model.company_id == company_id)
        if search:
            pattern = f"%{search.strip()}%"
            query = query.filter(
                or_(CompanyModel.name.ilike(pattern), self.model.statement_type.ilike(pattern))
            )
        query = query.order_by(
            self.model.processed_at.is_(None),
            self.model.processed_at.desc(),
            self.model.year.desc(),
            self.model.quarter.desc(),
            self.model.id.desc(),
        )
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def get_detail(self, statement_id: int) -> Optional[StatementModel]:
        return (
            self.db.query(self.model)
            .options(
                joinedload(self.model.company),
                selectinload(self.model.metrics),
                selectinload(self.model.inconsistencies),
            )
            .filter(self.model.id == statement_id)
            .first()
        )

    def mark_processed(self, statement: StatementModel, when: datetime) -> StatementModel:
        """Stamp ``processed_at`` (caller must commit)."""
        statement.processed_at = when
        return self.update(statement)
