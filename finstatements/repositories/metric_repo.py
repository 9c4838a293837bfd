"""Metric repository."""

from typing import List

from sqlalchemy.orm import Session

from finstatements.models.metric import MetricModel
from finstatements.repositories.base import BaseRepository
from finstatements.schemas.metric import ExtractedMetric


class MetricRepository(BaseRepository[MetricModel]):
    def __init__(self, db: Session):
        super().__init__(db, MetricModel)

    def add(self, statement_id: int, metric: ExtractedMetric) -> MetricModel:
        return self.create(
            MetricModel(
                statement_id=statement_id,
                metric_name=metric.name,
                metric_value=metric.value,
                metric_category=metric.category,
            )
        )

    def for_statement(self, statement_id: int) -> List[MetricModel]:
        return (
            self.db.query(self.model)
            .filter(self.model.statement_id == statement_id)
            .order_by(self.model.id)
            .all()
        )
