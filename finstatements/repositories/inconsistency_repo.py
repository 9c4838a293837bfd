"""Inconsistency repository."""

from typing import List

from sqlalchemy.orm import Session

from finstatements.models.inconsistency import InconsistencyModel
from finstatements.repositories.base import BaseRepository
from finstatements.schemas.inconsistency import DetectedInconsistency


class InconsistencyRepository(BaseRepository[InconsistencyModel]):
    def __init__(self, db: Session):
        super().__init__(db, InconsistencyModel)

    def add(self, statement_id: int, found: DetectedInconsistency) -> InconsistencyModel:
        return self.create(
            InconsistencyModel(
                statement_id=statement_id,
                inconsistency_type=found.inconsistency_type,
                description=found.description,
                severity=found.severity.value,
            )
        )

    def for_statement(self, statement_id: int) -> List[InconsistencyModel]:
        return (
            self.db.query(self.model)
            .filter(self.model.statement_id == statement_id)
            .order_by(self.model.id)
            .all()
        )
