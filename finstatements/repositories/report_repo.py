"""Report repository."""

from typing import List

from sqlalchemy.orm import Session, joinedload

from finstatements.models.report import ReportModel
from finstatements.repositories.base import BaseRepository


class ReportRepository(BaseRepository[ReportModel]):
    def __init__(self, db: Session):
        super().__init__(db, ReportModel)

    def list_with_creator(self, *, limit: int = 100) -> List[ReportModel]:
        return (
            self.db.query(self.model)
            .options(joinedload(self.model.creator))
            .order_by(self.model.created_at.desc(), self.model.id.desc())
            .limit(limit)
            .all()
        )
