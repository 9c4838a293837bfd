"""Company repository."""

from typing import List, Optional, Tuple

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from finstatements.models.company import CompanyModel
from finstatements.models.statement import StatementModel
from finstatements.repositories.base import BaseRepository


class CompanyRepository(BaseRepository[CompanyModel]):
    def __init__(self, db: Session):
        super().__init__(db, CompanyModel)

    def list_with_counts(
        self, search: Optional[str] = None
    ) -> List[Tuple[CompanyModel, int]]:
        """Companies ordered by name, each with its statement count.

        ``search`` matches name or industry, case-insensitively.
        """
        query = (
            self.db.query(self.model, func.count(StatementModel.id))
            .outerjoin(StatementModel, StatementModel.company_id == self.model.id)
            .group_by(self.model.id)
        )
        if search:
            pattern = f"%{search.strip()}%"
            query = query.filter(
                or_(self.model.name.ilike(pattern), self.model.industry.ilike(pattern))
            )
        return [(company, count) for company, count in query.order_by(self.model.name).all()]

    def statement_count(self, company_id: int) -> int:
        return (
            self.db.query(func.count(StatementModel.id))
            .filter(StatementModel.company_id == company_id)
            .scalar()
        )
