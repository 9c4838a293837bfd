"""User and team repositories."""

from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from finstatements.models.report import ReportModel
from finstatements.models.statement import StatementModel
from finstatements.models.user import TeamModel, UserModel
from finstatements.repositories.base import BaseRepository


class UserRepository(BaseRepository[UserModel]):
    def __init__(self, db: Session):
        super().__init__(db, UserModel)

    def get_by_email(self, email: str) -> Optional[UserModel]:
        return (
            self.db.query(self.model)
            .filter(self.model.email == email.strip().lower())
            .first()
        )

    def list_with_teams(self) -> List[UserModel]:
        return (
            self.db.query(self.model)
            .options(joinedload(self.model.team))
            .order_by(self.model.created_at.desc(), self.model.id.desc())
            .all()
        )

    def has_authored_records(self, user_id: int) -> bool:
        """True if statements or reports still point at this user."""
        uploaded = (
            self.db.query(StatementModel.id)
            .filter(StatementModel.uploaded_by == user_id)
            .first()
        )
        if uploaded is not None:
            return True
        created = (
            self.db.query(ReportModel.id)
            .filter(ReportModel.created_by == user_id)
            .first()
        )
        return created is not None


class TeamRepository(BaseRepository[TeamModel]):
    def __init__(self, db: Session):
        super().__init__(db, TeamModel)

    def list_by_name(self) -> List[TeamModel]:
        return self.db.query(self.model).order_by(self.model.name).all()
