"""Company ORM model."""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from finstatements.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CompanyModel(Base):
    __tablename__ = "companies"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False, index=True)
    industry = Column(String)
    team_id = Column(Integer, ForeignKey("teams.id", ondelete="SET NULL"))
    created_at = Column(DateTime(timezone=True), default=_utcnow)

    # Relationships
    team = relationship("TeamModel", back_populates="companies")
    statements = relationship(
        "StatementModel", back_populates="company", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Company id={self.id} {self.name}>"
