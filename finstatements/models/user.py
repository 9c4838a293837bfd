"""User and team ORM models.

Credentials live with the upstream auth service; these rows only carry
identity, role and team membership.
"""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from finstatements.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TeamModel(Base):
    __tablename__ = "teams"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    description = Column(Text)
    created_at = Column(DateTime(timezone=True), default=_utcnow)

    # Relationships
    members = relationship("UserModel", back_populates="team")
    companies = relationship("CompanyModel", back_populates="team")

    def __repr__(self) -> str:
        return f"<Team id={self.id} {self.name}>"


class UserModel(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String, unique=True, nullable=False, index=True)
    role = Column(String, nullable=False, default="user")  # UserRole enum value
    team_id = Column(Integer, ForeignKey("teams.id", ondelete="SET NULL"))
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    last_login = Column(DateTime(timezone=True))

    # Relationships
    team = relationship("TeamModel", back_populates="members")

    def __repr__(self) -> str:
        return f"<User id={self.id} {self.email} role={self.role}>"
