"""Inconsistency ORM model: data-quality issues flagged on a statement."""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship

from finstatements.database import Base


class InconsistencyModel(Base):
    __tablename__ = "inconsistencies"
    __table_args__ = (
        Index("inconsistencies_statement_severity_idx", "statement_id", "severity"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    statement_id = Column(
        Integer, ForeignKey("financial_statements.id", ondelete="CASCADE"), nullable=False
    )
    inconsistency_type = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    severity = Column(String, nullable=False, default="medium")  # Severity enum value
    detected_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    # Relationships
    statement = relationship("StatementModel", back_populates="inconsistencies")

    def __repr__(self) -> str:
        return (
            f"<Inconsistency statement_id={self.statement_id} "
            f"type={self.inconsistency_type} severity={self.severity}>"
        )
