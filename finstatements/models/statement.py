"""Financial statement ORM model."""

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import relationship

from finstatements.database import Base


class StatementModel(Base):
    __tablename__ = "financial_statements"
    __table_args__ = (
        # Not unique: the same company/period may be uploaded more than once
        Index("statements_company_period_idx", "company_id", "year", "quarter"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    company_id = Column(
        Integer, ForeignKey("companies.id", ondelete="CASCADE"), nullable=False
    )
    statement_type = Column(String, nullable=False)  # StatementType enum value
    period = Column(String, nullable=False)  # "Q1" … "Q4" or "Annual"
    year = Column(Integer, nullable=False)
    quarter = Column(Integer)
    file_path = Column(String)  # archive handle or source URL
    processed_at = Column(DateTime(timezone=True))  # null until extraction completes
    uploaded_by = Column(Integer, ForeignKey("users.id"), nullable=False)

    # Relationships
    company = relationship("CompanyModel", back_populates="statements")
    uploader = relationship("UserModel")
    metrics = relationship(
        "MetricModel", back_populates="statement", cascade="all, delete-orphan"
    )
    inconsistencies = relationship(
        "InconsistencyModel", back_populates="statement", cascade="all, delete-orphan"
    )

    @property
    def is_processed(self) -> bool:
        return self.processed_at is not None

    def __repr__(self) -> str:
        return (
            f"<Statement id={self.id} company_id={self.company_id} "
            f"{self.statement_type} {self.period} {self.year}>"
        )
