"""Financial metric ORM model."""

from sqlalchemy import Column, Float, ForeignKey, Index, Integer, String
from sqlalchemy.orm import relationship

from finstatements.database import Base


class MetricModel(Base):
    __tablename__ = "financial_metrics"
    __table_args__ = (
        Index("metrics_statement_name_idx", "statement_id", "metric_name"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    statement_id = Column(
        Integer, ForeignKey("financial_statements.id", ondelete="CASCADE"), nullable=False
    )
    metric_name = Column(String, nullable=False)  # free-form, e.g. "total_revenue"
    metric_value = Column(Float)
    metric_category = Column(String, nullable=False, default="general")

    # Relationships
    statement = relationship("StatementModel", back_populates="metrics")

    def __repr__(self) -> str:
        return f"<Metric statement_id={self.statement_id} {self.metric_name}={self.metric_value}>"
