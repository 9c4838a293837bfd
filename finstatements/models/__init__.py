"""SQLAlchemy ORM models: imported here so Base.metadata sees them."""

from finstatements.models.company import CompanyModel
from finstatements.models.inconsistency import InconsistencyModel
from finstatements.models.metric import MetricModel
from finstatements.models.report import ReportModel
from finstatements.models.statement import StatementModel
from finstatements.models.user import TeamModel, UserModel

__all__ = [
    "CompanyModel",
    "StatementModel",
    "MetricModel",
    "InconsistencyModel",
    "UserModel",
    "TeamModel",
    "ReportModel",
]
