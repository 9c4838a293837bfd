"""Gathers report datasets and records each generated report."""

import logging
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from finstatements.models.company import CompanyModel
from finstatements.models.inconsistency import InconsistencyModel
from finstatements.models.metric import MetricModel
from finstatements.models.report import ReportModel
from finstatements.models.statement import StatementModel
from finstatements.repositories.report_repo import ReportRepository
from finstatements.schemas.report import GeneratedReport, Report, ReportData, ReportRequest

logger = logging.getLogger(__name__)

_SEVERITY_RANK = {"high": 0, "medium": 1, "low": 2}


def report_to_schema(report: ReportModel) -> Report:
    return Report(
        id=report.id,
        name=report.name,
        type=report.type,
        parameters=report.parameters or {},
        created_by=report.created_by,
        created_by_email=report.creator.email if report.creator else None,
        created_at=report.created_at,
    )


class ReportService:
    """Builds the rows behind a report; rendering them to a file is left to the client."""

    def __init__(self, db: Session, report_repo: ReportRepository):
        self.db = db
        self.reports = report_repo

    def list_reports(self, limit: int = 100) -> List[Report]:
        return [report_to_schema(r) for r in self.reports.list_with_creator(limit=limit)]

    def generate(self, request: ReportRequest, created_by: int) -> GeneratedReport:
        """Collect the dataset for ``request`` and store a report record."""
        data = self.collect(request)

        report = self.reports.create(
            ReportModel(
                name=request.name,
                type=request.type.value,
                parameters=request.model_dump(mode="json"),
                created_by=created_by,
            )
        )
        self.db.commit()
        self.db.refresh(report)

        logger.info(
            "Report %d (%s) generated: %d companies, %d statements, %d metrics",
            report.id,
            report.type,
            len(data.companies),
            len(data.statements),
            len(data.metrics),
        )
        return GeneratedReport(report=report_to_schema(report), data=data)

    def collect(self, request: ReportRequest) -> ReportData:
        """Dataset for the selected companies; no companies selected means an empty dataset."""
        ids = list(request.company_ids)
        if not ids:
            return ReportData(
                inconsistencies=[] if request.include_inconsistencies else None
            )

        companies = (
            self.db.query(CompanyModel)
            .filter(CompanyModel.id.in_(ids))
            .order_by(CompanyModel.name)
            .all()
        )
        statements = (
            self.db.query(StatementModel, CompanyModel.name)
            .join(CompanyModel, StatementModel.company_id == CompanyModel.id)
            .filter(StatementModel.company_id.in_(ids))
            .order_by(StatementModel.year.desc(), StatementModel.quarter.desc())
            .all()
        )
        metrics = (
            self.db.query(MetricModel, StatementModel.year, StatementModel.quarter, CompanyModel.name)
            .join(StatementModel, MetricModel.statement_id == StatementModel.id)
            .join(CompanyModel, StatementModel.company_id == CompanyModel.id)
            .filter(StatementModel.company_id.in_(ids))
            .order_by(CompanyModel.name, StatementModel.year.desc(), StatementModel.quarter.desc())
            .all()
        )

        data = ReportData(
            companies=[_company_row(c) for c in companies],
            statements=[_statement_row(s, name) for s, name in statements],
            metrics=[
                {
                    "id": m.id,
                    "statement_id": m.statement_id,
                    "metric_name": m.metric_name,
                    "metric_value": m.metric_value,
                    "metric_category": m.metric_category,
                    "year": year,
                    "quarter": quarter,
                    "company_name": name,
                }
                for m, year, quarter, name in metrics
            ],
        )
        if request.include_inconsistencies:
            data.inconsistencies = self._inconsistency_rows(ids)
        return data

    def _inconsistency_rows(self, company_ids: List[int]) -> List[Dict[str, Any]]:
        rows = (
            self.db.query(
                InconsistencyModel, StatementModel.year, StatementModel.quarter, CompanyModel.name
            )
            .join(StatementModel, InconsistencyModel.statement_id == StatementModel.id)
            .join(CompanyModel, StatementModel.company_id == CompanyModel.id)
            .filter(StatementModel.company_id.in_(company_ids))
            .order_by(InconsistencyModel.detected_at.desc(), InconsistencyModel.id.desc())
            .all()
        )
        out = [
            {
                "id": i.id,
                "statement_id": i.statement_id,
                "inconsistency_type": i.inconsistency_type,
                "description": i.description,
                "severity": i.severity,
                "detected_at": i.detected_at.isoformat() if i.detected_at else None,
                "year": year,
                "quarter": quarter,
                "company_name": name,
            }
            for i, year, quarter, name in rows
        ]
        # Most severe first; sort is stable so recency is kept within a severity
        out.sort(key=lambda row: _SEVERITY_RANK.get(row["severity"], len(_SEVERITY_RANK)))
        return out


def _company_row(company: CompanyModel) -> Dict[str, Any]:
    return {
        "id": company.id,
        "name": company.name,
        "industry": company.industry,
        "team_id": company.team_id,
        "created_at": company.created_at.isoformat() if company.created_at else None,
    }


def _statement_row(statement: StatementModel, company_name: str) -> Dict[str, Any]:
    return {
        "id": statement.id,
        "company_id": statement.company_id,
        "company_name": company_name,
        "statement_type": statement.statement_type,
        "period": statement.period,
        "year": statement.year,
        "quarter": statement.quarter,
        "file_path": statement.file_path,
        "processed_at": statement.processed_at.isoformat() if statement.processed_at else None,
    }
