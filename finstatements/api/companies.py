"""Company endpoints: list, inspect, create, rename and delete companies.

Deleting a company removes its statements together with their metrics and
inconsistencies.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from finstatements.database import get_db
from finstatements.dependencies import get_current_user
from finstatements.logging_config import get_logger
from finstatements.models.company import CompanyModel
from finstatements.models.user import UserModel
from finstatements.repositories.company_repo import CompanyRepository
from finstatements.schemas.company import Company, CompanyCreate, CompanyUpdate, CompanyWithStats

logger = get_logger(__name__)
router = APIRouter()


def _with_stats(company: CompanyModel, statement_count: int) -> CompanyWithStats:
    return CompanyWithStats(
        **Company.model_validate(company).model_dump(),
        statement_count=statement_count,
    )


@router.get("/", response_model=List[CompanyWithStats])
def list_companies(
    search: Optional[str] = Query(default=None, max_length=200),
    db: Session = Depends(get_db),
) -> List[CompanyWithStats]:
    """List companies with their statement counts, optionally filtered by name or industry."""
    logger.info("companies_list_requested", search=search)

    try:
        rows = CompanyRepository(db).list_with_counts(search)
    except SQLAlchemyError as e:
        logger.error("companies_list_failed", error=str(e))
        raise HTTPException(status_code=500, detail=f"Failed to list companies: {e}")

    logger.info("companies_list_completed", count=len(rows))
    return [_with_stats(company, count) for company, count in rows]


@router.get("/{company_id}", response_model=CompanyWithStats)
def get_company(company_id: int, db: Session = Depends(get_db)) -> CompanyWithStats:
    repo = CompanyRepository(db)
    company = repo.get(company_id)
    if company is None:
        logger.warning("company_not_found", company_id=company_id)
        raise HTTPException(status_code=404, detail=f"Company {company_id} not found")
    return _with_stats(company, repo.statement_count(company_id))


@router.post("/", response_model=Company, status_code=201)
def create_company(
    body: CompanyCreate,
    db: Session = Depends(get_db),
    user: UserModel = Depends(get_current_user),
) -> Company:
    """Create a company owned by the caller's team."""
    company = CompanyRepository(db).create(
        CompanyModel(name=body.name, industry=body.industry, team_id=user.team_id)
    )
    db.commit()
    logger.info("company_created", company_id=company.id, name=company.name, user_id=user.id)
    return Company.model_validate(company)


@router.put("/{company_id}", response_model=Company)
def update_company(
    company_id: int,
    body: CompanyUpdate,
    db: Session = Depends(get_db),
    user: UserModel = Depends(get_current_user),
) -> Company:
    repo = CompanyRepository(db)
    company = repo.get(company_id)
    if company is None:
        raise HTTPException(status_code=404, detail=f"Company {company_id} not found")

    company.name = body.name
    company.industry = body.industry
    repo.update(company)
    db.commit()
    logger.info("company_updated", company_id=company_id, user_id=user.id)
    return Company.model_validate(company)


@router.delete("/{company_id}", status_code=204)
def delete_company(
    company_id: int,
    db: Session = Depends(get_db),
    user: UserModel = Depends(get_current_user),
) -> Response:
    if not CompanyRepository(db).delete(company_id):
        raise HTTPException(status_code=404, detail=f"Company {company_id} not found")
    db.commit()
    logger.info("company_deleted", company_id=company_id, user_id=user.id)
    return Response(status_code=204)
