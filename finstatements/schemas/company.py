"""Company schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class CompanyBase(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    industry: Optional[str] = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Company name cannot be empty")
        return v

    @field_validator("industry")
    @classmethod
    def blank_industry_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return v.strip() or None


class CompanyCreate(CompanyBase):
    pass


class CompanyUpdate(CompanyBase):
    pass


class Company(CompanyBase):
    id: int
    team_id: Optional[int] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class CompanyWithStats(Company):
    """Company with the number of statements uploaded for it."""

    statement_count: int = 0
