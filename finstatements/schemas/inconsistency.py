"""Inconsistency schemas and severity enum."""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class DetectedInconsistency(BaseModel):
    """One validated entry returned by the inconsistency detector."""

    inconsistency_type: str = Field(
        min_length=1,
        validation_alias=AliasChoices("inconsistency_type", "type"),
    )
    description: str = Field(min_length=1)
    severity: Severity = Severity.MEDIUM

    @field_validator("inconsistency_type", "description", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @field_validator("severity", mode="before")
    @classmethod
    def coerce_severity(cls, v: Any) -> Severity:
        if isinstance(v, Severity):
            return v
        try:
            return Severity(str(v).strip().lower())
        except ValueError:
            return Severity.MEDIUM


class Inconsistency(BaseModel):
    id: int
    statement_id: int
    inconsistency_type: str
    description: str
    severity: Severity
    detected_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
