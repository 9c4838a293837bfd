"""Metric schemas.

``ExtractedMetric`` is the validated shape of one candidate returned by the
structured-extraction service. Anything that does not fit is dropped at the
ingestion boundary instead of being trusted downstream.
"""

from typing import Any

from pydantic import AliasChoices, BaseModel, Field, field_validator

DEFAULT_CATEGORY = "general"


class ExtractedMetric(BaseModel):
    name: str = Field(
        min_length=1,
        validation_alias=AliasChoices("metric_name", "name"),
    )
    value: float = Field(
        allow_inf_nan=False,
        validation_alias=AliasChoices("metric_value", "value"),
    )
    category: str = Field(
        default=DEFAULT_CATEGORY,
        validation_alias=AliasChoices("metric_category", "category"),
    )

    @field_validator("name")
    @classmethod
    def reject_blank_name(cls, v: str) -> str:
        # stored as given; whitespace only counts as missing
        if not v.strip():
            raise ValueError("metric name must not be blank")
        return v

    @field_validator("value", mode="before")
    @classmethod
    def reject_bool(cls, v: Any) -> Any:
        # bool is an int subclass; True must not become 1.0
        if isinstance(v, bool):
            raise ValueError("metric value must be numeric")
        return v

    @field_validator("category", mode="before")
    @classmethod
    def default_category(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v if v.strip() else DEFAULT_CATEGORY
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return DEFAULT_CATEGORY

    def as_payload(self) -> dict:
        """Shape sent to the inconsistency detector."""
        return {
            "metric_name": self.name,
            "metric_value": self.value,
            "metric_category": self.category,
        }


class Metric(BaseModel):
    id: int
    statement_id: int
    metric_name: str
    metric_value: float | None = None
    metric_category: str

    model_config = {"from_attributes": True}
