"""
app/schemas/study.py

Request/response schemas for the footprint endpoints.
"""

from __future__ import annotations

import math
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from footprint import FootprintResult, Issue, NormalizedStudy


class IssueResponse(BaseModel):
    """
    API response model for one validation issue.
    """

    field: str
    message: str
    severity: Literal["error", "warning"]

    @classmethod
    def from_issue(cls, issue: Issue) -> "IssueResponse":
        return cls(field=issue.field, message=issue.message, severity=issue.severity)


class GreyComponentResponse(BaseModel):
    enabled: bool
    pollutant: str
    load_kg: float
    cmax_mg_l: float
    cnat_mg_l: float


class StudyResponse(BaseModel):
    """
    API response model for a normalized study.
    """

    production_total_kg: float
    blue_m3: float
    green_m3: float
    grey: GreyComponentResponse

    @classmethod
    def from_study(cls, study: NormalizedStudy) -> "StudyResponse":
        return cls.model_validate(study.to_dict())


class FootprintResultPayload(BaseModel):
    """
    Footprint metrics, used in responses and as the optional precomputed
    ``result`` of export requests.
    """

    model_config = ConfigDict(extra="ignore")

    blue_l_per_kg: float
    green_l_per_kg: float
    grey_l_per_kg: float
    total_l_per_kg: float
    blue_m3_total: float
    green_m3_total: float
    grey_m3_total: float
    total_m3: float

    @field_validator("*")
    @classmethod
    def _finite(cls, value: float) -> float:
        if not math.isfinite(value):
            raise ValueError("must be a finite number")
        return value

    @classmethod
    def from_result(cls, result: FootprintResult) -> "FootprintResultPayload":
        return cls.model_validate(result.to_dict())

    def to_result(self) -> FootprintResult:
        return FootprintResult(**self.model_dump())


class IssuesResponse(BaseModel):
    """
    Body of every rejected request.
    """

    ok: Literal[False] = False
    issues: list[IssueResponse] = Field(default_factory=list)


class CalculateResponse(BaseModel):
    ok: Literal[True] = True
    study: StudyResponse
    result: FootprintResultPayload
    issues: list[IssueResponse] = Field(default_factory=list)


class CSVValidationResponse(BaseModel):
    """
    API response model for CSV study validation.
    """

    ok: bool
    headers: list[str] = Field(default_factory=list)
    preview: StudyResponse | None = None
    issues: list[IssueResponse] = Field(default_factory=list)


class ExportRequest(BaseModel):
    """
    Export body: the study to export and, optionally, its known result.
    """

    model_config = ConfigDict(extra="ignore")

    study: Any = None
    result: FootprintResultPayload | None = None


class ExampleResponse(BaseModel):
    study: StudyResponse
    result: FootprintResultPayload


class HealthResponse(BaseModel):
    status: Literal["ok"] = "ok"
    service: str

