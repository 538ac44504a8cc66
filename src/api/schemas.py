"""Pydantic schemas for API request/response validation."""

import uuid
from datetime import datetime

from pydantic import AliasGenerator, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from db.models import AnalysisStatus


class CamelModel(BaseModel):
    """Accepts and emits camelCase field names, like the result documents."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# Request Schemas (what clients send to us)
# =============================================================================


class AnalysisCreateRequest(CamelModel):
    """Request body for analyzing a page."""

    url: str = Field(
        ...,
        description="Page to analyze; https:// is assumed when no scheme is given",
        examples=["https://example.com/guide"],
    )
    target_keywords: list[str] = Field(
        default_factory=list,
        description="Keywords or questions the page should be cited for",
        examples=[["answer engine optimization", "aeo"]],
    )

    @field_validator("url")
    @classmethod
    def url_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("URL is required")
        return value

    @field_validator("target_keywords")
    @classmethod
    def keywords_not_blank(cls, value: list[str]) -> list[str]:
        cleaned = [k.strip() for k in value]
        if any(not k for k in cleaned):
            raise ValueError("Target keywords must not be blank")
        return cleaned


# =============================================================================
# Response Schemas (what we send back to clients)
# =============================================================================


class AnalysisSummaryResponse(BaseModel):
    """One stored analysis, without its result document."""

    # Read from ORM attribute names, emit camelCase
    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=AliasGenerator(serialization_alias=to_camel),
    )

    id: uuid.UUID
    url: str
    status: AnalysisStatus
    target_keywords: list[str]
    overall_score: int | None
    overall_grade: str | None
    error_message: str | None
    created_at: datetime


class AnalysisListResponse(BaseModel):
    """Response for listing recent analyses."""

    analyses: list[AnalysisSummaryResponse]
    count: int


class TrendPoint(BaseModel):
    score: int | None
    date: datetime


class TrendResponse(BaseModel):
    """Score trend and history for one URL."""

    url: str
    days: int
    trend: dict
    history: list[TrendPoint]


# =============================================================================
# Health Check
# =============================================================================


class HealthResponse(BaseModel):
    """Response for health check endpoint."""

    status: str = "healthy"
    service: str = "citewise"
    version: str = "0.1.0"
