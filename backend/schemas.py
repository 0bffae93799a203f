"""Pydantic schemas for API responses.

Field names are camelCase because the browser UI consumes the report verbatim.
"""

from pydantic import BaseModel, ConfigDict

from models import Impact, IssueType, RecommendationCategory, TagCategory, TagStatus


class Tag(BaseModel):
    """One checked meta element."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    value: str | None
    content: str | None
    status: TagStatus
    statusText: str
    category: TagCategory
    description: str
    recommendation: str | None = None
    info: str | None = None


class Issue(BaseModel):
    """Flat entry for the summary panel."""

    model_config = ConfigDict(frozen=True)

    type: IssueType
    message: str


class Recommendation(BaseModel):
    """Actionable advice derived from extracted values."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str
    impact: Impact
    category: RecommendationCategory


class Preview(BaseModel):
    """Search result or social share card."""

    model_config = ConfigDict(frozen=True)

    title: str | None = None
    description: str | None = None
    url: str | None = None
    image: str | None = None


class AnalysisResponse(BaseModel):
    """Response for GET /api/analyze."""

    url: str
    overallScore: int
    validCount: int
    warningCount: int
    errorCount: int
    tags: list[Tag]
    issues: list[Issue]
    recommendations: list[Recommendation]
    googlePreview: Preview
    facebookPreview: Preview
    twitterPreview: Preview
    rawHtml: str
    lastUpdated: str


class ExportResponse(AnalysisResponse):
    """Downloadable report for GET /api/export."""

    exportedAt: str


class HealthResponse(BaseModel):
    status: str


class ErrorResponse(BaseModel):
    message: str
