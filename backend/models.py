"""Data models and types used across the backend.

API response models are in schemas.py.
Types for the extraction intermediate and rule evaluation live here.
"""

from collections.abc import Mapping
from typing import Literal, NotRequired, TypedDict

TagStatus = Literal["success", "warning", "error"]
TagCategory = Literal["essential", "social", "other"]
IssueType = Literal["error", "warning"]
Impact = Literal["high", "medium", "low"]
RecommendationCategory = Literal["technical", "content", "social", "performance"]

# Read only by the preview pass.
PREVIEW_KEYS: tuple[str, ...] = (
    "twitter:title",
    "twitter:description",
    "twitter:image",
)

# Read-only map from tag id (or preview key) to the extracted text, None when absent.
ExtractedValues = Mapping[str, str | None]


class IssueData(TypedDict):
    """Summary-panel entry produced by a rule."""

    type: IssueType
    message: str


class Verdict(TypedDict):
    """Outcome of evaluating one rule against one extracted value."""

    status: TagStatus
    statusText: str
    recommendation: NotRequired[str]
    info: NotRequired[str]
    issue: NotRequired[IssueData]
