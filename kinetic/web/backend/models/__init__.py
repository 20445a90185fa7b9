"""Pydantic models for API requests and responses."""

from .requests import (
    BeatAnalysisRequest,
    CreateProjectRequest,
    GenerateTimelineRequest,
    RenderRequest,
    ScriptEnhancementRequest,
    UpdateProjectRequest,
)
from .responses import (
    ApiResponse,
    ErrorBody,
    ErrorResponse,
    ProjectSummary,
)

__all__ = [
    # Requests
    "BeatAnalysisRequest",
    "CreateProjectRequest",
    "GenerateTimelineRequest",
    "RenderRequest",
    "ScriptEnhancementRequest",
    "UpdateProjectRequest",
    # Responses
    "ApiResponse",
    "ErrorBody",
    "ErrorResponse",
    "ProjectSummary",
]
