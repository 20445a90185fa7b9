"""Pydantic response models for API endpoints."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ....timeline.models import Project


class ApiResponse(BaseModel):
    """Envelope shared by every successful response."""

    success: bool = True
    data: Any = None
    message: Optional[str] = None


class ProjectSummary(BaseModel):
    """Summary of a project for listing."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    project_name: str
    status: str
    scenes: int = Field(description="Number of scenes in the timeline")
    total_frames: int = Field(description="Timeline duration in frames")
    created_at: str
    updated_at: str

    @classmethod
    def from_project(cls, project: Project) -> "ProjectSummary":
        timeline = project.timeline
        return cls(
            id=project.id,
            project_name=project.project_name,
            status=project.status,
            scenes=len(timeline.scenes) if timeline else 0,
            total_frames=timeline.video.total_frames if timeline else 0,
            created_at=project.created_at,
            updated_at=project.updated_at,
        )


class ErrorBody(BaseModel):
    code: str
    message: str
    stage: Optional[str] = None
    provider: Optional[str] = None
    fields: dict[str, list[str]] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    success: bool = False
    error: ErrorBody
