"""Pydantic request models for API endpoints.

Bodies use camelCase keys; snake_case is accepted too.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ....timeline.models import (
    AnimationTimeline,
    BeatAnalysisResult,
    UploadedAssets,
)


class ApiRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BeatAnalysisRequest(ApiRequest):
    """Request to analyze the beats of a music track."""

    music_file_url: str = Field(..., min_length=1, description="Public URL of the music file")
    fps: int = Field(default=30, description="Frame rate the beats are expressed in")


class ScriptEnhancementRequest(ApiRequest):
    """Request to enhance a script."""

    original_script: str = Field(..., description="Script as written by the user")
    style_prompt: str = Field(..., description="Desired style of the video")


class GenerateTimelineRequest(ApiRequest):
    """Request to synthesize a timeline from the earlier stage results."""

    enhanced_script: str = Field(..., description="Output of script enhancement")
    original_script: str = Field(default="", description="Script before enhancement")
    emphasized_words: list[str] = Field(default_factory=list)
    style_prompt: str = Field(default="", description="Desired style of the video")
    beat_analysis: BeatAnalysisResult
    uploaded_assets: UploadedAssets
    video_width: int = 1080
    video_height: int = 1920
    fps: int = 30
    target_frames: int = 600
    project_name: str = "Untitled Project"


class CreateProjectRequest(ApiRequest):
    """Request to run the whole pipeline and store the result as a project."""

    project_name: str = Field(..., description="Project name")
    original_script: str = Field(..., description="Script as written by the user")
    style_prompt: str = Field(..., description="Desired style of the video")
    uploaded_assets: UploadedAssets
    video_resolution: Optional[str] = Field(default=None, description="Output resolution, e.g. 1080x1920")
    fps: Optional[int] = None
    target_frames: Optional[int] = None


class UpdateProjectRequest(ApiRequest):
    """Request to replace a project's timeline wholesale."""

    timeline: AnimationTimeline
    project_name: Optional[str] = None


class RenderRequest(ApiRequest):
    """Request to render a stored project or an inline timeline."""

    project_id: Optional[str] = Field(default=None, description="Stored project to render")
    timeline: Optional[AnimationTimeline] = Field(default=None, description="Inline timeline to render")
    resolution: Optional[str] = Field(default=None, description="Output resolution override, WxH")
    duration_in_frames: Optional[int] = Field(default=None, description="Output duration override")
