"""Project CRUD router."""

import time
import uuid

from fastapi import APIRouter, status

from ....config import Config
from ....engine.evaluator import RenderOptions, evaluate
from ....errors import ValidationError
from ....pipeline.orchestrator import GenerationRequest
from ....timeline.models import Project
from ....timeline.validation import (
    parse_resolution,
    require,
    validate_project_name,
    validate_timeline,
)
from ..dependencies import ConfigDep, PipelineDep, RepositoryDep
from ..models.requests import CreateProjectRequest, UpdateProjectRequest
from ..models.responses import ApiResponse, ProjectSummary

router = APIRouter(prefix="/projects", tags=["projects"])


def _new_project_id() -> str:
    return f"project_{int(time.time() * 1000)}_{uuid.uuid4().hex[:6]}"


def _render_options(config: Config, style_mode: str | None) -> RenderOptions:
    if style_mode is not None and style_mode not in ("premium", "bold", "minimal"):
        raise ValidationError(f"Unknown style mode: {style_mode}", fields={"style_mode": ["invalid"]})
    return RenderOptions.from_config(config.render, style_mode)


@router.get("", response_model=list[ProjectSummary])
def list_projects(repository: RepositoryDep) -> list[ProjectSummary]:
    """List all projects with summary info."""
    return [ProjectSummary.from_project(p) for p in repository.list()]


@router.post("", response_model=ApiResponse, status_code=status.HTTP_201_CREATED)
def create_project(
    request: CreateProjectRequest,
    pipeline: PipelineDep,
    repository: RepositoryDep,
) -> ApiResponse:
    """Run the whole pipeline and store the result as a new project."""
    require(validate_project_name(request.project_name), "project_name")
    width = height = None
    if request.video_resolution:
        width, height = parse_resolution(request.video_resolution)

    project_id = _new_project_id()
    result = pipeline.run_or_raise(
        GenerationRequest(
            script=request.original_script,
            style_prompt=request.style_prompt,
            assets=request.uploaded_assets,
            project_id=project_id,
            project_name=request.project_name,
            width=width,
            height=height,
            fps=request.fps,
            target_frames=request.target_frames,
        )
    )

    project = repository.put(
        Project(
            id=project_id,
            project_name=request.project_name,
            original_script=request.original_script,
            style_prompt=request.style_prompt,
            enhanced_script=result.enhancement.enhanced_script,
            beat_analysis=result.beat_analysis,
            uploaded_assets=result.assets,
            timeline=result.timeline,
            status="completed",
        )
    )
    return ApiResponse(data=project.to_dict(), message="Project created successfully")


@router.get("/{project_id}", response_model=ApiResponse)
def get_project(project_id: str, repository: RepositoryDep) -> ApiResponse:
    """Get a stored project."""
    return ApiResponse(data=repository.get(project_id).to_dict())


@router.put("/{project_id}", response_model=ApiResponse)
def update_project(
    project_id: str,
    request: UpdateProjectRequest,
    repository: RepositoryDep,
) -> ApiResponse:
    """Replace a project's timeline. The project goes back to draft."""
    project = repository.get(project_id)

    report = validate_timeline(request.timeline)
    if not report.valid:
        raise ValidationError(
            f"Invalid timeline: {'; '.join(report.errors)}",
            fields={"timeline": report.errors},
        )

    update = {"timeline": request.timeline.with_derived_total(), "status": "draft"}
    if request.project_name:
        require(validate_project_name(request.project_name), "project_name")
        update["project_name"] = request.project_name
    stored = repository.put(project.model_copy(update=update))
    return ApiResponse(data=stored.to_dict(), message="Project updated")


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_project(project_id: str, repository: RepositoryDep) -> None:
    """Delete a project."""
    repository.delete(project_id)


@router.get("/{project_id}/frames/{frame}", response_model=ApiResponse)
def get_frame(
    project_id: str,
    frame: int,
    repository: RepositoryDep,
    config: ConfigDep,
    style_mode: str | None = None,
) -> ApiResponse:
    """Evaluate a stored project's timeline at one frame."""
    project = repository.get(project_id)
    if project.timeline is None:
        raise ValidationError(f"Project {project_id} has no timeline")
    state = evaluate(project.timeline, frame, options=_render_options(config, style_mode))
    return ApiResponse(data=state.to_dict())
