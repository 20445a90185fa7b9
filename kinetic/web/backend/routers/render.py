"""Render job router."""

from fastapi import APIRouter

from ....errors import ValidationError
from ..dependencies import PipelineDep, RenderSubmitterDep, RepositoryDep
from ..models.requests import RenderRequest
from ..models.responses import ApiResponse

router = APIRouter(prefix="/render", tags=["render"])


@router.post("", response_model=ApiResponse)
def render(
    request: RenderRequest,
    pipeline: PipelineDep,
    submitter: RenderSubmitterDep,
    repository: RepositoryDep,
) -> ApiResponse:
    """Submit a render job for a stored project or an inline timeline."""
    if request.timeline is not None:
        timeline = request.timeline
    elif request.project_id:
        timeline = repository.get(request.project_id).timeline
        if timeline is None:
            raise ValidationError(f"Project {request.project_id} has no timeline")
    else:
        raise ValidationError(
            "Either projectId or timeline is required",
            fields={"timeline": ["required"]},
        )

    result = pipeline.submit_render(
        timeline,
        resolution=request.resolution,
        duration_in_frames=request.duration_in_frames,
        submitter=submitter,
    )
    return ApiResponse(data=result.to_dict(), message="Render completed")
