"""Pipeline stage router.

Each endpoint runs a single stage of the generation pipeline, so a client
can drive the stages one at a time and edit the intermediate results.
"""

from fastapi import APIRouter

from ....providers.base import SynthesisRequest
from ....timeline.models import ScriptEnhancementResult
from ..dependencies import PipelineDep
from ..models.requests import (
    BeatAnalysisRequest,
    GenerateTimelineRequest,
    ScriptEnhancementRequest,
)
from ..models.responses import ApiResponse

router = APIRouter(tags=["stages"])


@router.post("/beat-analysis", response_model=ApiResponse)
def analyze_beats(request: BeatAnalysisRequest, pipeline: PipelineDep) -> ApiResponse:
    """Detect beats, energy levels and peaks of a music track."""
    result = pipeline.analyze_beats(request.music_file_url, request.fps)
    return ApiResponse(data=result.to_dict(), message="Beat analysis completed successfully")


@router.post("/script-enhancement", response_model=ApiResponse)
def enhance_script(request: ScriptEnhancementRequest, pipeline: PipelineDep) -> ApiResponse:
    """Rewrite a script and pick the words to emphasize."""
    result = pipeline.enhance_script(request.original_script, request.style_prompt)
    return ApiResponse(data=result.to_dict(), message="Script enhanced successfully")


@router.post("/generate-timeline", response_model=ApiResponse)
def generate_timeline(request: GenerateTimelineRequest, pipeline: PipelineDep) -> ApiResponse:
    """Synthesize a timeline from enhancement, beat and asset results."""
    enhancement = ScriptEnhancementResult(
        original_script=request.original_script or request.enhanced_script,
        enhanced_script=request.enhanced_script,
        emphasized_words=request.emphasized_words,
    )
    timeline = pipeline.synthesize(
        SynthesisRequest(
            enhancement=enhancement,
            beat_analysis=request.beat_analysis,
            assets=request.uploaded_assets,
            width=request.video_width,
            height=request.video_height,
            fps=request.fps,
            target_frames=request.target_frames,
            project_name=request.project_name,
            style_prompt=request.style_prompt,
        )
    )
    return ApiResponse(data=timeline.to_dict(), message="Timeline generated successfully")
