"""Generation pipeline orchestrator."""

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Iterator, Optional

from pydantic import ValidationError as SchemaError
from rich.console import Console

from ..config import Config, load_config
from ..errors import KineticError, ProviderError, ValidationError
from ..providers.base import Stage, SynthesisRequest
from ..providers.factory import ProviderSet, create_providers
from ..timeline.models import (
    AnimationTimeline,
    BeatAnalysisResult,
    ScriptEnhancementResult,
    TimelineMetadata,
    UploadedAssets,
    UploadFile,
)
from ..timeline.validation import (
    AUDIO_EXTENSIONS,
    IMAGE_EXTENSIONS,
    VIDEO_EXTENSIONS,
    require,
    validate_file_extension,
    validate_fps,
    validate_script,
    validate_style_prompt,
    validate_timeline,
)
from .synthesis import split_sentences


logger = logging.getLogger(__name__)
console = Console(stderr=True)

_EXTENSIONS = {
    "logo": ["png", "svg"],
    "music": AUDIO_EXTENSIONS,
    "productImages": IMAGE_EXTENSIONS,
    "productVideos": VIDEO_EXTENSIONS,
}


@dataclass
class GenerationRequest:
    """Inputs of one pipeline run.

    Either ``files`` (uploaded by the upload stage) or ``assets`` (already
    uploaded) must provide a music track.
    """

    script: str
    style_prompt: str
    files: list[UploadFile] = field(default_factory=list)
    assets: Optional[UploadedAssets] = None
    project_id: Optional[str] = None
    project_name: str = "Untitled Project"
    width: Optional[int] = None
    height: Optional[int] = None
    fps: Optional[int] = None
    target_frames: Optional[int] = None


@dataclass
class PipelineResult:
    """Result of the generation pipeline."""

    success: bool
    timeline: AnimationTimeline | None
    stages_completed: list[str]
    failed_stage: str | None = None
    error_message: str | None = None
    assets: UploadedAssets | None = None
    beat_analysis: BeatAnalysisResult | None = None
    enhancement: ScriptEnhancementResult | None = None
    metadata: dict = field(default_factory=dict)
    error: KineticError | None = field(default=None, repr=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "timeline": self.timeline.to_dict() if self.timeline else None,
            "stages_completed": list(self.stages_completed),
            "failed_stage": self.failed_stage,
            "error_message": self.error_message,
            "metadata": dict(self.metadata),
        }


class GenerationPipeline:
    """Run upload, beat analysis, script enhancement and timeline synthesis.

    Stages run strictly in order and the first failure ends the run. Each
    stage checks its inputs before calling its provider and reports
    provider failures tagged with the stage name. Retries belong to the
    provider HTTP client, not to the pipeline.
    """

    def __init__(
        self,
        config: Config | None = None,
        providers: ProviderSet | None = None,
        verbose: bool = False,
    ):
        """Initialize the pipeline.

        Args:
            config: Configuration object. If None, loads from config.yaml.
            providers: Stage providers. If None, chosen from the config.
            verbose: If True, print stage progress to the console.
        """
        self.config = config or load_config()
        self.providers = providers or create_providers(self.config)
        self.verbose = verbose

        # project id -> [lock, runs holding or waiting for it]
        self._locks: dict[str, list] = {}
        self._locks_guard = threading.Lock()

        # Progress callback
        self._progress_callback: Callable[[str, float], None] | None = None

        self._render_submitter = None

    def set_progress_callback(self, callback: Callable[[str, float], None]) -> None:
        """Set a callback for progress updates.

        Args:
            callback: Function that receives (stage_name, progress_percent)
        """
        self._progress_callback = callback

    def _report_progress(self, stage: Stage, progress: float) -> None:
        if self._progress_callback:
            self._progress_callback(stage.value, progress)
        if self.verbose:
            console.print(f"[cyan]{stage.value}[/cyan] {progress:.0f}%")

    @contextmanager
    def _project_lock(self, project_id: Optional[str]) -> Iterator[None]:
        """Serialize runs for the same project; other projects run freely."""
        if project_id is None:
            yield
            return
        with self._locks_guard:
            entry = self._locks.setdefault(project_id, [threading.Lock(), 0])
            entry[1] += 1
        try:
            with entry[0]:
                yield
        finally:
            with self._locks_guard:
                entry[1] -= 1
                if not entry[1]:
                    del self._locks[project_id]

    def _call(self, stage: Stage, provider: Any, fn: Callable, *args):
        """Invoke a provider, mapping its failures to typed errors."""
        try:
            return fn(*args)
        except KineticError:
            raise
        except SchemaError as e:
            raise ValidationError(
                f"{provider.name} returned data that does not match the schema: {e.error_count()} error(s)",
                stage=stage.value,
            ) from e
        except Exception as e:
            raise ProviderError(stage.value, provider.name, str(e) or type(e).__name__, cause=e) from e

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    def upload(self, request: GenerationRequest) -> UploadedAssets:
        stage = Stage.UPLOAD
        if request.assets is not None:
            assets = request.assets
        else:
            if not any(f.kind == "music" for f in request.files):
                raise ValidationError("Music file is required", stage=stage.value, fields={"music": ["required"]})
            for file in request.files:
                require(validate_file_extension(file.filename, _EXTENSIONS[file.kind]), file.kind, stage.value)
            provider = self.providers.upload
            assets = self._call(stage, provider, provider.upload, request.files)

        if assets.music_file is None or not assets.music_file.url:
            raise ValidationError("Music file is required", stage=stage.value, fields={"music": ["required"]})
        return assets

    def analyze_beats(self, music_url: str, fps: int) -> BeatAnalysisResult:
        stage = Stage.BEAT_ANALYSIS
        if not music_url:
            raise ValidationError("musicFileUrl is required", stage=stage.value)
        require(validate_fps(fps), "fps", stage.value)

        provider = self.providers.beat_analysis
        result = self._call(stage, provider, provider.analyze, music_url, fps)

        beats = result.beats
        if any(b < 0 for b in beats) or any(b2 <= b1 for b1, b2 in zip(beats, beats[1:])):
            raise ValidationError(
                f"{provider.name} returned beats that are negative or not increasing",
                stage=stage.value,
            )
        return result

    def enhance_script(self, script: str, style_prompt: str) -> ScriptEnhancementResult:
        stage = Stage.SCRIPT_ENHANCEMENT
        require(validate_script(script), "script", stage.value)
        require(validate_style_prompt(style_prompt), "style_prompt", stage.value)

        provider = self.providers.script_enhancement
        return self._call(stage, provider, provider.enhance, script, style_prompt)

    def synthesize(self, synthesis: SynthesisRequest) -> AnimationTimeline:
        stage = Stage.TIMELINE_SYNTHESIS
        script = synthesis.enhancement.enhanced_script
        if not script.strip():
            raise ValidationError("enhancedScript is required", stage=stage.value)
        if not split_sentences(script):
            raise ValidationError(
                "enhancedScript contains no sentences",
                stage=stage.value,
                fields={"enhancedScript": ["no sentences"]},
            )
        if synthesis.assets.music_file is None:
            raise ValidationError("Music file is required", stage=stage.value)

        provider = self.providers.timeline_synthesis
        timeline = self._call(stage, provider, provider.synthesize, synthesis)

        report = validate_timeline(timeline)
        if not report.valid:
            raise ValidationError(
                f"{provider.name} produced an invalid timeline: {'; '.join(report.errors)}",
                stage=stage.value,
                fields={"timeline": report.errors},
            )
        return timeline

    # ------------------------------------------------------------------
    # Runs
    # ------------------------------------------------------------------

    def run(self, request: GenerationRequest) -> PipelineResult:
        """Run every stage in order.

        Stage failures do not raise: the result carries the failed stage
        and the error. Use ``run_or_raise`` to get the typed error instead.

        Args:
            request: The generation inputs.

        Returns:
            PipelineResult with the timeline on success.
        """
        video = self.config.video
        fps = request.fps or video.fps
        stages_completed: list[str] = []
        result = PipelineResult(success=False, timeline=None, stages_completed=stages_completed)
        current = Stage.UPLOAD

        with self._project_lock(request.project_id):
            started = datetime.now()
            try:
                logger.info("Stage %s started", current.value)
                self._report_progress(current, 0)
                result.assets = self.upload(request)
                stages_completed.append(current.value)

                current = Stage.BEAT_ANALYSIS
                logger.info("Stage %s started", current.value)
                self._report_progress(current, 25)
                result.beat_analysis = self.analyze_beats(result.assets.music_file.url, fps)
                stages_completed.append(current.value)

                current = Stage.SCRIPT_ENHANCEMENT
                logger.info("Stage %s started", current.value)
                self._report_progress(current, 50)
                result.enhancement = self.enhance_script(request.script, request.style_prompt)
                stages_completed.append(current.value)

                current = Stage.TIMELINE_SYNTHESIS
                logger.info("Stage %s started", current.value)
                self._report_progress(current, 75)
                timeline = self.synthesize(
                    SynthesisRequest(
                        enhancement=result.enhancement,
                        beat_analysis=result.beat_analysis,
                        assets=result.assets,
                        width=request.width or video.width,
                        height=request.height or video.height,
                        fps=fps,
                        target_frames=request.target_frames or video.target_frames,
                        project_name=request.project_name,
                        style_prompt=request.style_prompt,
                        timeline_id=request.project_id,
                    )
                )
                stages_completed.append(current.value)

            except (ValidationError, ProviderError) as e:
                logger.error("Stage %s failed: %s", current.value, e)
                result.failed_stage = current.value
                result.error_message = str(e)
                result.error = e
                return result

            now = datetime.now().isoformat()
            result.timeline = timeline.model_copy(
                update={"metadata": TimelineMetadata(created_at=now, updated_at=now)}
            )
            result.success = True
            result.metadata = {
                "providers": self.providers.names(),
                "duration_seconds": (datetime.now() - started).total_seconds(),
                "total_frames": result.timeline.video.total_frames,
                "scenes": len(result.timeline.scenes),
            }
            self._report_progress(current, 100)
            logger.info(
                "Pipeline finished: %d scenes, %d frames",
                len(result.timeline.scenes),
                result.timeline.video.total_frames,
            )
            return result

    def run_or_raise(self, request: GenerationRequest) -> PipelineResult:
        """Like ``run`` but re-raise the stage error on failure."""
        result = self.run(request)
        if not result.success and result.error is not None:
            raise result.error
        return result

    def submit_render(
        self,
        timeline: AnimationTimeline,
        resolution: Optional[str] = None,
        duration_in_frames: Optional[int] = None,
        submitter=None,
    ):
        """Hand a timeline to the render back end.

        Not part of ``run``: rendering is requested separately, usually
        after the timeline has been reviewed or edited.

        Args:
            timeline: The timeline to render.
            resolution: Output resolution override, ``"WxH"``.
            duration_in_frames: Output duration override.
            submitter: Render back end. If None, chosen from the config.

        Returns:
            RenderResult from the submitter.

        Raises:
            ValidationError: If the timeline or an override is invalid.
            ProviderError: If the render back end fails.
        """
        from ..render.job import RenderJobSpec, create_render_submitter

        stage = Stage.RENDER
        report = validate_timeline(timeline)
        if not report.valid:
            raise ValidationError(
                f"Cannot render an invalid timeline: {'; '.join(report.errors)}",
                stage=stage.value,
                fields={"timeline": report.errors},
            )
        try:
            job = RenderJobSpec.from_resolution(timeline, resolution, duration_in_frames)
        except ValidationError as e:
            raise ValidationError(e.message, stage=stage.value, fields=e.fields) from e

        if submitter is None:
            if self._render_submitter is None:
                self._render_submitter = create_render_submitter(self.config)
            submitter = self._render_submitter

        logger.info(
            "Stage %s started: %s, %d frames via %s",
            stage.value,
            timeline.id,
            job.effective_duration,
            submitter.name,
        )
        self._report_progress(stage, 0)
        result = self._call(stage, submitter, submitter.submit, job)
        self._report_progress(stage, 100)
        return result
