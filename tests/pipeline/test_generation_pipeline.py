"""Tests for the generation pipeline orchestrator."""

from unittest.mock import MagicMock

import pytest

from kinetic.errors import ProviderError, ValidationError
from kinetic.pipeline.orchestrator import GenerationPipeline, GenerationRequest
from kinetic.providers.base import BeatAnalysisProvider, ScriptEnhancementProvider, TimelineSynthesisProvider
from kinetic.providers.factory import mock_providers
from kinetic.render.job import MockRenderSubmitter, RenderSubmitter
from kinetic.timeline.models import (
    AnimationTimeline,
    BeatAnalysisResult,
    MusicAsset,
    ScriptEnhancementResult,
    UploadedAssets,
    UploadFile,
)


class FailingBeatAnalysis(BeatAnalysisProvider):
    name = "failing-beats"

    def analyze(self, music_url, fps=30):
        raise RuntimeError("service unavailable")


class UnorderedBeatAnalysis(BeatAnalysisProvider):
    name = "unordered-beats"

    def analyze(self, music_url, fps=30):
        return BeatAnalysisResult(tempo=120, beats=[30, 20])


class DecorationOnlyEnhancement(ScriptEnhancementProvider):
    name = "decoration-only"

    def enhance(self, script, style_prompt):
        return ScriptEnhancementResult(original_script=script, enhanced_script="✨ ✨")


class BrokenRenderSubmitter(RenderSubmitter):
    name = "broken-render"

    def submit(self, job):
        raise RuntimeError("renderer offline")


class EmptyTimelineSynthesis(TimelineSynthesisProvider):
    name = "empty-synthesis"

    def synthesize(self, request):
        return AnimationTimeline(id="empty")


@pytest.fixture
def generation_request(sample_script) -> GenerationRequest:
    return GenerationRequest(
        script=sample_script,
        style_prompt="Bold and energetic",
        assets=UploadedAssets(music_file=MusicAsset(url="https://storage.example.com/music.mp3")),
        project_name="Launch",
    )


class TestGenerationPipeline:
    """Tests for GenerationPipeline.run."""

    def test_runs_every_stage(self, mock_config, generation_request):
        """Test runs every stage."""
        result = GenerationPipeline(mock_config).run(generation_request)
        assert result.success
        assert result.stages_completed == [
            "upload",
            "beat_analysis",
            "script_enhancement",
            "timeline_synthesis",
        ]
        assert result.timeline.video.total_frames == 600
        assert result.timeline.metadata is not None
        assert result.metadata["scenes"] == 2
        assert result.metadata["providers"]["beat_analysis"] == "mock-beat-analysis"

    def test_uploads_files(self, mock_config, generation_request):
        """Test uploads files."""
        generation_request.assets = None
        generation_request.files = [
            UploadFile(kind="music", filename="track.mp3"),
            UploadFile(kind="productImages", filename="shot.png"),
        ]
        result = GenerationPipeline(mock_config).run(generation_request)
        assert result.success
        assert result.assets.music_file.url == "https://storage.example.com/music.mp3"
        assert result.timeline.scenes[-1].id == "scene_product"

    def test_music_is_required(self, mock_config, generation_request):
        """Test music is required."""
        generation_request.assets = None
        result = GenerationPipeline(mock_config).run(generation_request)
        assert not result.success
        assert result.failed_stage == "upload"
        assert isinstance(result.error, ValidationError)
        assert result.stages_completed == []

    def test_rejects_bad_extension(self, mock_config, generation_request):
        """Test rejects bad extension."""
        generation_request.assets = None
        generation_request.files = [UploadFile(kind="music", filename="track.txt")]
        result = GenerationPipeline(mock_config).run(generation_request)
        assert result.failed_stage == "upload"
        assert "Invalid file type" in result.error_message

    def test_provider_failure_stops_the_run(self, mock_config, generation_request):
        """Test provider failure stops the run."""
        providers = mock_providers()
        providers.beat_analysis = FailingBeatAnalysis()
        enhancer = MagicMock()
        enhancer.name = "spy-enhancer"
        providers.script_enhancement = enhancer

        result = GenerationPipeline(mock_config, providers=providers).run(generation_request)

        assert not result.success
        assert result.failed_stage == "beat_analysis"
        assert result.stages_completed == ["upload"]
        assert isinstance(result.error, ProviderError)
        assert result.error.provider == "failing-beats"
        assert "service unavailable" in result.error_message
        enhancer.enhance.assert_not_called()

    def test_beat_contract_violation(self, mock_config, generation_request):
        """Test beat contract violation."""
        providers = mock_providers()
        providers.beat_analysis = UnorderedBeatAnalysis()
        result = GenerationPipeline(mock_config, providers=providers).run(generation_request)
        assert result.failed_stage == "beat_analysis"
        assert isinstance(result.error, ValidationError)

    def test_invalid_fps(self, mock_config, generation_request):
        """Test invalid FPS."""
        generation_request.fps = 25
        result = GenerationPipeline(mock_config).run(generation_request)
        assert result.failed_stage == "beat_analysis"
        assert result.error.fields == {"fps": ["FPS must be one of 24, 30, 60"]}

    def test_short_script(self, mock_config, generation_request):
        """Test short script."""
        generation_request.script = "Too short"
        result = GenerationPipeline(mock_config).run(generation_request)
        assert result.failed_stage == "script_enhancement"
        assert "script" in result.error.fields

    def test_invalid_synthesized_timeline(self, mock_config, generation_request):
        """Test invalid synthesized timeline."""
        providers = mock_providers()
        providers.timeline_synthesis = EmptyTimelineSynthesis()
        result = GenerationPipeline(mock_config, providers=providers).run(generation_request)
        assert result.failed_stage == "timeline_synthesis"
        assert result.error.fields["timeline"] == ["No scenes defined"]

    def test_decoration_only_enhancement(self, mock_config, generation_request):
        """Test an enhanced script without sentences fails validation before synthesis."""
        providers = mock_providers()
        providers.script_enhancement = DecorationOnlyEnhancement()
        synthesizer = MagicMock()
        synthesizer.name = "spy-synthesis"
        providers.timeline_synthesis = synthesizer

        result = GenerationPipeline(mock_config, providers=providers).run(generation_request)

        assert result.failed_stage == "timeline_synthesis"
        assert isinstance(result.error, ValidationError)
        assert result.error.fields == {"enhancedScript": ["no sentences"]}
        synthesizer.synthesize.assert_not_called()

    def test_project_locks_are_released(self, mock_config, generation_request):
        """Test per-project locks do not outlive their runs."""
        generation_request.project_id = "project_launch"
        pipeline = GenerationPipeline(mock_config)
        assert pipeline.run(generation_request).success
        assert pipeline._locks == {}

        pipeline.providers.beat_analysis = FailingBeatAnalysis()
        assert not pipeline.run(generation_request).success
        assert pipeline._locks == {}

    def test_progress_callback(self, mock_config, generation_request):
        """Test progress callback."""
        updates = []
        pipeline = GenerationPipeline(mock_config)
        pipeline.set_progress_callback(lambda stage, progress: updates.append((stage, progress)))
        pipeline.run(generation_request)
        assert updates == [
            ("upload", 0),
            ("beat_analysis", 25),
            ("script_enhancement", 50),
            ("timeline_synthesis", 75),
            ("timeline_synthesis", 100),
        ]

    def test_run_or_raise(self, mock_config, generation_request):
        """Test run or raise."""
        providers = mock_providers()
        providers.beat_analysis = FailingBeatAnalysis()
        pipeline = GenerationPipeline(mock_config, providers=providers)
        with pytest.raises(ProviderError) as exc_info:
            pipeline.run_or_raise(generation_request)
        assert exc_info.value.stage == "beat_analysis"

    def test_to_dict(self, mock_config, generation_request):
        """Test to dict."""
        data = GenerationPipeline(mock_config).run(generation_request).to_dict()
        assert data["success"] is True
        assert data["timeline"]["video"]["totalFrames"] == 600


class TestSubmitRender:
    """Tests for GenerationPipeline.submit_render."""

    def test_renders_with_configured_submitter(self, mock_config, sample_timeline):
        """Test renders with configured submitter."""
        result = GenerationPipeline(mock_config).submit_render(sample_timeline)
        assert result.submitter == "mock-render"
        assert result.frames == 145

    def test_overrides_reach_the_job(self, mock_config, sample_timeline):
        """Test overrides reach the job."""
        result = GenerationPipeline(mock_config).submit_render(
            sample_timeline,
            resolution="720x1280",
            duration_in_frames=30,
            submitter=MockRenderSubmitter(),
        )
        assert result.frames == 30
        assert (result.width, result.height) == (720, 1280)

    def test_invalid_timeline_is_rejected(self, mock_config, sample_timeline):
        """Test invalid timeline is rejected."""
        timeline = sample_timeline.model_copy(update={"scenes": []})
        with pytest.raises(ValidationError) as exc_info:
            GenerationPipeline(mock_config).submit_render(timeline)
        assert exc_info.value.stage == "render"
        assert "No scenes defined" in exc_info.value.message

    def test_bad_resolution(self, mock_config, sample_timeline):
        """Test bad resolution."""
        with pytest.raises(ValidationError) as exc_info:
            GenerationPipeline(mock_config).submit_render(sample_timeline, resolution="wide")
        assert exc_info.value.stage == "render"
        assert "resolution" in exc_info.value.fields

    def test_submitter_failure_is_typed(self, mock_config, sample_timeline):
        """Test submitter failure is typed."""
        with pytest.raises(ProviderError) as exc_info:
            GenerationPipeline(mock_config).submit_render(sample_timeline, submitter=BrokenRenderSubmitter())
        assert exc_info.value.stage == "render"
        assert "renderer offline" in exc_info.value.message
