"""
Deterministic mock providers.

Used for every stage that has no live service configured, so the pipeline
runs end to end offline. Outputs follow the same contracts as the live
providers and never depend on time or randomness.
"""

from dataclasses import replace
from pathlib import PurePosixPath
from typing import Optional

from ..timeline.models import (
    AnimationTimeline,
    BeatAnalysisResult,
    EnergyLevel,
    EnergyLevelData,
    ImageAsset,
    LogoAsset,
    MusicAsset,
    ScriptEnhancementResult,
    UploadFile,
    VideoAsset,
)
from .base import (
    BeatAnalysisProvider,
    ScriptEnhancementProvider,
    SynthesisRequest,
    TimelineSynthesisProvider,
    UploadedAsset,
    UploadProvider,
)


MOCK_STORAGE_URL = "https://storage.example.com"
MOCK_TEMPO = 128
MOCK_ANALYSIS_FRAMES = 300
MOCK_ENERGY_STEP = 30

_ENERGY_CYCLE = (EnergyLevel.LOW, EnergyLevel.MEDIUM, EnergyLevel.HIGH)


def _extension(filename: str, default: str) -> str:
    suffix = PurePosixPath(filename).suffix.lstrip(".").lower()
    return suffix or default


class MockUploadProvider(UploadProvider):
    """Pretends to store files under a fixed storage URL."""

    name = "mock-upload"

    def __init__(self, base_url: str = MOCK_STORAGE_URL):
        self.base_url = base_url.rstrip("/")

    def upload_file(self, file: UploadFile, index: int) -> UploadedAsset:
        if file.kind == "logo":
            fmt = "svg" if file.content_type == "image/svg+xml" or file.filename.endswith(".svg") else "png"
            return LogoAsset(url=f"{self.base_url}/logo.{fmt}", format=fmt, size=file.size)
        if file.kind == "music":
            fmt = _extension(file.filename, "mp3")
            if fmt not in ("mp3", "wav", "aac", "m4a"):
                fmt = "mp3"
            return MusicAsset(url=f"{self.base_url}/music.{fmt}", format=fmt, size=file.size)
        if file.kind == "productImages":
            fmt = _extension(file.filename, "png")
            return ImageAsset(url=f"{self.base_url}/product_{index}.{fmt}", format=fmt, size=file.size)
        return VideoAsset(url=f"{self.base_url}/video_{index}.mp4", size=file.size)


class MockBeatAnalysisProvider(BeatAnalysisProvider):
    """Regular 128 BPM beats over the first 300 frames."""

    name = "mock-beat-analysis"

    def __init__(self, tempo: float = MOCK_TEMPO, frames: int = MOCK_ANALYSIS_FRAMES):
        self.tempo = tempo
        self.frames = frames

    def analyze(self, music_url: str, fps: int = 30) -> BeatAnalysisResult:
        interval = max(1, round(fps * 60 / self.tempo))
        beats = list(range(interval, self.frames, interval))
        energy_levels = [
            EnergyLevelData(frame=frame, energy=_ENERGY_CYCLE[i % len(_ENERGY_CYCLE)])
            for i, frame in enumerate(range(0, self.frames, MOCK_ENERGY_STEP))
        ]
        return BeatAnalysisResult(
            tempo=self.tempo,
            beats=beats,
            energy_levels=energy_levels,
            peak_frames=beats[::2],
        )


class MockScriptEnhancementProvider(ScriptEnhancementProvider):
    """Decorates the script and emphasizes its long words."""

    name = "mock-script-enhancement"

    def __init__(self, max_emphasized: int = 5, min_word_length: int = 6):
        self.max_emphasized = max_emphasized
        self.min_word_length = min_word_length

    def enhance(self, script: str, style_prompt: str) -> ScriptEnhancementResult:
        emphasized = [w for w in script.split() if len(w) >= self.min_word_length]
        return ScriptEnhancementResult(
            original_script=script,
            enhanced_script=f"✨ {script} ✨",
            emphasized_words=emphasized[: self.max_emphasized],
        )


class MockTimelineSynthesisProvider(TimelineSynthesisProvider):
    """Builds the timeline locally with ``synthesize_timeline``."""

    name = "mock-timeline-synthesis"

    def __init__(self, timeline_id: Optional[str] = None):
        self.timeline_id = timeline_id

    def synthesize(self, request: SynthesisRequest) -> AnimationTimeline:
        from ..pipeline.synthesis import synthesize_timeline

        if self.timeline_id and not request.timeline_id:
            request = replace(request, timeline_id=self.timeline_id)
        return synthesize_timeline(request)
