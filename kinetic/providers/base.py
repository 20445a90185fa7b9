"""
Provider interfaces for the generation pipeline stages.

Each stage talks to exactly one provider. Mock and live providers
implement the same interface, so the pipeline never branches on which
kind it holds.
"""

from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from ..timeline.models import (
    AnimationTimeline,
    BeatAnalysisResult,
    ImageAsset,
    LogoAsset,
    MusicAsset,
    ScriptEnhancementResult,
    UploadedAssets,
    UploadFile,
    VideoAsset,
)


class Stage(str, Enum):
    """Pipeline stages, in execution order. ``RENDER`` runs only on request."""

    UPLOAD = "upload"
    BEAT_ANALYSIS = "beat_analysis"
    SCRIPT_ENHANCEMENT = "script_enhancement"
    TIMELINE_SYNTHESIS = "timeline_synthesis"
    RENDER = "render"


@dataclass
class SynthesisRequest:
    """Inputs of the timeline synthesis stage."""

    enhancement: ScriptEnhancementResult
    beat_analysis: BeatAnalysisResult
    assets: UploadedAssets
    width: int = 1080
    height: int = 1920
    fps: int = 30
    target_frames: int = 600
    project_name: str = "Untitled Project"
    style_prompt: str = ""
    timeline_id: Optional[str] = None
    options: dict = field(default_factory=dict)


UploadedAsset = LogoAsset | MusicAsset | ImageAsset | VideoAsset


class UploadProvider(ABC):
    """Stores uploaded files and returns their public URLs."""

    name = "upload"

    #: Files uploaded concurrently within one stage call.
    max_workers = 4

    @abstractmethod
    def upload_file(self, file: UploadFile, index: int) -> UploadedAsset:
        """Store one file.

        Args:
            file: The file to store.
            index: Position of the file among files of the same kind.

        Returns:
            The asset record for the stored file.
        """
        pass

    def upload(self, files: list[UploadFile]) -> UploadedAssets:
        """Store every file, concurrently, and group the results by kind."""
        counters: dict[str, int] = {}
        jobs = []
        for file in files:
            index = counters.get(file.kind, 0)
            counters[file.kind] = index + 1
            jobs.append((file, index))

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            assets = list(executor.map(lambda job: self.upload_file(*job), jobs))

        grouped: dict = {"product_images": [], "product_videos": []}
        for (file, _), asset in zip(jobs, assets):
            if file.kind == "logo":
                grouped["logo"] = asset
            elif file.kind == "music":
                grouped["music_file"] = asset
            elif file.kind == "productImages":
                grouped["product_images"].append(asset)
            else:
                grouped["product_videos"].append(asset)
        return UploadedAssets(**grouped)


class BeatAnalysisProvider(ABC):
    """Detects beats in a music track."""

    name = "beat_analysis"

    @abstractmethod
    def analyze(self, music_url: str, fps: int = 30) -> BeatAnalysisResult:
        """Analyze a music track.

        Args:
            music_url: URL of the uploaded track.
            fps: Frame rate the beat frames are expressed in.

        Returns:
            BeatAnalysisResult with beats in increasing order.
        """
        pass


class ScriptEnhancementProvider(ABC):
    """Rewrites a script and picks the words to emphasize."""

    name = "script_enhancement"

    @abstractmethod
    def enhance(self, script: str, style_prompt: str) -> ScriptEnhancementResult:
        pass


class TimelineSynthesisProvider(ABC):
    """Builds an animation timeline from the earlier stage results."""

    name = "timeline_synthesis"

    @abstractmethod
    def synthesize(self, request: SynthesisRequest) -> AnimationTimeline:
        pass
