"""
Render jobs.

A render job pairs a timeline with optional output overrides (resolution
and duration). Submitters hand the job to something that turns it into
video: ``MockRenderSubmitter`` walks every frame through the evaluation
engine and reports what it saw, ``HttpRenderSubmitter`` posts the job to
a render service.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Iterator, Optional

import httpx

from ..config import Config, HttpConfig
from ..engine.evaluator import RenderOptions, evaluate
from ..errors import ProviderError
from ..providers.base import Stage
from ..timeline.models import MIN_SCENE_FRAMES, AnimationTimeline
from ..timeline.validation import parse_resolution


logger = logging.getLogger(__name__)

RENDER_STAGE = Stage.RENDER.value


@dataclass(frozen=True)
class RenderJobSpec:
    """What to render and how large.

    Args:
        timeline: The timeline to render.
        width: Output width override.
        height: Output height override.
        duration_in_frames: Output duration override. Never below 15 frames.
    """

    timeline: AnimationTimeline
    width: Optional[int] = None
    height: Optional[int] = None
    duration_in_frames: Optional[int] = None

    @classmethod
    def from_resolution(
        cls,
        timeline: AnimationTimeline,
        resolution: Optional[str] = None,
        duration_in_frames: Optional[int] = None,
    ) -> "RenderJobSpec":
        """Build a job from a ``"WxH"`` resolution string.

        Raises:
            ValidationError: If the resolution is malformed.
        """
        width = height = None
        if resolution:
            width, height = parse_resolution(resolution)
        return cls(timeline, width=width, height=height, duration_in_frames=duration_in_frames)

    @property
    def effective_width(self) -> int:
        return self.width or self.timeline.video.width

    @property
    def effective_height(self) -> int:
        return self.height or self.timeline.video.height

    @property
    def effective_duration(self) -> int:
        total = self.duration_in_frames or self.timeline.computed_total_frames()
        return max(MIN_SCENE_FRAMES, total)

    def frame_plan(self) -> Iterator[int]:
        """Frame numbers the renderer will produce, in order."""
        return iter(range(self.effective_duration))

    def to_payload(self) -> dict[str, Any]:
        payload = self.timeline.to_dict()
        payload["durationInFrames"] = self.effective_duration
        if self.width and self.height:
            payload["resolution"] = f"{self.width}x{self.height}"
        return payload


@dataclass
class RenderResult:
    """Outcome of a submitted render job."""

    submitter: str
    frames: int
    width: int
    height: int
    output: Optional[str] = None
    degraded_frames: list[int] = field(default_factory=list)
    degraded_layers: dict[str, int] = field(default_factory=dict)
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "submitter": self.submitter,
            "frames": self.frames,
            "width": self.width,
            "height": self.height,
            "output": self.output,
            "degraded_frames": list(self.degraded_frames),
            "degraded_layers": dict(self.degraded_layers),
            "details": dict(self.details),
        }


class RenderSubmitter(ABC):
    """Abstract base class for render back ends."""

    name: str = "render"

    @abstractmethod
    def submit(self, job: RenderJobSpec) -> RenderResult:
        """Render a job.

        Raises:
            ProviderError: If the back end fails.
        """
        pass


class MockRenderSubmitter(RenderSubmitter):
    """Evaluates every planned frame locally without producing video."""

    name = "mock-render"

    def __init__(self, options: Optional[RenderOptions] = None):
        self.options = options or RenderOptions()

    def submit(self, job: RenderJobSpec) -> RenderResult:
        result = RenderResult(
            submitter=self.name,
            frames=job.effective_duration,
            width=job.effective_width,
            height=job.effective_height,
        )
        empty = 0
        for frame in job.frame_plan():
            state = evaluate(job.timeline, frame, options=self.options)
            if state.scene is None:
                empty += 1
            degraded = state.degraded_layers
            if degraded:
                result.degraded_frames.append(frame)
                for layer_id in degraded:
                    result.degraded_layers[layer_id] = result.degraded_layers.get(layer_id, 0) + 1

        result.details = {"empty_frames": empty}
        if result.degraded_frames:
            logger.warning(
                "Render of %s had %d degraded frame(s)",
                job.timeline.id,
                len(result.degraded_frames),
            )
        return result


class HttpRenderSubmitter(RenderSubmitter):
    """Posts the job to a render service and returns its answer."""

    name = "http-render"

    def __init__(self, base_url: str, http: Optional[HttpConfig] = None, api_key: Optional[str] = None, **kwargs):
        from ..providers.client import ProviderClient

        self.client = ProviderClient(base_url, http=http, api_key=api_key, **kwargs)

    def submit(self, job: RenderJobSpec) -> RenderResult:
        try:
            data = self.client.post_json("/api/render", job.to_payload(), timeout_class="long")
        except httpx.HTTPError as e:
            raise ProviderError(RENDER_STAGE, self.name, str(e) or type(e).__name__, cause=e) from e

        data = data if isinstance(data, dict) else {}
        return RenderResult(
            submitter=self.name,
            frames=job.effective_duration,
            width=job.effective_width,
            height=job.effective_height,
            output=data.get("output") or data.get("url"),
            details=data,
        )


def create_render_submitter(config: Optional[Config] = None) -> RenderSubmitter:
    """HTTP submitter in live mode with a render URL, mock otherwise."""
    if config is None:
        from ..config import load_config

        config = load_config()

    providers = config.providers
    options = RenderOptions.from_config(config.render)
    if providers.mode == "live" and providers.render_url:
        logger.info("Render jobs go to %s", providers.render_url)
        return HttpRenderSubmitter(providers.render_url, http=config.http, api_key=providers.api_key)
    return MockRenderSubmitter(options)
