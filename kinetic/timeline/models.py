"""
Timeline data model.

Defines the renderable project document: video and audio configuration,
ordered scenes, their layers and animation descriptors, plus the typed
results of the upstream pipeline stages.

JSON documents use camelCase keys (``durationInFrames``, ``musicUrl``);
Python attributes are snake_case. Both spellings are accepted on input.
All records are frozen: edits produce new instances (see
``kinetic.timeline.utils``).
"""

import uuid
from datetime import datetime
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


# Scenes shorter than this are clamped, never rejected.
MIN_SCENE_FRAMES = 15

# Frames shared by two adjacent scenes when a transition is armed.
TRANSITION_FRAMES = 10


class TimelineModel(BaseModel):
    """Base for every timeline record (camelCase aliases, frozen)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    def to_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# ============================================================================
# ENUMERATIONS
# ============================================================================


class TransitionType(str, Enum):
    """Presentation used between a scene and the next one."""

    NONE = "none"
    FADE = "fade"
    SLIDE = "slide"
    FLIP = "flip"
    WIPE = "wipe"
    CLOCK_WIPE = "clockWipe"


class LayoutAlign(str, Enum):
    TOP = "top"
    CENTER = "center"
    BOTTOM = "bottom"


class TextAnimation(str, Enum):
    """Word-level animation of a text layer."""

    FADE = "fade"
    POP_IN = "pop-in"
    FADE_UP = "fade-up"
    TYPING = "typing"
    GLITCH = "glitch"


class TextStyle(str, Enum):
    NONE = "none"
    NEON = "neon"
    OUTLINE = "outline"
    SHADOW = "shadow"


class Easing(str, Enum):
    LINEAR = "linear"
    EASE_IN = "easeIn"
    EASE_OUT = "easeOut"
    EASE_IN_OUT = "easeInOut"


class AnimationType(str, Enum):
    """Layer-level entrance/exit animation."""

    SLIDE_UP = "slideUp"
    FADE_IN = "fadeIn"
    SCALE_IMPACT = "scaleImpact"
    LETTER_BY_LETTER = "letterByLetter"
    BEAT_BOUNCE = "beatBounce"
    FADE_OUT = "fadeOut"
    SLIDE_DOWN = "slideDown"


class EnergyLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


StyleMode = Literal["premium", "bold", "minimal"]
FontFamily = Literal["inter", "playfair", "oswald", "bebas"]


# ============================================================================
# TIMELINE MODELS
# ============================================================================


class Background(TimelineModel):
    type: Literal["solid", "gradient", "video", "image"] = "solid"
    color: Optional[str] = "#000000"
    gradient_start: Optional[str] = None
    gradient_end: Optional[str] = None
    video_url: Optional[str] = None
    image_url: Optional[str] = None


class VideoConfig(TimelineModel):
    """Output video settings.

    ``total_frames`` is derived from the scenes; use
    ``AnimationTimeline.with_derived_total`` rather than setting it by hand.
    """

    fps: int = 30
    width: int = 1080
    height: int = 1920
    total_frames: int = 1
    background: Optional[Background] = None


class AudioConfig(TimelineModel):
    music_url: str = ""
    beats: list[int] = Field(default_factory=list)
    tempo: float = 120.0
    volume: float = 0.8


class AnimationSpec(TimelineModel):
    type: AnimationType = AnimationType.FADE_IN
    duration_in_frames: int = 30
    easing: Easing = Easing.EASE_OUT

    @model_validator(mode="before")
    @classmethod
    def _accept_duration_key(cls, data):
        # Generated documents use "duration" for the frame count.
        if isinstance(data, dict) and "duration" in data:
            data = dict(data)
            duration = data.pop("duration")
            data.setdefault("durationInFrames", duration)
        return data


class LayerStyle(TimelineModel):
    font_size: Optional[float] = None
    color: Optional[str] = None
    font_weight: Optional[Union[int, str]] = None
    font_family: Optional[str] = None
    opacity: float = 1.0
    letter_spacing: Optional[float] = None
    position: Optional[str] = None


def _layer_id() -> str:
    return f"layer_{uuid.uuid4().hex[:9]}"


class BaseLayer(TimelineModel):
    id: str = Field(default_factory=_layer_id)
    animation: AnimationSpec = Field(default_factory=AnimationSpec)
    style: LayerStyle = Field(default_factory=LayerStyle)
    beat_sync: bool = False
    start_frame: Optional[int] = None


class TextLayer(BaseLayer):
    type: Literal["text"] = "text"
    content: str = ""
    emphasis_words: list[str] = Field(default_factory=list)
    text_animation: TextAnimation = TextAnimation.FADE
    text_style: TextStyle = TextStyle.NONE


class ImageLayer(BaseLayer):
    type: Literal["image"] = "image"
    src: str = ""
    width: Optional[int] = None
    height: Optional[int] = None


class LogoLayer(BaseLayer):
    type: Literal["logo"] = "logo"
    src: str = ""
    width: Optional[int] = None
    height: Optional[int] = None


class VideoLayer(BaseLayer):
    type: Literal["video"] = "video"
    src: str = ""
    width: Optional[int] = None
    height: Optional[int] = None
    volume: float = 1.0
    loop: bool = False


Layer = Annotated[
    Union[TextLayer, ImageLayer, VideoLayer, LogoLayer],
    Field(discriminator="type"),
]


class Scene(TimelineModel):
    """A time-bounded segment owning its layers."""

    id: str
    duration_in_frames: int = 60
    layers: list[Layer] = Field(default_factory=list)
    transition_type: TransitionType = TransitionType.NONE
    layout_align: LayoutAlign = LayoutAlign.CENTER
    name: Optional[str] = None
    background_image_url: Optional[str] = None
    background_opacity: float = 0.4

    @model_validator(mode="before")
    @classmethod
    def _accept_span_form(cls, data):
        # Editor documents carry startFrame/endFrame (or duration) and a
        # transition object instead of durationInFrames/transitionType.
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if "durationInFrames" not in data and "duration_in_frames" not in data:
            if "duration" in data:
                data["durationInFrames"] = data.pop("duration")
            elif "startFrame" in data and "endFrame" in data:
                data["durationInFrames"] = data["endFrame"] - data["startFrame"]
        data.pop("startFrame", None)
        data.pop("endFrame", None)

        transition = data.pop("transition", None) or data.pop("transitions", None)
        if isinstance(transition, dict) and "transitionType" not in data and "transition_type" not in data:
            kind = transition.get("type", "none")
            known = {t.value for t in TransitionType}
            # Types without a presentation here (flash, zoom) fall back to a fade.
            data["transitionType"] = kind if kind in known else TransitionType.FADE.value
        return data

    @property
    def effective_duration(self) -> int:
        """Duration after the minimum-length clamp."""
        return max(MIN_SCENE_FRAMES, self.duration_in_frames)

    @property
    def has_transition(self) -> bool:
        return self.transition_type != TransitionType.NONE


class TimelineMetadata(TimelineModel):
    created_at: str = Field(default_factory=lambda: datetime.now().isoformat())
    updated_at: str = Field(default_factory=lambda: datetime.now().isoformat())
    version: str = "1.0"


class AnimationTimeline(TimelineModel):
    """Root aggregate describing a full renderable project."""

    id: str
    project_name: str = "Untitled Project"
    description: Optional[str] = None
    video: VideoConfig = Field(default_factory=VideoConfig)
    audio: AudioConfig = Field(default_factory=AudioConfig)
    scenes: list[Scene] = Field(default_factory=list)
    metadata: Optional[TimelineMetadata] = None

    def computed_total_frames(self) -> int:
        """Total duration with transition windows subtracted."""
        from ..transitions.sequencer import total_duration

        return total_duration(self.scenes)

    def with_derived_total(self) -> "AnimationTimeline":
        """Return a copy whose ``video.total_frames`` matches the scenes."""
        total = self.computed_total_frames()
        if total == self.video.total_frames:
            return self
        video = self.video.model_copy(update={"total_frames": total})
        return self.model_copy(update={"video": video})

    def get_scene(self, scene_id: str) -> Optional[Scene]:
        for scene in self.scenes:
            if scene.id == scene_id:
                return scene
        return None


# ============================================================================
# PIPELINE STAGE RESULTS
# ============================================================================


class EnergyLevelData(TimelineModel):
    frame: int
    energy: EnergyLevel


class BeatAnalysisResult(TimelineModel):
    """Typed result of the beat-analysis provider."""

    tempo: float
    beats: list[int] = Field(default_factory=list)
    energy_levels: list[EnergyLevelData] = Field(default_factory=list)
    peak_frames: list[int] = Field(default_factory=list)

    @model_validator(mode="after")
    def _peaks_are_beats(self) -> "BeatAnalysisResult":
        beat_set = set(self.beats)
        stray = [f for f in self.peak_frames if f not in beat_set]
        if stray:
            raise ValueError(f"peak frames not present in beats: {stray}")
        return self


class ScriptEnhancementResult(TimelineModel):
    original_script: str
    enhanced_script: str
    emphasized_words: list[str] = Field(default_factory=list)


class LogoAsset(TimelineModel):
    url: str
    format: Literal["png", "svg"] = "png"
    size: int = 0


class MusicAsset(TimelineModel):
    url: str
    format: Literal["mp3", "wav", "aac", "m4a"] = "mp3"
    duration: float = 0.0
    size: int = 0


class ImageAsset(TimelineModel):
    url: str
    format: str = "png"
    size: int = 0


class VideoAsset(TimelineModel):
    url: str
    duration: float = 0.0
    size: int = 0


class UploadedAssets(TimelineModel):
    """Result of the upload stage. ``music_file`` is mandatory downstream."""

    logo: Optional[LogoAsset] = None
    music_file: Optional[MusicAsset] = None
    product_images: list[ImageAsset] = Field(default_factory=list)
    product_videos: list[VideoAsset] = Field(default_factory=list)


class UploadFile(TimelineModel):
    """A local file handed to the upload stage."""

    kind: Literal["logo", "music", "productImages", "productVideos"]
    filename: str
    content_type: str = "application/octet-stream"
    size: int = 0
    path: Optional[str] = None


ProjectStatus = Literal["draft", "processing", "ready", "completed", "error"]


class Project(TimelineModel):
    """Stored project record: inputs, stage results and the timeline."""

    id: str
    project_name: str
    original_script: str = ""
    style_prompt: str = ""
    enhanced_script: Optional[str] = None
    beat_analysis: Optional[BeatAnalysisResult] = None
    uploaded_assets: Optional[UploadedAssets] = None
    timeline: Optional[AnimationTimeline] = None
    status: ProjectStatus = "draft"
    created_at: str = Field(default_factory=lambda: datetime.now().isoformat())
    updated_at: str = Field(default_factory=lambda: datetime.now().isoformat())
