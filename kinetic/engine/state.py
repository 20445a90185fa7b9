"""
Render-state records produced by the frame evaluation engine.

These are plain data: numbers and strings an external renderer can draw
without knowing anything about timing. ``to_dict`` gives the JSON shape.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Optional

from ..transitions.presentations import Compositing


@dataclass(frozen=True)
class CharState:
    char: str
    visible: bool


@dataclass(frozen=True)
class WordState:
    """One word of a text layer."""

    text: str
    index: int
    highlighted: bool
    color: str
    opacity: float = 1.0
    scale: float = 1.0
    translate_x: float = 0.0
    translate_y: float = 0.0
    skew_x_deg: float = 0.0
    text_shadow: Optional[str] = None
    text_stroke: Optional[str] = None
    filter: Optional[str] = None
    chars: Optional[tuple[CharState, ...]] = None


@dataclass(frozen=True)
class LayerState:
    """Evaluated state of one layer at one frame."""

    layer_id: str
    layer_type: str
    visible: bool = True
    opacity: float = 1.0
    translate_x: float = 0.0
    translate_y: float = 0.0
    scale: float = 1.0
    local_frame: int = 0
    content: Optional[str] = None
    src: Optional[str] = None
    words: tuple[WordState, ...] = ()
    style: dict[str, Any] = field(default_factory=dict)
    degraded: bool = False
    error: Optional[str] = None

    @classmethod
    def hidden(cls, layer_id: str, layer_type: str, local_frame: int = 0) -> "LayerState":
        return cls(layer_id=layer_id, layer_type=layer_type, visible=False, opacity=0.0, local_frame=local_frame)

    @classmethod
    def degraded_state(cls, layer_id: str, layer_type: str, error: str) -> "LayerState":
        return cls(
            layer_id=layer_id,
            layer_type=layer_type,
            visible=False,
            opacity=0.0,
            degraded=True,
            error=error,
        )


@dataclass(frozen=True)
class SceneEntrance:
    """Scene-wide motion applied by the style mode."""

    scale: float = 1.0
    translate_y: float = 0.0
    opacity: float = 1.0


@dataclass(frozen=True)
class SceneLayout:
    justify: str = "center"
    padding_top: int = 0
    padding_bottom: int = 0
    font_family: str = '"Inter", system-ui, sans-serif'
    font_size: str = "8em"
    font_weight: str = "bold"


@dataclass(frozen=True)
class MediaBackgroundState:
    image_url: str
    opacity: float
    scale: float


@dataclass(frozen=True)
class FilmGrainState:
    seed: int
    opacity: float


@dataclass(frozen=True)
class LightLeakState:
    color: str
    x_pct: float
    y_pct: float
    opacity: float


@dataclass(frozen=True)
class VfxState:
    film_grain: Optional[FilmGrainState] = None
    light_leak: Optional[LightLeakState] = None


@dataclass(frozen=True)
class SceneState:
    """A scene resolved and evaluated at one frame."""

    scene_id: str
    scene_index: int
    local_frame: int
    entrance: SceneEntrance
    layout: SceneLayout
    layers: tuple[LayerState, ...] = ()
    background: Optional[MediaBackgroundState] = None


@dataclass(frozen=True)
class FrameState:
    """Everything the renderer needs to draw one global frame.

    ``scene`` is None for frames outside the timeline. During a transition
    ``scene`` is the incoming scene and ``outgoing`` the one leaving.
    """

    frame: int
    scene: Optional[SceneState] = None
    outgoing: Optional[SceneState] = None
    transition: Optional[Compositing] = None
    vfx: VfxState = field(default_factory=VfxState)
    background_color: Optional[str] = None

    @property
    def degraded_layers(self) -> list[str]:
        layers = list(self.scene.layers) if self.scene else []
        if self.outgoing:
            layers.extend(self.outgoing.layers)
        return [layer.layer_id for layer in layers if layer.degraded]

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        if self.transition is not None:
            data["transition"] = self.transition.to_dict()
        return data
