"""
Transition presentations.

A presentation maps transition progress in [0, 1) to how the outgoing and
incoming scenes are composited: opacity, translation (percent of the
frame), rotation and an optional clip. Timing is linear over the window.
"""

import math
from dataclasses import asdict, dataclass, field
from typing import Callable, Optional

from ..timeline.models import TransitionType


CLOCK_WIPE_SIZE = (320, 320)


@dataclass(frozen=True)
class LayerTransform:
    """How one side of a transition is drawn."""

    opacity: float = 1.0
    translate_x_pct: float = 0.0
    translate_y_pct: float = 0.0
    rotate_x_deg: float = 0.0
    visible: bool = True
    clip: Optional[dict] = field(default=None)

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class Compositing:
    """Outgoing and incoming transforms for one transition frame."""

    transition_type: TransitionType
    progress: float
    outgoing: LayerTransform
    incoming: LayerTransform

    def to_dict(self) -> dict:
        return {
            "type": self.transition_type.value,
            "progress": self.progress,
            "outgoing": self.outgoing.to_dict(),
            "incoming": self.incoming.to_dict(),
        }


def _fade(p: float) -> tuple[LayerTransform, LayerTransform]:
    return LayerTransform(opacity=1.0 - p), LayerTransform(opacity=p)


def _slide(p: float) -> tuple[LayerTransform, LayerTransform]:
    # from-right
    return (
        LayerTransform(translate_x_pct=-100.0 * p),
        LayerTransform(translate_x_pct=100.0 * (1.0 - p)),
    )


def _flip(p: float) -> tuple[LayerTransform, LayerTransform]:
    # from-bottom; each side has its backface hidden
    out_angle = 180.0 * p
    in_angle = -180.0 + 180.0 * p
    return (
        LayerTransform(rotate_x_deg=out_angle, visible=out_angle < 90.0),
        LayerTransform(rotate_x_deg=in_angle, visible=in_angle > -90.0),
    )


def _wipe(p: float) -> tuple[LayerTransform, LayerTransform]:
    # from-left hard edge
    right_inset = round(100.0 * (1.0 - p), 4)
    return (
        LayerTransform(),
        LayerTransform(clip={"shape": "inset", "top": 0, "right": right_inset, "bottom": 0, "left": 0}),
    )


def _clock_wipe(p: float) -> tuple[LayerTransform, LayerTransform]:
    width, height = CLOCK_WIPE_SIZE
    return (
        LayerTransform(),
        LayerTransform(
            clip={
                "shape": "sector",
                "width": width,
                "height": height,
                "radius": math.hypot(width, height) / 2,
                "sweep_deg": 360.0 * p,
            }
        ),
    )


PRESENTATIONS: dict[TransitionType, Callable[[float], tuple[LayerTransform, LayerTransform]]] = {
    TransitionType.FADE: _fade,
    TransitionType.SLIDE: _slide,
    TransitionType.FLIP: _flip,
    TransitionType.WIPE: _wipe,
    TransitionType.CLOCK_WIPE: _clock_wipe,
}


def presentation(transition_type: TransitionType | str, progress: float) -> Optional[Compositing]:
    """Composite the two sides of a transition at ``progress``.

    Returns None for ``none`` (a hard cut).
    """
    transition_type = TransitionType(transition_type)
    build = PRESENTATIONS.get(transition_type)
    if build is None:
        return None
    p = min(max(progress, 0.0), 1.0)
    outgoing, incoming = build(p)
    return Compositing(
        transition_type=transition_type,
        progress=p,
        outgoing=outgoing,
        incoming=incoming,
    )
