"""Scene transition sequencing and presentations."""

from .presentations import Compositing, LayerTransform, presentation
from .sequencer import (
    Active,
    Done,
    SceneSpan,
    TransitionSequencer,
    Transitioning,
    find_span,
    scene_spans,
    total_duration,
)

__all__ = [
    "Active",
    "Compositing",
    "Done",
    "LayerTransform",
    "SceneSpan",
    "TransitionSequencer",
    "Transitioning",
    "find_span",
    "presentation",
    "scene_spans",
    "total_duration",
]
