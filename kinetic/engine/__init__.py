"""
Frame evaluation engine.

Main components:
- evaluate: global frame -> FrameState (scene, layers, transition, vfx)
- easing: eased ramps, clamped interpolation and spring physics
- text: word-level highlight, style and animation state

Usage:
    from kinetic.engine import evaluate

    state = evaluate(timeline, 42)
"""

from .easing import ease, eased_value, interpolate, seeded_random, settle_frame, spring
from .evaluator import RenderOptions, evaluate, evaluate_layer, render_frames, resolve_frame
from .state import FrameState, LayerState, SceneState, WordState
from .text import evaluate_text, normalize_word

__all__ = [
    # Evaluation
    "RenderOptions",
    "evaluate",
    "evaluate_layer",
    "render_frames",
    "resolve_frame",
    # State
    "FrameState",
    "LayerState",
    "SceneState",
    "WordState",
    # Math
    "ease",
    "eased_value",
    "interpolate",
    "seeded_random",
    "settle_frame",
    "spring",
    # Text
    "evaluate_text",
    "normalize_word",
]
