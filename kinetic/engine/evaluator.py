"""
Frame evaluation engine.

``evaluate(timeline, frame)`` turns a timeline and a global frame number
into a ``FrameState``: which scene is on screen, how every layer of it
looks, and how the transition (if any) composites it with its neighbour.

Evaluation is a pure function of its arguments. It reads no clock, no
random source and no module state, so frames can be evaluated in any
order and in parallel.
"""

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, replace
from typing import Optional, Sequence

from ..config import RenderConfig
from ..errors import DegradedFrameError, ValidationError
from ..sync.beats import nearest_beat_distance
from ..timeline.models import (
    AnimationTimeline,
    AnimationType,
    Layer,
    LayoutAlign,
    Scene,
    StyleMode,
    TextLayer,
)
from ..transitions.sequencer import Active, SequencerState, Transitioning, TransitionSequencer
from .easing import eased_value, interpolate, spring
from .state import FrameState, LayerState, SceneEntrance, SceneLayout, SceneState
from .text import evaluate_text
from .vfx import global_vfx, media_background


logger = logging.getLogger(__name__)

# Beat-synced layers pulse when within this many frames of a beat.
BEAT_PULSE_WINDOW = 5
BEAT_PULSE_SCALE = 0.15

SLIDE_DISTANCE = 50

FONT_FAMILIES = {
    "playfair": '"Playfair Display", serif',
    "oswald": '"Oswald", sans-serif',
    "bebas": '"Bebas Neue", sans-serif',
    "inter": '"Inter", system-ui, sans-serif',
}

_JUSTIFY = {
    LayoutAlign.TOP: "flex-start",
    LayoutAlign.CENTER: "center",
    LayoutAlign.BOTTOM: "flex-end",
}


@dataclass(frozen=True)
class RenderOptions:
    """Look-and-feel inputs that are not part of the timeline document."""

    style_mode: StyleMode = "premium"
    primary_color: str = "#3b82f6"
    background_color: str = "#0a0a0a"
    font_family: str = "inter"
    enable_global_vfx: bool = True

    @classmethod
    def from_config(cls, config: RenderConfig, style_mode: Optional[StyleMode] = None) -> "RenderOptions":
        return cls(
            style_mode=style_mode or config.style_mode,
            primary_color=config.primary_color,
            background_color=config.background_color,
            font_family=config.font_family,
            enable_global_vfx=config.enable_global_vfx,
        )


# ============================================================================
# SCENE-LEVEL MODIFIERS
# ============================================================================


def scene_entrance(frame: int, fps: int, style_mode: StyleMode) -> SceneEntrance:
    """Entrance motion of the whole scene for a style mode.

    bold pops in with a spring scale, premium slides up, minimal only fades.
    """
    scale = spring(frame, fps, damping=12) if style_mode == "bold" else 1.0
    translate_y = 0.0
    if style_mode == "premium":
        translate_y = interpolate(spring(frame, fps, damping=14), [0, 1], [50, 0])
    opacity = interpolate(spring(frame, fps, damping=14), [0, 1], [0, 1])
    return SceneEntrance(scale=scale, translate_y=translate_y, opacity=opacity)


def scene_layout(layout_align: LayoutAlign, style_mode: StyleMode, font_family: str = "inter") -> SceneLayout:
    if font_family == "inter" and style_mode == "minimal":
        family = "monospace"
    else:
        family = FONT_FAMILIES.get(font_family, FONT_FAMILIES["inter"])
    return SceneLayout(
        justify=_JUSTIFY[layout_align],
        padding_top=80 if layout_align == LayoutAlign.TOP else 0,
        padding_bottom=80 if layout_align == LayoutAlign.BOTTOM else 0,
        font_family=family,
        font_size="10em" if style_mode == "bold" else "8em",
        font_weight="normal" if style_mode == "minimal" else "bold",
    )


# ============================================================================
# LAYERS
# ============================================================================


def _content_of(layer: Layer) -> tuple[Optional[str], Optional[str]]:
    if isinstance(layer, TextLayer):
        if not layer.content.strip():
            raise DegradedFrameError(layer.id, "text layer has no content")
        return layer.content, None
    if not layer.src:
        raise DegradedFrameError(layer.id, f"{layer.type} layer has no source")
    return None, layer.src


def evaluate_layer(
    layer: Layer,
    scene_frame: int,
    fps: int,
    options: RenderOptions,
    beats: Sequence[int] = (),
    scene_start: int = 0,
) -> LayerState:
    """Evaluate one layer at a scene-local frame.

    Args:
        layer: The layer to evaluate.
        scene_frame: Frames since the owning scene started.
        fps: Timeline frame rate.
        options: Render options (highlight color for text).
        beats: Global beat frames, used by beat-synced layers.
        scene_start: Global frame at which the owning scene starts.

    Returns:
        LayerState for the frame.

    Raises:
        DegradedFrameError: If the layer data cannot be evaluated.
    """
    local = scene_frame - (layer.start_frame or 0)
    if local < 0:
        return LayerState.hidden(layer.id, layer.type, local_frame=local)

    content, src = _content_of(layer)
    spec = layer.animation
    duration = spec.duration_in_frames
    if duration < 0:
        raise DegradedFrameError(layer.id, f"negative animation duration {duration}")

    opacity = 1.0
    translate_y = 0.0
    scale = 1.0
    kind = spec.type

    if kind in (AnimationType.FADE_IN, AnimationType.BEAT_BOUNCE):
        opacity = eased_value(0, 1, local, duration, spec.easing)
    elif kind == AnimationType.FADE_OUT:
        opacity = eased_value(1, 0, local, duration, spec.easing)
    elif kind == AnimationType.SLIDE_UP:
        translate_y = eased_value(SLIDE_DISTANCE, 0, local, duration, spec.easing)
        opacity = eased_value(0, 1, local, duration, spec.easing)
    elif kind == AnimationType.SLIDE_DOWN:
        translate_y = eased_value(-SLIDE_DISTANCE, 0, local, duration, spec.easing)
        opacity = eased_value(0, 1, local, duration, spec.easing)
    elif kind == AnimationType.SCALE_IMPACT:
        scale = spring(local, fps, damping=12)
    elif kind == AnimationType.LETTER_BY_LETTER:
        progress = eased_value(0, 1, local, duration, spec.easing)
        if content is not None:
            content = content[: math.ceil(len(content) * progress)]
        else:
            opacity = progress

    if layer.beat_sync and kind == AnimationType.BEAT_BOUNCE:
        distance = nearest_beat_distance(beats, scene_start + scene_frame)
        if distance is not None and distance < BEAT_PULSE_WINDOW:
            scale *= 1 + BEAT_PULSE_SCALE * (1 - distance / BEAT_PULSE_WINDOW)

    opacity *= layer.style.opacity

    words = ()
    if isinstance(layer, TextLayer):
        words = evaluate_text(
            content,
            local,
            fps,
            emphasis_words=layer.emphasis_words,
            highlight_color=options.primary_color,
            animation=layer.text_animation,
            style=layer.text_style,
        )

    return LayerState(
        layer_id=layer.id,
        layer_type=layer.type,
        visible=opacity > 0,
        opacity=opacity,
        translate_y=translate_y,
        scale=scale,
        local_frame=local,
        content=content,
        src=src,
        words=words,
        style=layer.style.to_dict(),
    )


def evaluate_layer_safely(layer: Layer, scene_frame: int, fps: int, options: RenderOptions, **kwargs) -> LayerState:
    """``evaluate_layer`` that degrades to a hidden state instead of raising."""
    try:
        return evaluate_layer(layer, scene_frame, fps, options, **kwargs)
    except Exception as exc:
        error = exc if isinstance(exc, DegradedFrameError) else DegradedFrameError(layer.id, str(exc))
        logger.warning("%s (scene frame %d)", error.message, scene_frame)
        return LayerState.degraded_state(layer.id, getattr(layer, "type", "unknown"), error.reason)


# ============================================================================
# SCENES AND FRAMES
# ============================================================================


def evaluate_scene(
    scene: Scene,
    index: int,
    scene_frame: int,
    timeline: AnimationTimeline,
    options: RenderOptions,
    scene_start: int = 0,
) -> SceneState:
    fps = timeline.video.fps
    layers = tuple(
        evaluate_layer_safely(
            layer,
            scene_frame,
            fps,
            options,
            beats=timeline.audio.beats,
            scene_start=scene_start,
        )
        for layer in scene.layers
    )
    return SceneState(
        scene_id=scene.id,
        scene_index=index,
        local_frame=scene_frame,
        entrance=scene_entrance(scene_frame, fps, options.style_mode),
        layout=scene_layout(scene.layout_align, options.style_mode, options.font_family),
        layers=layers,
        background=media_background(
            scene_frame,
            scene.effective_duration,
            scene.background_image_url,
            scene.background_opacity,
        ),
    )


def resolve_frame(
    timeline: AnimationTimeline,
    global_frame: int,
    sequencer: Optional[TransitionSequencer] = None,
) -> SequencerState:
    """Find the scene, or the pair of scenes in a transition, that owns a frame.

    Inside an overlap window the incoming scene is active and the outgoing
    one is its transition partner. Negative frames and frames past the end
    resolve to ``Done``.
    """
    sequencer = sequencer or TransitionSequencer(timeline.scenes)
    return sequencer.state_at(global_frame)


def evaluate(
    timeline: AnimationTimeline,
    global_frame: int,
    style_mode: Optional[StyleMode] = None,
    options: Optional[RenderOptions] = None,
) -> FrameState:
    """Evaluate a timeline at a global frame.

    Args:
        timeline: The timeline to evaluate; never modified.
        global_frame: Frame number from the start of the video.
        style_mode: Overrides ``options.style_mode`` (default "premium").
        options: Render options; defaults are used when omitted.

    Returns:
        FrameState. Its ``scene`` is None when the frame lies outside the
        timeline.

    Raises:
        ValidationError: If the timeline frame rate is not positive.
    """
    options = options or RenderOptions()
    if style_mode is not None and style_mode != options.style_mode:
        options = replace(options, style_mode=style_mode)
    fps = timeline.video.fps
    if fps <= 0:
        raise ValidationError(f"Invalid FPS value: {fps}")

    sequencer = TransitionSequencer(timeline.scenes)
    state = resolve_frame(timeline, global_frame, sequencer)

    if isinstance(state, Active):
        span = sequencer.spans[state.scene_index]
        scene = evaluate_scene(
            timeline.scenes[state.scene_index],
            state.scene_index,
            state.local_frame,
            timeline,
            options,
            scene_start=span.start,
        )
        outgoing = None
        transition = None
    elif isinstance(state, Transitioning):
        incoming_span = sequencer.spans[state.to_index]
        outgoing_span = sequencer.spans[state.from_index]
        scene = evaluate_scene(
            timeline.scenes[state.to_index],
            state.to_index,
            global_frame - incoming_span.start,
            timeline,
            options,
            scene_start=incoming_span.start,
        )
        outgoing = evaluate_scene(
            timeline.scenes[state.from_index],
            state.from_index,
            global_frame - outgoing_span.start,
            timeline,
            options,
            scene_start=outgoing_span.start,
        )
        transition = state.compositing
    else:
        return FrameState(frame=global_frame, background_color=options.background_color)

    return FrameState(
        frame=global_frame,
        scene=scene,
        outgoing=outgoing,
        transition=transition,
        vfx=global_vfx(
            global_frame,
            sequencer.total_frames,
            options.primary_color,
            enabled=options.enable_global_vfx,
        ),
        background_color=options.background_color,
    )


def render_frames(
    timeline: AnimationTimeline,
    start: int = 0,
    end: Optional[int] = None,
    options: Optional[RenderOptions] = None,
    max_workers: int = 1,
) -> list[FrameState]:
    """Evaluate the frames ``[start, end)`` in order.

    With ``max_workers > 1`` frames are evaluated in a thread pool; the
    result order is unchanged.
    """
    if end is None:
        end = timeline.computed_total_frames()
    frames = range(start, end)
    if max_workers <= 1:
        return [evaluate(timeline, frame, options=options) for frame in frames]

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        return list(executor.map(lambda f: evaluate(timeline, f, options=options), frames))
