"""
Timeline utilities.

Frame/second conversions, range queries, keyframe generation, JSON
import/export and copy-on-write editing helpers. Editing helpers never
touch their input: each returns a new timeline whose ``video.total_frames``
has been recomputed from the scenes.
"""

import json
import re
import time
import uuid
from typing import Optional, Sequence

from ..engine.easing import ease
from ..errors import NotFoundError
from ..transitions.sequencer import scene_spans
from .models import AnimationTimeline, Easing, Layer, Scene, TransitionType


_HEX_RE = re.compile(r"^#?([a-f\d]{2})([a-f\d]{2})([a-f\d]{2})$", re.IGNORECASE)


# ============================================================================
# TIME
# ============================================================================


def seconds_to_frame(seconds: float, fps: int = 30) -> int:
    return round(seconds * fps)


def frame_to_seconds(frame: int, fps: int = 30) -> float:
    return frame / fps


def total_duration_seconds(timeline: AnimationTimeline) -> float:
    """Length of the rendered video in seconds."""
    return timeline.computed_total_frames() / timeline.video.fps


def animation_duration_seconds(start_frame: int, duration_in_frames: int, fps: int = 30) -> float:
    return (start_frame + duration_in_frames) / fps


# ============================================================================
# QUERIES
# ============================================================================


def scenes_in_frame_range(timeline: AnimationTimeline, start: int, end: int) -> list[Scene]:
    """Scenes whose span touches the inclusive range ``[start, end]``."""
    return [
        timeline.scenes[span.index]
        for span in scene_spans(timeline.scenes)
        if not (span.end - 1 < start or span.start > end)
    ]


def layers_at_frame(timeline: AnimationTimeline, frame: int) -> list[Layer]:
    """All layers of every scene covering ``frame``.

    Inside a transition window both scenes contribute.
    """
    layers: list[Layer] = []
    for span in scene_spans(timeline.scenes):
        if span.start <= frame < span.end:
            layers.extend(timeline.scenes[span.index].layers)
    return layers


def calculate_scene_durations(sections: Sequence[str], total_frames: int) -> list[dict]:
    """Split ``total_frames`` evenly across sections.

    The last section absorbs the remainder.

    Returns:
        One ``{"section", "start_frame", "end_frame"}`` dict per section.
    """
    if not sections:
        return []
    per_section = total_frames // len(sections)
    result = []
    for i, section in enumerate(sections):
        start = i * per_section
        end = total_frames if i == len(sections) - 1 else (i + 1) * per_section
        result.append({"section": section, "start_frame": start, "end_frame": end})
    return result


# ============================================================================
# KEYFRAMES
# ============================================================================


def generate_keyframes(
    start_value: float,
    end_value: float,
    duration: int,
    easing: Easing | str = Easing.EASE_OUT,
) -> list[int]:
    """Sample an eased ramp, one keyframe every 5 frames (at least 2 steps).

    Returns:
        ``steps + 1`` rounded values from ``start_value`` to ``end_value``.
    """
    easing = Easing(easing)
    steps = max(2, duration // 5)
    keyframes = []
    for i in range(steps + 1):
        t = ease(i / steps, easing)
        keyframes.append(round(start_value + (end_value - start_value) * t))
    return keyframes


# ============================================================================
# SERIALIZATION
# ============================================================================


def export_timeline_json(timeline: AnimationTimeline, indent: int = 2) -> str:
    return json.dumps(timeline.to_dict(), indent=indent)


def import_timeline_json(text: str) -> AnimationTimeline:
    """Parse a timeline document.

    Raises:
        pydantic.ValidationError: If the document does not match the schema.
        json.JSONDecodeError: If the text is not JSON.
    """
    return AnimationTimeline.model_validate(json.loads(text))


def clone_timeline(timeline: AnimationTimeline) -> AnimationTimeline:
    return timeline.model_copy(deep=True)


# ============================================================================
# COPY-ON-WRITE EDITS
# ============================================================================


def _scene_index(timeline: AnimationTimeline, scene_id: str) -> int:
    for i, scene in enumerate(timeline.scenes):
        if scene.id == scene_id:
            return i
    raise NotFoundError("Scene", scene_id)


def _with_scenes(timeline: AnimationTimeline, scenes: list[Scene]) -> AnimationTimeline:
    updated = timeline.model_copy(update={"scenes": scenes}, deep=True)
    return updated.with_derived_total()


def replace_scene(timeline: AnimationTimeline, scene: Scene) -> AnimationTimeline:
    """Swap in ``scene`` for the scene with the same id."""
    index = _scene_index(timeline, scene.id)
    scenes = list(timeline.scenes)
    scenes[index] = scene
    return _with_scenes(timeline, scenes)


def with_scene_duration(timeline: AnimationTimeline, scene_id: str, frames: int) -> AnimationTimeline:
    index = _scene_index(timeline, scene_id)
    scene = timeline.scenes[index].model_copy(update={"duration_in_frames": frames})
    return replace_scene(timeline, scene)


def with_transition(
    timeline: AnimationTimeline,
    scene_id: str,
    transition: TransitionType | str,
) -> AnimationTimeline:
    index = _scene_index(timeline, scene_id)
    scene = timeline.scenes[index].model_copy(
        update={"transition_type": TransitionType(transition)}
    )
    return replace_scene(timeline, scene)


def remove_scene(timeline: AnimationTimeline, scene_id: str) -> AnimationTimeline:
    index = _scene_index(timeline, scene_id)
    scenes = [s for i, s in enumerate(timeline.scenes) if i != index]
    return _with_scenes(timeline, scenes)


def insert_scene(
    timeline: AnimationTimeline,
    scene: Scene,
    position: Optional[int] = None,
) -> AnimationTimeline:
    """Insert ``scene`` at ``position`` (appended when None)."""
    scenes = list(timeline.scenes)
    if position is None:
        scenes.append(scene)
    else:
        scenes.insert(position, scene)
    return _with_scenes(timeline, scenes)


# ============================================================================
# MISC
# ============================================================================


def responsive_font_size(base_size: float, width: int, height: int) -> int:
    """Scale a font size designed for 1080p to the given resolution."""
    density = (width * height) ** 0.5 / 1080
    return round(base_size * density)


def rgb_to_hex(r: int, g: int, b: int) -> str:
    return "#" + "".join(f"{x:02x}" for x in (r, g, b)).upper()


def hex_to_rgb(value: str) -> Optional[dict[str, int]]:
    match = _HEX_RE.match(value)
    if not match:
        return None
    r, g, b = (int(group, 16) for group in match.groups())
    return {"r": r, "g": g, "b": b}


def _short_id() -> str:
    return uuid.uuid4().hex[:9]


def generate_scene_id() -> str:
    return f"scene_{int(time.time() * 1000)}_{_short_id()}"


def generate_layer_id() -> str:
    return f"layer_{int(time.time() * 1000)}_{_short_id()}"
