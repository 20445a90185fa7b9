"""
Timeline and input validation.

``validate_timeline`` is advisory: it never raises and never mutates, it
reports every problem it finds. The input validators return
``(ok, error)`` pairs; ``require`` turns a failed pair into a
``ValidationError``.
"""

import re
from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence

from ..errors import ValidationError
from ..transitions.sequencer import overlap_after
from .models import TRANSITION_FRAMES, AnimationTimeline, Scene


ALLOWED_FPS = (24, 30, 60)

IMAGE_EXTENSIONS = ["png", "jpg", "jpeg", "webp", "svg"]
AUDIO_EXTENSIONS = ["mp3", "wav", "aac", "m4a"]
VIDEO_EXTENSIONS = ["mp4", "mov", "webm"]

_PROJECT_NAME_RE = re.compile(r"^[a-zA-Z0-9\s\-_]+$")
_RESOLUTION_RE = re.compile(r"^(\d+)x(\d+)$")


@dataclass
class ValidationReport:
    """Outcome of ``validate_timeline``."""

    valid: bool
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"valid": self.valid, "errors": list(self.errors)}


def requested_spans(scenes: Sequence[Scene]) -> list[tuple[int, int]]:
    """``(start, end)`` per scene using the requested (unclamped) durations."""
    spans = []
    cursor = 0
    for i, scene in enumerate(scenes):
        start = cursor
        end = start + scene.duration_in_frames
        spans.append((start, end))
        cursor = end - overlap_after(scenes, i)
    return spans


def _span_errors(index: int, start: int, end: int) -> list[str]:
    errors = []
    if start < 0:
        errors.append(f"Scene {index} has negative startFrame")
    if end <= start:
        errors.append(f"Scene {index} endFrame must be greater than startFrame")
    return errors


def validate_timeline_spans(spans: Iterable[tuple[int, int]]) -> list[str]:
    """Check explicit ``(start, end)`` scene placements."""
    errors = []
    for i, (start, end) in enumerate(spans):
        errors.extend(_span_errors(i, start, end))
    return errors


def validate_timeline(timeline: AnimationTimeline) -> ValidationReport:
    """Check a timeline for structural problems.

    Scene durations are checked as requested, not as clamped, so a
    ``durationInFrames`` of zero is reported even though it would render
    as a 15-frame scene.

    Args:
        timeline: The timeline to check.

    Returns:
        ValidationReport listing every error found, in document order.
    """
    errors: list[str] = []

    if not timeline.scenes:
        errors.append("No scenes defined")

    video = timeline.video
    if video.fps <= 0:
        errors.append("Invalid FPS value")
    if video.width <= 0 or video.height <= 0:
        errors.append("Invalid video dimensions")
    if video.total_frames <= 0:
        errors.append("Invalid total frames")

    spans = requested_spans(timeline.scenes)
    for i, (scene, (start, end)) in enumerate(zip(timeline.scenes, spans)):
        if not scene.id:
            errors.append(f"Scene {i} missing ID")
        errors.extend(_span_errors(i, start, end))
        if not scene.layers:
            errors.append(f"Scene {i} has no layers")
        if i > 0 and overlap_after(timeline.scenes, i - 1) and overlap_after(timeline.scenes, i):
            if scene.effective_duration < 2 * TRANSITION_FRAMES:
                errors.append(
                    f"Scene {i} is shorter than its transitions "
                    f"({scene.effective_duration} < {2 * TRANSITION_FRAMES} frames)"
                )

    previous: Optional[int] = None
    for i, beat in enumerate(timeline.audio.beats):
        if beat < 0:
            errors.append(f"Beat {i} has negative frame {beat}")
        if previous is not None and beat <= previous:
            errors.append(f"Beat {i} is not after beat {i - 1} ({beat} <= {previous})")
        previous = beat

    return ValidationReport(valid=not errors, errors=errors)


# ============================================================================
# INPUT VALIDATORS
# ============================================================================


def _length_check(value: Optional[str], label: str, minimum: int, maximum: int) -> tuple[bool, Optional[str]]:
    if not value or not value.strip():
        return False, f"{label} is required"
    if len(value) < minimum:
        return False, f"{label} must be at least {minimum} characters"
    if len(value) > maximum:
        return False, f"{label} must not exceed {maximum} characters"
    return True, None


def validate_script(script: Optional[str]) -> tuple[bool, Optional[str]]:
    return _length_check(script, "Script", 10, 5000)


def validate_style_prompt(prompt: Optional[str]) -> tuple[bool, Optional[str]]:
    return _length_check(prompt, "Style prompt", 5, 1000)


def validate_project_name(name: Optional[str]) -> tuple[bool, Optional[str]]:
    ok, error = _length_check(name, "Project name", 3, 100)
    if not ok:
        return ok, error
    if not _PROJECT_NAME_RE.match(name):
        return False, "Project name contains invalid characters"
    return True, None


def validate_file_extension(filename: str, allowed: Sequence[str]) -> tuple[bool, Optional[str]]:
    extension = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
    if extension in allowed:
        return True, None
    return False, f"Invalid file type: {filename}. Allowed: {', '.join(allowed)}"


def validate_resolution(resolution: str) -> tuple[bool, Optional[str]]:
    """Check a ``"WxH"`` resolution string."""
    match = _RESOLUTION_RE.match(resolution or "")
    if not match or int(match.group(1)) <= 0 or int(match.group(2)) <= 0:
        return False, "Resolution must be in format WIDTHxHEIGHT (e.g., 1080x1920)"
    return True, None


def parse_resolution(resolution: str) -> tuple[int, int]:
    """Parse ``"WxH"`` into ``(width, height)``.

    Raises:
        ValidationError: If the string is malformed.
    """
    require(validate_resolution(resolution), "resolution")
    width, _, height = resolution.partition("x")
    return int(width), int(height)


def validate_fps(fps: int) -> tuple[bool, Optional[str]]:
    if fps in ALLOWED_FPS:
        return True, None
    return False, f"FPS must be one of {', '.join(str(f) for f in ALLOWED_FPS)}"


def require(result: tuple[bool, Optional[str]], field_name: str, stage: Optional[str] = None) -> None:
    """Raise ``ValidationError`` when a validator result is not ok."""
    ok, error = result
    if not ok:
        message = error or f"Invalid {field_name}"
        raise ValidationError(message, stage=stage, fields={field_name: [message]})
