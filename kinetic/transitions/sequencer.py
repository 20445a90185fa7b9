"""
Transition sequencing over an ordered scene list.

Scenes are laid end to end. When a scene has a transition and is not the
last one, it shares its final ``TRANSITION_FRAMES`` frames with the start
of the next scene, so transitions shorten the timeline instead of
extending it:

    total = sum(max(15, duration_i)) - sum(10 if transition_i and i < last)

Everything here is derived on demand from the scenes; nothing is cached.
"""

from dataclasses import dataclass
from typing import Optional, Sequence, Union

from ..timeline.models import TRANSITION_FRAMES, Scene, TransitionType
from .presentations import Compositing, presentation


@dataclass(frozen=True)
class SceneSpan:
    """Resolved placement of one scene on the global timeline."""

    index: int
    scene_id: str
    start: int
    end: int  # exclusive

    @property
    def duration(self) -> int:
        return self.end - self.start


@dataclass(frozen=True)
class Active:
    """A single scene is on screen."""

    scene_index: int
    local_frame: int


@dataclass(frozen=True)
class Transitioning:
    """Two adjacent scenes are being composited."""

    from_index: int
    to_index: int
    progress: float  # 0 <= progress < 1
    transition_type: TransitionType
    compositing: Optional[Compositing] = None


@dataclass(frozen=True)
class Done:
    """The frame lies past the end of the timeline."""


SequencerState = Union[Active, Transitioning, Done]


def overlap_after(scenes: Sequence[Scene], index: int) -> int:
    """Frames scene ``index`` shares with the following scene."""
    if index < len(scenes) - 1 and scenes[index].has_transition:
        return TRANSITION_FRAMES
    return 0


def scene_spans(scenes: Sequence[Scene]) -> list[SceneSpan]:
    """Place every scene on the global timeline."""
    spans = []
    cursor = 0
    for i, scene in enumerate(scenes):
        duration = scene.effective_duration
        spans.append(SceneSpan(index=i, scene_id=scene.id, start=cursor, end=cursor + duration))
        cursor += duration - overlap_after(scenes, i)
    return spans


def total_duration(scenes: Sequence[Scene]) -> int:
    """Total frame count with transition windows subtracted."""
    total = sum(scene.effective_duration for scene in scenes)
    total -= sum(overlap_after(scenes, i) for i in range(len(scenes)))
    return total


def find_span(scenes: Sequence[Scene], frame: int) -> Optional[SceneSpan]:
    """Return the span of the scene that owns ``frame``.

    Inside a transition window both scenes cover the frame; the incoming
    scene owns it.
    """
    if frame < 0:
        return None
    owner = None
    for span in scene_spans(scenes):
        if span.start > frame:
            break
        if frame < span.end:
            owner = span
    return owner


class TransitionSequencer:
    """State machine stitching consecutive scenes together.

    Stateless between calls: ``state_at`` can be asked about any frame in
    any order.
    """

    def __init__(self, scenes: Sequence[Scene]):
        self.scenes = tuple(scenes)
        self.spans = scene_spans(self.scenes)
        self.total_frames = total_duration(self.scenes)

    def state_at(self, frame: int) -> SequencerState:
        """Resolve the sequencer state at a global frame."""
        if frame < 0 or frame >= self.total_frames or not self.spans:
            return Done()

        # A scene shorter than its two transitions leaves overlapping windows;
        # the later transition owns the shared frames.
        for span in reversed(self.spans[1:]):
            previous = self.spans[span.index - 1]
            overlap = overlap_after(self.scenes, previous.index)
            window_start = span.start
            if overlap and window_start <= frame < window_start + overlap:
                progress = (frame - window_start) / overlap
                kind = self.scenes[previous.index].transition_type
                return Transitioning(
                    from_index=previous.index,
                    to_index=span.index,
                    progress=progress,
                    transition_type=kind,
                    compositing=presentation(kind, progress),
                )

        span = find_span(self.scenes, frame)
        if span is None:
            return Done()
        return Active(scene_index=span.index, local_frame=frame - span.start)

    def segments(self) -> list[tuple[int, int, int]]:
        """``(scene_index, start, end)`` for every scene."""
        return [(s.index, s.start, s.end) for s in self.spans]

    def transition_windows(self) -> list[tuple[int, int, TransitionType]]:
        """``(start, end, type)`` for every armed transition."""
        windows = []
        for span in self.spans[:-1]:
            overlap = overlap_after(self.scenes, span.index)
            if overlap:
                windows.append(
                    (span.end - overlap, span.end, self.scenes[span.index].transition_type)
                )
        return windows
