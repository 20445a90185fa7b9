"""
Beat alignment.

Pairs emphasized words with detected beat frames and offers small helpers
over beat lists and beat-analysis results.
"""

from dataclasses import dataclass
from typing import Sequence

from ..timeline.models import BeatAnalysisResult, EnergyLevel


@dataclass(frozen=True)
class BeatAlignment:
    """An emphasized word pinned to a beat frame."""

    word: str
    frame: int

    def to_dict(self) -> dict:
        return {"word": self.word, "frame": self.frame}


def align_words_with_beats(emphasis_words: Sequence[str], beats: Sequence[int]) -> list[BeatAlignment]:
    """Pair the i-th emphasized word with the i-th beat.

    Surplus words or beats are dropped, so the result has
    ``min(len(emphasis_words), len(beats))`` entries.

    Args:
        emphasis_words: Words in emphasis order.
        beats: Beat frames in ascending order.

    Returns:
        List of BeatAlignment, empty when there are no beats.
    """
    return [BeatAlignment(word=word, frame=frame) for word, frame in zip(emphasis_words, beats)]


def adjust_beats_for_fps(beats: Sequence[int], from_fps: int, to_fps: int) -> list[int]:
    """Rescale beat frames detected at ``from_fps`` to ``to_fps``."""
    ratio = to_fps / from_fps
    return [round(beat * ratio) for beat in beats]


def beat_animation_windows(beats: Sequence[int], window: int = 10) -> list[range]:
    """Frames around each beat, ``[max(0, b - window), b + window)``."""
    return [range(max(0, beat - window), beat + window) for beat in beats]


def nearest_beat_distance(beats: Sequence[int], frame: int) -> int | None:
    """Absolute distance from ``frame`` to the closest beat, None without beats."""
    if not beats:
        return None
    return min(abs(frame - beat) for beat in beats)


def beat_intervals(beats: Sequence[int]) -> list[int]:
    return [b - a for a, b in zip(beats, beats[1:])]


def peak_beats(result: BeatAnalysisResult) -> list[int]:
    """Beats flagged as peaks, in beat order."""
    peaks = set(result.peak_frames)
    return [beat for beat in result.beats if beat in peaks]


def energy_at_frame(result: BeatAnalysisResult, frame: int) -> EnergyLevel:
    """Energy of the last level sample at or before ``frame``."""
    energy = EnergyLevel.LOW
    for level in sorted(result.energy_levels, key=lambda lvl: lvl.frame):
        if level.frame > frame:
            break
        energy = level.energy
    return energy
