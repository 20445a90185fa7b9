"""
Beat synchronization.

Main components:
- align_words_with_beats: pins emphasized words to beat frames
- beat helpers: fps rescaling, animation windows, peaks and energy lookup

Usage:
    from kinetic.sync import align_words_with_beats

    alignment = align_words_with_beats(["Stop", "AI"], [15, 30])
"""

from .beats import (
    BeatAlignment,
    adjust_beats_for_fps,
    align_words_with_beats,
    beat_animation_windows,
    beat_intervals,
    energy_at_frame,
    nearest_beat_distance,
    peak_beats,
)

__all__ = [
    "BeatAlignment",
    "adjust_beats_for_fps",
    "align_words_with_beats",
    "beat_animation_windows",
    "beat_intervals",
    "energy_at_frame",
    "nearest_beat_distance",
    "peak_beats",
]
