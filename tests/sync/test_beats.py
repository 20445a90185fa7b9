"""Tests for beat alignment and beat helpers."""

from kinetic.sync import (
    BeatAlignment,
    adjust_beats_for_fps,
    align_words_with_beats,
    beat_animation_windows,
    beat_intervals,
    energy_at_frame,
    nearest_beat_distance,
    peak_beats,
)
from kinetic.timeline.models import BeatAnalysisResult, EnergyLevel


class TestAlignWordsWithBeats:
    """Tests for align_words_with_beats."""

    def test_surplus_words_are_dropped(self):
        """Test surplus words are dropped."""
        result = align_words_with_beats(["Stop", "AI", "convert"], [15, 30])
        assert result == [BeatAlignment("Stop", 15), BeatAlignment("AI", 30)]

    def test_surplus_beats_are_dropped(self):
        """Test surplus beats are dropped."""
        result = align_words_with_beats(["Stop"], [15, 30, 45])
        assert [a.to_dict() for a in result] == [{"word": "Stop", "frame": 15}]

    def test_no_beats(self):
        """Test no beats."""
        assert align_words_with_beats(["Stop", "AI"], []) == []

    def test_never_more_than_min(self):
        """Test never more than min."""
        for words in ([], ["a"], ["a", "b", "c"]):
            for beats in ([], [1], [1, 2, 3, 4]):
                assert len(align_words_with_beats(words, beats)) == min(len(words), len(beats))


class TestBeatHelpers:
    """Tests for beat list helpers."""

    def test_adjust_beats_for_fps(self):
        """Test adjust beats for FPS."""
        assert adjust_beats_for_fps([15, 30, 45], 30, 60) == [30, 60, 90]
        assert adjust_beats_for_fps([15, 30], 30, 24) == [12, 24]

    def test_animation_windows(self):
        """Test animation windows."""
        windows = beat_animation_windows([5, 40], window=10)
        assert windows == [range(0, 15), range(30, 50)]

    def test_nearest_beat_distance(self):
        """Test nearest beat distance."""
        assert nearest_beat_distance([15, 30], 27) == 3
        assert nearest_beat_distance([], 27) is None

    def test_intervals(self):
        """Test beat intervals."""
        assert beat_intervals([14, 28, 43]) == [14, 15]


class TestAnalysisHelpers:
    """Tests for helpers over BeatAnalysisResult."""

    def _result(self) -> BeatAnalysisResult:
        return BeatAnalysisResult.model_validate(
            {
                "tempo": 120,
                "beats": [15, 30, 45, 60],
                "energyLevels": [
                    {"frame": 30, "energy": "high"},
                    {"frame": 0, "energy": "medium"},
                ],
                "peakFrames": [45, 15],
            }
        )

    def test_peak_beats_in_beat_order(self):
        """Test peak beats in beat order."""
        assert peak_beats(self._result()) == [15, 45]

    def test_energy_at_frame(self):
        """Test energy at frame."""
        result = self._result()
        assert energy_at_frame(result, 10) == EnergyLevel.MEDIUM
        assert energy_at_frame(result, 30) == EnergyLevel.HIGH

    def test_energy_defaults_to_low(self):
        """Test energy defaults to low."""
        result = BeatAnalysisResult(tempo=120)
        assert energy_at_frame(result, 100) == EnergyLevel.LOW
