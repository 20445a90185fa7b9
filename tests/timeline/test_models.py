"""Tests for the timeline data model."""

import pytest
from pydantic import ValidationError as SchemaError

from kinetic.timeline.models import (
    MIN_SCENE_FRAMES,
    AnimationSpec,
    AnimationTimeline,
    AnimationType,
    BeatAnalysisResult,
    ImageLayer,
    Scene,
    TextLayer,
    TransitionType,
)


class TestScene:
    """Tests for Scene."""

    def test_short_scene_is_clamped(self):
        """Test short scene is clamped."""
        scene = Scene(id="s", duration_in_frames=5)
        assert scene.effective_duration == MIN_SCENE_FRAMES

    def test_long_scene_is_kept(self):
        """Test long scene is kept."""
        assert Scene(id="s", duration_in_frames=90).effective_duration == 90

    def test_camel_case_keys(self):
        """Test camel case keys."""
        scene = Scene.model_validate(
            {"id": "s", "durationInFrames": 42, "transitionType": "clockWipe", "layoutAlign": "top"}
        )
        assert scene.duration_in_frames == 42
        assert scene.transition_type == TransitionType.CLOCK_WIPE
        assert scene.has_transition

    def test_start_end_form(self):
        """Test start end form."""
        scene = Scene.model_validate(
            {"id": "s", "startFrame": 30, "endFrame": 75, "transition": {"type": "wipe", "duration": 10}}
        )
        assert scene.duration_in_frames == 45
        assert scene.transition_type == TransitionType.WIPE

    def test_unknown_transition_object_becomes_fade(self):
        """Test unknown transition object becomes fade."""
        scene = Scene.model_validate({"id": "s", "duration": 30, "transition": {"type": "flash"}})
        assert scene.duration_in_frames == 30
        assert scene.transition_type == TransitionType.FADE

    def test_scene_is_frozen(self):
        """Test scene is frozen."""
        scene = Scene(id="s")
        with pytest.raises(SchemaError):
            scene.duration_in_frames = 10


class TestLayers:
    """Tests for the layer union."""

    def test_discriminated_by_type(self):
        """Test discriminated by type."""
        scene = Scene.model_validate(
            {
                "id": "s",
                "layers": [
                    {"type": "text", "content": "Hello"},
                    {"type": "image", "src": "a.png"},
                    {"type": "logo", "src": "logo.svg"},
                    {"type": "video", "src": "clip.mp4", "loop": True},
                ],
            }
        )
        kinds = [layer.type for layer in scene.layers]
        assert kinds == ["text", "image", "logo", "video"]
        assert isinstance(scene.layers[0], TextLayer)
        assert isinstance(scene.layers[1], ImageLayer)

    def test_unknown_layer_type_rejected(self):
        """Test unknown layer type rejected."""
        with pytest.raises(SchemaError):
            Scene.model_validate({"id": "s", "layers": [{"type": "shape"}]})

    def test_animation_accepts_duration_key(self):
        """Test animation accepts duration key."""
        spec = AnimationSpec.model_validate({"type": "slideUp", "duration": 12, "easing": "easeIn"})
        assert spec.type == AnimationType.SLIDE_UP
        assert spec.duration_in_frames == 12

    def test_layer_ids_are_generated(self):
        """Test layer IDS are generated."""
        a, b = TextLayer(content="a"), TextLayer(content="b")
        assert a.id.startswith("layer_")
        assert a.id != b.id


class TestAnimationTimeline:
    """Tests for AnimationTimeline."""

    def test_total_frames_subtracts_overlaps(self, sample_timeline):
        """Test total frames subtracts overlaps."""
        assert sample_timeline.computed_total_frames() == 145
        assert sample_timeline.video.total_frames == 145

    def test_last_scene_transition_is_ignored(self):
        """Test last scene transition is ignored."""
        timeline = AnimationTimeline(
            id="t",
            scenes=[
                Scene(id="a", duration_in_frames=30),
                Scene(id="b", duration_in_frames=30, transition_type=TransitionType.SLIDE),
            ],
        )
        assert timeline.computed_total_frames() == 60

    def test_with_derived_total_returns_copy(self):
        """Test with derived total returns copy."""
        timeline = AnimationTimeline(id="t", scenes=[Scene(id="a", duration_in_frames=40)])
        derived = timeline.with_derived_total()
        assert derived.video.total_frames == 40
        assert timeline.video.total_frames == 1

    def test_get_scene(self, sample_timeline):
        """Test get scene."""
        assert sample_timeline.get_scene("scene_middle").duration_in_frames == 45
        assert sample_timeline.get_scene("missing") is None

    def test_to_dict_uses_camel_case(self, sample_timeline):
        """Test to dict uses camel case."""
        data = sample_timeline.to_dict()
        assert data["projectName"] == "Sample"
        assert data["video"]["totalFrames"] == 145
        assert data["scenes"][0]["durationInFrames"] == 60
        assert data["scenes"][0]["layers"][0]["emphasisWords"] == ["AI"]

    def test_round_trip(self, sample_timeline):
        """Test round trip."""
        restored = AnimationTimeline.model_validate(sample_timeline.to_dict())
        assert restored == sample_timeline


class TestBeatAnalysisResult:
    """Tests for BeatAnalysisResult."""

    def test_peaks_must_be_beats(self):
        """Test peaks must be beats."""
        with pytest.raises(SchemaError):
            BeatAnalysisResult(tempo=120, beats=[15, 30], peak_frames=[45])

    def test_valid_result(self):
        """Test valid result."""
        result = BeatAnalysisResult.model_validate(
            {
                "tempo": 128,
                "beats": [15, 30, 45],
                "energyLevels": [{"frame": 30, "energy": "high"}],
                "peakFrames": [30],
            }
        )
        assert result.energy_levels[0].energy.value == "high"
        assert result.peak_frames == [30]
