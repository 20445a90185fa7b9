"""Tests for the deterministic mock providers."""

from kinetic.providers.mock import (
    MockBeatAnalysisProvider,
    MockScriptEnhancementProvider,
    MockTimelineSynthesisProvider,
    MockUploadProvider,
)
from kinetic.providers.base import SynthesisRequest
from kinetic.timeline.models import UploadFile


class TestMockUploadProvider:
    """Tests for MockUploadProvider."""

    def test_groups_files_by_kind(self):
        """Test groups files by kind."""
        provider = MockUploadProvider()
        assets = provider.upload(
            [
                UploadFile(kind="music", filename="track.wav", size=10),
                UploadFile(kind="logo", filename="brand.svg"),
                UploadFile(kind="productImages", filename="a.jpg"),
                UploadFile(kind="productImages", filename="b.png"),
                UploadFile(kind="productVideos", filename="demo.mov"),
            ]
        )
        assert assets.music_file.url == "https://storage.example.com/music.wav"
        assert assets.music_file.size == 10
        assert assets.logo.format == "svg"
        assert [img.url for img in assets.product_images] == [
            "https://storage.example.com/product_0.jpg",
            "https://storage.example.com/product_1.png",
        ]
        assert assets.product_videos[0].url == "https://storage.example.com/video_0.mp4"

    def test_unknown_music_format_defaults_to_mp3(self):
        """Test unknown music format defaults to mp3."""
        asset = MockUploadProvider().upload_file(UploadFile(kind="music", filename="track.ogg"), 0)
        assert asset.format == "mp3"

    def test_custom_base_url(self):
        """Test custom base URL."""
        provider = MockUploadProvider("https://cdn.test/")
        asset = provider.upload_file(UploadFile(kind="logo", filename="logo.png"), 0)
        assert asset.url == "https://cdn.test/logo.png"


class TestMockBeatAnalysisProvider:
    """Tests for MockBeatAnalysisProvider."""

    def test_regular_beats_at_30fps(self):
        """Test regular beats at 30fps."""
        result = MockBeatAnalysisProvider().analyze("https://storage.example.com/music.mp3", fps=30)
        assert result.tempo == 128
        assert result.beats[:3] == [14, 28, 42]
        assert result.beats[-1] == 294
        assert result.peak_frames == result.beats[::2]

    def test_beats_strictly_increasing(self):
        """Test beats strictly increasing."""
        beats = MockBeatAnalysisProvider().analyze("m.mp3", fps=60).beats
        assert all(b > a for a, b in zip(beats, beats[1:]))
        assert beats[0] == 28

    def test_energy_cycles(self):
        """Test energy cycles."""
        levels = MockBeatAnalysisProvider().analyze("m.mp3").energy_levels
        assert [lvl.frame for lvl in levels[:3]] == [0, 30, 60]
        assert [lvl.energy.value for lvl in levels[:4]] == ["low", "medium", "high", "low"]


class TestMockScriptEnhancementProvider:
    """Tests for MockScriptEnhancementProvider."""

    def test_decorates_and_emphasizes(self, sample_script):
        """Test decorates and emphasizes."""
        result = MockScriptEnhancementProvider().enhance(sample_script, "bold style")
        assert result.original_script == sample_script
        assert result.enhanced_script == f"✨ {sample_script} ✨"
        assert result.emphasized_words == ["faster", "product", "today!"]

    def test_caps_emphasized_words(self):
        """Test caps emphasized words."""
        script = "alpha1 bravo2 charlie delta4 echo55 foxtrot golf77"
        result = MockScriptEnhancementProvider().enhance(script, "style")
        assert len(result.emphasized_words) == 5


class TestMockTimelineSynthesisProvider:
    """Tests for MockTimelineSynthesisProvider."""

    def _request(self, sample_script):
        from kinetic.timeline.models import MusicAsset, UploadedAssets

        enhancement = MockScriptEnhancementProvider().enhance(sample_script, "style")
        beats = MockBeatAnalysisProvider().analyze("m.mp3")
        assets = UploadedAssets(music_file=MusicAsset(url="https://storage.example.com/music.mp3"))
        return SynthesisRequest(enhancement=enhancement, beat_analysis=beats, assets=assets)

    def test_deterministic(self, sample_script):
        """Test deterministic."""
        provider = MockTimelineSynthesisProvider()
        first = provider.synthesize(self._request(sample_script))
        second = provider.synthesize(self._request(sample_script))
        assert first == second

    def test_fixed_timeline_id(self, sample_script):
        """Test fixed timeline ID."""
        request = self._request(sample_script)
        timeline = MockTimelineSynthesisProvider(timeline_id="project_fixed").synthesize(request)
        assert timeline.id == "project_fixed"
        assert request.timeline_id is None
