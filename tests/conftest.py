"""Shared test fixtures."""

import pytest

from kinetic.config import Config, HttpConfig
from kinetic.timeline.models import (
    AnimationSpec,
    AnimationTimeline,
    AnimationType,
    AudioConfig,
    ImageLayer,
    Scene,
    TextAnimation,
    TextLayer,
    TransitionType,
    VideoConfig,
)


@pytest.fixture
def mock_config() -> Config:
    """Provide a configuration with every stage mocked and no retry delays."""
    config = Config()
    config.providers.mode = "mock"
    config.http = HttpConfig(max_attempts=3, initial_delay=0, max_delay=0)
    return config


@pytest.fixture
def sample_timeline() -> AnimationTimeline:
    """Three scenes of 60/45/60 frames with fades after the first two (145 frames)."""
    scenes = [
        Scene(
            id="scene_intro",
            duration_in_frames=60,
            transition_type=TransitionType.FADE,
            layers=[
                TextLayer(
                    id="layer_headline",
                    content="Stop wasting time with AI.",
                    emphasis_words=["AI"],
                    text_animation=TextAnimation.FADE,
                    animation=AnimationSpec(type=AnimationType.FADE_IN, duration_in_frames=20),
                )
            ],
        ),
        Scene(
            id="scene_middle",
            duration_in_frames=45,
            transition_type=TransitionType.FADE,
            layers=[
                TextLayer(
                    id="layer_body",
                    content="Convert faster today",
                    emphasis_words=["convert"],
                    text_animation=TextAnimation.TYPING,
                    animation=AnimationSpec(type=AnimationType.BEAT_BOUNCE, duration_in_frames=10),
                    beat_sync=True,
                )
            ],
        ),
        Scene(
            id="scene_outro",
            duration_in_frames=60,
            background_image_url="https://storage.example.com/product_0.png",
            layers=[
                ImageLayer(
                    id="layer_product",
                    src="https://storage.example.com/product_0.png",
                    animation=AnimationSpec(type=AnimationType.SLIDE_UP, duration_in_frames=30),
                )
            ],
        ),
    ]
    timeline = AnimationTimeline(
        id="timeline_sample",
        project_name="Sample",
        video=VideoConfig(fps=30, width=1080, height=1920),
        audio=AudioConfig(music_url="https://storage.example.com/music.mp3", beats=[15, 30, 70, 100], tempo=120),
        scenes=scenes,
    )
    return timeline.with_derived_total()


@pytest.fixture
def sample_script() -> str:
    """A script long enough to pass input validation."""
    return "Build faster with AI. Ship your product today!"
