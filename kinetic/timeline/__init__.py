"""Timeline data model.

Validation and editing helpers live in ``kinetic.timeline.validation`` and
``kinetic.timeline.utils``.
"""

from .models import (
    MIN_SCENE_FRAMES,
    TRANSITION_FRAMES,
    AnimationSpec,
    AnimationTimeline,
    AnimationType,
    AudioConfig,
    BeatAnalysisResult,
    Easing,
    ImageLayer,
    Layer,
    LayerStyle,
    LayoutAlign,
    LogoLayer,
    Project,
    Scene,
    ScriptEnhancementResult,
    TextAnimation,
    TextLayer,
    TextStyle,
    TransitionType,
    UploadedAssets,
    VideoConfig,
    VideoLayer,
)

__all__ = [
    # Constants
    "MIN_SCENE_FRAMES",
    "TRANSITION_FRAMES",
    # Models
    "AnimationSpec",
    "AnimationTimeline",
    "AnimationType",
    "AudioConfig",
    "BeatAnalysisResult",
    "Easing",
    "ImageLayer",
    "Layer",
    "LayerStyle",
    "LayoutAlign",
    "LogoLayer",
    "Project",
    "Scene",
    "ScriptEnhancementResult",
    "TextAnimation",
    "TextLayer",
    "TextStyle",
    "TransitionType",
    "UploadedAssets",
    "VideoConfig",
    "VideoLayer",
]
