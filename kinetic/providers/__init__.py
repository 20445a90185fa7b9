"""Providers for the generation pipeline stages (mock and HTTP-backed)."""

from .base import (
    BeatAnalysisProvider,
    ScriptEnhancementProvider,
    Stage,
    SynthesisRequest,
    TimelineSynthesisProvider,
    UploadProvider,
)
from .client import ProviderClient
from .factory import ProviderSet, create_providers, mock_providers
from .mock import (
    MockBeatAnalysisProvider,
    MockScriptEnhancementProvider,
    MockTimelineSynthesisProvider,
    MockUploadProvider,
)

__all__ = [
    # Interfaces
    "BeatAnalysisProvider",
    "ScriptEnhancementProvider",
    "Stage",
    "SynthesisRequest",
    "TimelineSynthesisProvider",
    "UploadProvider",
    # Implementations
    "MockBeatAnalysisProvider",
    "MockScriptEnhancementProvider",
    "MockTimelineSynthesisProvider",
    "MockUploadProvider",
    "ProviderClient",
    # Selection
    "ProviderSet",
    "create_providers",
    "mock_providers",
]
