"""Provider selection by configuration."""

import logging
from dataclasses import dataclass
from typing import Optional

from ..config import Config
from .base import (
    BeatAnalysisProvider,
    ScriptEnhancementProvider,
    TimelineSynthesisProvider,
    UploadProvider,
)
from .live import (
    HttpBeatAnalysisProvider,
    HttpScriptEnhancementProvider,
    HttpTimelineSynthesisProvider,
    HttpUploadProvider,
    make_client,
)
from .mock import (
    MockBeatAnalysisProvider,
    MockScriptEnhancementProvider,
    MockTimelineSynthesisProvider,
    MockUploadProvider,
)


logger = logging.getLogger(__name__)


@dataclass
class ProviderSet:
    """One provider per pipeline stage."""

    upload: UploadProvider
    beat_analysis: BeatAnalysisProvider
    script_enhancement: ScriptEnhancementProvider
    timeline_synthesis: TimelineSynthesisProvider

    def names(self) -> dict[str, str]:
        return {
            "upload": self.upload.name,
            "beat_analysis": self.beat_analysis.name,
            "script_enhancement": self.script_enhancement.name,
            "timeline_synthesis": self.timeline_synthesis.name,
        }


def mock_providers() -> ProviderSet:
    return ProviderSet(
        upload=MockUploadProvider(),
        beat_analysis=MockBeatAnalysisProvider(),
        script_enhancement=MockScriptEnhancementProvider(),
        timeline_synthesis=MockTimelineSynthesisProvider(),
    )


def create_providers(config: Optional[Config] = None) -> ProviderSet:
    """Pick a provider for every stage.

    In ``mock`` mode every stage is mocked. In ``live`` mode a stage with a
    configured URL talks to that service and a stage without one is
    mocked. The choice is made once, here.

    Args:
        config: Configuration object. If None, loads default config.

    Returns:
        ProviderSet for the pipeline.
    """
    if config is None:
        from ..config import load_config

        config = load_config()

    providers = mock_providers()
    settings = config.providers
    if settings.mode == "mock":
        logger.info("Using mock providers for all stages")
        return providers

    def client_for(url: str):
        return make_client(url, config.http, settings.api_key)

    if settings.upload_url:
        providers.upload = HttpUploadProvider(client_for(settings.upload_url))
    if settings.beat_analysis_url:
        providers.beat_analysis = HttpBeatAnalysisProvider(client_for(settings.beat_analysis_url))
    if settings.script_enhancement_url:
        providers.script_enhancement = HttpScriptEnhancementProvider(
            client_for(settings.script_enhancement_url)
        )
    if settings.timeline_synthesis_url:
        providers.timeline_synthesis = HttpTimelineSynthesisProvider(
            client_for(settings.timeline_synthesis_url)
        )

    for stage, name in providers.names().items():
        logger.info("Stage %s uses provider %s", stage, name)
    return providers
