"""Test fixtures for web backend tests."""

from typing import Generator

import pytest
from fastapi.testclient import TestClient

from kinetic.config import Config
from kinetic.pipeline.orchestrator import GenerationPipeline
from kinetic.project.repository import InMemoryTimelineRepository
from kinetic.providers.base import BeatAnalysisProvider
from kinetic.providers.factory import mock_providers
from kinetic.render.job import MockRenderSubmitter
from kinetic.web.backend import dependencies
from kinetic.web.backend.app import create_app


class UnavailableBeatAnalysis(BeatAnalysisProvider):
    name = "unavailable-beats"

    def analyze(self, music_url, fps=30):
        raise ConnectionError("beat service unreachable")


@pytest.fixture
def repository() -> InMemoryTimelineRepository:
    """Create a fresh in-memory project store."""
    return InMemoryTimelineRepository()


@pytest.fixture
def pipeline(mock_config: Config) -> GenerationPipeline:
    """Create a pipeline backed by mock providers."""
    return GenerationPipeline(mock_config)


def _client(config: Config, pipeline, repository) -> TestClient:
    app = create_app(config)
    app.dependency_overrides[dependencies.get_config] = lambda: config
    app.dependency_overrides[dependencies.get_pipeline] = lambda: pipeline
    app.dependency_overrides[dependencies.get_repository] = lambda: repository
    app.dependency_overrides[dependencies.get_render_submitter] = lambda: MockRenderSubmitter()
    return TestClient(app)


@pytest.fixture
def test_client(
    mock_config: Config,
    pipeline: GenerationPipeline,
    repository: InMemoryTimelineRepository,
) -> Generator[TestClient, None, None]:
    """Create a test client with mocked dependencies."""
    with _client(mock_config, pipeline, repository) as client:
        yield client


@pytest.fixture
def failing_client(
    mock_config: Config,
    repository: InMemoryTimelineRepository,
) -> Generator[TestClient, None, None]:
    """Create a test client whose beat-analysis provider is down."""
    providers = mock_providers()
    providers.beat_analysis = UnavailableBeatAnalysis()
    pipeline = GenerationPipeline(mock_config, providers=providers)
    with _client(mock_config, pipeline, repository) as client:
        yield client


@pytest.fixture
def create_payload(sample_script: str) -> dict:
    """Body of a valid project creation request."""
    return {
        "projectName": "Launch Video",
        "originalScript": sample_script,
        "stylePrompt": "Bold and energetic",
        "uploadedAssets": {
            "musicFile": {"url": "https://storage.example.com/music.mp3", "format": "mp3"},
        },
    }
