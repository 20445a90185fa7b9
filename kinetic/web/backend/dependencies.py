"""Dependency injection for FastAPI."""

from functools import lru_cache
from pathlib import Path
from typing import Annotated

from fastapi import Depends

from ...config import Config, load_config
from ...pipeline.orchestrator import GenerationPipeline
from ...project.repository import JsonDirectoryRepository, TimelineRepository
from ...render.job import RenderSubmitter, create_render_submitter


@lru_cache
def get_config() -> Config:
    """Get the application configuration (cached)."""
    return load_config()


@lru_cache
def get_pipeline() -> GenerationPipeline:
    """Get the generation pipeline (cached singleton)."""
    return GenerationPipeline(get_config())


@lru_cache
def get_render_submitter() -> RenderSubmitter:
    """Get the render submitter (cached singleton)."""
    return create_render_submitter(get_config())


@lru_cache
def _repository_for(projects_dir: Path) -> TimelineRepository:
    return JsonDirectoryRepository(projects_dir)


def get_projects_dir(config: Annotated[Config, Depends(get_config)]) -> Path:
    """Get the projects directory from config."""
    return config.web.projects_dir


def get_repository(
    projects_dir: Annotated[Path, Depends(get_projects_dir)],
) -> TimelineRepository:
    """Get the project repository for the configured directory."""
    return _repository_for(projects_dir)


# Type aliases for cleaner router signatures
ConfigDep = Annotated[Config, Depends(get_config)]
PipelineDep = Annotated[GenerationPipeline, Depends(get_pipeline)]
RepositoryDep = Annotated[TimelineRepository, Depends(get_repository)]
RenderSubmitterDep = Annotated[RenderSubmitter, Depends(get_render_submitter)]
