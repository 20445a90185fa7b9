"""Project storage."""

from .repository import (
    InMemoryTimelineRepository,
    JsonDirectoryRepository,
    TimelineRepository,
    create_repository,
)

__all__ = [
    "InMemoryTimelineRepository",
    "JsonDirectoryRepository",
    "TimelineRepository",
    "create_repository",
]
