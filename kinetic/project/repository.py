"""
Project storage.

The pipeline, web layer and CLI depend only on the ``TimelineRepository``
interface. Two implementations ship: an in-memory map for tests and
single-process use, and a directory of JSON files (one per project).
"""

import json
import re
import threading
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Optional

from ..errors import NotFoundError, ValidationError
from ..timeline.models import Project


_SAFE_ID = re.compile(r"^[A-Za-z0-9_\-]+$")


class TimelineRepository(ABC):
    """Store of projects keyed by opaque ids."""

    @abstractmethod
    def get(self, project_id: str) -> Project:
        """Return a project.

        Raises:
            NotFoundError: If no project has this id.
        """
        pass

    @abstractmethod
    def put(self, project: Project) -> Project:
        """Insert or replace a project and return the stored record."""
        pass

    @abstractmethod
    def delete(self, project_id: str) -> None:
        """Remove a project.

        Raises:
            NotFoundError: If no project has this id.
        """
        pass

    @abstractmethod
    def list(self) -> list[Project]:
        """All projects, newest first."""
        pass

    def exists(self, project_id: str) -> bool:
        try:
            self.get(project_id)
        except NotFoundError:
            return False
        return True

    @staticmethod
    def _touch(project: Project) -> Project:
        return project.model_copy(update={"updated_at": datetime.now().isoformat()})


class InMemoryTimelineRepository(TimelineRepository):
    def __init__(self):
        self._projects: dict[str, Project] = {}
        self._lock = threading.Lock()

    def get(self, project_id: str) -> Project:
        with self._lock:
            project = self._projects.get(project_id)
        if project is None:
            raise NotFoundError("Project", project_id)
        return project

    def put(self, project: Project) -> Project:
        stored = self._touch(project)
        with self._lock:
            self._projects[project.id] = stored
        return stored

    def delete(self, project_id: str) -> None:
        with self._lock:
            if self._projects.pop(project_id, None) is None:
                raise NotFoundError("Project", project_id)

    def list(self) -> list[Project]:
        with self._lock:
            projects = list(self._projects.values())
        return sorted(projects, key=lambda p: p.created_at, reverse=True)


class JsonDirectoryRepository(TimelineRepository):
    """One ``<id>.json`` file per project under ``root``."""

    def __init__(self, root: Path | str):
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()

    def _path(self, project_id: str) -> Path:
        if not _SAFE_ID.match(project_id or ""):
            raise ValidationError(f"Invalid project id: {project_id!r}")
        return self.root / f"{project_id}.json"

    def _read(self, path: Path) -> Project:
        with open(path) as f:
            return Project.model_validate(json.load(f))

    def get(self, project_id: str) -> Project:
        path = self._path(project_id)
        if not path.exists():
            raise NotFoundError("Project", project_id)
        return self._read(path)

    def put(self, project: Project) -> Project:
        path = self._path(project.id)
        stored = self._touch(project)
        tmp = path.with_suffix(".json.tmp")
        with self._lock:
            with open(tmp, "w") as f:
                json.dump(stored.to_dict(), f, indent=2)
            tmp.replace(path)
        return stored

    def delete(self, project_id: str) -> None:
        path = self._path(project_id)
        with self._lock:
            if not path.exists():
                raise NotFoundError("Project", project_id)
            path.unlink()

    def list(self) -> list[Project]:
        projects = [self._read(path) for path in self.root.glob("*.json")]
        return sorted(projects, key=lambda p: p.created_at, reverse=True)


def create_repository(root: Optional[Path | str] = None) -> TimelineRepository:
    """JSON-directory repository when ``root`` is given, in-memory otherwise."""
    if root is None:
        return InMemoryTimelineRepository()
    return JsonDirectoryRepository(root)
