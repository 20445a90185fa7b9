"""API routers for the web backend."""

from .projects import router as projects_router
from .render import router as render_router
from .stages import router as stages_router

__all__ = [
    "projects_router",
    "render_router",
    "stages_router",
]
