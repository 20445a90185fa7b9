"""Render job description and submitters."""

from .job import (
    HttpRenderSubmitter,
    MockRenderSubmitter,
    RenderJobSpec,
    RenderResult,
    RenderSubmitter,
    create_render_submitter,
)

__all__ = [
    "HttpRenderSubmitter",
    "MockRenderSubmitter",
    "RenderJobSpec",
    "RenderResult",
    "RenderSubmitter",
    "create_render_submitter",
]
