"""Pipeline module for generating animation timelines."""

from .orchestrator import GenerationPipeline, GenerationRequest, PipelineResult
from .synthesis import analyze_tone, extract_emphasis_points, synthesize_timeline

__all__ = [
    "GenerationPipeline",
    "GenerationRequest",
    "PipelineResult",
    "analyze_tone",
    "extract_emphasis_points",
    "synthesize_timeline",
]
