"""Web interface for the kinetic typography engine.

This package provides a FastAPI backend exposing the generation stages,
stored projects, frame evaluation and render jobs.

Usage:
    python -m kinetic.web [--port 8000] [--host 127.0.0.1]
"""
