"""Kinetic typography timeline engine."""

__version__ = "0.1.0"
