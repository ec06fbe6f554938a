"""Timed cognitive assessment core: session controller, scoring and results."""

__version__ = "0.1.0"
