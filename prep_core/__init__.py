"""Scoring core for study-tool personalization, placement simulators and result windows."""

__version__ = "0.3.0"
