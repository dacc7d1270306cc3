"""Feedback time breakdown: working-time reconstruction from feedback timestamps."""

__version__ = "0.1.0"
