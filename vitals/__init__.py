"""Codebase vitals: weighted health scoring for Python codebases."""

__version__ = "0.1.0"
