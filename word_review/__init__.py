"""Vocabulary lessons with flash-card review and a matching game."""

__version__ = "0.1.0"
