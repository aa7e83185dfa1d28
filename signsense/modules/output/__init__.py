"""Recognized-text output."""
from .transcript import Transcript

__all__ = ["Transcript"]
