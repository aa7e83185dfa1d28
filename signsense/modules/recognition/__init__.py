"""Gesture recognition module."""
from .gesture_rules import DEFAULT_CATALOG, GestureRuleSet, build_catalog
from .temporal_filter import TemporalFilter

__all__ = [
    "DEFAULT_CATALOG",
    "GestureRuleSet",
    "build_catalog",
    "TemporalFilter",
]
