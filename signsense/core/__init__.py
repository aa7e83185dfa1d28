"""Core types and event bus. The pipeline is imported from core.pipeline."""
from .events import EventBus, Events
from .types import FrameResult, GestureDefinition, RecognitionResult

__all__ = [
    "EventBus",
    "Events",
    "FrameResult",
    "GestureDefinition",
    "RecognitionResult",
]
