"""
Shared domain types for the SignSense recognition core.

Centralizes landmark indices, the gesture catalog entry, the per-gesture
evidence record and the result containers passed between modules, so the
recognition, output and pipeline modules do not import each other.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Dict, Mapping, Optional, Tuple

import numpy as np


# =============================================================================
# Hand Landmark Indices (MediaPipe convention)
# =============================================================================

WRIST = 0
THUMB_CMC = 1
THUMB_MCP = 2
THUMB_IP = 3
THUMB_TIP = 4
INDEX_MCP = 5
INDEX_PIP = 6
INDEX_DIP = 7
INDEX_TIP = 8
MIDDLE_MCP = 9
MIDDLE_PIP = 10
MIDDLE_DIP = 11
MIDDLE_TIP = 12
RING_MCP = 13
RING_PIP = 14
RING_DIP = 15
RING_TIP = 16
PINKY_MCP = 17
PINKY_PIP = 18
PINKY_DIP = 19
PINKY_TIP = 20

NUM_LANDMARKS = 21

FINGER_TIPS = (THUMB_TIP, INDEX_TIP, MIDDLE_TIP, RING_TIP, PINKY_TIP)
FINGER_BASES = (THUMB_MCP, INDEX_MCP, MIDDLE_MCP, RING_MCP, PINKY_MCP)

# The four non-thumb fingers, used by most fist / flat-hand rules
FOUR_TIPS = (INDEX_TIP, MIDDLE_TIP, RING_TIP, PINKY_TIP)
FOUR_BASES = (INDEX_MCP, MIDDLE_MCP, RING_MCP, PINKY_MCP)

# Skeleton edges drawn by the live overlay
HAND_CONNECTIONS = (
    (0, 1), (1, 2), (2, 3), (3, 4),
    (0, 5), (5, 6), (6, 7), (7, 8),
    (0, 9), (9, 10), (10, 11), (11, 12),
    (0, 13), (13, 14), (14, 15), (15, 16),
    (0, 17), (17, 18), (18, 19), (19, 20),
)

# A frame is a (21, 3) float32 array of normalized (x, y, z) coordinates
LandmarkFrame = np.ndarray
GesturePredicate = Callable[[LandmarkFrame], bool]


# =============================================================================
# Gesture Catalog Entry
# =============================================================================

@dataclass(frozen=True)
class GestureDefinition:
    """One named hand shape: description plus a pure frame predicate."""
    name: str
    description: str
    predicate: GesturePredicate
    category: str = "letter"  # word / letter / control
    translations: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        # Catalog entries are static configuration; freeze the label table too
        object.__setattr__(self, "translations", MappingProxyType(dict(self.translations)))

    def matches(self, frame: LandmarkFrame) -> bool:
        return bool(self.predicate(frame))

    def label(self, language: str) -> str:
        """Display label for a language, falling back to the gesture name."""
        return self.translations.get(language, self.name)


# =============================================================================
# Recognition State Containers
# =============================================================================

@dataclass
class EvidenceRecord:
    """Accumulated evidence for one gesture (timestamps in milliseconds)."""
    detection_count: float = 0.0
    last_detected_at: float = 0.0

    def clear(self):
        self.detection_count = 0.0
        self.last_detected_at = 0.0


@dataclass(frozen=True)
class RecognitionResult:
    """Outcome of one state-machine update."""
    committed: Optional[str]
    confidence: int
    detected: Tuple[str, ...] = ()

    @property
    def has_commit(self) -> bool:
        return self.committed is not None


class FrameResult:
    """Result of a single pipeline iteration, read by the UI layer."""

    __slots__ = (
        "frame_id", "timestamp", "hand_detected", "detections",
        "committed", "confidence", "text",
    )

    def __init__(self, frame_id: int = 0, timestamp: float = 0.0):
        self.frame_id = frame_id
        self.timestamp = timestamp
        self.hand_detected = False
        self.detections: Dict[str, bool] = {}
        self.committed: Optional[str] = None
        self.confidence = 0
        self.text = ""

    @property
    def fired(self) -> Tuple[str, ...]:
        """Names of the gestures whose predicate matched this frame."""
        return tuple(name for name, hit in self.detections.items() if hit)

    def __repr__(self):
        return (f"FrameResult(#{self.frame_id}, hand={self.hand_detected}, "
                f"committed={self.committed!r}, conf={self.confidence})")
