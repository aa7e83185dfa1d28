"""
Live landmark source: MediaPipe Hands tuned for single-hand signing.

Turns a BGR camera frame into the (21, 3) frame the recognition core
expects, or None when no complete hand is visible.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import cv2
import numpy as np
import mediapipe as mp

from signsense.core.types import LandmarkFrame
from signsense.modules.detection.landmark_extractor import LandmarkExtractor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DetectorSettings:
    """MediaPipe Hands options for signing in front of a webcam."""
    max_num_hands: int = 1
    model_complexity: int = 1
    min_detection_confidence: float = 0.8
    min_tracking_confidence: float = 0.8

    @classmethod
    def from_config(cls, config: dict) -> "DetectorSettings":
        defaults = cls()
        return cls(
            max_num_hands=config.get("max_num_hands", defaults.max_num_hands),
            model_complexity=config.get("model_complexity", defaults.model_complexity),
            min_detection_confidence=config.get("min_detection_confidence",
                                                defaults.min_detection_confidence),
            min_tracking_confidence=config.get("min_tracking_confidence",
                                               defaults.min_tracking_confidence),
        )


class HandDetector:
    """Runs MediaPipe Hands on camera frames and keeps the first hand."""

    def __init__(self, config: dict):
        self._settings = DetectorSettings.from_config(config)
        self._hands = None
        self._handedness: Optional[str] = None

    @property
    def settings(self) -> DetectorSettings:
        return self._settings

    @property
    def handedness(self) -> Optional[str]:
        """'Left' / 'Right' label of the last detected hand, if any."""
        return self._handedness

    def open(self):
        s = self._settings
        self._hands = mp.solutions.hands.Hands(
            static_image_mode=False,
            max_num_hands=s.max_num_hands,
            model_complexity=s.model_complexity,
            min_detection_confidence=s.min_detection_confidence,
            min_tracking_confidence=s.min_tracking_confidence,
        )
        logger.info("MediaPipe Hands ready (hands=%d, complexity=%d, detect=%.2f, track=%.2f)",
                    s.max_num_hands, s.model_complexity,
                    s.min_detection_confidence, s.min_tracking_confidence)

    def find_hand(self, bgr_frame: np.ndarray) -> Optional[LandmarkFrame]:
        """Landmarks of the first hand in a BGR frame, or None."""
        if self._hands is None:
            self.open()

        rgb = cv2.cvtColor(bgr_frame, cv2.COLOR_BGR2RGB)
        rgb.flags.writeable = False
        results = self._hands.process(rgb)

        hands = getattr(results, "multi_hand_landmarks", None)
        if not hands:
            self._handedness = None
            return None

        labels = getattr(results, "multi_handedness", None)
        self._handedness = labels[0].classification[0].label if labels else None
        return LandmarkExtractor.to_frame(hands[0])

    def close(self):
        if self._hands is not None:
            self._hands.close()
            self._hands = None
            logger.info("MediaPipe Hands closed")

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, *args):
        self.close()
