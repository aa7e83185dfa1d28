"""
Conversion of upstream hand landmarks into validated (21, 3) frames.

Whatever the landmark source hands over (a MediaPipe landmark list, a list
of objects with x/y/z, or a plain array), the recognition core only ever sees
a fully populated float32 frame or None. Partial or malformed hands are
turned into None here, which downstream means "no hand this frame".
"""

import logging
from typing import Optional

import numpy as np

from signsense.core.types import LandmarkFrame, NUM_LANDMARKS

logger = logging.getLogger(__name__)


class LandmarkExtractor:
    """Validates landmark input and converts it to the core frame format."""

    def __init__(self, frame_width: int = 640, frame_height: int = 480):
        self._frame_width = frame_width
        self._frame_height = frame_height

    def set_frame_size(self, width: int, height: int):
        """Set frame dimensions for pixel coordinate conversion."""
        self._frame_width = width
        self._frame_height = height

    @staticmethod
    def to_frame(source) -> Optional[LandmarkFrame]:
        """Convert a landmark source to a (21, 3) float32 array.

        Accepts a MediaPipe NormalizedLandmarkList (anything with a
        `.landmark` sequence), a sequence of objects with x/y/z attributes,
        or an array-like of 21 (x, y) or (x, y, z) rows.

        Returns:
            The frame, or None when the source is absent, does not hold
            exactly 21 points, or contains non-finite coordinates.
        """
        if source is None:
            return None

        points = getattr(source, "landmark", source)
        try:
            if len(points) != NUM_LANDMARKS:
                logger.debug("Discarding hand with %d landmarks", len(points))
                return None
            first = points[0]
            if hasattr(first, "x") and hasattr(first, "y"):
                frame = np.array(
                    [[p.x, p.y, getattr(p, "z", 0.0)] for p in points], dtype=np.float32
                )
            else:
                frame = np.asarray(points, dtype=np.float32)
        except (TypeError, ValueError, AttributeError,
                KeyError, IndexError, OverflowError) as e:
            logger.debug("Discarding unconvertible landmark source: %s", e)
            return None

        if frame.ndim != 2 or frame.shape[0] != NUM_LANDMARKS or frame.shape[1] not in (2, 3):
            logger.debug("Discarding landmark array of shape %s", frame.shape)
            return None
        if frame.shape[1] == 2:
            frame = np.hstack([frame, np.zeros((NUM_LANDMARKS, 1), dtype=np.float32)])
        if not np.all(np.isfinite(frame)):
            logger.debug("Discarding frame with non-finite coordinates")
            return None
        return frame

    def extract_landmarks(self, results) -> Optional[LandmarkFrame]:
        """First detected hand of a MediaPipe Hands result, as a frame."""
        if results is None or not getattr(results, "multi_hand_landmarks", None):
            return None
        return self.to_frame(results.multi_hand_landmarks[0])

    def to_pixel_coords(self, frame: LandmarkFrame) -> np.ndarray:
        """Convert normalized landmarks to pixel coordinates.

        Returns:
            np.ndarray of shape (21, 2) with pixel x, y
        """
        pixels = np.zeros((NUM_LANDMARKS, 2), dtype=np.int32)
        pixels[:, 0] = (frame[:, 0] * self._frame_width).astype(np.int32)
        pixels[:, 1] = (frame[:, 1] * self._frame_height).astype(np.int32)
        return pixels

    def get_bounding_box(self, frame: LandmarkFrame, padding: float = 0.1) -> tuple:
        """Bounding box around the hand as (x, y, w, h) in pixels."""
        pixels = self.to_pixel_coords(frame)
        x_min, y_min = pixels.min(axis=0)
        x_max, y_max = pixels.max(axis=0)

        w = x_max - x_min
        h = y_max - y_min
        pad_x = int(w * padding)
        pad_y = int(h * padding)

        return (
            max(0, int(x_min) - pad_x),
            max(0, int(y_min) - pad_y),
            int(w) + 2 * pad_x,
            int(h) + 2 * pad_y,
        )
