"""
Geometric primitives over a (21, 3) landmark frame.

Every gesture rule is built from these tests. Coordinates are normalized
image coordinates, so "above" means a smaller y value and "closer to the
camera" means a more negative z value.
"""

from typing import Sequence, Tuple

import numpy as np

from signsense.core.types import LandmarkFrame, THUMB_IP, THUMB_TIP, WRIST

_X, _Y, _Z = 0, 1, 2

DEFAULT_ALIGNMENT_THRESHOLD = 0.05
DEFAULT_DEPTH_THRESHOLD = 0.03


def finger_extended(frame: LandmarkFrame, tip: int, base: int) -> bool:
    """True when the tip sits above its base joint (points away from the palm)."""
    return bool(frame[tip, _Y] < frame[base, _Y])


def fingers_curled(frame: LandmarkFrame, tips: Sequence[int], bases: Sequence[int]) -> bool:
    """True when every listed tip sits below its paired base."""
    return all(frame[tip, _Y] > frame[base, _Y] for tip, base in zip(tips, bases))


def count_extended(frame: LandmarkFrame, tips: Sequence[int], bases: Sequence[int]) -> int:
    return sum(1 for tip, base in zip(tips, bases) if finger_extended(frame, tip, base))


def _max_deviation(values: np.ndarray) -> float:
    return float(np.max(np.abs(values - values.mean())))


def fingers_aligned(frame: LandmarkFrame, indices: Sequence[int],
                    threshold: float = DEFAULT_ALIGNMENT_THRESHOLD) -> bool:
    """True when the points' y values all lie within `threshold` of their mean.

    y = {0.40, 0.41, 0.39, 0.42} gives mean 0.405 and max deviation 0.015,
    so it is aligned at the default threshold.
    """
    return _max_deviation(frame[list(indices), _Y]) < threshold


def depth_clustered(frame: LandmarkFrame, indices: Sequence[int],
                    threshold: float = DEFAULT_DEPTH_THRESHOLD) -> bool:
    """True when the points' z values all lie within `threshold` of their mean."""
    return _max_deviation(frame[list(indices), _Z]) < threshold


def thumb_extended_sideways(frame: LandmarkFrame) -> bool:
    """Thumb tip further out than the thumb IP joint (thumb held away from the palm)."""
    return bool(frame[THUMB_TIP, _X] > frame[THUMB_IP, _X])


def distance(frame: LandmarkFrame, a: int, b: int) -> float:
    """Euclidean 3D distance between two landmarks."""
    return float(np.linalg.norm(frame[a] - frame[b]))


def wrist_in_region(frame: LandmarkFrame, x_range: Tuple[float, float],
                    y_range: Tuple[float, float]) -> bool:
    """Open-interval test of the wrist position against a screen region."""
    x, y = frame[WRIST, _X], frame[WRIST, _Y]
    return bool(x_range[0] < x < x_range[1] and y_range[0] < y < y_range[1])


def points_horizontal(frame: LandmarkFrame, tip: int, base: int) -> bool:
    """True when the base->tip segment runs more sideways than vertically."""
    dx = abs(frame[tip, _X] - frame[base, _X])
    dy = abs(frame[tip, _Y] - frame[base, _Y])
    return bool(dx > dy)


def between_x(frame: LandmarkFrame, point: int, a: int, b: int) -> bool:
    """True when `point` lies strictly between landmarks `a` and `b` horizontally."""
    lo, hi = sorted((frame[a, _X], frame[b, _X]))
    return bool(lo < frame[point, _X] < hi)
