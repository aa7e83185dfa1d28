"""
Tests for Landmark Extraction
=============================
"""

from types import SimpleNamespace

import numpy as np
import pytest

from signsense.modules.detection.landmark_extractor import LandmarkExtractor


def _mediapipe_hand(frame):
    """Mimic a NormalizedLandmarkList built from a (21, 3) array."""
    return SimpleNamespace(
        landmark=[SimpleNamespace(x=float(x), y=float(y), z=float(z)) for x, y, z in frame]
    )


class TestToFrame:
    """Test suite for input validation and conversion."""

    def test_array_passthrough(self, fist):
        frame = LandmarkExtractor.to_frame(fist)
        assert frame.shape == (21, 3)
        assert frame.dtype == np.float32
        np.testing.assert_allclose(frame, fist)

    def test_mediapipe_landmark_list(self, fist):
        frame = LandmarkExtractor.to_frame(_mediapipe_hand(fist))
        np.testing.assert_allclose(frame, fist, atol=1e-6)

    def test_list_of_points(self, fist):
        points = [SimpleNamespace(x=x, y=y, z=z) for x, y, z in fist.tolist()]
        assert LandmarkExtractor.to_frame(points) is not None

    def test_two_columns_padded_with_zero_depth(self, fist):
        frame = LandmarkExtractor.to_frame(fist[:, :2].tolist())
        assert frame.shape == (21, 3)
        assert np.all(frame[:, 2] == 0)

    def test_none(self):
        assert LandmarkExtractor.to_frame(None) is None

    def test_partial_hand(self, fist):
        assert LandmarkExtractor.to_frame(fist[:20]) is None

    def test_non_finite(self, fist):
        fist[7, 1] = np.inf
        assert LandmarkExtractor.to_frame(fist) is None

    def test_unconvertible(self):
        assert LandmarkExtractor.to_frame([("a", "b", "c")] * 21) is None


class TestExtractor:

    @pytest.fixture
    def extractor(self):
        return LandmarkExtractor(640, 480)

    def test_extract_first_hand(self, extractor, fist, open_hand):
        results = SimpleNamespace(multi_hand_landmarks=[_mediapipe_hand(fist), _mediapipe_hand(open_hand)])
        frame = extractor.extract_landmarks(results)
        np.testing.assert_allclose(frame, fist, atol=1e-6)

    def test_extract_no_hand(self, extractor):
        assert extractor.extract_landmarks(SimpleNamespace(multi_hand_landmarks=None)) is None
        assert extractor.extract_landmarks(None) is None

    def test_pixel_coords(self, extractor, fist):
        pixels = extractor.to_pixel_coords(fist)
        assert pixels.shape == (21, 2)
        assert tuple(pixels[0]) == (320, 384)

    def test_bounding_box_inside_frame(self, extractor, fist):
        x, y, w, h = extractor.get_bounding_box(fist)
        assert x >= 0 and y >= 0
        assert w > 0 and h > 0
