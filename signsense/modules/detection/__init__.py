"""Hand landmark validation. The MediaPipe wrapper lives in hand_detector."""
from .landmark_extractor import LandmarkExtractor

__all__ = ["LandmarkExtractor"]
