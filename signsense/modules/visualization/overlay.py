"""
Live camera overlay for the sign-to-text view: hand skeleton, recognized
text, confidence bar and key legend.
"""

import logging
import cv2
import numpy as np

from signsense.core.types import HAND_CONNECTIONS

logger = logging.getLogger(__name__)


class Overlay:
    """Draws the recognition state on top of BGR camera frames."""

    def __init__(self, config: dict):
        self._show_landmarks = config.get("show_landmarks", True)
        self._show_confidence_bar = config.get("show_confidence_bar", True)
        self._show_legend = config.get("show_legend", True)
        # Progress is only shown while a gesture is still accumulating
        self._progress_ceiling = config.get("progress_ceiling", 95)

        colors = config.get("colors", {})
        self._color_text = tuple(colors.get("text", [255, 255, 255]))
        self._color_skeleton = tuple(colors.get("skeleton", [246, 92, 139]))
        self._color_conf_high = tuple(colors.get("confidence_high", [0, 255, 0]))
        self._color_conf_mid = tuple(colors.get("confidence_mid", [0, 255, 255]))
        self._color_conf_low = tuple(colors.get("confidence_low", [0, 0, 255]))

        panel_cfg = config.get("panel", {})
        self._panel_opacity = panel_cfg.get("opacity", 0.7)
        self._panel_height = panel_cfg.get("height", 70)

    def render(self, frame: np.ndarray, state: dict) -> np.ndarray:
        """Render the overlay.

        Args:
            frame: BGR frame to draw on
            state: dict with the current recognition state:
                - pixels: (21, 2) int array or None
                - text: str
                - confidence: int
                - language: str
                - hand_detected: bool

        Returns:
            Frame with overlay
        """
        h, w = frame.shape[:2]

        if self._show_landmarks and state.get("pixels") is not None:
            self.draw_skeleton(frame, state["pixels"], self._color_skeleton)

        self._draw_text_panel(frame, w, h, state)

        confidence = state.get("confidence", 0)
        if self._show_confidence_bar and 0 < confidence < self._progress_ceiling:
            self._draw_confidence_bar(frame, w, confidence)

        if self._show_legend:
            self._draw_legend(frame, w, state.get("language", "english"))

        if not state.get("hand_detected", True):
            cv2.putText(
                frame, "No hand detected",
                (15, 30), cv2.FONT_HERSHEY_SIMPLEX, 0.7, self._color_conf_low, 2,
            )

        return frame

    @staticmethod
    def draw_skeleton(frame: np.ndarray, pixels: np.ndarray, color=(246, 92, 139)):
        """Draw the 21-point hand skeleton from (21, 2) pixel coordinates."""
        for a, b in HAND_CONNECTIONS:
            cv2.line(frame, (int(pixels[a][0]), int(pixels[a][1])),
                     (int(pixels[b][0]), int(pixels[b][1])), color, 4)
        for x, y in pixels:
            cv2.circle(frame, (int(x), int(y)), 4, color, -1)
        return frame

    def _draw_text_panel(self, frame, w, h, state):
        """Semi-transparent bottom panel with the recognized text."""
        top = h - self._panel_height
        overlay = frame.copy()
        cv2.rectangle(overlay, (0, top), (w, h), (20, 20, 20), -1)
        cv2.addWeighted(overlay, self._panel_opacity, frame, 1 - self._panel_opacity, 0, frame)

        # Hershey fonts are ASCII only; the translated text goes to the log
        text = state.get("text") or "..."
        max_chars = max(10, w // 14)
        if len(text) > max_chars:
            text = "..." + text[-(max_chars - 3):]
        cv2.putText(
            frame, text,
            (15, top + 45), cv2.FONT_HERSHEY_SIMPLEX, 0.9, self._color_text, 2,
        )

    def _draw_confidence_bar(self, frame, w, confidence):
        """Horizontal progress bar toward the next commit."""
        if confidence >= 70:
            color = self._color_conf_high
        elif confidence >= 40:
            color = self._color_conf_mid
        else:
            color = self._color_conf_low

        x, y, bar_w, bar_h = 15, 45, w // 3, 14
        cv2.rectangle(frame, (x, y), (x + bar_w, y + bar_h), (60, 60, 60), -1)
        cv2.rectangle(frame, (x, y), (x + int(bar_w * confidence / 100), y + bar_h), color, -1)
        cv2.putText(
            frame, f"{confidence}%",
            (x + bar_w + 10, y + bar_h), cv2.FONT_HERSHEY_SIMPLEX, 0.5, self._color_text, 1,
        )

    def _draw_legend(self, frame, w, language):
        lines = [f"lang: {language}", "l: language", "r: reset", "q: quit"]
        for i, line in enumerate(lines):
            cv2.putText(
                frame, line,
                (w - 150, 25 + i * 20), cv2.FONT_HERSHEY_SIMPLEX, 0.45, self._color_text, 1,
            )
