#!/usr/bin/env python3
"""
SignSense - Sign-to-Text Recognition
Main application entry point.

Architecture:
    - core.RecognitionPipeline handles validate -> rules -> temporal filter
    - core.EventBus carries commits and confidence changes to the app
    - Live mode reads a camera through MediaPipe Hands
    - Replay mode feeds a recorded (N, 21, 3) landmark sequence

Usage:
    python -m signsense.main                              # Live camera
    python -m signsense.main --language gujarati          # Gujarati rendering
    python -m signsense.main --mode replay --replay seq.npy
"""

import sys
import signal
import argparse
import logging

import numpy as np

from signsense import __version__
from signsense.core.events import EventBus, Events
from signsense.core.pipeline import RecognitionPipeline
from signsense.modules.utils.config import Config
from signsense.modules.utils.logger import setup_logging, GestureLogger

logger = logging.getLogger(__name__)

LANGUAGES = ("english", "gujarati")


# =============================================================================
# Replay Source
# =============================================================================

def load_replay(path: str) -> list:
    """Load a recorded landmark sequence.

    The file is a .npy array of shape (N, 21, 3). A frame holding any NaN
    stands for "no hand" and is returned as None.

    Raises:
        FileNotFoundError: path does not exist
        ValueError: array has the wrong shape
    """
    sequence = np.load(path, allow_pickle=False)
    if sequence.ndim != 3 or sequence.shape[1:] != (21, 3):
        raise ValueError(f"Replay file must hold an (N, 21, 3) array, got {sequence.shape}")

    frames = []
    for frame in sequence.astype(np.float32):
        frames.append(None if np.isnan(frame).any() else frame)
    logger.info("Loaded %d replay frames from %s (%d without a hand)",
                len(frames), path, sum(f is None for f in frames))
    return frames


class ReplayClock:
    """Deterministic clock advanced by a fixed frame interval."""

    def __init__(self, frame_interval_ms: float = 33.0):
        self._interval_s = frame_interval_ms / 1000.0
        self._now = 0.0

    def __call__(self) -> float:
        return self._now

    def tick(self):
        self._now += self._interval_s


# =============================================================================
# Application
# =============================================================================

class SignToTextApp:
    """Wires the recognition pipeline to a landmark source and the display."""

    def __init__(self, config: Config, language: str = "english", clock=None):
        self._config = config
        self._language = language
        self._running = False

        self._bus = EventBus()
        self._gesture_logger = GestureLogger()
        pipeline_kwargs = dict(
            event_bus=self._bus,
            gesture_logger=self._gesture_logger,
            config=config.recognition,
        )
        if clock is not None:
            pipeline_kwargs["clock"] = clock
        self._pipeline = RecognitionPipeline(**pipeline_kwargs)

        self._bus.subscribe(Events.GESTURE_COMMITTED, self._on_gesture_committed)
        self._bus.subscribe(Events.HAND_LOST, self._on_hand_lost)

        logger.info("SignToTextApp initialized (%d gestures, language=%s)",
                    len(self._pipeline.rules), language)

    @property
    def pipeline(self) -> RecognitionPipeline:
        return self._pipeline

    @property
    def language(self) -> str:
        return self._language

    def _on_gesture_committed(self, **kwargs):
        logger.info("Text [%s]: %s", self._language, self._pipeline.render_text(self._language))

    def _on_hand_lost(self, **kwargs):
        logger.debug("Hand left the frame")

    def toggle_language(self):
        index = LANGUAGES.index(self._language) if self._language in LANGUAGES else 0
        self._language = LANGUAGES[(index + 1) % len(LANGUAGES)]
        logger.info("Display language: %s", self._language)

    # -------------------------------------------------------------------------

    def run_replay(self, frames: list, clock: ReplayClock) -> str:
        """Feed recorded frames through the pipeline; returns the rendered text."""
        self._running = True
        for landmarks in frames:
            if not self._running:
                break
            self._pipeline.process_frame(landmarks)
            clock.tick()

        self._pipeline.stop()
        self._pipeline.analytics.print_summary()
        return self._pipeline.render_text(self._language)

    def run_live(self) -> bool:
        """Camera loop with MediaPipe Hands and the overlay."""
        import cv2
        from signsense.modules.detection.hand_detector import HandDetector
        from signsense.modules.detection.landmark_extractor import LandmarkExtractor
        from signsense.modules.visualization.overlay import Overlay

        cam_cfg = self._config.camera
        width = cam_cfg.get("width", 640)
        height = cam_cfg.get("height", 480)

        cap = cv2.VideoCapture(cam_cfg.get("device_id", 0))
        if not cap.isOpened():
            logger.error("Failed to open camera %d. Check connection and permissions.",
                         cam_cfg.get("device_id", 0))
            return False
        cap.set(cv2.CAP_PROP_FRAME_WIDTH, width)
        cap.set(cv2.CAP_PROP_FRAME_HEIGHT, height)

        extractor = LandmarkExtractor(width, height)
        overlay = Overlay(self._config.visualization)
        window_name = self._config.get("visualization.window_name", "SignSense")
        flip = cam_cfg.get("flip_horizontal", True)

        self._running = True
        logger.info("Starting live loop (camera %dx%d)", width, height)
        try:
            with HandDetector(self._config.mediapipe) as detector:
                while self._running:
                    ret, frame = cap.read()
                    if not ret or frame is None:
                        logger.warning("Camera read failed")
                        break
                    if flip:
                        frame = cv2.flip(frame, 1)

                    h, w = frame.shape[:2]
                    extractor.set_frame_size(w, h)
                    landmarks = detector.find_hand(frame)
                    result = self._pipeline.process_frame(landmarks)

                    state = {
                        "pixels": extractor.to_pixel_coords(landmarks) if landmarks is not None else None,
                        "text": result.text,
                        "confidence": result.confidence,
                        "language": self._language,
                        "hand_detected": result.hand_detected,
                    }
                    cv2.imshow(window_name, overlay.render(frame, state))

                    key = cv2.waitKey(1) & 0xFF
                    if key == ord("q"):
                        self._running = False
                    elif key == ord("r"):
                        self._pipeline.reset()
                    elif key == ord("l"):
                        self.toggle_language()
        finally:
            self._shutdown(cap)
        return True

    def _shutdown(self, cap=None):
        """Stop the session; recognized text is kept."""
        import cv2

        logger.info("Shutting down...")
        self._running = False
        self._pipeline.stop()
        if cap is not None:
            cap.release()
        cv2.destroyAllWindows()
        self._pipeline.analytics.print_summary()
        logger.info("Final text [%s]: %s", self._language,
                    self._pipeline.render_text(self._language) or "-")

    def handle_signal(self, signum, frame):
        """Handle SIGINT/SIGTERM for graceful shutdown."""
        logger.info("Signal %d received, shutting down...", signum)
        self._running = False


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="SignSense - rule-based sign-to-text recognition"
    )
    parser.add_argument(
        "--mode", choices=["live", "replay"],
        default="live", help="Landmark source"
    )
    parser.add_argument(
        "--replay", type=str, default=None,
        help="Path to an (N, 21, 3) .npy landmark sequence (replay mode)"
    )
    parser.add_argument(
        "--config", type=str, default=None,
        help="Path to config.yaml"
    )
    parser.add_argument(
        "--camera", type=int, default=None,
        help="Camera device ID"
    )
    parser.add_argument(
        "--language", choices=list(LANGUAGES), default=None,
        help="Display language for recognized text"
    )
    parser.add_argument(
        "--frame-interval-ms", type=float, default=33.0,
        help="Simulated time between replay frames"
    )
    parser.add_argument(
        "--log-level", type=str, default=None,
        help="Override logging level (DEBUG, INFO, ...)"
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)

    # Load configuration
    config = Config()
    config.load(config_path=args.config)

    if args.camera is not None:
        config.override("camera.device_id", args.camera)

    # Setup logging
    log_cfg = config.get_section("logging")
    setup_logging(
        level=args.log_level or log_cfg.get("level", "INFO"),
        log_file=log_cfg.get("file"),
        max_size_mb=log_cfg.get("max_size_mb", 10),
        backup_count=log_cfg.get("backup_count", 3),
    )

    language = args.language or config.get("output.language", "english")

    logger.info("=" * 60)
    logger.info("  SIGNSENSE - Sign-to-Text Recognition")
    logger.info("  Version: %s", __version__)
    logger.info("  Mode: %s", args.mode)
    logger.info("=" * 60)

    if args.mode == "replay":
        if not args.replay:
            logger.error("--replay PATH is required in replay mode")
            return 2
        try:
            frames = load_replay(args.replay)
        except (OSError, ValueError) as e:
            logger.error("Cannot load replay file: %s", e)
            return 1

        clock = ReplayClock(args.frame_interval_ms)
        app = SignToTextApp(config, language=language, clock=clock)
        signal.signal(signal.SIGINT, app.handle_signal)
        text = app.run_replay(frames, clock)
        print(text)
        return 0

    app = SignToTextApp(config, language=language)
    signal.signal(signal.SIGINT, app.handle_signal)
    signal.signal(signal.SIGTERM, app.handle_signal)
    return 0 if app.run_live() else 1


if __name__ == "__main__":
    sys.exit(main())
