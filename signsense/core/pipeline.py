"""
Recognition pipeline: the in-process boundary between the landmark source
and the sign-to-text view.

Architecture:
    landmarks -> LandmarkExtractor.to_frame -> GestureRuleSet.evaluate
    -> TemporalFilter.update -> Transcript / EventBus / Analytics

Each call to process_frame() runs to completion before the next frame is
delivered; there is no internal threading.
"""

import time
import logging

from signsense.core.events import EventBus, Events
from signsense.core.types import FrameResult
from signsense.modules.detection.landmark_extractor import LandmarkExtractor
from signsense.modules.intelligence.analytics import Analytics
from signsense.modules.output.transcript import Transcript
from signsense.modules.recognition.gesture_rules import GestureRuleSet
from signsense.modules.recognition.temporal_filter import TemporalFilter
from signsense.modules.utils.logger import GestureLogger

logger = logging.getLogger(__name__)


class RecognitionPipeline:
    """Frame-driven sign recognition with a debounced text output.

    Collaborators are injectable; anything not supplied is built from the
    default catalog and the `recognition` config section.
    """

    def __init__(
        self,
        rule_set=None,
        temporal_filter=None,
        transcript=None,
        event_bus=None,
        analytics=None,
        gesture_logger=None,
        config=None,
        clock=time.time,
    ):
        config = config or {}
        self._clock = clock
        # Transcript and GestureRuleSet define __len__, so test against None
        self._rules = rule_set if rule_set is not None else GestureRuleSet()
        if temporal_filter is None:
            temporal_filter = TemporalFilter(self._rules.names, config=config, clock=clock)
        self._filter = temporal_filter
        self._transcript = transcript if transcript is not None else Transcript()
        self._bus = event_bus if event_bus is not None else EventBus()
        self._analytics = analytics if analytics is not None else Analytics(clock=clock)
        self._gesture_logger = gesture_logger if gesture_logger is not None else GestureLogger()

        self._frame_count = 0
        self._hand_present = False

    def process_frame(self, landmarks) -> FrameResult:
        """Run one frame through rules and the temporal filter.

        Args:
            landmarks: 21-point hand landmarks in any form accepted by
                       LandmarkExtractor.to_frame, or None for "no hand".
                       Malformed input is treated as "no hand".

        Returns:
            FrameResult describing what happened on this frame
        """
        self._frame_count += 1
        result = FrameResult(frame_id=self._frame_count, timestamp=self._clock())

        frame = LandmarkExtractor.to_frame(landmarks)
        result.hand_detected = frame is not None
        self._track_hand(result.hand_detected)

        detections = self._rules.evaluate(frame) if frame is not None else None
        result.detections = detections or {}

        previous_confidence = self._transcript.confidence
        recognition = self._filter.update(detections)

        if recognition.has_commit:
            self._transcript.append(recognition.committed)
        self._transcript.confidence = recognition.confidence

        result.committed = recognition.committed
        result.confidence = self._transcript.confidence
        result.text = self._transcript.text

        self._analytics.record_frame(result.hand_detected, recognition.detected)
        if recognition.detected:
            self._bus.emit(Events.GESTURE_DETECTED, gestures=recognition.detected,
                           frame_id=result.frame_id)
        if result.confidence != previous_confidence:
            self._bus.emit(Events.CONFIDENCE_CHANGED, confidence=result.confidence)
        if recognition.has_commit:
            self._analytics.record_commit(recognition.committed)
            self._gesture_logger.log_commit(recognition.committed, result.confidence, result.text)
            self._bus.emit(Events.GESTURE_COMMITTED, gesture=recognition.committed,
                           text=result.text, confidence=result.confidence)

        return result

    def _track_hand(self, present: bool):
        """Emit hand visibility events on transitions only."""
        if present == self._hand_present:
            return
        self._hand_present = present
        if present:
            self._bus.emit(Events.HAND_DETECTED, frame_id=self._frame_count)
        else:
            logger.debug("Hand lost at frame %d", self._frame_count)
            self._bus.emit(Events.HAND_LOST, frame_id=self._frame_count)

    def reset(self):
        """Clear evidence, last recognized gesture, text and confidence.

        The commit log follows the transcript and is cleared too.
        """
        previous_confidence = self._transcript.confidence
        self._filter.reset()
        self._transcript.clear()
        self._gesture_logger.clear()
        self._hand_present = False
        logger.info("Recognition session reset")
        self._bus.emit(Events.SESSION_RESET)
        if previous_confidence != self._transcript.confidence:
            self._bus.emit(Events.CONFIDENCE_CHANGED, confidence=self._transcript.confidence)

    def stop(self):
        """End of a capture session: evidence is dropped, the text is kept."""
        self._filter.clear_evidence()
        self._hand_present = False
        logger.info("Recognition session stopped (%d frames)", self._frame_count)
        self._bus.emit(Events.SESSION_STOPPED, text=self._transcript.text)

    def render_text(self, language: str = "english") -> str:
        return self._transcript.render(language, self._rules.catalog)

    @property
    def text(self) -> str:
        return self._transcript.text

    @property
    def confidence(self) -> int:
        return self._transcript.confidence

    @property
    def transcript(self) -> Transcript:
        return self._transcript

    @property
    def rules(self) -> GestureRuleSet:
        return self._rules

    @property
    def temporal_filter(self) -> TemporalFilter:
        return self._filter

    @property
    def events(self) -> EventBus:
        return self._bus

    @property
    def analytics(self) -> Analytics:
        return self._analytics

    @property
    def gesture_logger(self) -> GestureLogger:
        return self._gesture_logger

    @property
    def frame_count(self) -> int:
        return self._frame_count
