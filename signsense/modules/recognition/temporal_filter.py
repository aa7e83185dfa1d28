"""
Multi-frame evidence accumulation for gesture stability.

Turns the noisy per-frame "which rules fired" signal into a single debounced
recognition event. Every catalog gesture owns an evidence record; a gesture
must fire on more than `commit_threshold` net frames before it is committed,
undetected frames decay its evidence, and a commit wipes the evidence of the
whole catalog so the next recognition starts from zero.
"""

import math
import time
import logging
from typing import Callable, Dict, Iterable, Mapping, Optional

from signsense.core.types import EvidenceRecord, RecognitionResult

logger = logging.getLogger(__name__)


class TemporalFilter:
    """Per-gesture evidence state machine with commit, decay and live confidence.

    Policy values (from the `recognition` config section):
        commit_threshold      commit once evidence exceeds this (15)
        confidence_min_count  live confidence only above this evidence (5)
        confidence_scale      evidence that maps to 100% (15)
        max_live_confidence   live confidence ceiling; 100 is reserved for commits (95)
        decay_per_frame       evidence lost on each frame without a match (0.5)
        retrigger_window_ms   gap after which the same gesture may commit again (5000)
    """

    def __init__(self, gesture_names: Iterable[str], config: dict = None,
                 clock: Callable[[], float] = time.time):
        """
        Args:
            gesture_names: Catalog names, in evaluation order. The evidence
                           map is derived from these and nothing else.
            config: Recognition config section
            clock: Returns the current time in seconds
        """
        config = config or {}
        self._commit_threshold = config.get("commit_threshold", 15)
        self._confidence_min_count = config.get("confidence_min_count", 5)
        self._confidence_scale = config.get("confidence_scale", 15)
        self._max_live_confidence = config.get("max_live_confidence", 95)
        self._decay = config.get("decay_per_frame", 0.5)
        self._retrigger_window_ms = config.get("retrigger_window_ms", 5000)
        self._clock = clock

        self._names = tuple(gesture_names)
        self._evidence: Dict[str, EvidenceRecord] = {}
        self._last_recognized: Optional[str] = None
        self._confidence = 0

    def update(self, detections: Optional[Mapping[str, bool]]) -> RecognitionResult:
        """Process one frame's detection results.

        Args:
            detections: gesture name -> fired this frame. None means no hand
                        was present, so every gesture decays. Names outside
                        the catalog are ignored; missing names count as not
                        detected.

        Returns:
            RecognitionResult with the committed gesture (if any), the
            current confidence and the names that fired.
        """
        now_ms = self._clock() * 1000.0
        detections = detections or {}
        committed = None
        confidence_updated = False
        detected = tuple(name for name in self._names if detections.get(name, False))

        for name in self._names:
            record = self._evidence.setdefault(name, EvidenceRecord())

            if not detections.get(name, False):
                record.detection_count = max(0.0, record.detection_count - self._decay)
                continue

            previous_at = record.last_detected_at
            record.detection_count += 1
            record.last_detected_at = now_ms

            if record.detection_count > self._commit_threshold and (
                self._last_recognized != name
                or now_ms - previous_at > self._retrigger_window_ms
            ):
                committed = name
                self._commit(name)
                # Evidence is already wiped for every gesture; later entries
                # in this frame must not start re-accumulating on it.
                break

            if record.detection_count > self._confidence_min_count:
                live = math.floor(record.detection_count / self._confidence_scale * 100)
                self._confidence = min(self._max_live_confidence, live)
                confidence_updated = True

        if committed is None and not confidence_updated:
            if self.max_detection_count <= self._confidence_min_count:
                self._confidence = 0

        return RecognitionResult(committed=committed, confidence=self._confidence,
                                 detected=detected)

    def _commit(self, name: str):
        """Record a recognition and clear evidence for the whole catalog.

        Clearing every gesture, not only the committed one, keeps residual
        evidence of look-alike shapes from committing right after. It also
        means two different gestures signed back to back inside one
        accumulation window compete for the same evidence budget, and the
        second one has to start over.
        """
        self._last_recognized = name
        self._confidence = 100
        for record in self._evidence.values():
            record.clear()
        logger.info("Gesture committed: %s", name)

    def clear_evidence(self):
        """Drop accumulated evidence only (e.g. the camera was stopped)."""
        self._evidence.clear()

    def reset(self):
        """Clear evidence, last recognized gesture and confidence."""
        self._evidence.clear()
        self._last_recognized = None
        self._confidence = 0
        logger.debug("Temporal filter reset")

    def evidence(self, name: str) -> EvidenceRecord:
        """Copy of a gesture's evidence record (zeros if never observed)."""
        record = self._evidence.get(name)
        if record is None:
            return EvidenceRecord()
        return EvidenceRecord(record.detection_count, record.last_detected_at)

    def detection_count(self, name: str) -> float:
        record = self._evidence.get(name)
        return record.detection_count if record else 0.0

    @property
    def max_detection_count(self) -> float:
        if not self._evidence:
            return 0.0
        return max(record.detection_count for record in self._evidence.values())

    @property
    def last_recognized(self) -> Optional[str]:
        return self._last_recognized

    @property
    def confidence(self) -> int:
        return self._confidence

    @property
    def gesture_names(self) -> tuple:
        return self._names
