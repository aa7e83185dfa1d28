"""
Session analytics for the sign-to-text view.

Answers the questions that come up when tuning the rule thresholds: how
often was a hand visible, which rules fire most (and therefore compete for
evidence), and how long does a signer hold a shape before it commits.
"""

import time
import logging
from collections import Counter

logger = logging.getLogger(__name__)


class Analytics:
    """Per-session recognition statistics."""

    def __init__(self, clock=time.time):
        self._clock = clock
        self.reset()

    def reset(self):
        self._started_at = self._clock()
        self._frames = 0
        self._hand_frames = 0
        self._fired = Counter()
        self._commits = Counter()
        self._commit_delays = []
        self._hand_since = None
        self._longest_hand_streak = 0
        self._current_streak = 0

    def record_frame(self, hand_detected: bool, fired=()):
        """Count one processed frame and the rules that matched on it."""
        self._frames += 1
        if hand_detected:
            self._hand_frames += 1
            self._current_streak += 1
            self._longest_hand_streak = max(self._longest_hand_streak, self._current_streak)
            if self._hand_since is None:
                self._hand_since = self._clock()
        else:
            self._current_streak = 0
            self._hand_since = None
        self._fired.update(fired)

    def record_commit(self, gesture_name: str):
        """Count a commit and how long the hand had been in view for it."""
        self._commits[gesture_name] += 1
        now = self._clock()
        if self._hand_since is not None:
            self._commit_delays.append(now - self._hand_since)
            # The next commit is timed from this one
            self._hand_since = now

    @property
    def session_duration(self) -> float:
        return self._clock() - self._started_at

    @property
    def detection_rate(self) -> float:
        """Share of frames with a hand, in percent."""
        return self._hand_frames / self._frames * 100 if self._frames else 0.0

    @property
    def total_commits(self) -> int:
        return sum(self._commits.values())

    def fire_rate(self, gesture_name: str) -> float:
        """Share of hand frames on which a rule matched, in percent."""
        if not self._hand_frames:
            return 0.0
        return self._fired[gesture_name] / self._hand_frames * 100

    def get_summary(self) -> dict:
        delays = self._commit_delays
        return {
            "session_duration_s": round(self.session_duration, 1),
            "total_frames": self._frames,
            "detection_frames": self._hand_frames,
            "detection_rate_pct": round(self.detection_rate, 1),
            "longest_hand_streak": self._longest_hand_streak,
            "commit_counts": dict(self._commits),
            "top_fired_rules": [name for name, _ in self._fired.most_common(3)],
            "avg_time_to_commit_s": round(sum(delays) / len(delays), 2) if delays else None,
        }

    def print_summary(self):
        """Log the session summary as a block."""
        s = self.get_summary()
        logger.info("=" * 60)
        logger.info("SESSION SUMMARY")
        logger.info("=" * 60)
        logger.info("Duration:          %.1fs", s["session_duration_s"])
        logger.info("Frames:            %d (hand in %.1f%%)", s["total_frames"], s["detection_rate_pct"])
        logger.info("Longest hand run:  %d frames", s["longest_hand_streak"])
        if s["avg_time_to_commit_s"] is not None:
            logger.info("Time to commit:    %.2fs avg", s["avg_time_to_commit_s"])
        logger.info("Most fired rules:  %s", ", ".join(s["top_fired_rules"]) or "-")
        logger.info("-" * 40)
        for gesture, n in self._commits.most_common():
            logger.info("  %-14s %4d", gesture, n)
        logger.info("=" * 60)
