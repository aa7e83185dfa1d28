"""
Logging setup and the per-session log of committed gestures.
"""

import os
import time
import logging
import logging.handlers
from collections import deque
from dataclasses import dataclass, asdict

CONSOLE_FORMAT = "%(asctime)s  %(levelname)-5s  %(message)s"
FILE_FORMAT = "%(asctime)s [%(levelname)-7s] %(name)-40s | %(message)s"

# Chatty third-party loggers pulled in by the live mode
_NOISY_LOGGERS = ("absl", "mediapipe", "matplotlib")


def setup_logging(level="INFO", log_file=None, max_size_mb=10, backup_count=3):
    """Console logging at `level`, plus a rotating DEBUG file when `log_file` is set."""
    root = logging.getLogger()
    root.setLevel(logging.DEBUG if log_file else _parse_level(level))
    for handler in list(root.handlers):
        root.removeHandler(handler)

    console = logging.StreamHandler()
    console.setLevel(_parse_level(level))
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt="%H:%M:%S"))
    root.addHandler(console)

    if log_file:
        folder = os.path.dirname(log_file)
        if folder:
            os.makedirs(folder, exist_ok=True)
        rotating = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=int(max_size_mb * 1024 * 1024),
            backupCount=backup_count,
            encoding="utf-8",
        )
        rotating.setLevel(logging.DEBUG)
        rotating.setFormatter(logging.Formatter(FILE_FORMAT))
        root.addHandler(rotating)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return root


def _parse_level(level) -> int:
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).upper())
    return value if isinstance(value, int) else logging.INFO


@dataclass(frozen=True)
class CommitRecord:
    timestamp: float
    gesture: str
    confidence: int
    text: str


class GestureLogger:
    """Logs each committed gesture and remembers the session's commits."""

    def __init__(self, max_history: int = 500):
        self.logger = logging.getLogger("gesture_events")
        self._history = deque(maxlen=max_history)

    def log_commit(self, gesture_name: str, confidence: int, text: str = ""):
        record = CommitRecord(time.time(), gesture_name, confidence, text)
        self._history.append(record)
        self.logger.info("Committed %-10s (%3d%%) -> %s", repr(gesture_name), confidence, text or "-")

    def get_history(self, last_n=None) -> list:
        """Commits as dicts, oldest first."""
        records = list(self._history)
        if last_n:
            records = records[-last_n:]
        return [asdict(r) for r in records]

    def history_text(self) -> str:
        """Committed gesture names in order, space separated."""
        return " ".join(r.gesture for r in self._history)

    def clear(self):
        self._history.clear()

    @property
    def total_commits(self) -> int:
        return len(self._history)
