"""
Event bus between the recognition pipeline and whatever displays it.

The pipeline announces what happened on a frame (hand seen or lost, rules
fired, confidence moved, gesture committed) and the session lifecycle
(reset, stopped). Views, loggers and tests subscribe by event name and
receive the payload as keyword arguments.

Usage:
    bus = EventBus()
    unsubscribe = bus.subscribe(Events.GESTURE_COMMITTED, on_commit)
    bus.emit(Events.GESTURE_COMMITTED, gesture="hello", text="hello", confidence=100)
    unsubscribe()
"""

import time
import logging
import threading
from bisect import insort
from collections import deque
from itertools import count
from typing import Callable, Dict, List, NamedTuple

logger = logging.getLogger(__name__)


class _Listener(NamedTuple):
    sort_key: tuple  # (-priority, registration order)
    callback: Callable


def _callback_name(callback) -> str:
    return getattr(callback, "__name__", repr(callback))


class EventBus:
    """Synchronous publish/subscribe with per-listener priority.

    Dispatch happens inline on the frame thread, so listeners should return
    quickly. Listeners with equal priority run in subscription order.
    """

    def __init__(self, max_history: int = 100, clock: Callable[[], float] = time.time):
        self._listeners: Dict[str, List[_Listener]] = {}
        self._lock = threading.Lock()
        self._order = count()
        self._history = deque(maxlen=max_history)
        self._clock = clock
        self._enabled = True

    def subscribe(self, event_name: str, callback: Callable, priority: int = 0) -> Callable[[], None]:
        """Register a listener.

        Args:
            event_name: One of the Events names (any string works)
            callback: Called with the emitted payload as **kwargs
            priority: Higher runs first

        Returns:
            A no-argument function that removes this listener
        """
        listener = _Listener((-priority, next(self._order)), callback)
        with self._lock:
            insort(self._listeners.setdefault(event_name, []), listener)
        logger.debug("Listener %s subscribed to '%s' (priority=%d)",
                     _callback_name(callback), event_name, priority)
        return lambda: self.unsubscribe(event_name, callback)

    def unsubscribe(self, event_name: str, callback: Callable):
        with self._lock:
            remaining = [entry for entry in self._listeners.get(event_name, ())
                         if entry.callback is not callback]
            if remaining:
                self._listeners[event_name] = remaining
            else:
                self._listeners.pop(event_name, None)

    def emit(self, event_name: str, **payload):
        """Deliver an event to its listeners.

        A listener that raises is logged and skipped; the frame update that
        emitted the event carries on.
        """
        if not self._enabled:
            return

        with self._lock:
            listeners = tuple(self._listeners.get(event_name, ()))
        self._history.append({"event": event_name, "time": self._clock(), "data": dict(payload)})

        for listener in listeners:
            try:
                listener.callback(**payload)
            except Exception:
                logger.exception("Listener %s failed on '%s'",
                                 _callback_name(listener.callback), event_name)

    def clear(self, event_name: str = None):
        """Drop every listener, or only those of one event."""
        with self._lock:
            if event_name is None:
                self._listeners.clear()
            else:
                self._listeners.pop(event_name, None)

    def set_enabled(self, enabled: bool):
        self._enabled = enabled

    @property
    def registered_events(self) -> list:
        with self._lock:
            return list(self._listeners)

    @property
    def listener_count(self) -> int:
        with self._lock:
            return sum(len(group) for group in self._listeners.values())

    def get_history(self, last_n: int = 10) -> list:
        """Most recent emitted events, oldest first."""
        return list(self._history)[-last_n:]


# =============================================================================
# Event Names
# =============================================================================

class Events:
    """Names of the events published by RecognitionPipeline."""

    # Per frame
    HAND_DETECTED = "hand_detected"             # frame_id; on transition only
    HAND_LOST = "hand_lost"                     # frame_id; on transition only
    GESTURE_DETECTED = "gesture_detected"       # gestures, frame_id
    CONFIDENCE_CHANGED = "confidence_changed"   # confidence

    # Recognition
    GESTURE_COMMITTED = "gesture_committed"     # gesture, text, confidence

    # Session lifecycle
    SESSION_RESET = "session_reset"
    SESSION_STOPPED = "session_stopped"         # text

    ALL = (
        HAND_DETECTED, HAND_LOST, GESTURE_DETECTED, CONFIDENCE_CHANGED,
        GESTURE_COMMITTED, SESSION_RESET, SESSION_STOPPED,
    )
