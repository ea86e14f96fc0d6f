"""Shared session state: progress triple, coarse status and navigation flags.

One SessionState is created per PlayerSession and handed to every component.
Each field has a single writing component; the presentation layer only reads
and must treat a multi-field read as an eventually consistent snapshot.
"""

# ============================================================================
# Standard Library Imports (alphabetical)
# ============================================================================
from enum import Enum
from typing import Optional, Tuple

# ============================================================================
# Third-Party Imports (alphabetical, with version requirements)
# ============================================================================
# None

# ============================================================================
# Local Imports (grouped by package, alphabetical)
# ============================================================================
from playersync.events import EventBus
from playersync.logging import get_logger

logger = get_logger(__name__)


class SessionStatus(Enum):
    """Coarse playback status that gates navigation affordances."""

    RUNNING = "running"
    PAUSED = "paused"
    STOPPED = "stopped"  # Initial state, and the state of an empty playlist


class Progress:
    """Immutable (percent, elapsed, duration) triple.

    percent is elapsed/duration*100 whenever duration > 0 and 0.0 otherwise;
    a zero duration is never divided.
    """

    def __init__(self, percent: float = 0.0, elapsed: int = 0, duration: int = 0):
        self._percent = float(percent)
        self._elapsed = int(elapsed)
        self._duration = int(duration)

    @classmethod
    def from_times(cls, elapsed: int, duration: int) -> "Progress":
        elapsed = max(0, int(elapsed))
        duration = max(0, int(duration))
        percent = elapsed / duration * 100 if duration > 0 else 0.0
        return cls(percent, elapsed, duration)

    @property
    def percent(self) -> float:
        return self._percent

    @property
    def elapsed(self) -> int:
        return self._elapsed

    @property
    def duration(self) -> int:
        return self._duration

    def as_tuple(self) -> Tuple[float, int, int]:
        return (self._percent, self._elapsed, self._duration)

    def to_dict(self) -> dict:
        return {
            "percent": self._percent,
            "elapsed": self._elapsed,
            "duration": self._duration,
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Progress):
            return NotImplemented
        return self.as_tuple() == other.as_tuple()

    def __hash__(self) -> int:
        return hash(self.as_tuple())

    def __repr__(self) -> str:
        return "Progress(percent=%.2f, elapsed=%d, duration=%d)" % self.as_tuple()


class SessionState:
    """
    Owned state shared by the poller, seek controller and playlist navigator.

    Field owners:
    - progress: ProgressPoller (polled), SeekController (override),
      Transport (reset when a track starts)
    - status: Transport command wrappers
    - current_index: PlaylistNavigator
    - end_of_track: ProgressPoller, Transport (cleared when a track starts)
    - dragging / drag_time: SeekController
    """

    def __init__(self, event_bus: Optional[EventBus] = None):
        self._events = event_bus or EventBus()

        self._progress = Progress()
        self._status = SessionStatus.STOPPED
        self._current_index: int = 0
        self._end_of_track: bool = False

        # Drag gesture (transient)
        self._dragging: bool = False
        self._drag_time: int = 0

    @property
    def events(self) -> EventBus:
        return self._events

    # ============================================================================
    # Progress
    # ============================================================================

    @property
    def progress(self) -> Progress:
        return self._progress

    def set_progress(self, progress: Progress) -> None:
        if progress == self._progress:
            return
        self._progress = progress
        self._events.publish(EventBus.PROGRESS_CHANGED, progress.to_dict())

    # ============================================================================
    # Status
    # ============================================================================

    @property
    def status(self) -> SessionStatus:
        return self._status

    def set_status(self, status: SessionStatus) -> None:
        if status == self._status:
            return
        logger.debug("Status %s -> %s", self._status.value, status.value)
        self._status = status
        self._events.publish(EventBus.STATUS_CHANGED, {"status": status})

    # ============================================================================
    # Playlist position
    # ============================================================================

    @property
    def current_index(self) -> int:
        return self._current_index

    def set_current_index(self, index: int) -> None:
        if index == self._current_index:
            return
        self._current_index = index
        self._events.publish(EventBus.CURRENT_INDEX_CHANGED, {"index": index})

    # ============================================================================
    # End-of-track
    # ============================================================================

    @property
    def end_of_track(self) -> bool:
        return self._end_of_track

    def set_end_of_track(self, reached: bool) -> None:
        was_reached = self._end_of_track
        self._end_of_track = reached
        if reached and not was_reached:
            self._events.publish(
                EventBus.END_OF_TRACK,
                {"elapsed": self._progress.elapsed, "duration": self._progress.duration},
            )

    # ============================================================================
    # Drag gesture
    # ============================================================================

    @property
    def is_dragging(self) -> bool:
        return self._dragging

    @property
    def drag_time(self) -> int:
        return self._drag_time

    def set_dragging(self, dragging: bool) -> None:
        self._dragging = dragging

    def set_drag_time(self, time: int) -> None:
        self._drag_time = time
