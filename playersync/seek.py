"""Progress-bar drag handling and the post-seek cooldown.

While a drag is in progress the progress shown is a local override computed
from the pointer. On release the engine is asked to seek and the cooldown is
armed: the engine refreshes its reported position on its own cadence, so for
a short window after a seek the poller would read the pre-seek position and
snap the bar backwards. The poller ignores engine samples while either the
drag or the cooldown is active.
"""

import math
from typing import Optional

import gi
gi.require_version("GLib", "2.0")
from gi.repository import GLib

from playersync.config import DEFAULT_SEEK_COOLDOWN_MS
from playersync.logging import get_logger
from playersync.session import Progress, SessionState, SessionStatus
from playersync.transport import Transport

logger = get_logger(__name__)


def position_to_time(x: float, bar_x: float, bar_width: float, duration: int) -> int:
    """
    Map a pointer position over the progress bar to a track time.

    Used for both the drag preview and the final seek so the two always agree.

    Args:
        x: Pointer horizontal position
        bar_x: Left edge of the bar
        bar_width: Bar width
        duration: Track duration in seconds

    Returns:
        0 left of the bar, duration right of it, otherwise the floored
        proportional time
    """
    if x <= bar_x:
        return 0
    if x >= bar_x + bar_width:
        return duration
    return int(math.floor((x - bar_x) / bar_width * duration))


class SeekCooldown:
    """Single-shot suppression window armed after each seek."""

    def __init__(self, window_ms: int = DEFAULT_SEEK_COOLDOWN_MS):
        self.window_ms = window_ms
        self._armed = False
        self._source_id: Optional[int] = None

    @property
    def is_armed(self) -> bool:
        return self._armed

    def arm(self) -> None:
        """Start (or restart) the window. A previous pending expiry is replaced."""
        self.cancel()
        self._armed = True
        self._source_id = GLib.timeout_add(self.window_ms, self._on_expired)

    def cancel(self) -> None:
        if self._source_id is not None:
            GLib.source_remove(self._source_id)
            self._source_id = None
        self._armed = False

    def _on_expired(self) -> bool:
        self._armed = False
        self._source_id = None
        return False  # Don't repeat


class SeekController:
    """Turns pointer drag gestures on the progress bar into seeks."""

    def __init__(self, state: SessionState, transport: Transport, cooldown: SeekCooldown):
        self._state = state
        self._transport = transport
        self._cooldown = cooldown

        # Bar geometry captured at gesture start
        self._bar_x = 0.0
        self._bar_width = 0.0

    @property
    def cooldown(self) -> SeekCooldown:
        return self._cooldown

    def _candidate_time(self, x: float) -> int:
        return position_to_time(x, self._bar_x, self._bar_width, self._state.progress.duration)

    def _override(self, time: int) -> None:
        self._state.set_drag_time(time)
        self._state.set_progress(Progress.from_times(time, self._state.progress.duration))

    def drag_start(self, x: float, bar_x: float, bar_width: float) -> None:
        """Begin a gesture at pointer x over a bar starting at bar_x."""
        self._bar_x = bar_x
        self._bar_width = bar_width
        self._state.set_dragging(True)
        self._override(self._candidate_time(x))

    def drag_move(self, x: float) -> None:
        if not self._state.is_dragging:
            return
        self._override(self._candidate_time(x))

    def drag_end(self, x: float) -> None:
        """Finish the gesture: seek, resume after end-of-track, then arm the cooldown."""
        if not self._state.is_dragging:
            return
        try:
            time = self._candidate_time(x)
            self._transport.seek_to(time)
            # The poller paused at end-of-track; moving away from the end resumes
            if self._state.end_of_track and self._state.status != SessionStatus.RUNNING:
                self._transport.resume()
            self._override(time)
            self._cooldown.arm()
            logger.debug("Seek to %ss, polling suppressed for %dms", time, self._cooldown.window_ms)
        finally:
            self._state.set_dragging(False)

    def cancel_drag(self) -> None:
        """Abandon a gesture without seeking; polling resumes on the next tick."""
        self._state.set_dragging(False)
