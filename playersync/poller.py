"""Progress poller: reconciles the engine's position with the session state."""

from typing import Optional

import gi
gi.require_version("GLib", "2.0")
from gi.repository import GLib

from playersync.config import DEFAULT_POLL_INTERVAL_MS
from playersync.exceptions import EngineError
from playersync.logging import get_logger
from playersync.playlist import PlaylistNavigator
from playersync.seek import SeekCooldown
from playersync.session import Progress, SessionState, SessionStatus
from playersync.transport import Transport

logger = get_logger(__name__)


class ProgressPoller:
    """
    Repeating GLib timer that samples the engine position.

    Each tick either samples the engine (polled source) or, while a drag or
    the post-seek cooldown is active, leaves the progress to the local
    override source. A STOPPED status triggers the navigator's next(); the
    poller itself never sets STOPPED, so end-of-track only pauses unless
    advance_on_end_of_track is enabled.
    """

    def __init__(
        self,
        state: SessionState,
        transport: Transport,
        navigator: PlaylistNavigator,
        cooldown: SeekCooldown,
        interval_ms: int = DEFAULT_POLL_INTERVAL_MS,
        advance_on_end_of_track: bool = False,
    ):
        self._state = state
        self._transport = transport
        self._navigator = navigator
        self._cooldown = cooldown
        self.interval_ms = interval_ms
        self.advance_on_end_of_track = advance_on_end_of_track
        self._source_id: Optional[int] = None

    @property
    def is_running(self) -> bool:
        return self._source_id is not None

    def start(self) -> None:
        if self._source_id is not None:
            return
        self._source_id = GLib.timeout_add(self.interval_ms, self._on_timeout)
        logger.debug("Progress polling every %dms", self.interval_ms)

    def stop(self) -> None:
        if self._source_id is None:
            return
        GLib.source_remove(self._source_id)
        self._source_id = None

    def _on_timeout(self) -> bool:
        try:
            self.tick()
        except Exception as e:
            # Keep the timer alive; the next tick retries
            logger.error("Error in progress poll: %s", e, exc_info=True)
        return True  # Continue polling

    def tick(self) -> bool:
        """
        Run one poll cycle.

        Returns:
            True if an engine sample was applied to the session state
        """
        # Read both suppression flags once, before the query
        suppressed = self._state.is_dragging or self._cooldown.is_armed
        if suppressed:
            return False

        sampled = False
        try:
            elapsed, duration = self._transport.get_progress()
        except EngineError as e:
            logger.debug("No progress this tick: %s", e)
        else:
            self._apply_sample(elapsed, duration)
            sampled = True

        if self._state.status == SessionStatus.STOPPED:
            self._navigator.next()
        return sampled

    def _apply_sample(self, elapsed: int, duration: int) -> None:
        self._state.set_progress(Progress.from_times(elapsed, duration))
        if duration > 0 and elapsed >= duration:
            self._state.set_end_of_track(True)
            if self.advance_on_end_of_track:
                self._navigator.next()
            else:
                self._transport.pause()
        else:
            self._state.set_end_of_track(False)
