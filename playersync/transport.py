"""Engine command wrappers that keep SessionStatus in step with the engine.

Every status transition goes through here: play and resume set RUNNING,
pause sets PAUSED. Commands never raise; an engine failure is logged. A
failed pause, resume or stop leaves the status as it was; a failed play
still moves the session to RUNNING on the new track. Queries (is_paused,
get_progress) propagate EngineError so each caller can apply its own recovery policy.
"""

from typing import Tuple

from playersync.engine import PlaybackEngine
from playersync.exceptions import EngineError
from playersync.logging import get_logger
from playersync.session import Progress, SessionState, SessionStatus

logger = get_logger(__name__)


class Transport:
    """Thin status-writing facade over a PlaybackEngine."""

    def __init__(self, engine: PlaybackEngine, state: SessionState):
        self._engine = engine
        self._state = state

    @property
    def engine(self) -> PlaybackEngine:
        return self._engine

    def play(self, path: str) -> bool:
        """
        Start a track from the top. Clears end-of-track and resets progress.

        Status becomes RUNNING whether or not the engine accepted the track.
        On failure the engine is stopped so nothing from the previous track
        keeps playing under the new selection.

        Returns:
            True if the engine started the track
        """
        started = True
        try:
            self._engine.play(path)
        except EngineError as e:
            logger.warning("Cannot play %s: %s", path, e)
            started = False
            try:
                self._engine.stop()
            except EngineError as stop_error:
                logger.debug("Stop after failed play: %s", stop_error)
        self._state.set_status(SessionStatus.RUNNING)
        self._state.set_end_of_track(False)
        self._state.set_progress(Progress())
        return started

    def pause(self) -> bool:
        try:
            self._engine.pause()
        except EngineError as e:
            logger.warning("Pause failed: %s", e)
            return False
        self._state.set_status(SessionStatus.PAUSED)
        return True

    def resume(self) -> bool:
        try:
            self._engine.resume()
        except EngineError as e:
            logger.warning("Resume failed: %s", e)
            return False
        self._state.set_status(SessionStatus.RUNNING)
        return True

    def stop(self) -> bool:
        """Stop the engine. Status is not changed: STOPPED is only the initial state."""
        try:
            self._engine.stop()
        except EngineError as e:
            logger.warning("Stop failed: %s", e)
            return False
        return True

    def seek_to(self, seconds: int) -> bool:
        try:
            self._engine.seek_to(seconds)
        except EngineError as e:
            logger.warning("Seek to %ss failed: %s", seconds, e)
            return False
        return True

    def is_paused(self) -> bool:
        return self._engine.is_paused()

    def get_progress(self) -> Tuple[int, int]:
        return self._engine.get_progress()
