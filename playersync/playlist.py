"""Playlist ownership and next/previous navigation policy."""

from typing import Iterable, List, Optional, Union

from playersync.config import DEFAULT_RESTART_THRESHOLD_SECONDS
from playersync.events import EventBus
from playersync.exceptions import EngineError, MetadataError
from playersync.logging import get_logger
from playersync.metadata import read_track_from_path
from playersync.session import SessionState, SessionStatus
from playersync.transport import Transport

logger = get_logger(__name__)


class Track:
    """A playlist entry identified by its file path. Immutable."""

    def __init__(self, file: str):
        self._file = str(file)

    @property
    def file(self) -> str:
        return self._file

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Track):
            return NotImplemented
        return self._file == other._file

    def __hash__(self) -> int:
        return hash(self._file)

    def __repr__(self) -> str:
        return "Track(%r)" % self._file


class PlaylistNavigator:
    """
    Owns the ordered track list and picks the track to play.

    Tracks are referenced by index only. The playlist grows by append; the
    current index is written only here (through SessionState).
    """

    def __init__(
        self,
        state: SessionState,
        transport: Transport,
        restart_threshold: int = DEFAULT_RESTART_THRESHOLD_SECONDS,
    ):
        """
        Initialize the navigator.

        Args:
            state: Shared session state (current index, progress, status)
            transport: Status-writing engine commands
            restart_threshold: Elapsed seconds from which previous() restarts
                the current track instead of going back
        """
        self._state = state
        self._transport = transport
        self._events = state.events
        self._restart_threshold = restart_threshold
        self._tracks: List[Track] = []

    def __len__(self) -> int:
        return len(self._tracks)

    def get_playlist(self) -> List[Track]:
        """Get a copy of the playlist."""
        return self._tracks.copy()

    def get_current_track(self) -> Optional[Track]:
        index = self._state.current_index
        if 0 <= index < len(self._tracks):
            return self._tracks[index]
        return None

    @property
    def can_navigate(self) -> bool:
        """Whether previous / toggle-pause / next affordances should be enabled."""
        return self._state.status != SessionStatus.STOPPED

    def import_paths(self, paths: Union[str, Iterable[str]]) -> List[Track]:
        """
        Append one track per path to the end of the playlist.

        The current index and playback are left untouched.

        Args:
            paths: A single path or an iterable of paths

        Returns:
            The newly appended tracks
        """
        if isinstance(paths, str):
            paths = [paths]
        added = [Track(path) for path in paths]
        if not added:
            return added
        self._tracks.extend(added)
        logger.info("Imported %d track(s), playlist size %d", len(added), len(self._tracks))
        self._events.publish(
            EventBus.PLAYLIST_CHANGED,
            {"tracks": self.get_playlist(), "added": len(added)},
        )
        return added

    def next(self) -> None:
        """Advance to the following track, wrapping from the last to the first."""
        if not self._tracks:
            self._reset_empty()
            return
        index = (self._state.current_index + 1) % len(self._tracks)
        self._play_index(index)

    def previous(self) -> None:
        """Go back one track, or restart the current one once it has played a while."""
        if not self._tracks:
            self._reset_empty()
            return
        current = self._state.current_index
        if self._state.progress.elapsed >= self._restart_threshold:
            index = current
        elif current > 0:
            index = current - 1
        else:
            index = len(self._tracks) - 1
        self._play_index(index)

    def toggle_pause(self) -> None:
        """Resume if the engine is paused, pause otherwise. No-op on an empty playlist."""
        if not self._tracks:
            return
        try:
            paused = self._transport.is_paused()
        except EngineError as e:
            logger.warning("Cannot query pause state: %s", e)
            return
        if paused:
            self._transport.resume()
        else:
            self._transport.pause()

    def _reset_empty(self) -> None:
        self._transport.stop()
        self._state.set_current_index(0)

    def _play_index(self, index: int) -> None:
        # Stale indices (e.g. after a future removal) are coerced into range
        index = index % len(self._tracks)
        track = self._tracks[index]
        self._state.set_current_index(index)
        # A failed start leaves the session on this track with the engine stopped
        started = self._transport.play(track.file)
        metadata = None
        if started:
            logger.info("Playing track %d/%d: %s", index + 1, len(self._tracks), track.file)
            try:
                metadata = read_track_from_path(track.file)
            except MetadataError as e:
                logger.debug("No metadata for %s: %s", track.file, e)
        self._events.publish(
            EventBus.TRACK_CHANGED,
            {"index": index, "track": track, "metadata": metadata, "started": started},
        )
