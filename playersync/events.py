"""Centralized event bus between the sync core and the presentation layer."""

from typing import Any, Callable, Dict, List
from playersync.logging import get_logger

logger = get_logger(__name__)


class EventBus:
    """Publish-subscribe event system. Components publish/subscribe without knowing each other.

    Event Flow Architecture:
    - The presentation layer publishes ACTION_* events (requests)
    - PlayerSession, SessionState and PlaylistNavigator publish *_CHANGED events (notifications)
    - All callbacks run on the GLib main context that drives the poller
    """

    # =========================================================================
    # Core -> Presentation: State Change Notifications
    # =========================================================================

    # {"percent": float, "elapsed": int, "duration": int}
    PROGRESS_CHANGED = "playback.progress_changed"
    # {"status": SessionStatus}
    STATUS_CHANGED = "playback.status_changed"
    # {"elapsed": int, "duration": int}; published when the poller first sees the end
    END_OF_TRACK = "playback.end_of_track"

    # Playlist state (published by PlaylistNavigator / SessionState)
    # {"tracks": List[Track], "added": int}
    PLAYLIST_CHANGED = "playlist.changed"
    # {"index": int}
    CURRENT_INDEX_CHANGED = "playlist.current_index_changed"
    # {"index": int, "track": Track, "metadata": Optional[TrackMetadata]}
    TRACK_CHANGED = "track.changed"

    # =========================================================================
    # Presentation -> Core: Action Requests
    # =========================================================================

    ACTION_NEXT = "action.next"
    ACTION_PREV = "action.previous"
    ACTION_TOGGLE_PAUSE = "action.toggle_pause"
    # {"paths": List[str] | str}
    ACTION_IMPORT = "action.import"
    # {"x": float, "bar_x": float, "bar_width": float}
    ACTION_DRAG_START = "action.drag_start"
    # {"x": float}
    ACTION_DRAG_MOVE = "action.drag_move"
    ACTION_DRAG_END = "action.drag_end"

    def __init__(self):
        self._subscribers: Dict[str, List[Callable[[Any], None]]] = {}

    def subscribe(self, event: str, callback: Callable[[Any], None]) -> None:
        if event not in self._subscribers:
            self._subscribers[event] = []
        self._subscribers[event].append(callback)

    def unsubscribe(self, event: str, callback: Callable[[Any], None]) -> None:
        if event in self._subscribers:
            try:
                self._subscribers[event].remove(callback)
            except ValueError:
                pass

    def publish(self, event: str, data: Any = None) -> None:
        # Copy so a callback may unsubscribe itself while we iterate
        for callback in list(self._subscribers.get(event, [])):
            try:
                callback(data)
            except Exception as e:
                logger.error(
                    "Error in event callback for %s: %s", event, e, exc_info=True
                )
