"""Player session - owns the shared state and wires the sync components together."""

from typing import Any, Dict, Iterable, Optional, Union

from playersync.config import Config, get_config
from playersync.engine import PlaybackEngine
from playersync.events import EventBus
from playersync.logging import get_logger
from playersync.playlist import PlaylistNavigator
from playersync.poller import ProgressPoller
from playersync.seek import SeekController, SeekCooldown
from playersync.session import SessionState
from playersync.transport import Transport

logger = get_logger(__name__)


class PlayerSession:
    """Composition root; subscribes to presentation actions and publishes state events."""

    def __init__(
        self,
        engine: PlaybackEngine,
        event_bus: Optional[EventBus] = None,
        config: Optional[Config] = None,
    ):
        config = config or get_config()
        self._events = event_bus or EventBus()
        self._engine = engine

        self.state = SessionState(self._events)
        self.transport = Transport(engine, self.state)
        self.navigator = PlaylistNavigator(
            self.state,
            self.transport,
            restart_threshold=config.restart_threshold_seconds,
        )
        self.cooldown = SeekCooldown(config.seek_cooldown_ms)
        self.seek = SeekController(self.state, self.transport, self.cooldown)
        self.poller = ProgressPoller(
            self.state,
            self.transport,
            self.navigator,
            self.cooldown,
            interval_ms=config.poll_interval_ms,
            advance_on_end_of_track=config.advance_on_end_of_track,
        )

        # Subscribe to action events
        self._subscriptions = [
            (EventBus.ACTION_NEXT, self._on_action_next),
            (EventBus.ACTION_PREV, self._on_action_previous),
            (EventBus.ACTION_TOGGLE_PAUSE, self._on_action_toggle_pause),
            (EventBus.ACTION_IMPORT, self._on_action_import),
            (EventBus.ACTION_DRAG_START, self._on_action_drag_start),
            (EventBus.ACTION_DRAG_MOVE, self._on_action_drag_move),
            (EventBus.ACTION_DRAG_END, self._on_action_drag_end),
        ]
        for event, callback in self._subscriptions:
            self._events.subscribe(event, callback)

    @property
    def events(self) -> EventBus:
        return self._events

    # ============================================================================
    # Lifecycle
    # ============================================================================

    def start(self) -> None:
        """Start the progress poller on the default GLib main context."""
        self.poller.start()

    def shutdown(self) -> None:
        """Cancel the poller and cooldown, detach from the bus and release the engine."""
        self.poller.stop()
        self.cooldown.cancel()
        for event, callback in self._subscriptions:
            self._events.unsubscribe(event, callback)
        self._engine.cleanup()
        logger.info("Player session shut down")

    def publish_initial_state(self) -> None:
        """Publish current state as events so a presentation can sync without reading state."""
        self._events.publish(EventBus.PROGRESS_CHANGED, self.state.progress.to_dict())
        self._events.publish(EventBus.STATUS_CHANGED, {"status": self.state.status})
        self._events.publish(
            EventBus.CURRENT_INDEX_CHANGED, {"index": self.state.current_index}
        )
        self._events.publish(
            EventBus.PLAYLIST_CHANGED,
            {"tracks": self.navigator.get_playlist(), "added": 0},
        )

    # ============================================================================
    # Commands (direct calls, equivalent to the ACTION_* events)
    # ============================================================================

    def next(self) -> None:
        self.navigator.next()

    def previous(self) -> None:
        self.navigator.previous()

    def toggle_pause(self) -> None:
        self.navigator.toggle_pause()

    def import_paths(self, paths: Union[str, Iterable[str]]) -> None:
        self.navigator.import_paths(paths)

    # ============================================================================
    # Action handlers
    # ============================================================================

    def _on_action_next(self, data: Optional[Dict[str, Any]]) -> None:
        self.navigator.next()

    def _on_action_previous(self, data: Optional[Dict[str, Any]]) -> None:
        self.navigator.previous()

    def _on_action_toggle_pause(self, data: Optional[Dict[str, Any]]) -> None:
        self.navigator.toggle_pause()

    def _on_action_import(self, data: Optional[Dict[str, Any]]) -> None:
        if not data or not data.get("paths"):
            return
        self.navigator.import_paths(data["paths"])

    def _on_action_drag_start(self, data: Optional[Dict[str, Any]]) -> None:
        if not data or not all(k in data for k in ("x", "bar_x", "bar_width")):
            return
        self.seek.drag_start(
            float(data["x"]), float(data["bar_x"]), float(data["bar_width"])
        )

    def _on_action_drag_move(self, data: Optional[Dict[str, Any]]) -> None:
        if not data or "x" not in data:
            return
        self.seek.drag_move(float(data["x"]))

    def _on_action_drag_end(self, data: Optional[Dict[str, Any]]) -> None:
        # A release without coordinates abandons the gesture without seeking
        if data and "x" in data:
            self.seek.drag_end(float(data["x"]))
        else:
            self.seek.cancel_drag()
