"""Tests for the shared session state."""

from playersync.events import EventBus
from playersync.session import Progress, SessionState, SessionStatus


class TestProgress:
    """Test the progress triple."""

    def test_from_times(self):
        progress = Progress.from_times(45, 180)
        assert progress.as_tuple() == (25.0, 45, 180)

    def test_from_times_zero_duration(self):
        assert Progress.from_times(12, 0) == Progress(0.0, 12, 0)

    def test_from_times_past_end(self):
        assert Progress.from_times(190, 180).percent > 100.0

    def test_negative_values_clamped(self):
        assert Progress.from_times(-5, -1) == Progress()

    def test_to_dict(self):
        assert Progress.from_times(90, 180).to_dict() == {
            "percent": 50.0,
            "elapsed": 90,
            "duration": 180,
        }


class TestSessionState:
    """Test change notifications."""

    def _recorder(self, bus, event):
        received = []
        bus.subscribe(event, received.append)
        return received

    def test_initial_state(self):
        state = SessionState()
        assert state.status == SessionStatus.STOPPED
        assert state.current_index == 0
        assert state.progress == Progress()
        assert state.end_of_track is False
        assert state.is_dragging is False

    def test_progress_published_only_on_change(self):
        bus = EventBus()
        received = self._recorder(bus, EventBus.PROGRESS_CHANGED)
        state = SessionState(bus)
        state.set_progress(Progress.from_times(10, 100))
        state.set_progress(Progress.from_times(10, 100))
        assert received == [{"percent": 10.0, "elapsed": 10, "duration": 100}]

    def test_status_published_only_on_change(self):
        bus = EventBus()
        received = self._recorder(bus, EventBus.STATUS_CHANGED)
        state = SessionState(bus)
        state.set_status(SessionStatus.STOPPED)
        state.set_status(SessionStatus.RUNNING)
        assert received == [{"status": SessionStatus.RUNNING}]

    def test_end_of_track_published_on_rising_edge(self):
        bus = EventBus()
        received = self._recorder(bus, EventBus.END_OF_TRACK)
        state = SessionState(bus)
        state.set_end_of_track(True)
        state.set_end_of_track(True)
        state.set_end_of_track(False)
        state.set_end_of_track(True)
        assert len(received) == 2

    def test_current_index_event(self):
        bus = EventBus()
        received = self._recorder(bus, EventBus.CURRENT_INDEX_CHANGED)
        state = SessionState(bus)
        state.set_current_index(0)
        state.set_current_index(2)
        assert received == [{"index": 2}]
