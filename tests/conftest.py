"""Pytest configuration and fixtures."""

import pytest
import tempfile
import shutil
from pathlib import Path

# Mock GLib/GStreamer before imports
import sys
from unittest.mock import MagicMock

sys.modules['gi'] = MagicMock()
sys.modules['gi.repository'] = MagicMock()
sys.modules['gi.repository.Gst'] = MagicMock()
sys.modules['gi.repository.GLib'] = MagicMock()

from playersync.engine import PlaybackEngine
from playersync.exceptions import EngineError


class FakeGLib:
    """Deterministic stand-in for GLib timeouts driven by a manual clock."""

    def __init__(self):
        self.now_ms = 0
        self._next_id = 1
        self._sources = {}

    def timeout_add(self, interval, callback, *args):
        source_id = self._next_id
        self._next_id += 1
        self._sources[source_id] = [self.now_ms + interval, interval, callback, args]
        return source_id

    def idle_add(self, callback, *args):
        return self.timeout_add(0, callback, *args)

    def source_remove(self, source_id):
        return self._sources.pop(source_id, None) is not None

    @property
    def pending(self):
        return len(self._sources)

    def advance(self, ms):
        """Move the clock forward, firing due sources in time order."""
        target = self.now_ms + ms
        while True:
            due = [(s[0], sid) for sid, s in self._sources.items() if s[0] <= target]
            if not due:
                break
            due_at, source_id = min(due)
            self.now_ms = due_at
            _, interval, callback, args = self._sources[source_id]
            keep = callback(*args)
            if source_id in self._sources:
                if keep:
                    self._sources[source_id][0] = due_at + max(interval, 1)
                else:
                    del self._sources[source_id]
        self.now_ms = target


class FakeEngine(PlaybackEngine):
    """Engine double that records commands and reports scripted progress."""

    def __init__(self):
        self.calls = []
        self.elapsed = 0
        self.duration = 0
        self.paused = False
        self.current_path = None
        self.fail_progress = False
        self.fail_commands = False
        self.unplayable = set()

    def _record(self, *call):
        self.calls.append(call)
        if self.fail_commands and call[0] != 'get_progress':
            raise EngineError("%s failed" % call[0])

    def commands(self, name):
        return [c for c in self.calls if c[0] == name]

    def play(self, path):
        self._record('play', path)
        if path in self.unplayable:
            raise EngineError("cannot open %s" % path)
        self.current_path = path
        self.elapsed = 0
        self.paused = False

    def pause(self):
        self._record('pause')
        self.paused = True

    def resume(self):
        self._record('resume')
        self.paused = False

    def stop(self):
        self._record('stop')
        self.current_path = None

    def seek_to(self, seconds):
        self._record('seek_to', seconds)
        self.elapsed = seconds

    def is_paused(self):
        self._record('is_paused')
        return self.paused

    def get_progress(self):
        self._record('get_progress')
        if self.fail_progress:
            raise EngineError("position unavailable")
        return self.elapsed, self.duration


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    temp_path = Path(tempfile.mkdtemp())
    yield temp_path
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def mock_config(monkeypatch, temp_dir):
    """Configuration rooted in temporary XDG directories."""
    from playersync.config import Config

    monkeypatch.setenv('XDG_CONFIG_HOME', str(temp_dir / 'config'))
    monkeypatch.setenv('XDG_DATA_HOME', str(temp_dir / 'data'))
    Config.reset_instance()
    yield Config.get_instance()
    Config.reset_instance()


@pytest.fixture
def fake_glib(monkeypatch):
    """Route the poller and cooldown timers through a manual clock."""
    fake = FakeGLib()
    monkeypatch.setattr('playersync.poller.GLib', fake)
    monkeypatch.setattr('playersync.seek.GLib', fake)
    return fake


@pytest.fixture
def engine():
    return FakeEngine()


@pytest.fixture
def session(engine, mock_config, fake_glib):
    """PlayerSession over a FakeEngine with default timings."""
    from playersync.controller import PlayerSession
    return PlayerSession(engine, config=mock_config)


@pytest.fixture
def recorded_events(session):
    """List of (event, data) published on the session bus."""
    from playersync.events import EventBus
    recorded = []
    for name in (
        EventBus.PROGRESS_CHANGED,
        EventBus.STATUS_CHANGED,
        EventBus.END_OF_TRACK,
        EventBus.PLAYLIST_CHANGED,
        EventBus.CURRENT_INDEX_CHANGED,
        EventBus.TRACK_CHANGED,
    ):
        session.events.subscribe(name, lambda data, name=name: recorded.append((name, data)))
    return recorded


@pytest.fixture
def sample_audio_file(temp_dir):
    """Create a sample audio file path for testing."""
    audio_file = temp_dir / 'test.mp3'
    audio_file.touch()
    return str(audio_file)
