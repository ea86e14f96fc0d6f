"""Playback engine client: the request/response boundary to the audio engine.

PlaybackEngine is the contract the sync core consumes. Commands are
fire-and-observe: they return once the request is issued and the effect is
observed on a later poll. GstPlaybackEngine implements the contract on a
GStreamer playbin, which does the actual decoding and output.
"""

import os
from typing import Tuple

import gi
gi.require_version('Gst', '1.0')
from gi.repository import Gst

from playersync.exceptions import EngineError
from playersync.logging import get_logger
from playersync.workflow_utils import file_uri

logger = get_logger(__name__)

# GStreamer playbin flags
GST_FLAG_AUDIO = 0x02
GST_FLAG_SOFT_VOLUME = 0x10


class PlaybackEngine:
    """Contract for the external playback engine."""

    def play(self, path: str) -> None:
        """Begin playback of the file at path; engine elapsed time resets to 0."""
        raise NotImplementedError("Subclasses must implement play()")

    def pause(self) -> None:
        raise NotImplementedError("Subclasses must implement pause()")

    def resume(self) -> None:
        raise NotImplementedError("Subclasses must implement resume()")

    def stop(self) -> None:
        raise NotImplementedError("Subclasses must implement stop()")

    def seek_to(self, seconds: int) -> None:
        """Jump to an absolute position in seconds."""
        raise NotImplementedError("Subclasses must implement seek_to()")

    def is_paused(self) -> bool:
        raise NotImplementedError("Subclasses must implement is_paused()")

    def get_progress(self) -> Tuple[int, int]:
        """
        Get the current playback position.

        Returns:
            (elapsed_seconds, duration_seconds)

        Raises:
            EngineError: if the engine cannot report a position right now
        """
        raise NotImplementedError("Subclasses must implement get_progress()")

    def cleanup(self) -> None:
        """Release engine resources. Default: nothing to release."""
        pass


class GstPlaybackEngine(PlaybackEngine):
    """
    GStreamer playbin engine for audio files.

    Position and duration are queried straight from the pipeline, so the
    reported elapsed time follows GStreamer's own clock, which lags a seek by
    a few tens of milliseconds.
    """

    def __init__(self, audio_sink: str = "autoaudiosink"):
        if not Gst.is_initialized():
            Gst.init(None)

        self.playbin = Gst.ElementFactory.make("playbin", "playbin")
        if not self.playbin:
            raise EngineError("Failed to create GStreamer playbin")

        try:
            self.playbin.set_property("flags", GST_FLAG_AUDIO | GST_FLAG_SOFT_VOLUME)
        except (AttributeError, TypeError):
            # Ignore errors setting flags (playbin might not support this property)
            pass

        sink = Gst.ElementFactory.make(audio_sink, "audiosink")
        if sink:
            self.playbin.set_property("audio-sink", sink)
        else:
            logger.warning("Audio sink %s unavailable, using playbin default", audio_sink)

        self.current_path = None

        bus = self.playbin.get_bus()
        bus.add_signal_watch()
        bus.connect("message", self._on_message)

    def _on_message(self, bus, message) -> bool:
        """
        Handle GStreamer bus messages.

        End-of-stream needs no handling here: the pipeline holds its final
        position and the poller detects end-of-track from it.
        """
        if message.type == Gst.MessageType.ERROR:
            err, debug = message.parse_error()
            logger.error("Playback error: %s", err.message)
            if debug:
                logger.debug("GStreamer debug: %s", debug)
            self.playbin.set_state(Gst.State.NULL)
        return True

    def _set_state(self, state) -> None:
        ret = self.playbin.set_state(state)
        if ret == Gst.StateChangeReturn.FAILURE:
            raise EngineError("GStreamer refused state change to %s" % state)

    def play(self, path: str) -> None:
        if not os.path.exists(path):
            raise EngineError("File not found: %s" % path)
        self.playbin.set_state(Gst.State.NULL)
        self.playbin.set_property("uri", file_uri(path))
        self.current_path = path
        self._set_state(Gst.State.PLAYING)

    def pause(self) -> None:
        self._set_state(Gst.State.PAUSED)

    def resume(self) -> None:
        if self.current_path is None:
            raise EngineError("Nothing loaded to resume")
        self._set_state(Gst.State.PLAYING)

    def stop(self) -> None:
        self.playbin.set_state(Gst.State.NULL)
        self.current_path = None

    def seek_to(self, seconds: int) -> None:
        success = self.playbin.seek_simple(
            Gst.Format.TIME,
            Gst.SeekFlags.FLUSH | Gst.SeekFlags.KEY_UNIT,
            int(max(0, seconds) * Gst.SECOND),
        )
        if not success:
            raise EngineError("Seek to %ss failed" % seconds)

    def is_paused(self) -> bool:
        # Zero timeout: report the target state without waiting for async transitions
        _, state, pending = self.playbin.get_state(0)
        target = state if pending == Gst.State.VOID_PENDING else pending
        return target == Gst.State.PAUSED

    def get_progress(self) -> Tuple[int, int]:
        ok_pos, position = self.playbin.query_position(Gst.Format.TIME)
        ok_dur, duration = self.playbin.query_duration(Gst.Format.TIME)
        if not ok_pos or not ok_dur:
            raise EngineError("Position unavailable")
        return max(0, position // Gst.SECOND), max(0, duration // Gst.SECOND)

    def cleanup(self) -> None:
        """Stop playback, remove the bus watch and release the pipeline."""
        if not self.playbin:
            return
        try:
            bus = self.playbin.get_bus()
            if bus:
                bus.remove_signal_watch()
        except (AttributeError, RuntimeError):
            # Bus may already be destroyed
            pass
        self.playbin.set_state(Gst.State.NULL)
        self.playbin = None
