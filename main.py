#!/usr/bin/env python3
"""playersync - headless entry point.

Plays the files given on the command line through GStreamer, keeping the
session's progress in sync until interrupted.
"""

import sys

import gi
gi.require_version('Gst', '1.0')
gi.require_version('GLib', '2.0')
from gi.repository import GLib, Gst

from playersync.config import get_config
from playersync.controller import PlayerSession
from playersync.engine import GstPlaybackEngine
from playersync.events import EventBus
from playersync.exceptions import PlayerSyncError
from playersync.logging import LinuxLogger, get_logger
from playersync.workflow_utils import format_time

logger = get_logger(__name__)


def _log_track_changed(data):
    if not data["started"]:
        logger.info("Could not start %s", data["track"].file)
        return
    metadata = data["metadata"]
    logger.info("Now playing: %s", metadata.title if metadata else data["track"].file)


def main():
    """Main entry point."""
    # Initialize config (creates directories, loads settings)
    config = get_config()

    # Initialize logging (uses config for log directory)
    LinuxLogger(log_dir=config.log_dir)

    Gst.init(None)

    try:
        engine = GstPlaybackEngine(audio_sink=config.audio_sink)
    except PlayerSyncError as e:
        logger.error("Cannot start playback engine: %s", e)
        return 1

    session = PlayerSession(engine, config=config)
    session.events.subscribe(EventBus.TRACK_CHANGED, _log_track_changed)
    session.events.subscribe(
        EventBus.END_OF_TRACK,
        lambda data: logger.info("End of track at %s", format_time(data["duration"])),
    )
    session.import_paths(sys.argv[1:])
    session.start()

    loop = GLib.MainLoop()
    try:
        loop.run()
    except KeyboardInterrupt:
        pass
    finally:
        session.shutdown()
    return 0


if __name__ == '__main__':
    sys.exit(main())
