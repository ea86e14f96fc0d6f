"""Exception hierarchy for the playback sync core.

Every condition in this package degrades gracefully, so these exceptions are
raised at component boundaries and absorbed by the caller that owns the
recovery policy (the poller, the transport wrappers, the event bus).
"""


class PlayerSyncError(Exception):
    """Base exception for all playersync errors."""

    pass


class EngineError(PlayerSyncError):
    """The playback engine rejected a command or could not answer a query."""

    pass


class ConfigurationError(PlayerSyncError):
    """Errors related to configuration."""

    pass


class MetadataError(PlayerSyncError):
    """Errors related to reading track metadata."""

    pass
