class SkyPingError(Exception):
    """Base class for recoverable SkyPing errors."""


class LocationUnavailable(SkyPingError):
    """The location provider could not produce a fix."""


class PermissionDenied(SkyPingError):
    """The user refused location or alerting access."""


class DataSourceFailure(SkyPingError):
    """A poll of the aircraft data source failed; retried on the next cycle."""


class PlaybackFailure(SkyPingError):
    """A clip could not be played; narration treats it as finished."""
