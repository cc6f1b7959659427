"""Beacon error hierarchy.

All beacon-specific errors inherit from BeaconError for easy catching.
Only ConfigError is meant to reach callers; the rest are caught at the
component boundary and turned into a reported state.
"""


class BeaconError(Exception):
    """Base error for all beacon operations."""


class ConfigError(BeaconError):
    """Invalid or missing configuration."""


class NetworkFailure(BeaconError):
    """A request could not complete (DNS, timeout, connection reset)."""


class ProtocolMismatch(BeaconError):
    """A response arrived but did not have the expected shape.

    Attributes:
        status_code: HTTP status of the offending response.
        location: ``Location`` header, if the response carried one.

    """

    def __init__(self, message: str, *, status_code: int, location: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.location = location


class ResourceUnavailable(BeaconError):
    """A timing or measurement facility is absent on this host."""
