"""Beacon configuration.

BeaconConfig is the central configuration object, frozen after creation.
"""

from dataclasses import dataclass, field

from beacon._errors import ConfigError

_STR_FIELDS = (
    "base_url",
    "health_path",
    "redirect_source_url",
    "redirect_expected_target",
    "trackable_class",
    "session_key",
)
_DURATION_FIELDS = (
    "health_timeout",
    "poll_interval",
    "redirect_timeout",
    "notification_ttl",
    "loading_duration",
)


@dataclass(frozen=True, slots=True)
class BeaconConfig:
    """Configuration for a Beacon page runtime.

    Attributes:
        base_url: Origin the health path is resolved against.
        health_path: Path of the health endpoint.
        health_timeout: Seconds before a health poll counts as failed.
        poll_interval: Seconds between health polls.
        redirect_source_url: Default URL probed by ``test_redirect()``.
        redirect_expected_target: Default substring the redirect
            ``Location`` header must contain.
        redirect_timeout: Seconds before a redirect probe counts as failed.
        notification_ttl: Seconds a result notification stays on screen.
        loading_duration: Seconds the manual loading indicator stays up.
        trackable_class: CSS class that marks click targets worth tracking.
        resource_initiators: Resource-timing initiator types to report.
        session_key: Storage key holding the session id.
        verbose: Print analytics and performance reports to stderr.

    """

    base_url: str = "http://127.0.0.1:8000"
    health_path: str = "/health"
    health_timeout: float = 5.0
    poll_interval: float = 30.0
    redirect_source_url: str = ""
    redirect_expected_target: str = ""
    redirect_timeout: float = 10.0
    notification_ttl: float = 5.0
    loading_duration: float = 3.0
    trackable_class: str = "btn"
    resource_initiators: frozenset[str] = field(
        default_factory=lambda: frozenset({"img", "css", "script"})
    )
    session_key: str = "sessionId"
    verbose: bool = False

    def __post_init__(self) -> None:
        for name in _STR_FIELDS:
            value = getattr(self, name)
            if not isinstance(value, str):
                msg = f"{name} must be a string, got {value!r}"
                raise ConfigError(msg)
        for name in _DURATION_FIELDS:
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int | float):
                msg = f"{name} must be a number of seconds, got {value!r}"
                raise ConfigError(msg)
        if not isinstance(self.verbose, bool):
            msg = f"verbose must be true or false, got {self.verbose!r}"
            raise ConfigError(msg)
        for name in ("health_timeout", "poll_interval", "redirect_timeout"):
            if getattr(self, name) <= 0:
                msg = f"{name} must be positive, got {getattr(self, name)!r}"
                raise ConfigError(msg)
        if self.notification_ttl < 0 or self.loading_duration < 0:
            msg = "notification_ttl and loading_duration must not be negative"
            raise ConfigError(msg)
        if not self.health_path.startswith("/"):
            object.__setattr__(self, "health_path", "/" + self.health_path)
        initiators = self.resource_initiators
        if isinstance(initiators, str):
            initiators = (initiators,)
        try:
            initiators = frozenset(initiators)
        except TypeError as exc:
            msg = f"resource_initiators must be a list of names, got {self.resource_initiators!r}"
            raise ConfigError(msg) from exc
        if not all(isinstance(i, str) for i in initiators):
            msg = f"resource_initiators must be a list of names, got {self.resource_initiators!r}"
            raise ConfigError(msg)
        object.__setattr__(self, "resource_initiators", initiators)

    @property
    def health_url(self) -> str:
        """Absolute URL of the health endpoint."""
        return self.base_url.rstrip("/") + self.health_path
