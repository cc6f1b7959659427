"""Tests for beacon.config."""

import pytest

from beacon._errors import ConfigError
from beacon.config import BeaconConfig


class TestBeaconConfig:
    """BeaconConfig — frozen dataclass with sensible defaults."""

    def test_defaults(self) -> None:
        config = BeaconConfig()
        assert config.health_path == "/health"
        assert config.health_timeout == 5.0
        assert config.poll_interval == 30.0
        assert config.notification_ttl == 5.0
        assert config.loading_duration == 3.0
        assert config.trackable_class == "btn"
        assert config.resource_initiators == frozenset({"img", "css", "script"})
        assert config.session_key == "sessionId"
        assert config.verbose is False

    def test_frozen(self) -> None:
        config = BeaconConfig()
        with pytest.raises(AttributeError):
            config.poll_interval = 1.0  # type: ignore[misc]

    def test_health_url_joins_base_and_path(self) -> None:
        config = BeaconConfig(base_url="https://example.com/")
        assert config.health_url == "https://example.com/health"

    def test_health_path_gets_leading_slash(self) -> None:
        config = BeaconConfig(base_url="https://example.com", health_path="status")
        assert config.health_path == "/status"
        assert config.health_url == "https://example.com/status"

    def test_initiators_normalized_to_frozenset(self) -> None:
        config = BeaconConfig(resource_initiators={"img"})  # type: ignore[arg-type]
        assert config.resource_initiators == frozenset({"img"})

    @pytest.mark.parametrize(
        "field", ["health_timeout", "poll_interval", "redirect_timeout"],
    )
    def test_non_positive_durations_rejected(self, field: str) -> None:
        with pytest.raises(ConfigError, match=field):
            BeaconConfig(**{field: 0})

    def test_negative_ttl_rejected(self) -> None:
        with pytest.raises(ConfigError):
            BeaconConfig(notification_ttl=-1)

    def test_zero_ttl_allowed(self) -> None:
        assert BeaconConfig(notification_ttl=0).notification_ttl == 0

    @pytest.mark.parametrize(
        ("field", "value"),
        [
            ("health_timeout", "fast"),
            ("poll_interval", True),
            ("base_url", 123),
            ("trackable_class", None),
            ("verbose", "yes"),
            ("resource_initiators", 5),
            ("resource_initiators", [1, 2]),
        ],
    )
    def test_wrong_types_rejected(self, field: str, value: object) -> None:
        with pytest.raises(ConfigError, match=field):
            BeaconConfig(**{field: value})  # type: ignore[arg-type]

    def test_single_initiator_string(self) -> None:
        config = BeaconConfig(resource_initiators="img")  # type: ignore[arg-type]
        assert config.resource_initiators == frozenset({"img"})
