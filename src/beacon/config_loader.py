"""Load BeaconConfig from beacon.yaml if present.

Merges file config with CLI kwargs. CLI overrides file.
"""

from __future__ import annotations

import dataclasses
import tomllib
from pathlib import Path

import yaml

from beacon._errors import ConfigError
from beacon.config import BeaconConfig

_FIELDS = frozenset(f.name for f in dataclasses.fields(BeaconConfig))


def load_config(root: Path, **overrides: object) -> BeaconConfig:
    """Load BeaconConfig from root, optionally merging beacon.yaml.

    Looks for beacon.yaml, beacon.yml, or beacon.toml in root. If found, loads
    and merges with overrides. Overrides take precedence; ``None`` overrides
    are ignored so unset CLI flags do not mask file values.
    """
    file_config = _read_beacon_config(root)
    merged = {**file_config, **{k: v for k, v in overrides.items() if v is not None}}
    unknown = sorted(set(merged) - _FIELDS)
    if unknown:
        msg = f"Unknown config keys: {', '.join(unknown)}"
        raise ConfigError(msg)
    return BeaconConfig(**merged)


def _read_beacon_config(root: Path) -> dict[str, object]:
    """Read beacon config from yaml/toml if present. Returns empty dict otherwise."""
    for name in ("beacon.yaml", "beacon.yml"):
        path = root / name
        if path.is_file():
            return _parse_yaml(path)
    toml_path = root / "beacon.toml"
    if toml_path.is_file():
        return _parse_toml(toml_path)
    return {}


def _parse_yaml(path: Path) -> dict[str, object]:
    """Parse YAML config."""
    try:
        data = yaml.safe_load(path.read_text()) or {}
    except yaml.YAMLError as exc:
        msg = f"Malformed config file {path.name}: {exc}"
        raise ConfigError(msg) from exc
    if not isinstance(data, dict):
        msg = f"Config file {path.name} must contain a mapping"
        raise ConfigError(msg)
    return _flatten_beacon_section(data)


def _parse_toml(path: Path) -> dict[str, object]:
    """Parse TOML config."""
    try:
        data = tomllib.loads(path.read_text())
    except tomllib.TOMLDecodeError as exc:
        msg = f"Malformed config file {path.name}: {exc}"
        raise ConfigError(msg) from exc
    return _flatten_beacon_section(data)


def _flatten_beacon_section(data: dict[str, object]) -> dict[str, object]:
    """Extract beacon.* keys into top-level config.

    Top-level keys that are not config fields are dropped, so a shared
    file can carry settings for other tools. Keys inside the ``beacon``
    section are kept verbatim and validated by the caller.
    """
    result: dict[str, object] = {}
    for k, v in data.items():
        if k != "beacon" and k in _FIELDS:
            result[k] = v
    section = data.get("beacon")
    if isinstance(section, dict):
        for k, v in section.items():
            result[k] = v
    return result
