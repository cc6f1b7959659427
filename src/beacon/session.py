"""Session identity — a stable per-tab token for correlating telemetry.

The session id lives in a per-tab key-value store.  It is created lazily
on first use and never changes afterwards; every later read returns the
stored value.

Thread Safety:
    ``SessionIdentity.get()`` runs check-then-create under a lock, so two
    concurrent first-time callers observe the same id.

"""

from __future__ import annotations

import json
import random
import string
import threading
import time
from pathlib import Path
from typing import Protocol

from beacon._types import SessionID

_ALPHABET = string.digits + string.ascii_lowercase


class KeyValueStorage(Protocol):
    """Minimal per-tab storage contract (the shape of ``sessionStorage``)."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryStorage:
    """Dict-backed storage.  Lives as long as the object does."""

    __slots__ = ("_data",)

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonFileStorage:
    """Storage persisted to a small JSON file.

    Survives process restarts the way a tab's storage survives page
    navigation.  A missing or unreadable file reads as empty.

    """

    __slots__ = ("_path",)

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str) -> str | None:
        value = self._load().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp.write_text(json.dumps(data, indent=2, sort_keys=True))
        tmp.replace(self._path)

    def _load(self) -> dict[str, object]:
        try:
            data = json.loads(self._path.read_text())
        except (OSError, ValueError):
            return {}
        return data if isinstance(data, dict) else {}


def new_session_id() -> SessionID:
    """Return a fresh token: ``session_<epoch-ms>_<9 base36 chars>``."""
    suffix = "".join(random.choices(_ALPHABET, k=9))
    return f"session_{int(time.time() * 1000)}_{suffix}"


class SessionIdentity:
    """Produces or retrieves the session id stored under *key*.

    Args:
        storage: Per-tab storage holding the id.
        key: Storage key.

    """

    __slots__ = ("_cached", "_key", "_lock", "_storage")

    def __init__(self, storage: KeyValueStorage | None = None, key: str = "sessionId") -> None:
        self._storage = storage if storage is not None else MemoryStorage()
        self._key = key
        self._lock = threading.Lock()
        self._cached: SessionID | None = None

    @property
    def key(self) -> str:
        return self._key

    def get(self) -> SessionID:
        """Return the session id, creating and storing it on first use."""
        cached = self._cached
        if cached is not None:
            return cached
        with self._lock:
            if self._cached is None:
                existing = self._storage.get(self._key)
                if not existing:
                    existing = new_session_id()
                    self._storage.set(self._key, existing)
                self._cached = existing
            return self._cached
