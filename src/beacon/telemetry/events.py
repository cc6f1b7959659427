"""Telemetry event model.

Defines the records flowing through the analytics and performance layers:
- ``TelemetryEvent``: one tracked interaction or lifecycle occurrence
- ``PageContext`` / ``ClickEvent`` / ``ElementRef``: host inputs
- ``NavigationTiming`` / ``ResourceTiming``: raw browser timing entries
- ``PageLoadSnapshot`` / ``ResourceReport``: derived performance metrics

Thread Safety:
    All records are frozen (immutable) and safe to share across threads.

"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from types import MappingProxyType
from typing import Any

from beacon._types import EventName, Payload, ResourceKind, SessionID


def format_timestamp(moment: datetime) -> str:
    """Format *moment* as ISO-8601 UTC with millisecond precision.

    Naive datetimes are taken to be UTC.  The result matches the shape of
    JavaScript's ``Date.toISOString()``, e.g. ``2026-01-02T03:04:05.678Z``.

    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return moment.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def utcnow() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(UTC)


# ---------------------------------------------------------------------------
# Analytics events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class TelemetryEvent:
    """A recorded interaction, immutable once created.

    Attributes:
        name: Event name, e.g. ``page_view``.
        payload: Read-only event data.
        timestamp: ISO-8601 emission time.
        session_id: Session the event belongs to.

    """

    name: EventName
    payload: Mapping[str, Any]
    timestamp: str
    session_id: SessionID

    def __post_init__(self) -> None:
        if not isinstance(self.payload, MappingProxyType):
            object.__setattr__(self, "payload", MappingProxyType(dict(self.payload)))

    def to_dict(self) -> dict[str, Any]:
        """Return the wire shape used by the browser original."""
        return {
            "event": self.name,
            "data": dict(self.payload),
            "timestamp": self.timestamp,
            "sessionId": self.session_id,
        }


@dataclass(frozen=True, slots=True)
class PageContext:
    """What the page knows about itself at load time.

    Missing values are empty strings, never None.

    """

    path: str = ""
    referrer: str = ""
    user_agent: str = ""

    def as_payload(self) -> Payload:
        return {
            "page": self.path or "",
            "referrer": self.referrer or "",
            "userAgent": self.user_agent or "",
        }


@dataclass(frozen=True, slots=True)
class ElementRef:
    """Snapshot of a DOM element at click time.

    Attributes:
        tag: Lower-case tag name.
        classes: CSS classes on the element.
        text: Text content.
        href: Link target, if the element has one.

    """

    tag: str = "button"
    classes: frozenset[str] = field(default_factory=frozenset)
    text: str = ""
    href: str | None = None

    def has_class(self, name: str) -> bool:
        return name in self.classes


@dataclass(frozen=True, slots=True)
class ClickEvent:
    """A click delivered by the host's global click stream."""

    target: ElementRef


# ---------------------------------------------------------------------------
# Performance timing
# ---------------------------------------------------------------------------


def _ms(data: Mapping[str, Any], key: str) -> float:
    value = data.get(key, 0.0)
    return float(value) if value is not None else 0.0


@dataclass(frozen=True, slots=True)
class NavigationTiming:
    """The subset of a navigation timing entry the observer needs.

    All values are milliseconds relative to the navigation start.

    """

    fetch_start: float
    dom_content_loaded_event_start: float
    dom_content_loaded_event_end: float
    load_event_start: float
    load_event_end: float

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> NavigationTiming:
        """Build from a browser ``PerformanceNavigationTiming.toJSON()`` dict."""
        return cls(
            fetch_start=_ms(data, "fetchStart"),
            dom_content_loaded_event_start=_ms(data, "domContentLoadedEventStart"),
            dom_content_loaded_event_end=_ms(data, "domContentLoadedEventEnd"),
            load_event_start=_ms(data, "loadEventStart"),
            load_event_end=_ms(data, "loadEventEnd"),
        )


@dataclass(frozen=True, slots=True)
class PageLoadSnapshot:
    """Page load durations, captured once per page load.

    Attributes:
        dom_content_loaded_ms: Time spent in the DOMContentLoaded handlers.
        load_complete_ms: Time spent in the load handlers.
        total_load_ms: Fetch start to load end.

    """

    dom_content_loaded_ms: float
    load_complete_ms: float
    total_load_ms: float

    @classmethod
    def from_navigation(cls, nav: NavigationTiming) -> PageLoadSnapshot:
        return cls(
            dom_content_loaded_ms=nav.dom_content_loaded_event_end - nav.dom_content_loaded_event_start,
            load_complete_ms=nav.load_event_end - nav.load_event_start,
            total_load_ms=nav.load_event_end - nav.fetch_start,
        )

    def to_dict(self) -> dict[str, float]:
        return {
            "domContentLoaded": self.dom_content_loaded_ms,
            "loadComplete": self.load_complete_ms,
            "totalTime": self.total_load_ms,
        }


@dataclass(frozen=True, slots=True)
class ResourceTiming:
    """One resource timing entry from the host's stream."""

    name: str
    duration_ms: float
    initiator_type: str

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> ResourceTiming:
        """Build from a browser ``PerformanceResourceTiming.toJSON()`` dict."""
        return cls(
            name=str(data.get("name", "")),
            duration_ms=_ms(data, "duration"),
            initiator_type=str(data.get("initiatorType", "")),
        )


@dataclass(frozen=True, slots=True)
class ResourceReport:
    """A reported resource load."""

    name: str
    duration_ms: float
    kind: ResourceKind
