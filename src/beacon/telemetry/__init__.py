"""Session-scoped telemetry — analytics events and performance timing.

Quick Start:
    >>> from beacon.session import SessionIdentity
    >>> from beacon.telemetry import AnalyticsCollector, EventBuffer
    >>> buffer = EventBuffer()
    >>> collector = AnalyticsCollector(buffer, SessionIdentity())
    >>> event = collector.track("signup", {"plan": "free"})
    >>> buffer.snapshot()[-1] is event
    True

"""

from beacon.telemetry.buffer import EventBuffer
from beacon.telemetry.collector import AnalyticsCollector
from beacon.telemetry.events import (
    ClickEvent,
    ElementRef,
    NavigationTiming,
    PageContext,
    PageLoadSnapshot,
    ResourceReport,
    ResourceTiming,
    TelemetryEvent,
    format_timestamp,
)
from beacon.telemetry.performance import (
    PerformanceObserver,
    StaticTimingSource,
    TimingSource,
)

__all__ = [
    "AnalyticsCollector",
    "ClickEvent",
    "ElementRef",
    "EventBuffer",
    "NavigationTiming",
    "PageContext",
    "PageLoadSnapshot",
    "PerformanceObserver",
    "ResourceReport",
    "ResourceTiming",
    "StaticTimingSource",
    "TelemetryEvent",
    "TimingSource",
    "format_timestamp",
]
