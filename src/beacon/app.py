"""Beacon page runtime — wires every component for one page.

Lifecycle::

    async with Beacon(config, sink=ConsoleSink()) as page:   # page ready
        page.page_loaded(timing_source)                     # load event
        await page.test_redirect()                          # user action
        page.track("signup", {"plan": "free"})
    # teardown releases the poll timer and every subscription

Components start independently at page-ready time:

- Status Monitor polls immediately and then on a fixed interval
- Analytics Collector records the page view and listens for clicks
- Performance Observer listens for resource timing entries
- Redirect Verifier waits for explicit calls

The only state they share is the session identity.

"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

import httpx

from beacon.config import BeaconConfig
from beacon.monitor.notifications import BusyIndicator, NotificationCenter
from beacon.monitor.redirect import RedirectVerifier
from beacon.monitor.status import StatusMonitor
from beacon.render import RecordingSink
from beacon.session import SessionIdentity
from beacon.telemetry.buffer import EventBuffer
from beacon.telemetry.collector import AnalyticsCollector
from beacon.telemetry.performance import PerformanceObserver

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime

    from beacon._types import EventName, Payload
    from beacon.monitor.redirect import RedirectCheckResult
    from beacon.monitor.status import StatusReport
    from beacon.render import RenderSink
    from beacon.session import KeyValueStorage
    from beacon.streams import EventStream
    from beacon.telemetry.events import (
        ClickEvent,
        PageContext,
        PageLoadSnapshot,
        ResourceTiming,
        TelemetryEvent,
    )
    from beacon.telemetry.performance import TimingSource


class Beacon:
    """Instrumentation and verification layer for a single page.

    Args:
        config: Runtime configuration (defaults to ``BeaconConfig()``).
        client: HTTP client; one is created (and closed) if omitted.
        sink: Render sink; a ``RecordingSink`` if omitted.
        storage: Per-tab storage for the session id.
        clock: Event timestamp source, for deterministic replays.

    """

    def __init__(
        self,
        config: BeaconConfig | None = None,
        *,
        client: httpx.AsyncClient | None = None,
        sink: RenderSink | None = None,
        storage: KeyValueStorage | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.config = config if config is not None else BeaconConfig()
        self.sink: RenderSink = sink if sink is not None else RecordingSink()
        self._owns_client = client is None
        self._client = client if client is not None else httpx.AsyncClient()
        self._started = False

        self.session = SessionIdentity(storage, key=self.config.session_key)
        self.buffer = EventBuffer(clock=clock) if clock is not None else EventBuffer()
        self.busy = BusyIndicator(self.sink)
        self.notifications = NotificationCenter(self.sink, ttl=self.config.notification_ttl)

        self.status = StatusMonitor(
            self._client,
            self.sink,
            url=self.config.health_url,
            timeout=self.config.health_timeout,
            interval=self.config.poll_interval,
        )
        self.redirects = RedirectVerifier(
            self._client,
            self.notifications,
            self.busy,
            source_url=self.config.redirect_source_url,
            expected_target=self.config.redirect_expected_target,
            timeout=self.config.redirect_timeout,
        )
        self.analytics = AnalyticsCollector(
            self.buffer,
            self.session,
            trackable_class=self.config.trackable_class,
            verbose=self.config.verbose,
        )
        self.performance = PerformanceObserver(
            initiators=self.config.resource_initiators,
            verbose=self.config.verbose,
        )

    # ----- Lifecycle -----

    async def start(
        self,
        page: PageContext | None = None,
        *,
        clicks: EventStream[ClickEvent] | None = None,
        resources: EventStream[ResourceTiming] | None = None,
        poll: bool = True,
    ) -> None:
        """Initialize every component (the page-ready moment)."""
        if self._started:
            return
        self._started = True
        if poll:
            self.status.start()
        self.analytics.start(page, clicks)
        self.performance.observe_resources(resources)

    def page_loaded(self, timings: TimingSource | None) -> PageLoadSnapshot | None:
        """Capture page load metrics (the load-complete moment)."""
        return self.performance.capture_page_load(timings)

    async def close(self) -> None:
        """Tear the page down and release everything it holds."""
        await self.status.aclose()
        self.analytics.stop()
        self.performance.stop()
        self.notifications.close()
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> Beacon:
        await self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    # ----- Caller-invocable operations -----

    async def check_status(self) -> StatusReport:
        """Poll the health endpoint once, outside the schedule."""
        return await self.status.poll()

    async def test_redirect(
        self,
        source_url: str | None = None,
        expected_target: str | None = None,
    ) -> RedirectCheckResult:
        """Verify the configured (or given) redirect."""
        return await self.redirects.test_redirect(source_url, expected_target)

    def track(self, name: EventName, payload: Payload | None = None) -> TelemetryEvent:
        """Record a custom analytics event."""
        return self.analytics.track(name, payload)

    async def show_loading(self, duration: float | None = None) -> None:
        """Show the loading indicator for *duration* seconds."""
        await self.busy.pulse(self.config.loading_duration if duration is None else duration)

    # ----- Inspection -----

    def summary(self) -> dict[str, Any]:
        """Current state of every component, for dashboards and the CLI."""
        report = self.status.report
        snapshot = self.performance.snapshot
        return {
            "status": report.state.value if report is not None else None,
            "session_id": self.session.get(),
            "events": self.buffer.stats(),
            "page_load": snapshot.to_dict() if snapshot is not None else None,
            "resources": self.performance.stats(),
            "notifications": len(self.notifications.active),
        }


def export_events(page: Beacon, path: str | Path) -> int:
    """Write the page's buffered events to a JSON-lines file."""
    count = page.buffer.export_jsonl(Path(path))
    print(f"  Exported {count} event{'s' if count != 1 else ''} to {path}", file=sys.stderr)
    return count
