"""Analytics collector — turns page lifecycle and clicks into events.

On ``start()`` the collector records one ``page_view`` and subscribes to
the host's click stream.  Clicks on elements carrying the trackable class
become ``button_click`` events.  Every event is tagged with the current
session id and stamped by the ``EventBuffer``.

Nothing is sent over the network.  With ``verbose=True`` each event is
also printed to stderr as one JSON line.

Thread Safety:
    The collector delegates to ``EventBuffer`` (internally locked) and
    ``SessionIdentity`` (create-once under a lock).

"""

from __future__ import annotations

import json
import sys
from typing import TYPE_CHECKING

from beacon.telemetry.events import PageContext

if TYPE_CHECKING:
    from beacon._types import EventName, Payload
    from beacon.session import SessionIdentity
    from beacon.streams import EventStream, Subscription
    from beacon.telemetry.buffer import EventBuffer
    from beacon.telemetry.events import ClickEvent, TelemetryEvent


PAGE_VIEW = "page_view"
BUTTON_CLICK = "button_click"


class AnalyticsCollector:
    """Session-scoped interaction tracker.

    Args:
        buffer: Where events are appended.
        session: Session identity shared with other emitters.
        trackable_class: CSS class that marks clicks worth tracking.
        verbose: Print each event to stderr.

    """

    __slots__ = ("_buffer", "_session", "_subscription", "_trackable_class", "_verbose")

    def __init__(
        self,
        buffer: EventBuffer,
        session: SessionIdentity,
        *,
        trackable_class: str = "btn",
        verbose: bool = False,
    ) -> None:
        self._buffer = buffer
        self._session = session
        self._trackable_class = trackable_class
        self._verbose = verbose
        self._subscription: Subscription[ClickEvent] | None = None

    @property
    def buffer(self) -> EventBuffer:
        """The underlying event buffer."""
        return self._buffer

    @property
    def listening(self) -> bool:
        """True while subscribed to a click stream."""
        return self._subscription is not None and self._subscription.active

    def start(
        self,
        page: PageContext | None = None,
        clicks: EventStream[ClickEvent] | None = None,
    ) -> TelemetryEvent:
        """Record the page view and start listening for clicks.

        Returns the ``page_view`` event.

        """
        event = self.track_page_view(page or PageContext())
        if clicks is not None:
            self.stop()
            self._subscription = clicks.subscribe(self.handle_click)
        return event

    def stop(self) -> None:
        """Stop listening for clicks.  Recorded events are kept."""
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

    def track_page_view(self, page: PageContext) -> TelemetryEvent:
        return self.track(PAGE_VIEW, page.as_payload())

    def handle_click(self, click: ClickEvent) -> TelemetryEvent | None:
        """Record a ``button_click`` if the click target is trackable."""
        target = click.target
        if not target.has_class(self._trackable_class):
            return None
        return self.track(BUTTON_CLICK, {"button": target.text, "href": target.href})

    def track(self, name: EventName, payload: Payload | None = None) -> TelemetryEvent:
        """Record an event under the current session."""
        event = self._buffer.record(name, payload, self._session.get())
        if self._verbose:
            print(
                f"  Analytics Event: {json.dumps(event.to_dict(), default=str)}",
                file=sys.stderr,
            )
        return event
