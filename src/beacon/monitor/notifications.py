"""Transient notifications and the busy indicator.

Every notification owns its own dismissal timer.  Showing a new one never
touches the timers of those already on screen, so each is removed exactly
``ttl`` seconds after it appeared regardless of what happens in between.

The busy indicator is reference counted: it goes up when the first
operation starts and comes down when the last one ends.

"""

from __future__ import annotations

import asyncio
import itertools
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from beacon._types import NotificationLevel
    from beacon.render import RenderSink


_ids = itertools.count(1)


@dataclass(frozen=True, slots=True)
class Notification:
    """A result message shown on the page for a limited time."""

    level: NotificationLevel
    title: str
    message: str
    id: int = 0

    def __post_init__(self) -> None:
        if self.id == 0:
            object.__setattr__(self, "id", next(_ids))


class NotificationCenter:
    """Shows notifications and removes each one after *ttl* seconds.

    Args:
        sink: Where notifications are drawn and removed.
        ttl: Seconds a notification stays visible.

    """

    def __init__(self, sink: RenderSink, *, ttl: float = 5.0) -> None:
        self._sink = sink
        self._ttl = ttl
        self._timers: dict[int, tuple[Notification, asyncio.TimerHandle]] = {}

    @property
    def active(self) -> list[Notification]:
        """Notifications currently on screen, oldest first."""
        return [n for n, _ in self._timers.values()]

    def show(self, notification: Notification) -> Notification:
        """Render *notification* and schedule its removal."""
        loop = asyncio.get_running_loop()
        self._sink.render_notification(notification)
        handle = loop.call_later(self._ttl, self._dismiss, notification.id)
        self._timers[notification.id] = (notification, handle)
        return notification

    def close(self) -> None:
        """Remove every visible notification now (page teardown)."""
        for notification_id in list(self._timers):
            _, handle = self._timers[notification_id]
            handle.cancel()
            self._dismiss(notification_id)

    def _dismiss(self, notification_id: int) -> None:
        entry = self._timers.pop(notification_id, None)
        if entry is not None:
            self._sink.dismiss_notification(entry[0])


class BusyIndicator:
    """Reference-counted "in progress" flag rendered through the sink."""

    __slots__ = ("_depth", "_sink")

    def __init__(self, sink: RenderSink) -> None:
        self._sink = sink
        self._depth = 0

    @property
    def busy(self) -> bool:
        return self._depth > 0

    def acquire(self) -> None:
        self._depth += 1
        if self._depth == 1:
            self._sink.render_busy(True)

    def release(self) -> None:
        if self._depth == 0:
            return
        self._depth -= 1
        if self._depth == 0:
            self._sink.render_busy(False)

    def __enter__(self) -> BusyIndicator:
        self.acquire()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()

    async def pulse(self, duration: float) -> None:
        """Hold the indicator up for *duration* seconds."""
        with self:
            await asyncio.sleep(duration)
