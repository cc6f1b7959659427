"""Event streams — subscription model for ambient host events.

A host (a pyodide page, a replay tool, a test) pushes click and
resource-timing entries into an ``EventStream``.  Components subscribe
with a callback and receive a ``Subscription`` they cancel on teardown.

Thread Safety:
    The subscriber list is protected by a ``threading.Lock``.  Callbacks
    run outside the lock, in subscription order.

"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable


class Subscription[T]:
    """Handle returned by ``EventStream.subscribe``.

    Calling ``unsubscribe()`` more than once is harmless.

    """

    __slots__ = ("_callback", "_stream")

    def __init__(self, stream: EventStream[T], callback: Callable[[T], object]) -> None:
        self._stream: EventStream[T] | None = stream
        self._callback = callback

    @property
    def active(self) -> bool:
        """True until ``unsubscribe()`` is called."""
        return self._stream is not None

    def unsubscribe(self) -> None:
        """Stop receiving entries from the stream."""
        stream, self._stream = self._stream, None
        if stream is not None:
            stream._remove(self)


class EventStream[T]:
    """Lazy, unbounded stream of host events.

    Entries are not buffered: a subscriber only sees what is emitted
    after it subscribed.  A closed stream accepts no new subscribers and
    drops emitted entries, which mirrors a page that has been torn down.

    """

    def __init__(self) -> None:
        self._subscribers: list[Subscription] = []
        self._lock = threading.Lock()
        self._closed = False

    @property
    def subscriber_count(self) -> int:
        """Number of live subscriptions."""
        with self._lock:
            return len(self._subscribers)

    @property
    def closed(self) -> bool:
        return self._closed

    def subscribe(self, callback: Callable[[T], object]) -> Subscription:
        """Register *callback* for every future entry."""
        sub = Subscription(self, callback)
        with self._lock:
            if self._closed:
                msg = "cannot subscribe to a closed stream"
                raise RuntimeError(msg)
            self._subscribers.append(sub)
        return sub

    def emit(self, item: T) -> int:
        """Deliver *item* to every subscriber.

        Returns:
            Number of subscribers that received the item.

        """
        with self._lock:
            if self._closed:
                return 0
            subscribers = list(self._subscribers)
        for sub in subscribers:
            sub._callback(item)
        return len(subscribers)

    def close(self) -> None:
        """Drop all subscribers and stop delivering entries."""
        with self._lock:
            self._closed = True
            subscribers, self._subscribers = self._subscribers, []
        for sub in subscribers:
            sub._stream = None

    def _remove(self, sub: Subscription) -> None:
        with self._lock:
            if sub in self._subscribers:
                self._subscribers.remove(sub)
