"""Event buffer — append-only, queryable telemetry store.

Keeps every ``TelemetryEvent`` in emission order.  Events are stamped
inside the buffer's lock, so append order and timestamp order agree even
with several emitters or a clock that steps backwards.

Reads never mutate the buffer: ``snapshot()``, ``recent()`` and
``query()`` return copies.

Thread Safety:
    All methods are protected by a ``threading.Lock``.  Safe for
    concurrent reads and writes from multiple threads.

"""

from __future__ import annotations

import json
import threading
from collections import deque
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from beacon.telemetry.events import TelemetryEvent, format_timestamp, utcnow

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    from pathlib import Path

    from beacon._types import EventName, Payload, SessionID


class EventBuffer:
    """Ordered event store with query support.

    Unbounded by default.  With *max_events* set, the buffer becomes a
    ring buffer and the oldest events are discarded once it is full.

    Args:
        max_events: Maximum number of events to retain (None = no cap).
        clock: Source of emission times (aware or UTC-naive datetimes).

    """

    __slots__ = ("_clock", "_events", "_last", "_lock", "_max_events", "_total")

    def __init__(
        self,
        max_events: int | None = None,
        *,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._max_events = max_events
        self._events: deque[TelemetryEvent] = deque(maxlen=max_events)
        self._lock = threading.Lock()
        self._clock = clock
        self._last: datetime | None = None
        self._total = 0

    def record(
        self,
        name: EventName,
        payload: Payload | None,
        session_id: SessionID,
    ) -> TelemetryEvent:
        """Stamp and append a new event, returning it."""
        with self._lock:
            moment = self._clock()
            if self._last is not None and _aware(moment) < _aware(self._last):
                moment = self._last
            self._last = moment
            event = TelemetryEvent(
                name=name,
                payload=payload or {},
                timestamp=format_timestamp(moment),
                session_id=session_id,
            )
            self._events.append(event)
            self._total += 1
        return event

    def snapshot(self) -> list[TelemetryEvent]:
        """Return every retained event, oldest first."""
        with self._lock:
            return list(self._events)

    def recent(self, n: int = 20) -> list[TelemetryEvent]:
        """Return the N most recent events, oldest first."""
        with self._lock:
            items = list(self._events)
        return items[-n:] if n > 0 else []

    def query(
        self,
        *,
        name: EventName | None = None,
        session_id: SessionID | None = None,
        since: str | datetime | None = None,
        limit: int = 100,
    ) -> list[TelemetryEvent]:
        """Query events with optional filters.

        Args:
            name: Only return events with this name.
            session_id: Only return events from this session.
            since: Only return events stamped at or after this moment, an
                ISO-8601 string in any offset or an aware datetime.  Naive
                values are taken to be UTC.
            limit: Maximum number of events to return.

        Returns:
            List of matching events, most recent first.

        """
        if since is not None:
            if not isinstance(since, datetime):
                since = datetime.fromisoformat(since)
            since = format_timestamp(since)
        with self._lock:
            results: list[TelemetryEvent] = []
            for event in reversed(self._events):
                if len(results) >= limit:
                    break
                if name is not None and event.name != name:
                    continue
                if session_id is not None and event.session_id != session_id:
                    continue
                if since is not None and event.timestamp < since:
                    continue
                results.append(event)
            return results

    def export_jsonl(self, path: Path) -> int:
        """Append every retained event to *path* as JSON lines.

        Returns:
            Number of events written.

        """
        events = self.snapshot()
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("a", encoding="utf-8") as fh:
            for event in events:
                fh.write(json.dumps(event.to_dict(), default=str) + "\n")
        return len(events)

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def __iter__(self) -> Iterator[TelemetryEvent]:
        return iter(self.snapshot())

    def stats(self) -> dict[str, Any]:
        """Return summary statistics about stored events."""
        with self._lock:
            events = list(self._events)
            total = self._total

        name_counts: dict[str, int] = {}
        for event in events:
            name_counts[event.name] = name_counts.get(event.name, 0) + 1

        return {
            "retained": len(events),
            "recorded": total,
            "max_events": self._max_events,
            "by_name": name_counts,
        }


def _aware(moment: datetime) -> datetime:
    return moment if moment.tzinfo is not None else moment.replace(tzinfo=UTC)
