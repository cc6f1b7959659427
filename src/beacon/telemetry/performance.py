"""Performance observer — page load and resource timing capture.

Two independent measurements:

1. ``capture_page_load()`` reads the navigation timing entry once the
   load lifecycle has completed and derives a ``PageLoadSnapshot``.
   It runs at most once per observer (one observer per page load).
2. ``observe_resources()`` subscribes to the host's resource timing
   stream and reports every image, stylesheet, or script entry.

Both fail open: without a timing facility the snapshot is skipped and
resource observation is a no-op.

Thread Safety:
    Used from the page's event loop (single-writer).  The report ring
    buffer is only read through ``reports()`` / ``stats()`` copies.

"""

from __future__ import annotations

import sys
from collections import deque
from typing import TYPE_CHECKING, Protocol

from beacon._errors import ResourceUnavailable
from beacon.telemetry.events import PageLoadSnapshot, ResourceReport

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence

    from beacon._types import ResourceKind
    from beacon.streams import EventStream, Subscription
    from beacon.telemetry.events import NavigationTiming, ResourceTiming


# Browser initiator types and the kind each one is reported as.
_INITIATOR_KINDS: dict[str, ResourceKind] = {
    "img": "image",
    "image": "image",
    "css": "stylesheet",
    "stylesheet": "stylesheet",
    "script": "script",
}


class TimingSource(Protocol):
    """Host facility exposing navigation timing entries.

    Implementations raise ``ResourceUnavailable`` when the host has no
    timing support.

    """

    def navigation_entries(self) -> Sequence[NavigationTiming]: ...


class StaticTimingSource:
    """Timing source over entries the host already collected."""

    __slots__ = ("_entries",)

    def __init__(self, entries: Iterable[NavigationTiming] = ()) -> None:
        self._entries = tuple(entries)

    def navigation_entries(self) -> Sequence[NavigationTiming]:
        return self._entries


class PerformanceObserver:
    """Captures page load metrics and reports resource loads.

    Args:
        initiators: Initiator types to report (others are ignored).
        on_report: Called with each ``ResourceReport`` as it is produced.
        max_reports: How many reports to keep for ``stats()``.
        verbose: Print metrics to stderr.

    """

    def __init__(
        self,
        *,
        initiators: Iterable[str] = ("img", "css", "script"),
        on_report: Callable[[ResourceReport], object] | None = None,
        max_reports: int = 1_000,
        verbose: bool = False,
    ) -> None:
        self._initiators = frozenset(initiators)
        self._on_report = on_report
        self._verbose = verbose
        self._reports: deque[ResourceReport] = deque(maxlen=max_reports)
        self._snapshot: PageLoadSnapshot | None = None
        self._captured = False
        self._subscription: Subscription[ResourceTiming] | None = None

    @property
    def snapshot(self) -> PageLoadSnapshot | None:
        """The page load snapshot, or None if not (or never) captured."""
        return self._snapshot

    @property
    def observing(self) -> bool:
        return self._subscription is not None and self._subscription.active

    # ----- Page load -----

    def capture_page_load(self, source: TimingSource | None) -> PageLoadSnapshot | None:
        """Compute the page load snapshot from *source*.

        Only the first call does any work; later calls return the stored
        snapshot.  Returns None when timing data is unavailable.

        """
        if self._captured:
            return self._snapshot
        self._captured = True

        try:
            nav = _first_navigation_entry(source)
        except ResourceUnavailable as exc:
            if self._verbose:
                print(f"  Page load metrics skipped: {exc}", file=sys.stderr)
            return None

        self._snapshot = PageLoadSnapshot.from_navigation(nav)
        if self._verbose:
            s = self._snapshot
            print(
                f"  Page Load Metrics: domContentLoaded: {s.dom_content_loaded_ms:.0f}ms, "
                f"loadComplete: {s.load_complete_ms:.0f}ms, "
                f"total: {s.total_load_ms:.0f}ms",
                file=sys.stderr,
            )
        return self._snapshot

    # ----- Resource timing -----

    def observe_resources(self, stream: EventStream[ResourceTiming] | None) -> bool:
        """Subscribe to *stream*.  Returns False (no-op) without a stream."""
        if stream is None or stream.closed:
            return False
        self.stop()
        self._subscription = stream.subscribe(self.handle_resource)
        return True

    def stop(self) -> None:
        """Stop observing resources.  The snapshot and reports are kept."""
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

    def handle_resource(self, entry: ResourceTiming) -> ResourceReport | None:
        """Report *entry* if its initiator type is tracked."""
        if entry.initiator_type not in self._initiators:
            return None
        kind = _INITIATOR_KINDS.get(entry.initiator_type)
        if kind is None:
            return None

        report = ResourceReport(name=entry.name, duration_ms=entry.duration_ms, kind=kind)
        self._reports.append(report)
        if self._verbose:
            print(f"  Resource Load: {report.name} - {report.duration_ms:.0f}ms", file=sys.stderr)
        if self._on_report is not None:
            self._on_report(report)
        return report

    def reports(self) -> list[ResourceReport]:
        """Retained resource reports, oldest first."""
        return list(self._reports)

    def stats(self) -> dict:
        """Aggregate statistics over retained resource reports.

        Returns a dict with count, p50/p95/p99/min/max durations, and a
        per-kind count.

        """
        reports = list(self._reports)
        if not reports:
            return {"count": 0}

        durations = sorted(r.duration_ms for r in reports)

        def percentile(data: list[float], pct: float) -> float:
            idx = int(len(data) * pct / 100)
            return data[min(idx, len(data) - 1)]

        by_kind: dict[str, int] = {}
        for r in reports:
            by_kind[r.kind] = by_kind.get(r.kind, 0) + 1

        return {
            "count": len(durations),
            "duration_ms": {
                "p50": round(percentile(durations, 50), 1),
                "p95": round(percentile(durations, 95), 1),
                "p99": round(percentile(durations, 99), 1),
                "min": round(durations[0], 1),
                "max": round(durations[-1], 1),
            },
            "by_kind": by_kind,
        }


def _first_navigation_entry(source: TimingSource | None) -> NavigationTiming:
    if source is None:
        msg = "no timing facility"
        raise ResourceUnavailable(msg)
    entries = source.navigation_entries()
    if not entries:
        msg = "no navigation timing entry"
        raise ResourceUnavailable(msg)
    return entries[0]
