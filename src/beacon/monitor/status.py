"""Status monitor — periodic health polling with a three-state display.

Each poll issues ``GET /health`` with a bounded timeout and maps the
outcome to exactly one state:

- 2xx response                    -> Active
- any other completed response    -> Warning
- transport failure or timeout    -> Error

The state is replaced wholesale on every poll and handed to the render
sink.  There is no retry inside a poll; the periodic schedule is the
retry.  Before the first poll completes the state is None and the sink
shows whatever neutral rendering it starts with.

"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from beacon._errors import NetworkFailure
from beacon.monitor.scheduler import PeriodicTask

if TYPE_CHECKING:
    import httpx

    from beacon.render import RenderSink


class StatusState(Enum):
    """Presentation state of the service indicator."""

    ACTIVE = "active"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class StatusReport:
    """A complete status rendering.

    Attributes:
        state: Indicator state.
        label: Headline text.
        description: Supporting text.
        status_code: HTTP status of the poll, None when it did not complete.

    """

    state: StatusState
    label: str
    description: str
    status_code: int | None = None


_TEXT: dict[StatusState, tuple[str, str]] = {
    StatusState.ACTIVE: ("Service Status: Active", "All systems operational"),
    StatusState.WARNING: ("Service Status: Warning", "Some issues detected"),
    StatusState.ERROR: ("Service Status: Error", "Service unavailable"),
}


def report_for(state: StatusState, status_code: int | None = None) -> StatusReport:
    """Build the canonical report for *state*."""
    label, description = _TEXT[state]
    return StatusReport(state=state, label=label, description=description, status_code=status_code)


def classify_response(status_code: int) -> StatusReport:
    """Map a completed health response to a report."""
    state = StatusState.ACTIVE if 200 <= status_code < 300 else StatusState.WARNING
    return report_for(state, status_code)


async def fetch_health(client: httpx.AsyncClient, url: str, timeout: float) -> int:
    """Issue one health request and return its status code.

    Raises:
        NetworkFailure: The request did not complete.

    """
    try:
        response = await client.get(url, timeout=timeout, follow_redirects=False)
    except Exception as exc:
        raise NetworkFailure(str(exc) or type(exc).__name__) from exc
    return response.status_code


class StatusMonitor:
    """Polls the health endpoint and keeps the displayed status current.

    Args:
        client: HTTP client used for the probe.
        sink: Where status reports are rendered.
        url: Absolute health endpoint URL.
        timeout: Seconds before a poll counts as failed.
        interval: Seconds between scheduled polls.

    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        sink: RenderSink,
        *,
        url: str,
        timeout: float = 5.0,
        interval: float = 30.0,
    ) -> None:
        self._client = client
        self._sink = sink
        self._url = url
        self._timeout = timeout
        self._interval = interval
        self._report: StatusReport | None = None
        self._task: PeriodicTask | None = None

    @property
    def url(self) -> str:
        return self._url

    @property
    def report(self) -> StatusReport | None:
        """The latest report, or None before the first poll completes."""
        return self._report

    @property
    def state(self) -> StatusState | None:
        return self._report.state if self._report is not None else None

    async def poll(self) -> StatusReport:
        """Probe the health endpoint once and render the result."""
        try:
            status_code = await fetch_health(self._client, self._url, self._timeout)
        except NetworkFailure:
            report = report_for(StatusState.ERROR)
        else:
            report = classify_response(status_code)

        self._report = report
        self._sink.render_status(report)
        return report

    def start(self) -> PeriodicTask:
        """Poll now and then on every interval.  Returns the owned handle."""
        if self._task is None or not self._task.running:
            self._task = PeriodicTask(self.poll, self._interval, name="status-poll").start()
        return self._task

    def stop(self) -> None:
        """Stop scheduled polling.  A poll already in flight still renders."""
        if self._task is not None:
            self._task.stop()

    async def aclose(self) -> None:
        if self._task is not None:
            await self._task.aclose()
