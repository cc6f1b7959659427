"""Render sinks — where components put their visible state.

Each component is handed the sink it draws on instead of reaching for a
global page.  ``RecordingSink`` keeps everything in memory for headless
use; ``ConsoleSink`` draws on stderr with ANSI colours and respects
``NO_COLOR`` (https://no-color.org).

"""

from __future__ import annotations

import os
import sys
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from beacon.monitor.notifications import Notification
    from beacon.monitor.status import StatusReport


class RenderSink(Protocol):
    """Minimal presentation surface shared by the monitor components."""

    def render_status(self, report: StatusReport) -> None: ...

    def render_notification(self, notification: Notification) -> None: ...

    def dismiss_notification(self, notification: Notification) -> None: ...

    def render_busy(self, busy: bool) -> None: ...


class RecordingSink:
    """Headless sink that records every render call.

    Attributes:
        statuses: Every status report rendered, oldest first.
        notifications: Notifications currently on screen.
        shown: Every notification ever rendered.
        dismissed: Notifications removed, in removal order.
        busy_changes: Every busy flag rendered.

    """

    def __init__(self) -> None:
        self.statuses: list[StatusReport] = []
        self.notifications: list[Notification] = []
        self.shown: list[Notification] = []
        self.dismissed: list[Notification] = []
        self.busy_changes: list[bool] = []

    @property
    def status(self) -> StatusReport | None:
        """The report currently displayed (None before the first poll)."""
        return self.statuses[-1] if self.statuses else None

    @property
    def busy(self) -> bool:
        return bool(self.busy_changes) and self.busy_changes[-1]

    def render_status(self, report: StatusReport) -> None:
        self.statuses.append(report)

    def render_notification(self, notification: Notification) -> None:
        self.notifications.append(notification)
        self.shown.append(notification)

    def dismiss_notification(self, notification: Notification) -> None:
        if notification in self.notifications:
            self.notifications.remove(notification)
        self.dismissed.append(notification)

    def render_busy(self, busy: bool) -> None:
        self.busy_changes.append(busy)


# ---------------------------------------------------------------------------
# ANSI helpers
# ---------------------------------------------------------------------------


def _supports_color() -> bool:
    """Return True if the terminal supports ANSI colors."""
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("TERM") == "dumb":
        return False
    return hasattr(sys.stderr, "isatty") and sys.stderr.isatty()


_COLOR = _supports_color()

_RESET = "\033[0m" if _COLOR else ""
_BOLD = "\033[1m" if _COLOR else ""
_DIM = "\033[2m" if _COLOR else ""
_GREEN = "\033[32m" if _COLOR else ""
_YELLOW = "\033[33m" if _COLOR else ""
_RED = "\033[31m" if _COLOR else ""

_LEVEL_COLORS: dict[str, str] = {
    "active": _GREEN,
    "success": _GREEN,
    "warning": _YELLOW,
    "error": _RED,
}


class ConsoleSink:
    """Sink that prints one line per render call to stderr."""

    def render_status(self, report: StatusReport) -> None:
        color = _LEVEL_COLORS.get(report.state.value, _DIM)
        print(
            f"  {color}●{_RESET} {_BOLD}{report.label}{_RESET} "
            f"{_DIM}— {report.description}{_RESET}",
            file=sys.stderr,
        )

    def render_notification(self, notification: Notification) -> None:
        color = _LEVEL_COLORS.get(notification.level, _DIM)
        print(
            f"  {color}[{notification.level}]{_RESET} {_BOLD}{notification.title}{_RESET}\n"
            f"    {notification.message}",
            file=sys.stderr,
        )

    def dismiss_notification(self, notification: Notification) -> None:
        pass

    def render_busy(self, busy: bool) -> None:
        if busy:
            print(f"  {_DIM}Working...{_RESET}", file=sys.stderr)
