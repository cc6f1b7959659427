"""Service monitoring — health polling and redirect verification.

Quick Start:
    >>> from beacon.monitor import StatusMonitor
    >>> from beacon.render import RecordingSink
    >>> monitor = StatusMonitor(client, RecordingSink(), url="https://example.com/health")
    >>> task = monitor.start()        # poll now, then every 30 s
    >>> task.stop()                   # on page teardown

"""

from beacon.monitor.notifications import BusyIndicator, Notification, NotificationCenter
from beacon.monitor.redirect import RedirectCheckResult, RedirectOutcome, RedirectVerifier
from beacon.monitor.scheduler import PeriodicTask
from beacon.monitor.status import StatusMonitor, StatusReport, StatusState

__all__ = [
    "BusyIndicator",
    "Notification",
    "NotificationCenter",
    "PeriodicTask",
    "RedirectCheckResult",
    "RedirectOutcome",
    "RedirectVerifier",
    "StatusMonitor",
    "StatusReport",
    "StatusState",
]
