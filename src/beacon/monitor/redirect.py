"""Redirect verifier — one-shot probe of a redirecting URL.

Sends a single ``HEAD`` request with redirect following disabled and
classifies the immediate response, in order:

1. request did not complete          -> NetworkFailure (detail: error message)
2. 301/302 and Location contains the
   expected substring                 -> Success (detail: the Location)
3. 301/302 otherwise                  -> DomainMismatch (detail: fixed message)
4. any other status                   -> UnexpectedStatus (detail: the code)

Every call raises the busy indicator for its duration and leaves a
notification on the page that removes itself after the configured TTL.

"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from beacon._errors import NetworkFailure, ProtocolMismatch
from beacon.monitor.notifications import Notification

if TYPE_CHECKING:
    import httpx

    from beacon._types import NotificationLevel
    from beacon.monitor.notifications import BusyIndicator, NotificationCenter


REDIRECT_STATUSES = frozenset({301, 302})
MISMATCH_DETAIL = "Target domain not found in redirect URL"


class RedirectOutcome(Enum):
    SUCCESS = "success"
    DOMAIN_MISMATCH = "domain_mismatch"
    UNEXPECTED_STATUS = "unexpected_status"
    NETWORK_FAILURE = "network_failure"


# outcome -> (notification level, notification title)
_PRESENTATION: dict[RedirectOutcome, tuple[NotificationLevel, str]] = {
    RedirectOutcome.SUCCESS: ("success", "Redirect working correctly!"),
    RedirectOutcome.DOMAIN_MISMATCH: ("error", "Redirect failed"),
    RedirectOutcome.UNEXPECTED_STATUS: ("warning", "Unexpected response"),
    RedirectOutcome.NETWORK_FAILURE: ("error", "Test failed"),
}


@dataclass(frozen=True, slots=True)
class RedirectCheckResult:
    """Outcome of one redirect probe."""

    outcome: RedirectOutcome
    detail: str

    @property
    def ok(self) -> bool:
        return self.outcome is RedirectOutcome.SUCCESS

    def to_notification(self) -> Notification:
        level, title = _PRESENTATION[self.outcome]
        if self.outcome is RedirectOutcome.SUCCESS:
            message = f"Redirected to: {self.detail}"
        elif self.outcome is RedirectOutcome.UNEXPECTED_STATUS:
            message = f"HTTP Status: {self.detail}"
        else:
            message = self.detail
        return Notification(level=level, title=title, message=message)


def inspect_redirect(status_code: int, location: str | None, expected: str) -> str:
    """Validate a probe response and return the redirect location.

    Raises:
        ProtocolMismatch: Not a 301/302, or the Location header does not
            contain *expected*.

    """
    if status_code not in REDIRECT_STATUSES:
        msg = str(status_code)
        raise ProtocolMismatch(msg, status_code=status_code, location=location)
    if not location or expected not in location:
        raise ProtocolMismatch(MISMATCH_DETAIL, status_code=status_code, location=location)
    return location


def classify_mismatch(exc: ProtocolMismatch) -> RedirectCheckResult:
    if exc.status_code in REDIRECT_STATUSES:
        return RedirectCheckResult(RedirectOutcome.DOMAIN_MISMATCH, MISMATCH_DETAIL)
    return RedirectCheckResult(RedirectOutcome.UNEXPECTED_STATUS, str(exc.status_code))


async def probe(client: httpx.AsyncClient, url: str, timeout: float) -> httpx.Response:
    """Send one ``HEAD`` to *url* without following redirects.

    Raises:
        NetworkFailure: The request did not complete.

    """
    try:
        return await client.head(url, follow_redirects=False, timeout=timeout)
    except Exception as exc:
        raise NetworkFailure(str(exc) or type(exc).__name__) from exc


class RedirectVerifier:
    """Checks that a URL redirects to the expected destination.

    Args:
        client: HTTP client used for the probe.
        notifications: Shows the result notification.
        busy: In-progress indicator held for the duration of a check.
        source_url: Default URL to probe.
        expected_target: Default substring the Location must contain.
        timeout: Seconds before the probe counts as failed.

    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        notifications: NotificationCenter,
        busy: BusyIndicator,
        *,
        source_url: str = "",
        expected_target: str = "",
        timeout: float = 10.0,
    ) -> None:
        self._client = client
        self._notifications = notifications
        self._busy = busy
        self._source_url = source_url
        self._expected_target = expected_target
        self._timeout = timeout

    async def check(self, source_url: str, expected_target: str) -> RedirectCheckResult:
        """Probe and classify, without any page side effects."""
        try:
            response = await probe(self._client, source_url, self._timeout)
            location = inspect_redirect(
                response.status_code,
                response.headers.get("location"),
                expected_target,
            )
        except NetworkFailure as exc:
            return RedirectCheckResult(RedirectOutcome.NETWORK_FAILURE, str(exc))
        except ProtocolMismatch as exc:
            return classify_mismatch(exc)
        return RedirectCheckResult(RedirectOutcome.SUCCESS, location)

    async def test_redirect(
        self,
        source_url: str | None = None,
        expected_target: str | None = None,
    ) -> RedirectCheckResult:
        """Run one check with busy indicator and result notification.

        Arguments default to the URL and target given at construction.

        """
        url = source_url if source_url is not None else self._source_url
        expected = expected_target if expected_target is not None else self._expected_target

        self._busy.acquire()
        try:
            result = await self.check(url, expected)
        finally:
            self._busy.release()

        self._notifications.show(result.to_notification())
        return result
