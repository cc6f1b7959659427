"""Tests for beacon.monitor.redirect — redirect probe classification."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from beacon.monitor.notifications import BusyIndicator, NotificationCenter
from beacon.monitor.redirect import (
    MISMATCH_DETAIL,
    RedirectCheckResult,
    RedirectOutcome,
    RedirectVerifier,
)
from beacon.render import RecordingSink
from tests.conftest import fail_with, mock_client, respond

SOURCE = "https://old.example.com/login"


def _verifier(
    client: httpx.AsyncClient, sink: RecordingSink, *, ttl: float = 5.0, **kwargs: object,
) -> RedirectVerifier:
    return RedirectVerifier(
        client,
        NotificationCenter(sink, ttl=ttl),
        BusyIndicator(sink),
        **kwargs,  # type: ignore[arg-type]
    )


class TestClassification:
    @pytest.mark.asyncio
    async def test_302_to_expected_domain_succeeds(self, sink: RecordingSink) -> None:
        handler = respond(302, location="https://good.example.com/path")
        async with mock_client(handler) as client:
            result = await _verifier(client, sink).check(SOURCE, "good.example.com")
        assert result == RedirectCheckResult(RedirectOutcome.SUCCESS, "https://good.example.com/path")
        assert result.ok

    @pytest.mark.asyncio
    async def test_301_to_expected_domain_succeeds(self, sink: RecordingSink) -> None:
        async with mock_client(respond(301, location="https://good.example.com/")) as client:
            result = await _verifier(client, sink).check(SOURCE, "good.example.com")
        assert result.outcome is RedirectOutcome.SUCCESS

    @pytest.mark.asyncio
    @pytest.mark.parametrize("code", [301, 302])
    async def test_wrong_domain_is_mismatch(self, sink: RecordingSink, code: int) -> None:
        async with mock_client(respond(code, location="https://evil.test/")) as client:
            result = await _verifier(client, sink).check(SOURCE, "good.example.com")
        assert result == RedirectCheckResult(RedirectOutcome.DOMAIN_MISMATCH, MISMATCH_DETAIL)

    @pytest.mark.asyncio
    async def test_missing_location_is_mismatch(self, sink: RecordingSink) -> None:
        async with mock_client(respond(302)) as client:
            result = await _verifier(client, sink).check(SOURCE, "good.example.com")
        assert result.outcome is RedirectOutcome.DOMAIN_MISMATCH

    @pytest.mark.asyncio
    @pytest.mark.parametrize("code", [200, 204, 303, 307, 404, 500])
    async def test_other_status_is_unexpected(self, sink: RecordingSink, code: int) -> None:
        async with mock_client(respond(code, location="https://good.example.com/")) as client:
            result = await _verifier(client, sink).check(SOURCE, "good.example.com")
        assert result == RedirectCheckResult(RedirectOutcome.UNEXPECTED_STATUS, str(code))

    @pytest.mark.asyncio
    async def test_network_error_is_failure(self, sink: RecordingSink) -> None:
        async with mock_client(fail_with(httpx.ConnectError, "Name or service not known")) as client:
            result = await _verifier(client, sink).check(SOURCE, "good.example.com")
        assert result == RedirectCheckResult(
            RedirectOutcome.NETWORK_FAILURE, "Name or service not known",
        )

    @pytest.mark.asyncio
    async def test_probe_is_head_without_following(self, sink: RecordingSink) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            if len(seen) > 1:
                return httpx.Response(200)
            return httpx.Response(302, headers={"location": "https://good.example.com/"})

        async with mock_client(handler) as client:
            await _verifier(client, sink).check(SOURCE, "good.example.com")

        assert len(seen) == 1
        assert seen[0].method == "HEAD"
        assert str(seen[0].url) == SOURCE


class TestTestRedirect:
    @pytest.mark.asyncio
    async def test_success_notification(self, sink: RecordingSink) -> None:
        async with mock_client(respond(302, location="https://good.example.com/path")) as client:
            await _verifier(client, sink).test_redirect(SOURCE, "good.example.com")

        [note] = sink.notifications
        assert note.level == "success"
        assert note.title == "Redirect working correctly!"
        assert note.message == "Redirected to: https://good.example.com/path"

    @pytest.mark.asyncio
    async def test_unexpected_status_notification(self, sink: RecordingSink) -> None:
        async with mock_client(respond(200)) as client:
            result = await _verifier(client, sink).test_redirect(SOURCE, "good.example.com")

        assert result == RedirectCheckResult(RedirectOutcome.UNEXPECTED_STATUS, "200")
        [note] = sink.notifications
        assert (note.level, note.title, note.message) == (
            "warning", "Unexpected response", "HTTP Status: 200",
        )

    @pytest.mark.asyncio
    async def test_failure_still_notifies(self, sink: RecordingSink) -> None:
        async with mock_client(fail_with(httpx.ReadTimeout, "timed out")) as client:
            await _verifier(client, sink).test_redirect(SOURCE, "x")

        [note] = sink.notifications
        assert (note.level, note.title, note.message) == ("error", "Test failed", "timed out")

    @pytest.mark.asyncio
    async def test_mismatch_notification(self, sink: RecordingSink) -> None:
        async with mock_client(respond(301, location="https://evil.test/")) as client:
            await _verifier(client, sink).test_redirect(SOURCE, "good.example.com")

        [note] = sink.notifications
        assert (note.level, note.title, note.message) == ("error", "Redirect failed", MISMATCH_DETAIL)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "handler",
        [respond(302, location="https://good.example.com/"), respond(500),
         fail_with(httpx.ConnectError, "down")],
    )
    async def test_busy_cleared_on_every_path(self, sink: RecordingSink, handler: object) -> None:
        async with mock_client(handler) as client:  # type: ignore[arg-type]
            await _verifier(client, sink).test_redirect(SOURCE, "good.example.com")
        assert sink.busy_changes == [True, False]

    @pytest.mark.asyncio
    async def test_non_http_error_is_network_failure(self, sink: RecordingSink) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            msg = "connection reset by peer"
            raise OSError(msg)

        async with mock_client(handler) as client:
            result = await _verifier(client, sink).test_redirect(SOURCE, "x")

        assert result == RedirectCheckResult(
            RedirectOutcome.NETWORK_FAILURE, "connection reset by peer",
        )
        [note] = sink.notifications
        assert (note.level, note.title) == ("error", "Test failed")
        assert sink.busy_changes == [True, False]

    @pytest.mark.asyncio
    async def test_closed_client_is_network_failure(self, sink: RecordingSink) -> None:
        client = mock_client(respond(302, location="https://x.test/"))
        await client.aclose()
        result = await _verifier(client, sink).test_redirect(SOURCE, "x")
        assert result.outcome is RedirectOutcome.NETWORK_FAILURE
        assert len(sink.notifications) == 1
        assert sink.busy_changes == [True, False]

    @pytest.mark.asyncio
    async def test_defaults_from_construction(self, sink: RecordingSink) -> None:
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(str(request.url))
            return httpx.Response(302, headers={"location": "https://new.test/"})

        async with mock_client(handler) as client:
            verifier = _verifier(client, sink, source_url=SOURCE, expected_target="new.test")
            result = await verifier.test_redirect()

        assert seen == [SOURCE]
        assert result.ok

    @pytest.mark.asyncio
    async def test_notification_removed_after_ttl(self, sink: RecordingSink) -> None:
        async with mock_client(respond(200)) as client:
            await _verifier(client, sink, ttl=0.02).test_redirect(SOURCE, "x")
        assert len(sink.notifications) == 1
        await asyncio.sleep(0.04)
        assert sink.notifications == []

    @pytest.mark.asyncio
    async def test_concurrent_tests_have_independent_notifications(
        self, sink: RecordingSink,
    ) -> None:
        async with mock_client(respond(200)) as client:
            verifier = _verifier(client, sink, ttl=0.05)
            await verifier.test_redirect(SOURCE, "x")
            await asyncio.sleep(0.03)
            await verifier.test_redirect(SOURCE, "x")
            first, second = sink.shown

            await asyncio.sleep(0.035)
            assert sink.notifications == [second]
            await asyncio.sleep(0.04)
            assert sink.notifications == []
            assert sink.dismissed == [first, second]

    @pytest.mark.asyncio
    async def test_overlapping_tests_keep_busy_until_last(self, sink: RecordingSink) -> None:
        gate = asyncio.Event()

        async def handler(request: httpx.Request) -> httpx.Response:
            await gate.wait()
            return httpx.Response(200)

        async with mock_client(handler) as client:  # type: ignore[arg-type]
            verifier = _verifier(client, sink)
            runs = [asyncio.create_task(verifier.test_redirect(SOURCE, "x")) for _ in range(2)]
            await asyncio.sleep(0.01)
            assert sink.busy_changes == [True]
            gate.set()
            await asyncio.gather(*runs)

        assert sink.busy_changes == [True, False]
        assert len(sink.shown) == 2
