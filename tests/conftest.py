"""Shared test fixtures for beacon."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import httpx
import pytest

from beacon.render import RecordingSink

type Handler = Callable[[httpx.Request], httpx.Response]


def mock_client(handler: Handler) -> httpx.AsyncClient:
    """An AsyncClient whose every request is answered by *handler*."""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def respond(status_code: int, **headers: str) -> Handler:
    """Handler returning a fixed status and headers."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, headers=headers)

    return handler


def fail_with(exc_type: type[httpx.RequestError], message: str) -> Handler:
    """Handler raising a transport error."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise exc_type(message, request=request)

    return handler


class StepClock:
    """Deterministic clock advancing by *step* on every call."""

    def __init__(self, start: datetime | None = None, step: timedelta = timedelta(seconds=1)) -> None:
        self.now = start or datetime(2026, 1, 2, 3, 4, 5, tzinfo=UTC)
        self.step = step

    def __call__(self) -> datetime:
        current = self.now
        self.now = self.now + self.step
        return current


@pytest.fixture
def sink() -> RecordingSink:
    """A fresh headless render sink."""
    return RecordingSink()


@pytest.fixture
def clock() -> StepClock:
    return StepClock()
