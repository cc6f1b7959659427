"""Tests for beacon.streams — subscription model for host events."""

from __future__ import annotations

import pytest

from beacon.streams import EventStream


class TestEventStream:
    def test_emit_reaches_subscribers_in_order(self) -> None:
        stream: EventStream[int] = EventStream()
        seen: list[tuple[str, int]] = []
        stream.subscribe(lambda i: seen.append(("a", i)))
        stream.subscribe(lambda i: seen.append(("b", i)))

        assert stream.emit(1) == 2
        stream.emit(2)
        assert seen == [("a", 1), ("b", 1), ("a", 2), ("b", 2)]

    def test_late_subscriber_misses_earlier_entries(self) -> None:
        stream: EventStream[str] = EventStream()
        stream.emit("early")
        seen: list[str] = []
        stream.subscribe(seen.append)
        stream.emit("late")
        assert seen == ["late"]

    def test_unsubscribe_stops_delivery(self) -> None:
        stream: EventStream[int] = EventStream()
        seen: list[int] = []
        sub = stream.subscribe(seen.append)
        stream.emit(1)
        sub.unsubscribe()
        stream.emit(2)

        assert seen == [1]
        assert not sub.active
        assert stream.subscriber_count == 0

    def test_unsubscribe_twice_is_harmless(self) -> None:
        stream: EventStream[int] = EventStream()
        sub = stream.subscribe(lambda _: None)
        sub.unsubscribe()
        sub.unsubscribe()
        assert stream.subscriber_count == 0

    def test_close_drops_subscribers_and_entries(self) -> None:
        stream: EventStream[int] = EventStream()
        seen: list[int] = []
        sub = stream.subscribe(seen.append)
        stream.close()

        assert stream.closed
        assert not sub.active
        assert stream.emit(1) == 0
        assert seen == []

    def test_subscribe_after_close_raises(self) -> None:
        stream: EventStream[int] = EventStream()
        stream.close()
        with pytest.raises(RuntimeError, match="closed"):
            stream.subscribe(lambda _: None)
