"""Tests for beacon.render — headless and console sinks."""

from __future__ import annotations

import io
import sys
from unittest.mock import patch

from beacon.monitor.notifications import Notification
from beacon.monitor.status import StatusState, report_for
from beacon.render import ConsoleSink, RecordingSink


class TestRecordingSink:
    def test_neutral_until_first_status(self) -> None:
        sink = RecordingSink()
        assert sink.status is None
        assert sink.busy is False

    def test_status_history(self) -> None:
        sink = RecordingSink()
        sink.render_status(report_for(StatusState.ERROR))
        sink.render_status(report_for(StatusState.ACTIVE))
        assert sink.status == report_for(StatusState.ACTIVE)
        assert len(sink.statuses) == 2

    def test_rerendering_same_state_is_harmless(self) -> None:
        sink = RecordingSink()
        report = report_for(StatusState.WARNING)
        sink.render_status(report)
        sink.render_status(report)
        assert sink.status == report

    def test_notification_dismissal(self) -> None:
        sink = RecordingSink()
        note = Notification(level="error", title="t", message="m")
        sink.render_notification(note)
        sink.dismiss_notification(note)
        assert sink.notifications == []
        assert sink.shown == [note]
        assert sink.dismissed == [note]


class TestConsoleSink:
    def _capture(self, call: str, *args: object) -> str:
        buf = io.StringIO()
        with patch.object(sys, "stderr", buf):
            getattr(ConsoleSink(), call)(*args)
        return buf.getvalue()

    def test_status_line(self) -> None:
        out = self._capture("render_status", report_for(StatusState.ACTIVE))
        assert "Service Status: Active" in out
        assert "All systems operational" in out

    def test_notification_lines(self) -> None:
        note = Notification(level="warning", title="Unexpected response", message="HTTP Status: 200")
        out = self._capture("render_notification", note)
        assert "[warning]" in out
        assert "Unexpected response" in out
        assert "HTTP Status: 200" in out

    def test_busy_only_prints_when_raised(self) -> None:
        assert "Working" in self._capture("render_busy", True)
        assert self._capture("render_busy", False) == ""

    def test_dismiss_is_silent(self) -> None:
        note = Notification(level="success", title="t", message="m")
        assert self._capture("dismiss_notification", note) == ""
