"""Shared type definitions for beacon."""

from collections.abc import Callable, Mapping
from typing import Any, Literal

# Per-tab session token
type SessionID = str

# Telemetry event name (e.g., "page_view", "button_click")
type EventName = str

# Free-form event payload
type Payload = Mapping[str, Any]

# Severity of a transient notification
type NotificationLevel = Literal["success", "warning", "error"]

# Resource kinds reported by the performance observer
type ResourceKind = Literal["image", "stylesheet", "script"]

# Async zero-argument job driven by the scheduler
type PeriodicJob = Callable[[], Any]
