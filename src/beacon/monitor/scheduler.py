"""Periodic task — a cancellable fixed-rate job on the event loop.

The job runs once immediately and then every ``interval`` seconds.  Ticks
are anchored to the start time, so a slow job does not push later ticks
back; a job that overruns its slot makes the next tick run right away.
A failing tick is reported to stderr and the schedule carries on.

Stopping cancels the timer only.  A tick already running is left to
finish, and no further tick starts after it.

"""

from __future__ import annotations

import asyncio
import inspect
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from beacon._types import PeriodicJob


class PeriodicTask:
    """Owned handle for a recurring job.

    Usage::

        task = PeriodicTask(monitor.poll, 30.0, name="status-poll").start()
        ...
        task.stop()              # or: await task.aclose()

    """

    __slots__ = ("_in_tick", "_interval", "_job", "_name", "_stopping", "_task", "_ticks")

    def __init__(self, job: PeriodicJob, interval: float, *, name: str = "periodic") -> None:
        if interval <= 0:
            msg = f"interval must be positive, got {interval!r}"
            raise ValueError(msg)
        self._job = job
        self._interval = interval
        self._name = name
        self._task: asyncio.Task[None] | None = None
        self._ticks = 0
        self._in_tick = False
        self._stopping = False

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def ticks(self) -> int:
        """Number of ticks started so far."""
        return self._ticks

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> PeriodicTask:
        """Schedule the job on the running loop.  Returns self."""
        self._stopping = False
        if self.running:
            return self
        self._task = asyncio.get_running_loop().create_task(self._run(), name=self._name)
        return self

    def stop(self) -> None:
        """Stop scheduling ticks.  A tick already running completes first."""
        self._stopping = True
        if self._task is not None and not self._task.done() and not self._in_tick:
            self._task.cancel()

    async def aclose(self) -> None:
        """Stop the schedule and wait for the task to finish."""
        task = self._task
        self.stop()
        if task is not None:
            try:
                await task
            except asyncio.CancelledError:
                pass

    async def _tick(self) -> None:
        self._ticks += 1
        self._in_tick = True
        try:
            result = self._job()
            if inspect.isawaitable(result):
                await result
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            print(f"  {self._name} error: {exc}", file=sys.stderr)
        finally:
            self._in_tick = False

    async def _run(self) -> None:
        loop = asyncio.get_running_loop()
        next_tick = loop.time()
        while not self._stopping:
            await self._tick()
            if self._stopping:
                break

            next_tick += self._interval
            delay = next_tick - loop.time()
            if delay < 0:
                next_tick = loop.time()
                delay = 0
            await asyncio.sleep(delay)
