"""Timer scheduling for the simulation engine.

The sequencer and the motion generator never sleep. They ask a Scheduler to
call them back later, either once (step resolution) or periodically (motion
ticks). Two implementations exist:

- AsyncioScheduler: real time on the running asyncio event loop
- ManualScheduler (sdvsim.testing): virtual time advanced explicitly
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from typing import Callable, Optional, Protocol


class TimerHandle(Protocol):
    """Anything that can cancel a scheduled callback."""

    def cancel(self) -> None: ...


class Scheduler(ABC):
    """Source of time and deferred callbacks."""

    @abstractmethod
    def monotonic(self) -> float:
        """Current time in seconds on this scheduler's clock."""

    @abstractmethod
    def call_later(self, delay_s: float, callback: Callable[[], None]) -> TimerHandle:
        """Run callback once after delay_s seconds."""

    @abstractmethod
    def call_every(self, period_s: float, callback: Callable[[], None]) -> TimerHandle:
        """Run callback every period_s seconds until the handle is cancelled."""


class _RepeatingHandle:
    """Re-arms itself on the loop after each call until cancelled."""

    def __init__(
        self,
        loop: asyncio.AbstractEventLoop,
        period_s: float,
        callback: Callable[[], None],
    ) -> None:
        self._loop = loop
        self._period_s = period_s
        self._callback = callback
        self._cancelled = False
        self._next_deadline = loop.time() + period_s
        self._handle: Optional[asyncio.TimerHandle] = loop.call_at(self._next_deadline, self._fire)

    def _fire(self) -> None:
        if self._cancelled:
            return
        self._callback()
        if self._cancelled:
            return
        # Schedule against the ideal deadline so slow callbacks do not drift.
        self._next_deadline = max(self._next_deadline + self._period_s, self._loop.time())
        self._handle = self._loop.call_at(self._next_deadline, self._fire)

    def cancel(self) -> None:
        self._cancelled = True
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class AsyncioScheduler(Scheduler):
    """Scheduler backed by an asyncio event loop.

    Args:
        loop: Loop to schedule on. If None, the running loop is looked up on
            each call, so the scheduler can be created before the loop starts.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is not None:
            return self._loop
        return asyncio.get_running_loop()

    def monotonic(self) -> float:
        return self.loop.time()

    def call_later(self, delay_s: float, callback: Callable[[], None]) -> TimerHandle:
        return self.loop.call_later(max(0.0, delay_s), callback)

    def call_every(self, period_s: float, callback: Callable[[], None]) -> TimerHandle:
        if period_s <= 0:
            raise ValueError(f"period_s must be positive, got {period_s}")
        return _RepeatingHandle(self.loop, period_s, callback)
