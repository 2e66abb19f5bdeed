"""Virtual-time scheduler and scripted randomness for deterministic runs.

ManualScheduler keeps time in integer microseconds so deadlines compare
exactly; callbacks fire only when advance() or run_until_idle() moves the
clock past them, in deadline order (ties in scheduling order).
"""

from __future__ import annotations

import heapq
import itertools
import random
from collections import deque
from typing import Callable, Iterable, Optional

from sdvsim.engine.scheduler import Scheduler
from sdvsim.parameters import PASS_PROBABILITY

MICROS_PER_SECOND = 1_000_000


class _ManualHandle:
    def __init__(self, callback: Callable[[], None], period_us: Optional[int] = None) -> None:
        self.callback = callback
        self.period_us = period_us
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler(Scheduler):
    """Scheduler whose clock only moves when told to."""

    def __init__(self) -> None:
        self._now_us = 0
        self._queue: list[tuple[int, int, _ManualHandle]] = []
        self._sequence = itertools.count()
        self.fired = 0

    def monotonic(self) -> float:
        return self._now_us / MICROS_PER_SECOND

    @property
    def now_ms(self) -> float:
        return self._now_us / 1000

    @property
    def pending(self) -> int:
        """Number of live (not cancelled) scheduled callbacks."""
        return sum(1 for _, _, handle in self._queue if not handle.cancelled)

    def call_later(self, delay_s: float, callback: Callable[[], None]) -> _ManualHandle:
        handle = _ManualHandle(callback)
        self._push(self._now_us + max(0, round(delay_s * MICROS_PER_SECOND)), handle)
        return handle

    def call_every(self, period_s: float, callback: Callable[[], None]) -> _ManualHandle:
        period_us = round(period_s * MICROS_PER_SECOND)
        if period_us <= 0:
            raise ValueError(f"period_s must be positive, got {period_s}")
        handle = _ManualHandle(callback, period_us)
        self._push(self._now_us + period_us, handle)
        return handle

    def advance(self, ms: float) -> None:
        """Move the clock forward by ms, firing everything that falls due."""
        target_us = self._now_us + round(ms * 1000)
        while self._queue and self._queue[0][0] <= target_us:
            self._fire_next()
        self._now_us = target_us

    def run_until_idle(self, max_callbacks: int = 1_000_000) -> None:
        """Fire callbacks in order until nothing live is scheduled.

        Raises:
            RuntimeError: If more than max_callbacks fire (a timer never stops)
        """
        budget = max_callbacks
        while self._queue:
            if self._fire_next():
                budget -= 1
                if budget < 0:
                    raise RuntimeError(f"Scheduler still busy after {max_callbacks} callbacks")

    def _push(self, deadline_us: int, handle: _ManualHandle) -> None:
        heapq.heappush(self._queue, (deadline_us, next(self._sequence), handle))

    def _fire_next(self) -> bool:
        deadline_us, _, handle = heapq.heappop(self._queue)
        if handle.cancelled:
            return False
        self._now_us = deadline_us
        handle.callback()
        self.fired += 1
        if handle.period_us is not None and not handle.cancelled:
            self._push(deadline_us + handle.period_us, handle)
        return True


class ScriptedRandom(random.Random):
    """Random source whose random() replays a fixed script.

    Once the script is exhausted, random() keeps returning default. Methods
    built on random() (uniform, choice, randint) follow the script too.
    """

    def __init__(self, values: Iterable[float] = (), default: float = 0.0) -> None:
        super().__init__(0)
        self._values = deque(values)
        self.default = default

    def random(self) -> float:
        if self._values:
            return self._values.popleft()
        return self.default

    @classmethod
    def outcomes(
        cls,
        passes: Iterable[bool],
        pass_probability: float = PASS_PROBABILITY,
    ) -> ScriptedRandom:
        """Script that yields the given pass/fail judgments, then passes."""
        values = [0.0 if passed else pass_probability for passed in passes]
        return cls(values, default=0.0)
