"""Cancellable scheduled tasks used for quiet-period timers."""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Protocol


class ScheduledTask(Protocol):
    """Owning handle for one pending callback."""

    def cancel(self) -> None:
        """Drop the callback. Safe to call any number of times."""
        ...

    @property
    def cancelled(self) -> bool: ...


class Scheduler(Protocol):
    """Anything able to run a callback once after ``delay_ms``."""

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> ScheduledTask:
        ...


@dataclass
class PendingTimer:
    deadline: float
    generation: int
    callback: Callable[[], None]
    owner: Optional["PollingScheduler"] = field(default=None, repr=False)
    cancelled: bool = False
    fired: bool = False

    def cancel(self) -> None:
        if self.cancelled or self.fired:
            return
        self.cancelled = True
        if self.owner is not None:
            self.owner._forget(self.generation)


class PollingScheduler:
    """Deadline-based timers fired from the host's own tick.

    The host calls ``process_due`` periodically (a UI interval, a game loop,
    or a test advancing a fake clock). Timers fire in deadline order; ties
    keep scheduling order.
    """

    def __init__(self, *, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._timers: Dict[int, PendingTimer] = {}
        self._generation = 0

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> PendingTimer:
        if delay_ms < 0:
            raise ValueError("delay_ms cannot be negative")
        self._generation += 1
        timer = PendingTimer(
            deadline=self._clock() + delay_ms / 1000.0,
            generation=self._generation,
            callback=callback,
            owner=self,
        )
        self._timers[timer.generation] = timer
        return timer

    @property
    def pending_count(self) -> int:
        return len(self._timers)

    def next_deadline(self) -> Optional[float]:
        if not self._timers:
            return None
        return min(timer.deadline for timer in self._timers.values())

    def process_due(self) -> int:
        """Fire every timer whose deadline has passed; return how many ran."""

        now = self._clock()
        due = sorted(
            (timer for timer in self._timers.values() if timer.deadline <= now),
            key=lambda timer: (timer.deadline, timer.generation),
        )
        fired = 0
        for timer in due:
            # An earlier callback may have cancelled this one.
            if self._timers.pop(timer.generation, None) is None:
                continue
            timer.fired = True
            timer.callback()
            fired += 1
        return fired

    def _forget(self, generation: int) -> None:
        self._timers.pop(generation, None)


class AsyncioTask:
    """Wraps ``asyncio.TimerHandle`` so ``cancelled`` also covers fired timers."""

    def __init__(self, loop: asyncio.AbstractEventLoop, delay_ms: int, callback: Callable[[], None]) -> None:
        self._callback = callback
        self._fired = False
        self._handle = loop.call_later(delay_ms / 1000.0, self._run)

    def _run(self) -> None:
        self._fired = True
        self._callback()

    def cancel(self) -> None:
        if not self._fired:
            self._handle.cancel()

    @property
    def cancelled(self) -> bool:
        return self._handle.cancelled()

    @property
    def fired(self) -> bool:
        return self._fired


class AsyncioScheduler:
    """Runs quiet-period callbacks on an asyncio event loop."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def _resolve_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> AsyncioTask:
        if delay_ms < 0:
            raise ValueError("delay_ms cannot be negative")
        return AsyncioTask(self._resolve_loop(), delay_ms, callback)


__all__ = [
    "AsyncioScheduler",
    "AsyncioTask",
    "PendingTimer",
    "PollingScheduler",
    "ScheduledTask",
    "Scheduler",
]
