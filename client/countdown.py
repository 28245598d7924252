"""Restartable wall-clock countdown driven by an asyncio ticker task."""

from __future__ import annotations
import asyncio
import math
import time
from typing import Callable, Optional

from shared.constants import TICK_SECONDS


class Countdown:
    """Counts down to an absolute deadline.

    Remaining time is recomputed from the deadline on every tick, so a late or
    skipped tick never accumulates drift. At zero the countdown cancels itself
    and calls ``on_expire`` exactly once.

    ``start()`` schedules the ticker on the running event loop. Outside a loop
    the countdown is armed but idle, and ``tick()`` can be called by hand.
    """

    def __init__(self, name: str,
                 on_tick: Optional[Callable[[int], None]] = None,
                 on_expire: Optional[Callable[[], None]] = None,
                 tick_seconds: float = TICK_SECONDS,
                 clock: Callable[[], float] = time.monotonic):
        self.name = name
        self.on_tick = on_tick
        self.on_expire = on_expire
        self._tick_seconds = tick_seconds
        self._clock = clock
        self._deadline: float | None = None
        self._task: asyncio.Task | None = None
        self.last_rendered_seconds: int | None = None

    @property
    def active(self) -> bool:
        return self._deadline is not None

    @property
    def deadline(self) -> float | None:
        return self._deadline

    @property
    def remaining(self) -> int:
        """Last rendered whole seconds; 0 once expired or never started."""
        return self.last_rendered_seconds or 0

    @property
    def ticking(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self, duration_seconds: float):
        self.cancel()
        self._deadline = self._clock() + duration_seconds
        self.tick()
        if not self.active:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        self._task = loop.create_task(self._run())

    def cancel(self):
        self._stop_ticker()
        self._deadline = None
        self.last_rendered_seconds = None

    def tick(self) -> int:
        if self._deadline is None:
            return self.remaining
        remaining = max(0, math.ceil(self._deadline - self._clock()))
        if remaining != self.last_rendered_seconds:
            self.last_rendered_seconds = remaining
            if self.on_tick:
                self.on_tick(remaining)
        if remaining == 0:
            self._stop_ticker()
            self._deadline = None
            print(f"[timer] {self.name} expired")
            if self.on_expire:
                self.on_expire()
        return remaining

    def _stop_ticker(self):
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()

    async def _run(self):
        while self._deadline is not None:
            await asyncio.sleep(self._tick_seconds)
            self.tick()
