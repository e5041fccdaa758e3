"""Clocks used by the wait coordinator.

Deadlines are absolute instants on the clock's own monotonic timeline
(seconds, float). ``sleep_until`` suspends the calling task until the
deadline is reached.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import timedelta
from typing import List, Protocol

from core.timing.duration import format_duration

logger = logging.getLogger(__name__)


class Clock(Protocol):
    def now(self) -> float: ...

    async def sleep_until(self, deadline: float) -> None: ...


class LoopClock:
    """Real clock backed by the running event loop's monotonic time."""

    def now(self) -> float:
        return asyncio.get_running_loop().time()

    async def sleep_until(self, deadline: float) -> None:
        delay = deadline - self.now()
        if delay > 0:
            await asyncio.sleep(delay)


@dataclass
class DryRunClock:
    """Clock that reports the sleeps it would perform instead of waiting.

    ``time_scale`` shrinks each wait instead of skipping it, which keeps the
    relative firing order of concurrent waiters (``0`` only yields).
    """

    time_scale: float = 0.0
    started: float = 0.0
    deadlines: List[float] = field(default_factory=list)

    def now(self) -> float:
        return self.started

    async def sleep_until(self, deadline: float) -> None:
        self.deadlines.append(deadline)
        wait = deadline - self.started
        logger.info("==> sleeping for %s", format_duration(timedelta(seconds=wait)) or "0s")
        await asyncio.sleep(max(wait, 0.0) * self.time_scale)

    @property
    def elapsed(self) -> float:
        """Virtual time covered once every recorded sleep has finished."""

        return max(self.deadlines, default=self.started) - self.started


__all__ = ["Clock", "LoopClock", "DryRunClock"]
