"""Concurrent checkpoint waiters.

One asyncio task is spawned per checkpoint, all of them before the first
one is awaited. Every task sleeps until its own absolute deadline
``start + (total - checkpoint)`` on a shared clock, so spawn overhead never
accumulates into later checkpoints, and then calls the checkpoint callback
once. The tasks share no mutable state besides the list recording the order
in which they fired, which is only appended to from the single event loop.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from datetime import timedelta
from typing import Any, Awaitable, Callable, List, Optional, Sequence, Union

from core.errors import ScheduleInvariantError
from core.timing.clock import Clock, LoopClock

logger = logging.getLogger(__name__)

CheckpointCallback = Callable[[timedelta], Union[None, Awaitable[Any]]]


class WaitCoordinator:
    def __init__(self, clock: Optional[Clock] = None) -> None:
        self.clock: Clock = clock if clock is not None else LoopClock()

    async def run(
        self,
        total: timedelta,
        checkpoints: Sequence[timedelta],
        on_checkpoint: CheckpointCallback,
    ) -> List[timedelta]:
        """Wait out ``total`` and fire ``on_checkpoint`` for every checkpoint.

        Returns the checkpoints in the order they fired. Raises
        :class:`ScheduleInvariantError` if a checkpoint lies beyond ``total``.
        """

        start = self.clock.now()
        fired: List[timedelta] = []

        async def _wait(checkpoint: timedelta) -> None:
            remaining = total - checkpoint
            if remaining < timedelta(0):
                raise ScheduleInvariantError(
                    f"checkpoint {checkpoint} lies beyond the timer length {total}"
                )
            logger.debug("checkpoint %s due after %s", checkpoint, remaining)
            await self.clock.sleep_until(start + remaining.total_seconds())
            result = on_checkpoint(checkpoint)
            if inspect.isawaitable(result):
                await result
            fired.append(checkpoint)

        tasks = [
            asyncio.create_task(_wait(checkpoint), name=f"checkpoint_{int(checkpoint.total_seconds())}s")
            for checkpoint in checkpoints
        ]
        try:
            await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
        return fired


__all__ = ["WaitCoordinator", "CheckpointCallback"]
