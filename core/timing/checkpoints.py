from __future__ import annotations

from datetime import timedelta
from typing import Iterable, Tuple

# Must stay sorted in descending order.
DEFAULT_THRESHOLDS: Tuple[timedelta, ...] = (
    timedelta(minutes=10),
    timedelta(minutes=5),
    timedelta(minutes=1),
    timedelta(seconds=10),
)

FINAL_CHECKPOINT = timedelta(0)


def plan(
    total: timedelta,
    thresholds: Iterable[timedelta] = DEFAULT_THRESHOLDS,
) -> Tuple[timedelta, ...]:
    """Return the checkpoints to schedule for a timer of length ``total``.

    Thresholds at or above ``total`` are dropped; the terminal zero
    checkpoint is always appended.
    """

    staged = tuple(t for t in thresholds if FINAL_CHECKPOINT < t < total)
    return staged + (FINAL_CHECKPOINT,)


__all__ = ["DEFAULT_THRESHOLDS", "FINAL_CHECKPOINT", "plan"]
