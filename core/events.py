"""Core timer models shared across the project."""

from __future__ import annotations

from datetime import timedelta
from typing import Optional, Tuple

import time

import ulid
from pydantic import BaseModel, ConfigDict, Field

from core.timing.duration import format_duration


def now_ts_ms() -> int:
    """Return the current timestamp in milliseconds."""

    return int(time.time() * 1000)


def new_session_id() -> str:
    """Generate a ULID based identifier for timer sessions."""

    return str(ulid.new())


class TimerSession(BaseModel):
    """One run of the timer, from resolved duration to end action."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_session_id)
    created_ts_ms: int = Field(default_factory=now_ts_ms)
    title: str
    total: timedelta
    checkpoints: Tuple[timedelta, ...]
    identifier: Optional[str] = None
    command: Optional[str] = None

    def describe(self, checkpoint: timedelta) -> str:
        """Notification body for ``checkpoint``."""

        if checkpoint <= timedelta(0):
            return f"{self.title} is over, time's up!"
        return f"{self.title} will end in {format_duration(checkpoint)}"


class CheckpointEvent(BaseModel):
    """Record of a checkpoint that fired."""

    session: str
    ts_ms: int = Field(default_factory=now_ts_ms)
    checkpoint: timedelta
    body: str
    final: bool = False


__all__ = ["TimerSession", "CheckpointEvent", "now_ts_ms", "new_session_id"]
