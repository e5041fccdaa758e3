"""Error taxonomy shared by the timer core, runtime and CLI."""

from __future__ import annotations


class TimerError(Exception):
    """Base class for every failure the timer reports to the user."""


class ReferenceParseError(TimerError):
    """The reference text could not be turned into a duration."""


class InvalidReference(ReferenceParseError):
    """Reference text does not match the grammar of the selected mode."""


class InvalidNumber(ReferenceParseError):
    """A matched numeric component overflows or cannot be parsed."""


class Unsupported(ReferenceParseError):
    """Reference form that is reserved but not implemented."""


class AlreadyRegistered(TimerError):
    """Another running timer holds the registration lock."""

    def __init__(self, identifier: str) -> None:
        super().__init__(f"a timer registered as '{identifier}' is already running")
        self.identifier = identifier


class LockIOError(TimerError):
    """Filesystem failure while creating, locking or unlocking the lock file."""


class ScheduleInvariantError(TimerError):
    """A checkpoint resolved to a negative wait."""


class EndCommandFailed(TimerError):
    """The end-of-timer command could not run or exited non-zero."""

    def __init__(self, command: str, returncode: int | None, reason: str = "") -> None:
        detail = reason or f"exit status {returncode}"
        super().__init__(f"end command '{command}' failed: {detail}")
        self.command = command
        self.returncode = returncode


class NotifierError(TimerError):
    """A notification sink failed to deliver a message."""


__all__ = [
    "TimerError",
    "ReferenceParseError",
    "InvalidReference",
    "InvalidNumber",
    "Unsupported",
    "AlreadyRegistered",
    "LockIOError",
    "ScheduleInvariantError",
    "EndCommandFailed",
    "NotifierError",
]
