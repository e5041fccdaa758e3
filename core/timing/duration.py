from __future__ import annotations

from datetime import timedelta

SECONDS_PER_MINUTE = 60
SECONDS_PER_HOUR = 60 * SECONDS_PER_MINUTE
SECONDS_PER_DAY = 24 * SECONDS_PER_HOUR


def whole_seconds(delta: timedelta) -> int:
    """Return ``delta`` truncated towards zero to whole seconds."""

    return int(delta.total_seconds())


def format_duration(delta: timedelta) -> str:
    """Render ``delta`` as ``"Xd Xh Xm Xs"``, skipping zero components.

    ``format_duration(timedelta(0))`` is the empty string; negative values are
    rendered as their magnitude with a leading ``-``.
    """

    seconds = whole_seconds(delta)
    sign = "-" if seconds < 0 else ""
    seconds = abs(seconds)

    days, seconds = divmod(seconds, SECONDS_PER_DAY)
    hours, seconds = divmod(seconds, SECONDS_PER_HOUR)
    minutes, seconds = divmod(seconds, SECONDS_PER_MINUTE)

    parts = [
        f"{value}{unit}"
        for value, unit in ((days, "d"), (hours, "h"), (minutes, "m"), (seconds, "s"))
        if value > 0
    ]
    if not parts:
        return ""
    return sign + " ".join(parts)


__all__ = ["format_duration", "whole_seconds", "SECONDS_PER_DAY"]
