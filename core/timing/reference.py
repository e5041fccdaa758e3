"""Parsing of user supplied time references.

Two modes are understood:

``at``
    An absolute local wall-clock target. ``"14"`` (hour of day), ``"14:30"``
    and ``"14:30:15"`` are accepted. A target that already passed today is
    taken to mean the same time tomorrow. Zero-colon values outside 0-23
    are the deprecated plain-seconds form and are read as a relative offset.

``in``
    A relative offset built from up to three ordered components, e.g.
    ``"1h 30m"``, ``"45s"`` or ``"2h5m10s"``.

Parsing (:func:`parse_reference`) and resolution against a clock sample
(:func:`resolve`) are kept apart so that the only impure input, ``now``, is
sampled once by the caller.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime, time, timedelta
from typing import Literal, Union

from core.errors import InvalidNumber, InvalidReference, Unsupported

logger = logging.getLogger(__name__)

Mode = Literal["at", "in"]

_INTEGER = re.compile(r"\d+", re.ASCII)
_RELATIVE = re.compile(r"(?:(\d+)h)? ?(?:(\d+)m)? ?(?:(\d+)s)?", re.ASCII)
_CLOCK_FORMATS = {1: "%H:%M", 2: "%H:%M:%S"}
_ONE_DAY = timedelta(days=1)


@dataclass(frozen=True)
class AbsoluteReference:
    """Local wall-clock target, e.g. 16:00."""

    at: time


@dataclass(frozen=True)
class RelativeReference:
    """Offset from now."""

    hours: int = 0
    minutes: int = 0
    seconds: int = 0


TimeReference = Union[AbsoluteReference, RelativeReference]


def _parse_at(text: str) -> TimeReference:
    colons = text.count(":")
    if colons == 0:
        if not _INTEGER.fullmatch(text):
            raise InvalidReference(f"couldn't parse reference time '{text}'")
        try:
            value = int(text)
        except ValueError as exc:
            raise InvalidNumber(f"invalid number '{text}'") from exc
        if value <= 23:
            return AbsoluteReference(time(hour=value))
        logger.warning(
            "'at %s' is read as plain seconds; this form is deprecated, use 'in %ss'",
            text,
            value,
        )
        return RelativeReference(seconds=value)
    if colons in _CLOCK_FORMATS:
        try:
            parsed = datetime.strptime(text, _CLOCK_FORMATS[colons])
        except ValueError as exc:
            raise InvalidReference(f"couldn't parse reference time '{text}': {exc}") from exc
        return AbsoluteReference(parsed.time())
    raise Unsupported(f"reference time '{text}' has {colons} colons; at most two are supported")


def _parse_in(text: str) -> RelativeReference:
    match = _RELATIVE.fullmatch(text)
    if match is None:
        raise InvalidReference(
            f"couldn't parse duration '{text}', expected something like '1h 30m 10s'"
        )
    values = []
    for group in match.groups():
        if group is None:
            values.append(0)
            continue
        try:
            values.append(int(group))
        except ValueError as exc:
            raise InvalidNumber(f"invalid number '{group}' in '{text}'") from exc
    hours, minutes, seconds = values
    return RelativeReference(hours=hours, minutes=minutes, seconds=seconds)


def parse_reference(mode: str, text: str) -> TimeReference:
    """Parse ``text`` according to ``mode`` (``"at"`` or ``"in"``)."""

    text = text.strip()
    if mode == "at":
        return _parse_at(text)
    if mode == "in":
        return _parse_in(text)
    raise InvalidReference(f"unknown mode '{mode}', expected 'at' or 'in'")


def resolve(reference: TimeReference, now: datetime) -> timedelta:
    """Turn ``reference`` into the non-negative duration left from ``now``."""

    if isinstance(reference, AbsoluteReference):
        target = datetime.combine(now.date(), reference.at, tzinfo=now.tzinfo) - now
        if target < timedelta(0):
            target += _ONE_DAY
        return target

    try:
        return timedelta(
            hours=reference.hours,
            minutes=reference.minutes,
            seconds=reference.seconds,
        )
    except OverflowError as exc:
        raise InvalidNumber(f"duration {reference} is too large") from exc


def parse_duration(mode: str, text: str, now: datetime) -> timedelta:
    reference = parse_reference(mode, text)
    duration = resolve(reference, now)
    try:
        now + duration
    except OverflowError as exc:
        raise InvalidNumber(f"duration '{text}' is too large") from exc
    logger.debug("resolved %r (%s) to %s", text, reference, duration)
    return duration


__all__ = [
    "AbsoluteReference",
    "RelativeReference",
    "TimeReference",
    "Mode",
    "parse_reference",
    "resolve",
    "parse_duration",
]
