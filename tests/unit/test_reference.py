"""Tests for core.timing.reference: parsing and resolving time references."""
from __future__ import annotations

from datetime import datetime, time, timedelta

import pytest

from core.errors import InvalidNumber, InvalidReference, ReferenceParseError, Unsupported
from core.timing.reference import (
    AbsoluteReference,
    RelativeReference,
    parse_duration,
    parse_reference,
    resolve,
)

NOW = datetime(2024, 5, 17, 10, 0, 0)


class TestAtMode:
    def test_hour_of_day(self) -> None:
        assert parse_reference("at", "16") == AbsoluteReference(time(16, 0, 0))

    def test_hh_mm(self) -> None:
        assert parse_reference("at", "4:05") == AbsoluteReference(time(4, 5))

    def test_hh_mm_ss(self) -> None:
        assert parse_reference("at", "23:59:30") == AbsoluteReference(time(23, 59, 30))

    def test_future_time_today(self) -> None:
        assert parse_duration("at", "12:30", NOW) == timedelta(hours=2, minutes=30)

    def test_past_time_rolls_to_tomorrow(self) -> None:
        # 4:00 already passed today, so tomorrow at 4:00
        assert parse_duration("at", "4:00", NOW) == timedelta(hours=18)

    @pytest.mark.parametrize("text", ["00:00:01", "09:59:59", "06:30:00", "10:00:00"])
    def test_resolved_duration_never_negative(self, text: str) -> None:
        target = datetime.combine(NOW.date(), datetime.strptime(text, "%H:%M:%S").time())
        expected = target - NOW
        if expected < timedelta(0):
            expected = (target + timedelta(days=1)) - NOW
        duration = parse_duration("at", text, NOW)
        assert duration == expected
        assert duration >= timedelta(0)

    def test_now_with_microseconds(self) -> None:
        now = NOW.replace(second=30, microsecond=500_000)
        assert parse_duration("at", "10:01", now) == timedelta(seconds=29, microseconds=500_000)

    def test_hour_only_resolves_against_now(self) -> None:
        assert parse_duration("at", "9", NOW) == timedelta(hours=23)

    def test_legacy_plain_seconds(self, caplog: pytest.LogCaptureFixture) -> None:
        assert parse_reference("at", "90") == RelativeReference(seconds=90)
        assert parse_duration("at", "90", NOW) == timedelta(seconds=90)
        assert "deprecated" in caplog.text

    @pytest.mark.parametrize("text", ["", "abc", "-5", "1.5", "4h"])
    def test_invalid_zero_colon(self, text: str) -> None:
        with pytest.raises(InvalidReference):
            parse_reference("at", text)

    @pytest.mark.parametrize("text", ["25:00", "12:60", "ab:cd", "12:", ":30", "1:2:xx"])
    def test_malformed_clock(self, text: str) -> None:
        with pytest.raises(InvalidReference):
            parse_reference("at", text)

    def test_more_than_two_colons_unsupported(self) -> None:
        with pytest.raises(Unsupported):
            parse_reference("at", "1:2:3:4")


class TestInMode:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("1h 30m", 5400),
            ("1h30m", 5400),
            ("45s", 45),
            ("2m", 120),
            ("3h", 10800),
            ("1h 2m 3s", 3723),
            ("1h 5s", 3605),
            ("10m 10s", 610),
            ("", 0),
        ],
    )
    def test_sum_of_components(self, text: str, expected: int) -> None:
        assert parse_duration("in", text, NOW) == timedelta(seconds=expected)

    def test_absent_components_are_zero(self) -> None:
        assert parse_reference("in", "7m") == RelativeReference(hours=0, minutes=7, seconds=0)

    def test_surrounding_whitespace_ignored(self) -> None:
        assert parse_duration("in", "  5m ", NOW) == timedelta(minutes=5)

    @pytest.mark.parametrize("text", ["soon", "5", "30s 1m", "1x", "h", "1h  30m", "5 minutes"])
    def test_non_matching_fails(self, text: str) -> None:
        with pytest.raises(InvalidReference):
            parse_reference("in", text)

    def test_overflow_is_invalid_number(self) -> None:
        with pytest.raises(InvalidNumber):
            parse_duration("in", "99999999999999h", NOW)

    def test_past_calendar_range_is_invalid_number(self) -> None:
        # fits a timedelta, but not a datetime once added to now
        with pytest.raises(InvalidNumber, match="too large"):
            parse_duration("in", "99999999h", NOW)

    def test_non_ascii_digits_rejected(self) -> None:
        with pytest.raises(InvalidReference):
            parse_reference("in", "١٢m")


def test_unknown_mode() -> None:
    with pytest.raises(InvalidReference):
        parse_reference("on", "5m")


def test_errors_share_base() -> None:
    for exc in (InvalidReference, InvalidNumber, Unsupported):
        assert issubclass(exc, ReferenceParseError)


def test_relative_resolution_ignores_now() -> None:
    ref = RelativeReference(hours=1)
    assert resolve(ref, NOW) == resolve(ref, NOW + timedelta(hours=5))
