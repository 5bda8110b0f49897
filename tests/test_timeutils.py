"""Tests for time parsing, rounding and rendering."""

from datetime import datetime, timedelta, timezone

import pytest

from caregiving_time.timeutils import (
    iso_instant,
    minutes_between,
    parse_instant,
    split_hours_minutes,
    tzinfo_from_name,
)

_BASE = datetime(2024, 1, 1, 8, 0, 0, tzinfo=timezone.utc)


class TestMinutesBetween:
    @pytest.mark.parametrize(
        "elapsed,expected",
        [
            (timedelta(0), 0),
            (timedelta(milliseconds=1), 1),
            (timedelta(milliseconds=30_001), 1),
            (timedelta(minutes=1), 1),
            (timedelta(minutes=1, milliseconds=1), 2),
            (timedelta(hours=2), 120),
        ],
    )
    def test_always_rounds_up(self, elapsed: timedelta, expected: int) -> None:
        assert minutes_between(_BASE, _BASE + elapsed) == expected

    def test_across_offsets(self) -> None:
        later = datetime(2024, 1, 1, 10, 30, tzinfo=timezone(timedelta(hours=2)))
        assert minutes_between(_BASE, later) == 30


class TestParseInstant:
    def test_zulu(self) -> None:
        assert parse_instant("2024-01-01T08:00:00Z", "UTC") == _BASE

    def test_offset(self) -> None:
        assert parse_instant("2024-01-01T09:00:00+01:00", "UTC") == _BASE

    def test_naive_uses_given_zone(self) -> None:
        dt = parse_instant("2024-01-01T09:00:00", "Europe/Paris")
        assert dt == _BASE

    def test_space_separator(self) -> None:
        assert parse_instant("2024-01-01 08:00:00", "UTC") == _BASE

    def test_date_only_is_utc_midnight(self) -> None:
        assert parse_instant("2024-01-01", "Europe/Paris") == datetime(2024, 1, 1, tzinfo=timezone.utc)

    def test_truncates_to_milliseconds(self) -> None:
        dt = parse_instant("2024-01-01T08:00:00.123456Z", "UTC")
        assert dt.microsecond == 123000

    @pytest.mark.parametrize("text", ["", "   ", "yesterday", "2024-13-01T00:00:00Z", "2024-02-30"])
    def test_rejects_invalid(self, text: str) -> None:
        with pytest.raises(ValueError):
            parse_instant(text, "UTC")


def test_invalid_zone() -> None:
    with pytest.raises(ValueError):
        tzinfo_from_name("Not/AZone")


def test_iso_instant_renders_utc_with_millis() -> None:
    local = datetime(2024, 1, 1, 9, 0, tzinfo=timezone(timedelta(hours=1)))
    assert iso_instant(local) == "2024-01-01T08:00:00.000Z"


@pytest.mark.parametrize("total,expected", [(0, (0, 0)), (59, (0, 59)), (60, (1, 0)), (130, (2, 10))])
def test_split_hours_minutes(total: int, expected: tuple[int, int]) -> None:
    assert split_hours_minutes(total) == expected


class TestDaylightSaving:
    def test_naive_times_across_spring_forward_measure_real_time(self) -> None:
        before = parse_instant("2024-03-10T01:00:00", "America/New_York")
        after = parse_instant("2024-03-10T04:00:00", "America/New_York")
        assert minutes_between(before, after) == 120

    def test_naive_times_across_fall_back_measure_real_time(self) -> None:
        before = parse_instant("2024-11-03T00:30:00", "America/New_York")
        after = parse_instant("2024-11-03T02:30:00", "America/New_York")
        assert minutes_between(before, after) == 180

    def test_results_are_utc(self) -> None:
        dt = parse_instant("2024-07-01T12:00:00", "America/New_York")
        assert dt.utcoffset() == timedelta(0)
        assert dt == datetime(2024, 7, 1, 16, tzinfo=timezone.utc)


def test_out_of_range_after_utc_conversion() -> None:
    with pytest.raises(ValueError):
        parse_instant("9999-12-31T23:00:00-02:00", "UTC")
