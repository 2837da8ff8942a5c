"""Tests for date parsing, period expansion and relative counters."""

from datetime import date, datetime, timedelta

import pytest

from timeline.calendar_math import (
    FormatError,
    Granularity,
    clamp_to_start,
    expand_to_full_period,
    format_date,
    get_iso_week_number,
    get_relative_time_label,
    get_relative_week_index,
    parse_local_date,
    snap_to_day,
)


def _counter(label: str) -> int:
    return int(label.lstrip("DAYWEEKMONTH"))


class TestParseFormat:
    def test_parse_plain_date(self) -> None:
        assert parse_local_date("2026-03-01") == date(2026, 3, 1)

    def test_format_is_zero_padded(self) -> None:
        assert format_date(date(2026, 3, 1)) == "2026-03-01"
        assert format_date(datetime(987, 1, 9, 23, 59)) == "0987-01-09"

    @pytest.mark.parametrize("bad", ["2026-3-1", "01/03/2026", "", "2026-03-01T00:00", "2026-02-30"])
    def test_malformed_raises_format_error(self, bad: str) -> None:
        with pytest.raises(FormatError):
            parse_local_date(bad)

    def test_format_error_is_value_error(self) -> None:
        assert issubclass(FormatError, ValueError)


class TestSnapAndClamp:
    def test_snap_drops_time(self) -> None:
        assert snap_to_day(datetime(2026, 3, 4, 17, 45)) == date(2026, 3, 4)

    def test_clamp_before_start(self) -> None:
        start = date(2026, 3, 1)
        assert clamp_to_start(start - timedelta(days=5), start) == start

    def test_clamp_keeps_later_dates(self) -> None:
        start = date(2026, 3, 1)
        for offset in range(0, 40, 3):
            d = start + timedelta(days=offset)
            assert clamp_to_start(d, start) == d

    def test_clamp_accepts_string_start(self) -> None:
        assert clamp_to_start(date(2026, 1, 1), "2026-03-01") == date(2026, 3, 1)


class TestExpandToFullPeriod:
    def test_day_is_identity(self) -> None:
        s, e = date(2026, 3, 4), date(2026, 3, 9)
        assert expand_to_full_period(s, e, Granularity.DAY) == (s, e)

    def test_week_is_monday_to_sunday(self) -> None:
        s, e = expand_to_full_period(date(2026, 3, 1), date(2026, 4, 30), "week")
        assert s == date(2026, 2, 23)
        assert e == date(2026, 5, 3)
        assert s.weekday() == 0 and e.weekday() == 6

    def test_month_is_first_to_last_day(self) -> None:
        s, e = expand_to_full_period(date(2024, 1, 15), date(2024, 2, 10), "month")
        assert s == date(2024, 1, 1)
        assert e == date(2024, 2, 29)

    @pytest.mark.parametrize("granularity", list(Granularity))
    def test_expansion_contains_input(self, granularity: Granularity) -> None:
        base = date(2025, 12, 20)
        for offset in range(0, 60, 7):
            start = base + timedelta(days=offset)
            end = start + timedelta(days=offset + 3)
            s, e = expand_to_full_period(start, end, granularity)
            assert s <= start and e >= end
            if granularity is Granularity.WEEK:
                assert s.weekday() == 0 and e.weekday() == 6
            if granularity is Granularity.MONTH:
                assert s.day == 1
                assert (e + timedelta(days=1)).day == 1


class TestRelativeLabels:
    def test_day_scenario(self) -> None:
        start = date(2026, 3, 1)
        assert get_relative_time_label(date(2026, 3, 1), start, "day") == "DAY1"
        assert get_relative_time_label(date(2026, 3, 2), start, "day") == "DAY2"

    def test_week_scenario(self) -> None:
        start = date(2026, 3, 1)
        assert get_relative_time_label(start, start, "week") == "WEEK1"
        assert get_relative_time_label(start + timedelta(days=14), start, "week") == "WEEK3"

    def test_month_uses_thirty_day_buckets(self) -> None:
        start = date(2026, 1, 1)
        assert get_relative_time_label(date(2026, 1, 30), start, "month") == "MONTH1"
        assert get_relative_time_label(date(2026, 1, 31), start, "month") == "MONTH2"

    @pytest.mark.parametrize("granularity", list(Granularity))
    def test_never_below_one_and_monotonic(self, granularity: Granularity) -> None:
        start = date(2026, 3, 1)
        prev = 0
        for offset in range(-20, 120):
            n = _counter(get_relative_time_label(start + timedelta(days=offset), start, granularity))
            assert n >= 1
            assert n >= prev
            prev = n

    def test_week_index_follows_iso_weeks(self) -> None:
        # 2026-03-01 is a Sunday, so the Monday after is already week 2
        start = date(2026, 3, 1)
        assert get_relative_week_index(date(2026, 2, 23), start) == 1
        assert get_relative_week_index(date(2026, 3, 2), start) == 2
        assert get_relative_week_index(start + timedelta(days=14), start) == 3

    def test_iso_week_number(self) -> None:
        assert get_iso_week_number(date(2026, 3, 1)) == 9
        assert get_iso_week_number(date(2021, 1, 3)) == 53
