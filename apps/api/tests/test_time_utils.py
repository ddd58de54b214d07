from datetime import date, datetime, time, timedelta, timezone

import pytest

from shiftplan.core.errors import ValidationError
from shiftplan.scheduling.enums import WeekDay
from shiftplan.scheduling.time_utils import (
    add_minutes,
    duration_minutes,
    ensure_utc,
    intervals_overlap,
    parse_time_of_day,
    resolve_timezone,
    round_half_up,
    to_minutes,
    week_window,
)

UTC = timezone.utc


class TestTimeOfDay:
    def test_parses_hhmm(self):
        assert parse_time_of_day("09:30") == time(9, 30)
        assert to_minutes("23:59") == 23 * 60 + 59

    @pytest.mark.parametrize("bad", ["24:00", "9:30", "12:60", "", None, "noon"])
    def test_rejects_malformed(self, bad):
        with pytest.raises(ValidationError):
            parse_time_of_day(bad)


class TestDurationMinutes:
    def test_whole_minutes(self):
        start = datetime(2024, 1, 1, 9, 0, tzinfo=UTC)
        assert duration_minutes(start, start + timedelta(hours=8)) == 480

    def test_floors_partial_minutes(self):
        start = datetime(2024, 1, 1, 9, 0, tzinfo=UTC)
        assert duration_minutes(start, start + timedelta(seconds=119)) == 1

    def test_zero_when_not_ordered(self):
        start = datetime(2024, 1, 1, 9, 0, tzinfo=UTC)
        assert duration_minutes(start, start) == 0
        assert duration_minutes(start, start - timedelta(hours=1)) == 0


class TestIntervalsOverlap:
    def test_touching_ranges_overlap(self):
        a0 = datetime(2024, 2, 1, 10, 0, tzinfo=UTC)
        a1 = datetime(2024, 2, 1, 14, 0, tzinfo=UTC)
        b1 = datetime(2024, 2, 1, 16, 0, tzinfo=UTC)
        assert intervals_overlap(a0, a1, a1, b1)

    def test_disjoint_ranges(self):
        a0 = datetime(2024, 2, 1, 10, 0, tzinfo=UTC)
        a1 = datetime(2024, 2, 1, 12, 0, tzinfo=UTC)
        b0 = datetime(2024, 2, 1, 13, 0, tzinfo=UTC)
        b1 = datetime(2024, 2, 1, 14, 0, tzinfo=UTC)
        assert not intervals_overlap(a0, a1, b0, b1)
        assert not intervals_overlap(b0, b1, a0, a1)


class TestTimezones:
    def test_unknown_zone_rejected(self):
        with pytest.raises(ValidationError):
            resolve_timezone("Mars/Olympus_Mons")

    def test_naive_is_read_as_utc(self):
        naive = datetime(2024, 1, 1, 9, 0)
        assert ensure_utc(naive) == datetime(2024, 1, 1, 9, 0, tzinfo=UTC)

    def test_add_minutes_is_elapsed_time_across_dst(self):
        tz = resolve_timezone("Europe/Berlin")
        # 2024-03-31 02:00 local clocks jump to 03:00
        start = datetime(2024, 3, 31, 0, 0, tzinfo=tz)
        end = add_minutes(start, 180)
        assert end.hour == 4
        assert (ensure_utc(end) - ensure_utc(start)) == timedelta(minutes=180)


class TestWeekWindow:
    def test_monday_start(self):
        moment = datetime(2024, 1, 10, 15, 0, tzinfo=UTC)  # Wednesday
        start, end = week_window(moment, WeekDay.MON)
        assert start == datetime(2024, 1, 8, tzinfo=UTC)
        assert end == datetime(2024, 1, 14, 23, 59, 59, 999000, tzinfo=UTC)

    def test_sunday_start(self):
        moment = datetime(2024, 1, 10, 15, 0, tzinfo=UTC)
        start, _ = week_window(moment, WeekDay.SUN)
        assert start.date() == date(2024, 1, 7)


class TestRoundHalfUp:
    def test_half_rounds_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(0.25, 1) == 0.3

    def test_one_decimal(self):
        assert round_half_up(2500 / 60, 1) == 41.7
