from datetime import date, datetime, time, timezone

import pytest

from shiftplan.core.config import settings
from shiftplan.core.errors import ValidationError
from shiftplan.scheduling.enums import RecurrenceRule, WeekDay
from shiftplan.scheduling.recurrence import build_template, expand_occurrences

UTC = timezone.utc


def _template(**overrides):
    fields = dict(
        rule="WEEKLY",
        start_date=date(2024, 1, 1),
        shift_duration=480,
        base_start_time="09:00",
    )
    fields.update(overrides)
    return build_template(**fields)


class TestWeekly:
    def test_three_mondays_in_three_weeks(self):
        template = _template()
        occurrences = expand_occurrences(template, date(2024, 1, 1), date(2024, 1, 21))

        assert [o.start for o in occurrences] == [
            datetime(2024, 1, 1, 9, 0, tzinfo=UTC),
            datetime(2024, 1, 8, 9, 0, tzinfo=UTC),
            datetime(2024, 1, 15, 9, 0, tzinfo=UTC),
        ]
        for o in occurrences:
            assert o.start.weekday() == 0
            assert o.end.time() == time(17, 0)

    def test_interval_keeps_phase_from_start_date(self):
        template = _template(interval=2)
        # range starts on an "off" week; phase is anchored at start_date, not range start
        occurrences = expand_occurrences(template, date(2024, 1, 8), date(2024, 2, 4))
        assert [o.start.date() for o in occurrences] == [date(2024, 1, 15), date(2024, 1, 29)]


class TestCustom:
    def test_tuesdays_and_thursdays_only(self):
        template = _template(rule="CUSTOM", by_weekday=["TUE", "THU"])
        occurrences = expand_occurrences(template, date(2024, 1, 1), date(2024, 1, 10))
        assert [o.start.date() for o in occurrences] == [
            date(2024, 1, 2),
            date(2024, 1, 4),
            date(2024, 1, 9),
        ]

    def test_weekday_names_are_parsed_case_insensitively(self):
        template = _template(rule="custom", by_weekday=["tue"])
        assert template.rule == RecurrenceRule.CUSTOM
        assert template.by_weekday == frozenset({WeekDay.TUE})


class TestDailyRules:
    def test_daily_with_interval(self):
        template = _template(rule="DAILY", interval=3)
        occurrences = expand_occurrences(template, date(2024, 1, 1), date(2024, 1, 10))
        assert [o.start.day for o in occurrences] == [1, 4, 7, 10]

    def test_every_two_days_ignores_stored_interval(self):
        template = _template(rule="EVERY_TWO_DAYS", interval=5)
        occurrences = expand_occurrences(template, date(2024, 1, 1), date(2024, 1, 7))
        assert [o.start.day for o in occurrences] == [1, 3, 5, 7]

    def test_nothing_before_start_date(self):
        template = _template(rule="DAILY", start_date=date(2024, 1, 5))
        occurrences = expand_occurrences(template, date(2024, 1, 1), date(2024, 1, 6))
        assert [o.start.day for o in occurrences] == [5, 6]


class TestBounds:
    def test_end_date_caps_expansion(self):
        template = _template(rule="DAILY", end_date=date(2024, 1, 3))
        occurrences = expand_occurrences(template, date(2024, 1, 1), date(2024, 1, 31))
        assert [o.start.day for o in occurrences] == [1, 2, 3]

    def test_expansion_is_repeatable(self):
        template = _template(rule="CUSTOM", by_weekday=["MON", "FRI"])
        first = expand_occurrences(template, date(2024, 1, 1), date(2024, 3, 1))
        second = expand_occurrences(template, date(2024, 1, 1), date(2024, 3, 1))
        assert first == second

    def test_local_timezone_is_respected(self):
        template = _template(rule="DAILY", timezone="America/New_York")
        occurrences = expand_occurrences(template, date(2024, 1, 1), date(2024, 1, 1))
        assert len(occurrences) == 1
        assert occurrences[0].start.astimezone(UTC) == datetime(2024, 1, 1, 14, 0, tzinfo=UTC)


class TestDefaultTimezone:
    def test_missing_timezone_uses_settings(self, monkeypatch):
        monkeypatch.setattr(settings, "default_timezone", "Asia/Tokyo")
        template = _template(rule="DAILY")
        assert template.timezone == "Asia/Tokyo"
        occurrences = expand_occurrences(template, date(2024, 1, 1), date(2024, 1, 1))
        assert occurrences[0].start.astimezone(UTC) == datetime(2024, 1, 1, 0, 0, tzinfo=UTC)

    def test_explicit_timezone_wins(self, monkeypatch):
        monkeypatch.setattr(settings, "default_timezone", "Asia/Tokyo")
        assert _template(timezone="UTC").timezone == "UTC"


class TestValidation:
    @pytest.mark.parametrize(
        "overrides",
        [
            {"rule": "NONE"},
            {"rule": "HOURLY"},
            {"interval": 0},
            {"interval": 31},
            {"rule": "CUSTOM", "by_weekday": []},
            {"by_weekday": ["FUNDAY"]},
            {"shift_duration": 0},
            {"base_start_time": "25:00"},
            {"timezone": "Not/AZone"},
            {"end_date": date(2023, 12, 31)},
        ],
    )
    def test_rejects_invalid_template(self, overrides):
        with pytest.raises(ValidationError):
            _template(**overrides)
