import pytest

from shiftplan.core.config import settings
from shiftplan.core.errors import ConflictError, ValidationError
from shiftplan.scheduling.availability import (
    assert_no_availability_overlap,
    availability_overlaps,
    build_window,
    validate_weekly_profile,
)


class TestAvailabilityOverlap:
    def test_touching_windows_do_not_overlap(self):
        existing = [build_window("MON", "09:00", "12:00")]
        assert availability_overlaps(existing, "MON", "12:00", "15:00") is False

    def test_shared_minutes_overlap(self):
        existing = [build_window("MON", "09:00", "12:00")]
        assert availability_overlaps(existing, "MON", "11:59", "15:00") is True

    def test_other_days_are_ignored(self):
        existing = [build_window("TUE", "09:00", "12:00")]
        assert availability_overlaps(existing, "MON", "10:00", "11:00") is False

    def test_update_excludes_its_own_window(self):
        existing = [build_window("WED", "09:00", "12:00", window_id=1)]
        moved = build_window("WED", "10:00", "13:00", window_id=1)
        assert_no_availability_overlap(existing, moved, exclude_window_id=1)

        with pytest.raises(ConflictError):
            assert_no_availability_overlap(existing, moved)


class TestWindowValidation:
    def test_unavailable_day(self):
        window = build_window("SUN")
        assert window.is_unavailable

    @pytest.mark.parametrize(
        "start,end",
        [("09:00", None), (None, "17:00"), ("17:00", "09:00"), ("09:00", "09:00"), ("9am", "17:00")],
    )
    def test_rejects_bad_ranges(self, start, end):
        with pytest.raises(ValidationError):
            build_window("MON", start, end)

    def test_rejects_unknown_day(self):
        with pytest.raises(ValidationError):
            build_window("MONDAYISH", "09:00", "10:00")


class TestWindowTimezone:
    def test_defaults_from_settings(self, monkeypatch):
        monkeypatch.setattr(settings, "default_timezone", "Europe/Paris")
        assert build_window("MON", "09:00", "12:00").timezone == "Europe/Paris"
        assert build_window("MON", "09:00", "12:00", timezone="UTC").timezone == "UTC"


class TestWeeklyProfile:
    def test_one_slot_per_day(self):
        profile = validate_weekly_profile(
            [build_window("MON", "08:00", "12:00"), build_window("TUE", "12:00", "16:00"), build_window("SUN")]
        )
        assert [w.day.value for w in profile] == ["MON", "TUE", "SUN"]

    def test_split_day_is_rejected(self):
        with pytest.raises(ValidationError):
            validate_weekly_profile(
                [build_window("MON", "09:00", "12:00"), build_window("MON", "13:00", "17:00")]
            )

    def test_overlapping_profile_is_rejected(self):
        with pytest.raises(ValidationError):
            validate_weekly_profile(
                [build_window("FRI", "08:00", "12:00"), build_window("FRI", "11:00", "14:00")]
            )
