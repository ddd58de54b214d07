"""Weekly availability windows.

Availability uses a strict overlap test: windows that only touch at a boundary
(09:00-12:00 and 12:00-15:00) do not collide.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from typing import Iterable, Optional

from shiftplan.core.config import settings
from shiftplan.core.errors import ConflictError, ValidationError
from shiftplan.scheduling.enums import WeekDay, parse_weekday
from shiftplan.scheduling.time_utils import format_hhmm, parse_time_of_day, resolve_timezone, to_minutes


@dataclass(frozen=True)
class AvailabilityWindow:
    day: WeekDay
    start: Optional[time]
    end: Optional[time]
    timezone: str = "UTC"
    window_id: Optional[object] = None

    @property
    def is_unavailable(self) -> bool:
        return self.start is None and self.end is None


def build_window(day, start=None, end=None, timezone: str | None = None, window_id=None) -> AvailabilityWindow:
    """Parse loosely typed input into a validated window."""
    window = AvailabilityWindow(
        day=parse_weekday(day),
        start=None if start in (None, "") else parse_time_of_day(start),
        end=None if end in (None, "") else parse_time_of_day(end),
        timezone=timezone or settings.default_timezone,
        window_id=window_id,
    )
    validate_window(window)
    return window


def validate_window(window: AvailabilityWindow) -> None:
    if (window.start is None) != (window.end is None):
        raise ValidationError(f"Availability for {window.day.value} needs both start and end, or neither")
    if window.start is not None and to_minutes(window.end) <= to_minutes(window.start):
        raise ValidationError(
            f"Invalid time range for {window.day.value}: end time must be after start time"
        )
    resolve_timezone(window.timezone)


def _minutes_overlap(a_start: int, a_end: int, b_start: int, b_end: int) -> bool:
    return max(a_start, b_start) < min(a_end, b_end)


def availability_overlaps(existing: Iterable[AvailabilityWindow], day, start, end) -> bool:
    """True if any same-day window shares more than a boundary with ``start``-``end``."""
    day = parse_weekday(day)
    start_m = to_minutes(start)
    end_m = to_minutes(end)
    for slot in existing:
        if slot.day != day or slot.start is None or slot.end is None:
            continue
        if _minutes_overlap(to_minutes(slot.start), to_minutes(slot.end), start_m, end_m):
            return True
    return False


def assert_no_availability_overlap(
    existing: Iterable[AvailabilityWindow],
    window: AvailabilityWindow,
    exclude_window_id=None,
) -> None:
    """Reject a create/update that would overlap another window of the same worker."""
    if window.is_unavailable:
        return
    others = [w for w in existing if exclude_window_id is None or w.window_id != exclude_window_id]
    if availability_overlaps(others, window.day, window.start, window.end):
        raise ConflictError(
            f"Availability {format_hhmm(window.start)}-{format_hhmm(window.end)} on "
            f"{window.day.value} overlaps an existing window"
        )


def validate_weekly_profile(windows: Iterable[AvailabilityWindow]) -> list[AvailabilityWindow]:
    """Validate a full replacement profile: every window valid, at most one slot per day."""
    accepted: list[AvailabilityWindow] = []
    seen: set[WeekDay] = set()
    for w in windows:
        validate_window(w)
        if w.day in seen:
            raise ValidationError(f"Weekly availability allows one slot per day; {w.day.value} appears twice")
        seen.add(w.day)
        accepted.append(w)
    return accepted
