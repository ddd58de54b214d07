"""Time and interval helpers shared by the scheduling core.

Instants are timezone-aware ``datetime`` values. Wall-clock times of day are
``datetime.time`` values transmitted as ``HH:mm`` strings.
"""

from __future__ import annotations

import math
import re
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from shiftplan.core.errors import ValidationError
from shiftplan.scheduling.enums import WeekDay

HHMM_RE = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")

MINUTES_PER_DAY = 24 * 60


def parse_time_of_day(value) -> time:
    """Parse ``HH:mm`` into a ``time``. ``time`` values pass through."""
    if isinstance(value, time):
        return value.replace(second=0, microsecond=0, tzinfo=None)
    s = str(value or "").strip()
    m = HHMM_RE.match(s)
    if not m:
        raise ValidationError(f"Invalid time of day '{value}'. Use HH:mm")
    return time(int(m.group(1)), int(m.group(2)))


def format_hhmm(t: time) -> str:
    return f"{t.hour:02d}:{t.minute:02d}"


def to_minutes(t) -> int:
    """Convert a time of day to minutes since midnight."""
    if not hasattr(t, "hour"):
        t = parse_time_of_day(t)
    return int(t.hour) * 60 + int(t.minute)


def duration_minutes(start: datetime, end: datetime) -> int:
    """Whole minutes from start to end, clamped to 0 when start is not before end."""
    if start >= end:
        return 0
    return int((end - start).total_seconds() // 60)


def intervals_overlap(start_a, end_a, start_b, end_b) -> bool:
    """Closed-interval overlap: ranges that only touch at a boundary still overlap."""
    return start_a <= end_b and start_b <= end_a


def daterange(start: date, end: date):
    cur = start
    while cur <= end:
        yield cur
        cur += timedelta(days=1)


def resolve_timezone(name: str | None) -> tzinfo:
    if not name or name.upper() == "UTC":
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValidationError(f"Unknown timezone '{name}'")


def ensure_utc(value: datetime) -> datetime:
    """Return an aware UTC datetime. Naive values are taken to already be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def local_midnight(d: date, tz: tzinfo) -> datetime:
    return datetime.combine(d, time.min, tzinfo=tz)


def to_local(value, tz: tzinfo) -> datetime:
    """Normalize a date or datetime to an aware datetime in ``tz``.

    A bare date means midnight of that date; a naive datetime is read as wall
    time in ``tz``.
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=tz)
        return value.astimezone(tz)
    if isinstance(value, date):
        return local_midnight(value, tz)
    raise ValidationError(f"Expected a date or datetime, got {value!r}")


def combine_date_and_time(d: date, t: time, tz: tzinfo) -> datetime:
    return datetime.combine(d, time(t.hour, t.minute), tzinfo=tz)


def week_window(moment: datetime, week_starts_on: WeekDay = WeekDay.MON) -> tuple[datetime, datetime]:
    """Calendar week containing ``moment``: first instant to last millisecond."""
    offset = (moment.date().weekday() - week_starts_on.ordinal) % 7
    start = datetime.combine(moment.date() - timedelta(days=offset), time.min, tzinfo=moment.tzinfo)
    end = start + timedelta(days=7) - timedelta(milliseconds=1)
    return start, end


def day_window(moment: datetime) -> tuple[datetime, datetime]:
    start = datetime.combine(moment.date(), time.min, tzinfo=moment.tzinfo)
    return start, start + timedelta(days=1) - timedelta(milliseconds=1)


def round_half_up(value: float, digits: int = 0) -> float:
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def add_minutes(moment: datetime, minutes: int) -> datetime:
    """Add elapsed minutes (not wall-clock minutes) to an aware datetime."""
    return (moment.astimezone(timezone.utc) + timedelta(minutes=minutes)).astimezone(moment.tzinfo)
