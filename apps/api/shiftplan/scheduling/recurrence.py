"""Recurring shift templates and their expansion into concrete occurrences.

Expansion walks the query range one calendar day at a time (in the template's
timezone) and asks the template's rule whether that day carries a shift. The
result depends only on the arguments, so repeated calls return the same list.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta

from shiftplan.core.config import settings
from shiftplan.core.errors import ValidationError
from shiftplan.scheduling.enums import RecurrenceRule, WeekDay, parse_recurrence_rule, parse_weekday
from shiftplan.scheduling.time_utils import (
    add_minutes,
    combine_date_and_time,
    local_midnight,
    parse_time_of_day,
    resolve_timezone,
    to_local,
)

MAX_INTERVAL = 30


@dataclass(frozen=True)
class RecurringTemplate:
    rule: RecurrenceRule
    start_date: date
    shift_duration: int  # minutes
    base_start_time: time
    interval: int = 1
    by_weekday: frozenset[WeekDay] = field(default_factory=frozenset)
    end_date: date | None = None
    timezone: str = "UTC"
    name: str = ""


@dataclass(frozen=True)
class Occurrence:
    start: datetime
    end: datetime


def build_template(
    rule,
    start_date,
    shift_duration,
    base_start_time,
    interval=1,
    by_weekday=(),
    end_date=None,
    timezone: str | None = None,
    name: str = "",
) -> RecurringTemplate:
    """Parse loosely typed template fields and validate the result."""
    template = RecurringTemplate(
        rule=parse_recurrence_rule(rule),
        start_date=start_date,
        shift_duration=shift_duration,
        base_start_time=parse_time_of_day(base_start_time),
        interval=interval,
        by_weekday=frozenset(parse_weekday(d) for d in (by_weekday or ())),
        end_date=end_date,
        timezone=timezone or settings.default_timezone,
        name=name,
    )
    validate_template(template)
    return template


def validate_template(template: RecurringTemplate) -> None:
    if template.rule == RecurrenceRule.NONE:
        raise ValidationError("Recurring rule must be set")
    if not isinstance(template.interval, int) or isinstance(template.interval, bool):
        raise ValidationError("interval must be an integer")
    if template.interval < 1 or template.interval > MAX_INTERVAL:
        raise ValidationError(f"interval must be between 1 and {MAX_INTERVAL}")
    if template.rule == RecurrenceRule.CUSTOM and not template.by_weekday:
        raise ValidationError("CUSTOM recurrence needs at least one weekday")
    if not isinstance(template.shift_duration, int) or template.shift_duration <= 0:
        raise ValidationError("shift_duration must be a positive number of minutes")
    tz = resolve_timezone(template.timezone)
    if template.end_date is not None and to_local(template.end_date, tz) < to_local(template.start_date, tz):
        raise ValidationError("end_date must not be before start_date")


def _interval_match(d: date, anchor: date, interval: int) -> bool:
    diff = (d - anchor).days
    return diff >= 0 and diff % interval == 0


def occurs_on(template: RecurringTemplate, d: date, anchor: date) -> bool:
    """Per-day inclusion test. ``anchor`` is the template start date in its own timezone."""
    rule = template.rule
    if rule == RecurrenceRule.DAILY:
        return _interval_match(d, anchor, template.interval)
    if rule == RecurrenceRule.EVERY_TWO_DAYS:
        # Fixed step; the stored interval is not consulted for this rule.
        return _interval_match(d, anchor, 2)
    if rule == RecurrenceRule.WEEKLY:
        diff = (d - anchor).days
        return d.weekday() == anchor.weekday() and diff % (template.interval * 7) == 0
    if rule == RecurrenceRule.CUSTOM:
        return WeekDay.from_date(d) in template.by_weekday
    return False


def expand_occurrences(template: RecurringTemplate, range_start, range_end) -> list[Occurrence]:
    """Every occurrence whose start day lies in ``[range_start, min(range_end, end_date)]``.

    ``range_start`` / ``range_end`` may be dates or datetimes; naive values are
    read in the template's timezone. Occurrences that would end before the
    template's own start date are dropped.
    """
    tz = resolve_timezone(template.timezone)
    start_local = to_local(range_start, tz)
    effective_end = to_local(range_end, tz)
    if template.end_date is not None:
        template_end = to_local(template.end_date, tz)
        if template_end < effective_end:
            effective_end = template_end

    template_start = to_local(template.start_date, tz)
    anchor = template_start.date()

    occurrences: list[Occurrence] = []
    cursor = start_local.date()
    while local_midnight(cursor, tz) <= effective_end:
        if occurs_on(template, cursor, anchor):
            start = combine_date_and_time(cursor, template.base_start_time, tz)
            end = add_minutes(start, template.shift_duration)
            if end >= template_start:
                occurrences.append(Occurrence(start=start, end=end))
        cursor += timedelta(days=1)

    return occurrences
