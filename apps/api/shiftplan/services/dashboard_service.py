from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import and_, func, select
from sqlalchemy.orm import Session

from shiftplan.core.config import settings
from shiftplan.models.shift import Shift
from shiftplan.models.shift_assignment import ShiftAssignment
from shiftplan.models.weekly_limit import WeeklyLimit
from shiftplan.models.worker import Worker
from shiftplan.scheduling.enums import AssignmentStatus, parse_weekday
from shiftplan.scheduling.hours import WeeklyHoursReport, WorkedShift, aggregate_weekly_hours
from shiftplan.scheduling.time_utils import day_window, ensure_utc, week_window


def weekly_hours(db: Session, week_start: datetime, week_end: datetime) -> WeeklyHoursReport:
    """Aggregate every assignment whose shift intersects the week window."""
    ws = ensure_utc(week_start)
    we = ensure_utc(week_end)

    rows = db.execute(
        select(
            ShiftAssignment.worker_id,
            Shift.start_time,
            Shift.end_time,
            WeeklyLimit.weekly_cap_minutes,
        )
        .join(Shift, Shift.shift_id == ShiftAssignment.shift_id)
        .outerjoin(WeeklyLimit, WeeklyLimit.worker_id == ShiftAssignment.worker_id)
        .where(and_(Shift.start_time <= we, Shift.end_time >= ws))
    ).all()

    return aggregate_weekly_hours(
        ws,
        we,
        (
            WorkedShift(r.worker_id, ensure_utc(r.start_time), ensure_utc(r.end_time), r.weekly_cap_minutes)
            for r in rows
        ),
    )


def dashboard_metrics(db: Session, now: Optional[datetime] = None) -> dict:
    now = ensure_utc(now or datetime.now(timezone.utc))
    today_start, today_end = day_window(now)
    week_start, week_end = week_window(now, parse_weekday(settings.week_starts_on))

    total_workers = db.execute(
        select(func.count()).select_from(Worker).where(Worker.is_active == True)  # noqa: E712
    ).scalar_one()

    active_shifts = db.execute(
        select(func.count())
        .select_from(Shift)
        .where(and_(Shift.start_time <= today_end, Shift.end_time >= today_start))
    ).scalar_one()

    pending_requests = db.execute(
        select(func.count())
        .select_from(ShiftAssignment)
        .where(ShiftAssignment.status == AssignmentStatus.PENDING)
    ).scalar_one()

    report = weekly_hours(db, week_start, week_end)

    return {
        "total_workers": total_workers,
        "active_shifts": active_shifts,
        "pending_requests": pending_requests,
        "week_start": week_start,
        "week_end": week_end,
        "weekly_hours": report.total_hours,
        "overtime_alerts": report.overtime_count,
        "minutes_by_worker": {str(k): v for k, v in report.minutes_by_worker.items()},
    }
