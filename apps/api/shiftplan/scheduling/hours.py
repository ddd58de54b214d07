from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterable, NamedTuple, Optional

from shiftplan.scheduling.time_utils import round_half_up


class WorkedShift(NamedTuple):
    worker_id: object
    start: datetime
    end: datetime
    weekly_cap_minutes: Optional[int] = None


@dataclass
class WeeklyHoursReport:
    week_start: datetime
    week_end: datetime
    minutes_by_worker: Dict[object, int] = field(default_factory=dict)
    overtime_workers: list = field(default_factory=list)

    @property
    def overtime_count(self) -> int:
        return len(self.overtime_workers)

    @property
    def total_minutes(self) -> int:
        return sum(self.minutes_by_worker.values())

    @property
    def total_hours(self) -> float:
        """Sum of all workers' minutes in hours, rounded to one decimal."""
        return round_half_up(self.total_minutes / 60, 1)


def overlap_minutes(start: datetime, end: datetime, window_start: datetime, window_end: datetime) -> int:
    """Minutes of ``[start, end]`` inside the window, rounded, never negative."""
    overlap_start = max(start, window_start)
    overlap_end = min(end, window_end)
    seconds = (overlap_end - overlap_start).total_seconds()
    return max(0, int(round_half_up(seconds / 60)))


def aggregate_weekly_hours(
    week_start: datetime,
    week_end: datetime,
    shifts: Iterable[WorkedShift],
) -> WeeklyHoursReport:
    """Per-worker minutes clipped to the week, plus overtime flags.

    A worker is flagged when their minutes exceed their cap; workers without
    a cap are never flagged.
    """
    report = WeeklyHoursReport(week_start=week_start, week_end=week_end)
    caps: Dict[object, int] = {}

    for s in shifts:
        worker_id, start, end, cap = s
        if cap is not None:
            caps[worker_id] = cap
        minutes = overlap_minutes(start, end, week_start, week_end)
        if minutes > 0:
            report.minutes_by_worker[worker_id] = report.minutes_by_worker.get(worker_id, 0) + minutes

    for worker_id, minutes in report.minutes_by_worker.items():
        cap = caps.get(worker_id)
        if cap is not None and minutes > cap:
            report.overtime_workers.append(worker_id)

    return report
