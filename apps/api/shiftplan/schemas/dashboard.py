from datetime import datetime

from pydantic import BaseModel


class DashboardOut(BaseModel):
    total_workers: int
    active_shifts: int
    pending_requests: int
    week_start: datetime
    week_end: datetime
    weekly_hours: float
    overtime_alerts: int
    minutes_by_worker: dict[str, int]
