from typing import Iterable

from sqlalchemy import and_, select
from sqlalchemy.orm import Session

from shiftplan.models.shift import Shift
from shiftplan.models.shift_assignment import ShiftAssignment
from shiftplan.scheduling.conflicts import BookedAssignment
from shiftplan.scheduling.time_utils import ensure_utc


class SqlAssignmentLookup:
    """Assignment lookup backed by the shifts / shift_assignments tables."""

    def __init__(self, db: Session):
        self.db = db

    def bookings_for_workers(self, worker_ids: Iterable, start, end) -> list[BookedAssignment]:
        ids = list(worker_ids)
        if not ids:
            return []
        rows = self.db.execute(
            select(
                ShiftAssignment.worker_id,
                ShiftAssignment.shift_id,
                ShiftAssignment.status,
                Shift.title,
                Shift.start_time,
                Shift.end_time,
            )
            .join(Shift, Shift.shift_id == ShiftAssignment.shift_id)
            .where(
                and_(
                    ShiftAssignment.worker_id.in_(ids),
                    Shift.start_time <= ensure_utc(end),
                    Shift.end_time >= ensure_utc(start),
                )
            )
            .order_by(Shift.start_time)
        ).all()

        return [
            BookedAssignment(
                worker_id=r.worker_id,
                shift_id=r.shift_id,
                shift_title=r.title,
                start=ensure_utc(r.start_time),
                end=ensure_utc(r.end_time),
                status=r.status,
            )
            for r in rows
        ]
