from __future__ import annotations

import logging
from typing import Iterable, Optional
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from shiftplan.core.errors import ForbiddenError, NotFoundError
from shiftplan.models.availability import WorkerAvailability
from shiftplan.models.worker import Worker
from shiftplan.scheduling.assignments import Actor
from shiftplan.scheduling.availability import (
    AvailabilityWindow,
    assert_no_availability_overlap,
    build_window,
    validate_weekly_profile,
)
from shiftplan.scheduling.enums import Role

logger = logging.getLogger(__name__)


def _require_worker(db: Session, worker_id: UUID) -> Worker:
    worker = db.get(Worker, worker_id)
    if not worker:
        raise NotFoundError("Worker not found")
    return worker


def _require_self_or_scheduler(actor: Actor, worker_id: UUID) -> None:
    if actor.role == Role.EMPLOYEE and actor.actor_id != worker_id:
        raise ForbiddenError("You can only change your own availability")


def _to_window(row: WorkerAvailability) -> AvailabilityWindow:
    return AvailabilityWindow(
        day=row.day,
        start=row.start_time,
        end=row.end_time,
        timezone=row.timezone,
        window_id=row.availability_id,
    )


def _windows(db: Session, worker_id: UUID) -> list[WorkerAvailability]:
    rows = (
        db.execute(select(WorkerAvailability).where(WorkerAvailability.worker_id == worker_id))
        .scalars()
        .all()
    )
    # Enum columns sort by name in SQL; order by weekday position instead
    return sorted(rows, key=lambda r: (r.day.ordinal, r.start_time is None, r.start_time))


def list_availability(db: Session, worker_id: UUID) -> list[WorkerAvailability]:
    _require_worker(db, worker_id)
    return _windows(db, worker_id)


def create_window(
    db: Session,
    actor: Actor,
    worker_id: UUID,
    day,
    start=None,
    end=None,
    timezone: Optional[str] = None,
) -> WorkerAvailability:
    _require_self_or_scheduler(actor, worker_id)
    _require_worker(db, worker_id)

    window = build_window(day, start, end, timezone)
    existing = [_to_window(r) for r in _windows(db, worker_id)]
    assert_no_availability_overlap(existing, window)

    row = WorkerAvailability(
        worker_id=worker_id,
        day=window.day,
        start_time=window.start,
        end_time=window.end,
        timezone=window.timezone,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def update_window(
    db: Session,
    actor: Actor,
    worker_id: UUID,
    availability_id: UUID,
    day,
    start=None,
    end=None,
    timezone: Optional[str] = None,
) -> WorkerAvailability:
    _require_self_or_scheduler(actor, worker_id)
    row = db.get(WorkerAvailability, availability_id)
    if not row or row.worker_id != worker_id:
        raise NotFoundError("Availability not found")

    window = build_window(day, start, end, timezone, window_id=availability_id)
    existing = [_to_window(r) for r in _windows(db, worker_id)]
    assert_no_availability_overlap(existing, window, exclude_window_id=availability_id)

    row.day = window.day
    row.start_time = window.start
    row.end_time = window.end
    row.timezone = window.timezone
    db.commit()
    db.refresh(row)
    return row


def delete_window(db: Session, actor: Actor, worker_id: UUID, availability_id: UUID) -> None:
    _require_self_or_scheduler(actor, worker_id)
    row = db.get(WorkerAvailability, availability_id)
    if not row or row.worker_id != worker_id:
        raise NotFoundError("Availability not found")
    db.delete(row)
    db.commit()


def replace_profile(db: Session, actor: Actor, worker_id: UUID, slots: Iterable[dict]) -> list[WorkerAvailability]:
    """Replace the worker's whole weekly profile in one transaction."""
    _require_self_or_scheduler(actor, worker_id)
    _require_worker(db, worker_id)

    windows = validate_weekly_profile(
        build_window(s.get("day"), s.get("start_time"), s.get("end_time"), s.get("timezone")) for s in slots
    )

    db.execute(delete(WorkerAvailability).where(WorkerAvailability.worker_id == worker_id))
    for w in windows:
        db.add(
            WorkerAvailability(
                worker_id=worker_id,
                day=w.day,
                start_time=w.start,
                end_time=w.end,
                timezone=w.timezone,
            )
        )
    db.commit()
    logger.info("Replaced availability for worker %s with %d window(s)", worker_id, len(windows))
    return _windows(db, worker_id)
