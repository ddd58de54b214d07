from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Iterable, Optional
from uuid import UUID

from sqlalchemy import and_, delete, select
from sqlalchemy.orm import Session

from shiftplan.core.errors import ConflictError, NotFoundError, ValidationError
from shiftplan.models.shift import Shift
from shiftplan.models.shift_assignment import ShiftAssignment
from shiftplan.models.work_site import WorkSite
from shiftplan.models.worker import Worker
from shiftplan.scheduling import assignments as transitions
from shiftplan.scheduling.assignments import (
    ADMIN_ROLES,
    SCHEDULER_ROLES,
    WORKER_ROLES,
    Actor,
    Assignment,
    AssignmentTransition,
    ShiftRoster,
    require_role,
)
from shiftplan.scheduling.conflicts import assert_no_worker_conflicts
from shiftplan.scheduling.enums import AssignmentStatus, Role, ShiftStatus
from shiftplan.scheduling.time_utils import duration_minutes, ensure_utc
from shiftplan.services.assignment_lookup import SqlAssignmentLookup

logger = logging.getLogger(__name__)

ASSIGNABLE_ROLES = (Role.EMPLOYEE, Role.MANAGER)


# ---------- helpers ----------
def _get_shift(db: Session, shift_id: UUID, lock: bool = False) -> Shift:
    stmt = select(Shift).where(Shift.shift_id == shift_id)
    if lock:
        stmt = stmt.with_for_update()
    shift = db.execute(stmt).scalars().first()
    if not shift:
        raise NotFoundError("Shift not found")
    return shift


def _assignments(db: Session, shift_id: UUID) -> list[ShiftAssignment]:
    return (
        db.execute(
            select(ShiftAssignment)
            .where(ShiftAssignment.shift_id == shift_id)
            .order_by(ShiftAssignment.created_at)
        )
        .scalars()
        .all()
    )


def _lock_workers(db: Session, worker_ids: Iterable[UUID]) -> dict[UUID, Worker]:
    """Row-lock the workers so concurrent assignments for one worker run one at a time."""
    ids = list(dict.fromkeys(worker_ids))
    if not ids:
        return {}
    rows = (
        db.execute(select(Worker).where(Worker.worker_id.in_(ids)).order_by(Worker.worker_id).with_for_update())
        .scalars()
        .all()
    )
    found = {w.worker_id: w for w in rows}
    missing = [str(i) for i in ids if i not in found]
    if missing:
        raise NotFoundError(f"Worker not found: {', '.join(missing)}")
    return found


def _roster(shift: Shift, rows: list[ShiftAssignment]) -> ShiftRoster:
    return ShiftRoster(
        shift_id=shift.shift_id,
        title=shift.title,
        start=ensure_utc(shift.start_time),
        end=ensure_utc(shift.end_time),
        assignments=tuple(
            Assignment(worker_id=r.worker_id, status=r.status, assignment_id=r.assignment_id, note=r.note)
            for r in rows
        ),
        status=shift.status,
    )


def _check_range(start: datetime, end: datetime) -> None:
    if start >= end:
        raise ValidationError("Shift end time must be after start time")


def _check_site(db: Session, site_id: Optional[UUID]) -> None:
    if site_id is not None and db.get(WorkSite, site_id) is None:
        raise NotFoundError("Work site not found")


def _replace_assignments(db: Session, shift: Shift, worker_ids: list[UUID]) -> None:
    db.execute(delete(ShiftAssignment).where(ShiftAssignment.shift_id == shift.shift_id))
    for wid in worker_ids:
        db.add(ShiftAssignment(shift_id=shift.shift_id, worker_id=wid, status=AssignmentStatus.PENDING))
    db.flush()
    shift.status = transitions.recompute_shift_status(AssignmentStatus.PENDING for _ in worker_ids)


# ---------- queries ----------
def list_shifts(
    db: Session,
    status: Optional[ShiftStatus] = None,
    site_id: Optional[UUID] = None,
    start_from: Optional[datetime] = None,
    end_to: Optional[datetime] = None,
) -> list[Shift]:
    conditions = []
    if status is not None:
        conditions.append(Shift.status == status)
    if site_id is not None:
        conditions.append(Shift.site_id == site_id)
    if start_from is not None:
        conditions.append(Shift.start_time >= ensure_utc(start_from))
    if end_to is not None:
        conditions.append(Shift.end_time <= ensure_utc(end_to))

    stmt = select(Shift).order_by(Shift.start_time)
    if conditions:
        stmt = stmt.where(and_(*conditions))
    return db.execute(stmt).scalars().all()


def get_shift(db: Session, shift_id: UUID) -> tuple[Shift, list[ShiftAssignment]]:
    shift = _get_shift(db, shift_id)
    return shift, _assignments(db, shift_id)


def list_pending_for_worker(
    db: Session, actor: Actor, now: Optional[datetime] = None
) -> list[tuple[ShiftAssignment, Shift]]:
    """The actor's PENDING assignments on shifts that have not started yet, soonest first."""
    require_role(actor, WORKER_ROLES, "list pending")
    now = ensure_utc(now or datetime.now(timezone.utc))
    rows = db.execute(
        select(ShiftAssignment, Shift)
        .join(Shift, Shift.shift_id == ShiftAssignment.shift_id)
        .where(
            and_(
                ShiftAssignment.worker_id == actor.actor_id,
                ShiftAssignment.status == AssignmentStatus.PENDING,
                Shift.start_time >= now,
            )
        )
        .order_by(Shift.start_time)
    ).all()
    return [(assignment, shift) for assignment, shift in rows]


# ---------- create / update / delete ----------
def create_shift(
    db: Session,
    actor: Actor,
    title: str,
    start_time: datetime,
    end_time: datetime,
    shift_date: Optional[date] = None,
    description: Optional[str] = None,
    site_id: Optional[UUID] = None,
    required_workers: int = 1,
    assigned_worker_ids: Iterable[UUID] = (),
) -> Shift:
    require_role(actor, SCHEDULER_ROLES, "create")
    start = ensure_utc(start_time)
    end = ensure_utc(end_time)
    _check_range(start, end)
    _check_site(db, site_id)

    worker_ids = list(dict.fromkeys(assigned_worker_ids))
    _lock_workers(db, worker_ids)
    assert_no_worker_conflicts(SqlAssignmentLookup(db), worker_ids, start, end)

    shift = Shift(
        title=title,
        description=description,
        start_time=start,
        end_time=end,
        shift_date=shift_date or start.date(),
        duration_minutes=duration_minutes(start, end),
        site_id=site_id,
        required_workers=required_workers,
        status=ShiftStatus.PUBLISHED,
        created_by=actor.actor_id,
    )
    db.add(shift)
    db.flush()

    if worker_ids:
        _replace_assignments(db, shift, worker_ids)

    db.commit()
    db.refresh(shift)
    logger.info("Created shift %s (%s - %s) with %d assignee(s)", shift.shift_id, start, end, len(worker_ids))
    return shift


UPDATABLE_FIELDS = ("title", "description", "shift_date", "site_id", "required_workers")


def update_shift(
    db: Session,
    actor: Actor,
    shift_id: UUID,
    changes: dict,
    assigned_worker_ids: Optional[Iterable[UUID]] = None,
) -> Shift:
    """Partial update. ``assigned_worker_ids`` (when not None) replaces the roster."""
    require_role(actor, ADMIN_ROLES, "update")
    shift = _get_shift(db, shift_id, lock=True)

    start = ensure_utc(changes.get("start_time") or shift.start_time)
    end = ensure_utc(changes.get("end_time") or shift.end_time)
    _check_range(start, end)
    _check_site(db, changes.get("site_id"))

    if assigned_worker_ids is not None:
        worker_ids = list(dict.fromkeys(assigned_worker_ids))
    else:
        worker_ids = [a.worker_id for a in _assignments(db, shift_id)]

    _lock_workers(db, worker_ids)
    assert_no_worker_conflicts(SqlAssignmentLookup(db), worker_ids, start, end, exclude_shift_id=shift.shift_id)

    for field in UPDATABLE_FIELDS:
        if field in changes and changes[field] is not None:
            setattr(shift, field, changes[field])
    if changes.get("start_time") and changes.get("shift_date") is None:
        shift.shift_date = start.date()
    shift.start_time = start
    shift.end_time = end
    shift.duration_minutes = duration_minutes(start, end)

    if assigned_worker_ids is not None:
        _replace_assignments(db, shift, worker_ids)

    db.commit()
    db.refresh(shift)
    logger.info("Updated shift %s by %s (fields: %s)", shift_id, actor.actor_id, ", ".join(sorted(changes)) or "-")
    return shift


def delete_shift(db: Session, actor: Actor, shift_id: UUID) -> None:
    require_role(actor, ADMIN_ROLES, "delete")
    shift = _get_shift(db, shift_id, lock=True)
    db.execute(delete(ShiftAssignment).where(ShiftAssignment.shift_id == shift.shift_id))
    db.delete(shift)
    db.commit()
    logger.info("Deleted shift %s", shift_id)


# ---------- assignment actions ----------
def assign_worker(db: Session, shift_id: UUID, worker_id: UUID, actor: Actor) -> ShiftAssignment:
    require_role(actor, SCHEDULER_ROLES, "assign")
    shift = _get_shift(db, shift_id, lock=True)
    worker = _lock_workers(db, [worker_id])[worker_id]
    if not worker.is_active:
        raise ValidationError("Cannot assign an inactive worker")
    if worker.role not in ASSIGNABLE_ROLES:
        raise ValidationError("Can only assign shifts to employees or managers")

    roster = _roster(shift, _assignments(db, shift_id))
    try:
        result = transitions.assign_worker(roster, worker_id, actor, SqlAssignmentLookup(db))
    except ConflictError as e:
        logger.warning("Rejected assignment of worker %s to shift %s: %s", worker_id, shift_id, e.detail)
        raise

    row = ShiftAssignment(shift_id=shift.shift_id, worker_id=worker_id, status=result.current)
    db.add(row)
    shift.status = result.roster.status
    db.commit()
    db.refresh(row)
    logger.info("Assigned worker %s to shift %s by %s", worker_id, shift_id, actor.actor_id)
    return row


def confirm_shift(db: Session, shift_id: UUID, actor: Actor, note: Optional[str] = None) -> ShiftAssignment:
    require_role(actor, WORKER_ROLES, "confirm")
    shift = _get_shift(db, shift_id, lock=True)
    _lock_workers(db, [actor.actor_id])
    rows = _assignments(db, shift_id)

    try:
        result = transitions.confirm_assignment(_roster(shift, rows), actor, SqlAssignmentLookup(db), note=note)
    except ConflictError as e:
        logger.warning("Rejected confirmation of shift %s by %s: %s", shift_id, actor.actor_id, e.detail)
        raise

    row = next(r for r in rows if r.worker_id == actor.actor_id)
    row.status = result.current
    row.note = note
    row.accepted_at = datetime.now(timezone.utc)
    shift.status = result.roster.status
    db.commit()
    db.refresh(row)
    logger.info("Worker %s confirmed shift %s; shift is now %s", actor.actor_id, shift_id, shift.status.value)
    return row


def decline_shift(db: Session, shift_id: UUID, actor: Actor, reason: Optional[str] = None) -> AssignmentTransition:
    """Decline and delete the actor's assignment.

    The returned transition carries the DECLINED status and the reason for
    callers that notify or audit; nothing DECLINED is persisted.
    """
    shift = _get_shift(db, shift_id, lock=True)
    rows = _assignments(db, shift_id)

    result = transitions.decline_assignment(_roster(shift, rows), actor, reason=reason)

    row = next(r for r in rows if r.worker_id == actor.actor_id)
    db.delete(row)
    shift.status = result.roster.status
    db.commit()
    logger.info(
        "Worker %s declined shift %s (reason: %s); shift is now %s",
        actor.actor_id,
        shift_id,
        reason,
        shift.status.value,
    )
    return result
