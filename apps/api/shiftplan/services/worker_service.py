from __future__ import annotations

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from shiftplan.core.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from shiftplan.models.weekly_limit import WeeklyLimit
from shiftplan.models.worker import Worker
from shiftplan.scheduling.assignments import SCHEDULER_ROLES, Actor, require_role
from shiftplan.scheduling.enums import Role

logger = logging.getLogger(__name__)


def get_worker(db: Session, worker_id: UUID) -> Worker:
    worker = db.get(Worker, worker_id)
    if not worker:
        raise NotFoundError("Worker not found")
    return worker


def list_workers(db: Session, active_only: bool = False) -> list[Worker]:
    stmt = select(Worker).order_by(Worker.name)
    if active_only:
        stmt = stmt.where(Worker.is_active == True)  # noqa: E712
    return db.execute(stmt).scalars().all()


def create_worker(
    db: Session,
    actor: Actor,
    name: str,
    email: str,
    role: Role = Role.EMPLOYEE,
    phone: Optional[str] = None,
    is_subcontractor: bool = False,
) -> Worker:
    require_role(actor, SCHEDULER_ROLES, "create workers for")
    exists = db.execute(select(Worker.worker_id).where(Worker.email == email)).first()
    if exists:
        raise ConflictError(f"Worker with email {email} already exists")

    worker = Worker(name=name, email=email, role=role, phone=phone, is_subcontractor=is_subcontractor)
    db.add(worker)
    db.commit()
    db.refresh(worker)
    return worker


def get_weekly_limit(db: Session, actor: Actor, worker_id: UUID) -> Optional[WeeklyLimit]:
    get_worker(db, worker_id)
    if actor.role == Role.EMPLOYEE and actor.actor_id != worker_id:
        raise ForbiddenError("You can only view your own weekly limit")
    return db.execute(select(WeeklyLimit).where(WeeklyLimit.worker_id == worker_id)).scalars().first()


def set_weekly_limit(db: Session, actor: Actor, worker_id: UUID, weekly_cap_minutes: int) -> WeeklyLimit:
    if actor.role not in SCHEDULER_ROLES:
        raise ForbiddenError("Employees cannot modify weekly hour limits")
    get_worker(db, worker_id)
    if weekly_cap_minutes <= 0:
        raise ValidationError("weekly_cap_minutes must be positive")

    limit = db.execute(select(WeeklyLimit).where(WeeklyLimit.worker_id == worker_id)).scalars().first()
    if limit is None:
        limit = WeeklyLimit(worker_id=worker_id, weekly_cap_minutes=weekly_cap_minutes)
        db.add(limit)
    else:
        limit.weekly_cap_minutes = weekly_cap_minutes
    db.commit()
    db.refresh(limit)
    logger.info("Weekly cap for worker %s set to %d minutes", worker_id, weekly_cap_minutes)
    return limit
