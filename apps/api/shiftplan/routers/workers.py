from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from shiftplan.core.database import get_db
from shiftplan.routers.deps import get_actor
from shiftplan.scheduling.assignments import Actor
from shiftplan.schemas.workers import (
    AvailabilityOut,
    AvailabilityProfileIn,
    AvailabilityWindowIn,
    WeeklyLimitIn,
    WeeklyLimitOut,
    WorkerCreate,
    WorkerOut,
)
from shiftplan.services import availability_service, worker_service

router = APIRouter()


# --- Workers ---
@router.get("", response_model=list[WorkerOut])
def list_workers(active_only: bool = Query(False), db: Session = Depends(get_db)):
    return worker_service.list_workers(db, active_only=active_only)


@router.post("", response_model=WorkerOut, status_code=201)
def create_worker(req: WorkerCreate, actor: Actor = Depends(get_actor), db: Session = Depends(get_db)):
    return worker_service.create_worker(db, actor, **req.model_dump())


@router.get("/{worker_id}", response_model=WorkerOut)
def get_worker(worker_id: UUID, db: Session = Depends(get_db)):
    return worker_service.get_worker(db, worker_id)


# --- Availability ---
@router.get("/{worker_id}/availability", response_model=list[AvailabilityOut])
def list_availability(worker_id: UUID, db: Session = Depends(get_db)):
    return availability_service.list_availability(db, worker_id)


@router.put("/{worker_id}/availability", response_model=list[AvailabilityOut])
def replace_availability(
    worker_id: UUID,
    payload: AvailabilityProfileIn,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
):
    return availability_service.replace_profile(db, actor, worker_id, [w.model_dump() for w in payload.availability])


@router.post("/{worker_id}/availability", response_model=AvailabilityOut, status_code=201)
def create_availability(
    worker_id: UUID,
    payload: AvailabilityWindowIn,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
):
    return availability_service.create_window(
        db, actor, worker_id, payload.day, payload.start_time, payload.end_time, payload.timezone
    )


@router.put("/{worker_id}/availability/{availability_id}", response_model=AvailabilityOut)
def update_availability(
    worker_id: UUID,
    availability_id: UUID,
    payload: AvailabilityWindowIn,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
):
    return availability_service.update_window(
        db, actor, worker_id, availability_id, payload.day, payload.start_time, payload.end_time, payload.timezone
    )


@router.delete("/{worker_id}/availability/{availability_id}")
def delete_availability(
    worker_id: UUID,
    availability_id: UUID,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
):
    availability_service.delete_window(db, actor, worker_id, availability_id)
    return {"ok": True}


# --- Weekly limit ---
@router.get("/{worker_id}/weekly-limit", response_model=Optional[WeeklyLimitOut])
def get_weekly_limit(worker_id: UUID, actor: Actor = Depends(get_actor), db: Session = Depends(get_db)):
    return worker_service.get_weekly_limit(db, actor, worker_id)


@router.put("/{worker_id}/weekly-limit", response_model=WeeklyLimitOut)
def set_weekly_limit(
    worker_id: UUID,
    payload: WeeklyLimitIn,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
):
    return worker_service.set_weekly_limit(db, actor, worker_id, payload.weekly_cap_minutes)
