from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from shiftplan.core.database import get_db
from shiftplan.routers.deps import get_actor
from shiftplan.scheduling.assignments import Actor
from shiftplan.scheduling.enums import parse_shift_status
from shiftplan.schemas.shifts import (
    AssignmentOut,
    AssignRequest,
    ConfirmRequest,
    DeclineOut,
    DeclineRequest,
    PendingAssignmentOut,
    ShiftCreate,
    ShiftDetailOut,
    ShiftOut,
    ShiftUpdate,
)
from shiftplan.services import shift_service

router = APIRouter()


@router.get("", response_model=list[ShiftOut])
def list_shifts(
    status: Optional[str] = Query(None),
    site_id: Optional[UUID] = Query(None),
    start_from: Optional[datetime] = Query(None, alias="from"),
    end_to: Optional[datetime] = Query(None, alias="to"),
    db: Session = Depends(get_db),
):
    return shift_service.list_shifts(
        db,
        status=parse_shift_status(status) if status else None,
        site_id=site_id,
        start_from=start_from,
        end_to=end_to,
    )


@router.post("", response_model=ShiftOut, status_code=201)
def create_shift(req: ShiftCreate, actor: Actor = Depends(get_actor), db: Session = Depends(get_db)):
    return shift_service.create_shift(
        db,
        actor,
        title=req.title,
        start_time=req.start_time,
        end_time=req.end_time,
        shift_date=req.shift_date,
        description=req.description,
        site_id=req.site_id,
        required_workers=req.required_workers,
        assigned_worker_ids=req.assigned_worker_ids,
    )


@router.get("/pending", response_model=list[PendingAssignmentOut])
def list_pending(actor: Actor = Depends(get_actor), db: Session = Depends(get_db)):
    """Assignments the acting worker still has to confirm or decline."""
    return [
        PendingAssignmentOut(**AssignmentOut.model_validate(a).model_dump(), shift=ShiftOut.model_validate(s))
        for a, s in shift_service.list_pending_for_worker(db, actor)
    ]


@router.get("/{shift_id}", response_model=ShiftDetailOut)
def get_shift(shift_id: UUID, db: Session = Depends(get_db)):
    shift, assignments = shift_service.get_shift(db, shift_id)
    out = ShiftDetailOut.model_validate(shift)
    out.assignments = [AssignmentOut.model_validate(a) for a in assignments]
    return out


@router.patch("/{shift_id}", response_model=ShiftOut)
def update_shift(
    shift_id: UUID,
    req: ShiftUpdate,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
):
    changes = req.model_dump(exclude_unset=True, exclude={"assigned_worker_ids"})
    return shift_service.update_shift(db, actor, shift_id, changes, assigned_worker_ids=req.assigned_worker_ids)


@router.delete("/{shift_id}")
def delete_shift(shift_id: UUID, actor: Actor = Depends(get_actor), db: Session = Depends(get_db)):
    shift_service.delete_shift(db, actor, shift_id)
    return {"deleted": True}


@router.patch("/{shift_id}/assign", response_model=AssignmentOut)
def assign_shift(
    shift_id: UUID,
    req: AssignRequest,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
):
    return shift_service.assign_worker(db, shift_id, req.worker_id, actor)


@router.patch("/{shift_id}/confirm", response_model=AssignmentOut)
def confirm_shift(
    shift_id: UUID,
    req: ConfirmRequest,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
):
    return shift_service.confirm_shift(db, shift_id, actor, note=req.note)


@router.patch("/{shift_id}/decline", response_model=DeclineOut)
def decline_shift(
    shift_id: UUID,
    req: DeclineRequest,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
):
    result = shift_service.decline_shift(db, shift_id, actor, reason=req.reason)
    return DeclineOut(
        shift_id=shift_id,
        worker_id=result.worker_id,
        status=result.current,
        shift_status=result.roster.status,
        reason=result.note,
    )
