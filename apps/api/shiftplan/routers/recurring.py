from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from shiftplan.core.database import get_db
from shiftplan.routers.deps import get_actor
from shiftplan.scheduling.assignments import Actor
from shiftplan.schemas.recurring import ExpandRequest, RecurringTemplateCreate, RecurringTemplateOut
from shiftplan.schemas.shifts import ShiftOut
from shiftplan.services import recurring_service

router = APIRouter()


@router.get("", response_model=list[RecurringTemplateOut])
def list_templates(db: Session = Depends(get_db)):
    return recurring_service.list_templates(db)


@router.post("", response_model=RecurringTemplateOut, status_code=201)
def create_template(
    req: RecurringTemplateCreate,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
):
    return recurring_service.create_template(db, actor, **req.model_dump())


@router.post("/{template_id}/expand", response_model=list[ShiftOut])
def expand_template(
    template_id: UUID,
    req: ExpandRequest,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
):
    return recurring_service.expand_template(db, actor, template_id, req.range_start, req.range_end)


@router.delete("/{template_id}")
def delete_template(
    template_id: UUID,
    cascade_shifts: bool = Query(True),
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
):
    recurring_service.delete_template(db, actor, template_id, cascade_shifts=cascade_shifts)
    return {"deleted": True}
