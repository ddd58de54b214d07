from datetime import date, datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from shiftplan.scheduling.enums import AssignmentStatus, RecurrenceRule, ShiftStatus


class ShiftCreate(BaseModel):
    title: str = Field(min_length=2)
    description: Optional[str] = None
    start_time: datetime
    end_time: datetime
    shift_date: Optional[date] = None
    site_id: Optional[UUID] = None
    required_workers: int = Field(default=1, ge=1)
    assigned_worker_ids: list[UUID] = Field(default_factory=list)


class ShiftUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=2)
    description: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    shift_date: Optional[date] = None
    site_id: Optional[UUID] = None
    required_workers: Optional[int] = Field(default=None, ge=1)
    # None keeps the roster; a list (even empty) replaces it
    assigned_worker_ids: Optional[list[UUID]] = None


class AssignmentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    assignment_id: UUID
    shift_id: UUID
    worker_id: UUID
    status: AssignmentStatus
    note: Optional[str] = None
    accepted_at: Optional[datetime] = None


class ShiftOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    shift_id: UUID
    title: str
    description: Optional[str] = None
    start_time: datetime
    end_time: datetime
    shift_date: date
    duration_minutes: int
    site_id: Optional[UUID] = None
    recurring_template_id: Optional[UUID] = None
    is_recurring: bool
    recurring_rule: RecurrenceRule
    required_workers: int
    status: ShiftStatus
    created_by: Optional[UUID] = None


class ShiftDetailOut(ShiftOut):
    assignments: list[AssignmentOut] = Field(default_factory=list)


class AssignRequest(BaseModel):
    worker_id: UUID


class ConfirmRequest(BaseModel):
    note: Optional[str] = None


class DeclineRequest(BaseModel):
    reason: Optional[str] = None


class DeclineOut(BaseModel):
    shift_id: UUID
    worker_id: UUID
    status: AssignmentStatus
    shift_status: ShiftStatus
    reason: Optional[str] = None
    message: str = "Shift assignment declined and removed"


class PendingAssignmentOut(AssignmentOut):
    shift: ShiftOut
