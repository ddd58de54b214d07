from datetime import time
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from shiftplan.scheduling.enums import Role, WeekDay


class WorkerCreate(BaseModel):
    name: str
    email: EmailStr
    phone: Optional[str] = None
    role: Role = Role.EMPLOYEE
    is_subcontractor: bool = False


class WorkerOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    worker_id: UUID
    name: str
    email: str
    phone: Optional[str] = None
    role: Role
    is_subcontractor: bool
    is_active: bool


class AvailabilityWindowIn(BaseModel):
    day: str
    start_time: Optional[str] = None  # HH:mm
    end_time: Optional[str] = None  # HH:mm
    timezone: Optional[str] = None  # falls back to settings.default_timezone


class AvailabilityProfileIn(BaseModel):
    availability: list[AvailabilityWindowIn] = Field(default_factory=list)


class AvailabilityOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    availability_id: UUID
    worker_id: UUID
    day: WeekDay
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    timezone: str


class WeeklyLimitIn(BaseModel):
    weekly_cap_minutes: int = Field(gt=0)


class WeeklyLimitOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    worker_id: UUID
    weekly_cap_minutes: int
