from datetime import date, datetime, time
from typing import Optional, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from shiftplan.scheduling.enums import RecurrenceRule


class RecurringTemplateCreate(BaseModel):
    # rule / weekdays / time stay loose strings; the scheduling core parses them
    name: str
    description: Optional[str] = None
    rule: str
    interval: int = 1
    by_weekday: list[str] = Field(default_factory=list)
    start_date: date
    end_date: Optional[date] = None
    shift_duration: int
    base_start_time: str
    timezone: Optional[str] = None  # falls back to settings.default_timezone


class RecurringTemplateOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    template_id: UUID
    name: str
    description: Optional[str] = None
    rule: RecurrenceRule
    interval: int
    by_weekday: list[str]
    start_date: date
    end_date: Optional[date] = None
    shift_duration: int
    base_start_time: time
    timezone: str


class ExpandRequest(BaseModel):
    range_start: Union[datetime, date]
    range_end: Union[datetime, date]
