from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class WorkSiteCreate(BaseModel):
    name: str = Field(min_length=2)
    address: Optional[str] = None
    timezone: Optional[str] = None  # falls back to settings.default_timezone


class WorkSiteOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    site_id: UUID
    name: str
    address: Optional[str] = None
    timezone: str
    created_at: Optional[datetime] = None
