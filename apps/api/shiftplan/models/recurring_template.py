import uuid
from sqlalchemy import Column, Date, Enum, Integer, JSON, String, Text, Time
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func
from sqlalchemy.sql.sqltypes import DateTime

from shiftplan.core.database import Base
from shiftplan.scheduling.enums import RecurrenceRule


class RecurringShiftTemplate(Base):
    __tablename__ = "recurring_templates"

    template_id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    name = Column(Text, nullable=False)
    description = Column(Text, nullable=True)

    rule = Column(Enum(RecurrenceRule, name="recurrence_rule"), nullable=False)
    interval = Column(Integer, nullable=False, default=1)
    by_weekday = Column(JSON, nullable=False, default=list)  # ["TUE", "THU"]

    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)  # inclusive

    shift_duration = Column(Integer, nullable=False)  # minutes
    base_start_time = Column(Time, nullable=False)
    timezone = Column(String, nullable=False, default="UTC")

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
