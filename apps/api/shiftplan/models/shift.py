import uuid
from sqlalchemy import Boolean, Column, Date, Enum, ForeignKey, Integer, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func
from sqlalchemy.sql.sqltypes import DateTime

from shiftplan.core.database import Base
# FK targets must be registered on Base.metadata before a Shift is flushed
from shiftplan.models.recurring_template import RecurringShiftTemplate  # noqa: F401
from shiftplan.models.work_site import WorkSite  # noqa: F401
from shiftplan.scheduling.enums import RecurrenceRule, ShiftStatus


class Shift(Base):
    __tablename__ = "shifts"

    shift_id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    title = Column(Text, nullable=False)
    description = Column(Text, nullable=True)

    start_time = Column(DateTime(timezone=True), nullable=False, index=True)
    end_time = Column(DateTime(timezone=True), nullable=False)
    shift_date = Column(Date, nullable=False)
    duration_minutes = Column(Integer, nullable=False)

    site_id = Column(UUID(as_uuid=True), ForeignKey("work_sites.site_id", ondelete="SET NULL"), nullable=True)
    recurring_template_id = Column(
        UUID(as_uuid=True),
        ForeignKey("recurring_templates.template_id", ondelete="SET NULL"),
        nullable=True,
    )
    is_recurring = Column(Boolean, nullable=False, default=False)
    recurring_rule = Column(Enum(RecurrenceRule, name="recurrence_rule"), nullable=False, default=RecurrenceRule.NONE)

    required_workers = Column(Integer, nullable=False, default=1)
    status = Column(Enum(ShiftStatus, name="shift_status"), nullable=False, default=ShiftStatus.PUBLISHED)

    created_by = Column(UUID(as_uuid=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
