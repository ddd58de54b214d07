import uuid
from sqlalchemy import Column, Enum, ForeignKey, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func
from sqlalchemy.sql.sqltypes import DateTime

from shiftplan.core.database import Base
from shiftplan.models.shift import Shift  # noqa: F401
from shiftplan.models.worker import Worker  # noqa: F401
from shiftplan.scheduling.enums import AssignmentStatus


class ShiftAssignment(Base):
    __tablename__ = "shift_assignments"
    __table_args__ = (UniqueConstraint("shift_id", "worker_id", name="uq_shift_assignments_shift_worker"),)

    assignment_id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    shift_id = Column(UUID(as_uuid=True), ForeignKey("shifts.shift_id", ondelete="CASCADE"), nullable=False, index=True)
    worker_id = Column(UUID(as_uuid=True), ForeignKey("workers.worker_id", ondelete="CASCADE"), nullable=False, index=True)

    status = Column(Enum(AssignmentStatus, name="assignment_status"), nullable=False, default=AssignmentStatus.PENDING)
    note = Column(Text, nullable=True)
    accepted_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
