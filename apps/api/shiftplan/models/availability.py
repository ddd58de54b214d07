import uuid
from sqlalchemy import Column, String, Time, Enum, ForeignKey
from sqlalchemy.dialects.postgresql import UUID

from shiftplan.core.database import Base
from shiftplan.models.worker import Worker  # noqa: F401
from shiftplan.scheduling.enums import WeekDay

class WorkerAvailability(Base):
    __tablename__ = "worker_availability"

    availability_id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    worker_id = Column(
        UUID(as_uuid=True),
        ForeignKey("workers.worker_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    day = Column(Enum(WeekDay, name="week_day"), nullable=False)
    # both NULL = unavailable that day
    start_time = Column(Time, nullable=True)
    end_time = Column(Time, nullable=True)
    timezone = Column(String, nullable=False, default="UTC")
