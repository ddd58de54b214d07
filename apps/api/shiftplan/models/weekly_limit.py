import uuid
from sqlalchemy import Column, Integer, ForeignKey
from sqlalchemy.dialects.postgresql import UUID

from shiftplan.core.database import Base
from shiftplan.models.worker import Worker  # noqa: F401

class WeeklyLimit(Base):
    __tablename__ = "weekly_limits"

    weekly_limit_id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    worker_id = Column(
        UUID(as_uuid=True),
        ForeignKey("workers.worker_id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )

    weekly_cap_minutes = Column(Integer, nullable=False)
