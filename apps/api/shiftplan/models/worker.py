import uuid
from sqlalchemy import Column, String, Boolean, DateTime, Enum
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func

from shiftplan.core.database import Base
from shiftplan.scheduling.enums import Role

class Worker(Base):
    __tablename__ = "workers"

    worker_id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    name = Column(String, nullable=False)
    email = Column(String, nullable=False, unique=True)
    phone = Column(String, nullable=True)
    role = Column(Enum(Role, name="worker_role"), nullable=False, default=Role.EMPLOYEE)

    is_subcontractor = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
