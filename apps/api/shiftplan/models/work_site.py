import uuid
from sqlalchemy import Column, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func
from sqlalchemy.sql.sqltypes import DateTime

from shiftplan.core.database import Base


class WorkSite(Base):
    __tablename__ = "work_sites"

    site_id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    name = Column(Text, nullable=False)
    address = Column(Text, nullable=True)
    timezone = Column(String, nullable=False, default="UTC")

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
