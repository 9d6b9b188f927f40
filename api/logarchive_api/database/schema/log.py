from sqlalchemy import Column, DateTime, Index, Text
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.sql import func

from logarchive_api.database.schema.base import Base


class Log(Base):
    """Unarchived application log row. Written by the application loggers, drained by the archiver."""

    __tablename__ = "logs"

    id = Column(UUID(as_uuid=False), primary_key=True, server_default=func.gen_random_uuid())
    user_id = Column(Text)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    log_date = Column(Text)  # YYYY-MM-DD
    log_time = Column(Text)
    timezone = Column(Text)

    module = Column(Text)
    level = Column(Text)
    action = Column(Text)
    message = Column(Text)
    # `metadata` is reserved on declarative classes
    metadata_ = Column("metadata", JSONB)
    error_stack = Column(Text)

    __table_args__ = (Index("idx_logs_created_at", "created_at"),)
