from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Index, Integer, String

from stockkeeper.database.base import Base


class ActivityLog(Base):
    __tablename__ = "activity_logs"

    id = Column(Integer, primary_key=True)
    action = Column(String(20), nullable=False)
    details = Column(String, nullable=False)

    timestamp = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    user_id = Column(String)
    item_id = Column(Integer)

    __table_args__ = (
        Index("idx_activity_logs_timestamp", "timestamp"),
    )


__all__ = ["ActivityLog"]
