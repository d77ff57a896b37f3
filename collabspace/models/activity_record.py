from sqlalchemy import Column, String, Date, DateTime, ForeignKey, Index, JSON
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from collabspace.database import Base
import uuid


class ActivityRecord(Base):
    """One tracked user action. Append-only: rows are never updated."""
    __tablename__ = "activity_records"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    activity_type = Column(String(50), nullable=False)
    details = Column(JSON, nullable=True)  # opaque client payload, stored verbatim
    occurred_at = Column(DateTime(timezone=True), nullable=False)
    # Calendar day of occurred_at in the user's streak timezone
    activity_date = Column(Date, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    user = relationship("User", back_populates="activities")

    __table_args__ = (
        Index("ix_activity_records_user_date", "user_id", "activity_date"),
        Index("ix_activity_records_user_occurred", "user_id", "occurred_at"),
    )

    def __repr__(self) -> str:
        return f"<ActivityRecord id={self.id} user_id={self.user_id} type={self.activity_type} date={self.activity_date}>"
