from sqlalchemy import Column, String, Date, DateTime, Integer, ForeignKey, text
from sqlalchemy.orm import relationship
from collabspace.database import Base


class UserStreak(Base):
    __tablename__ = "user_streaks"

    # user_id as primary key keeps exactly one row per user
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    timezone = Column(String, nullable=False, default="UTC")

    # Streak counters
    current_streak = Column(Integer, nullable=False, default=0)
    longest_streak = Column(Integer, nullable=False, default=0)
    total_active_days = Column(Integer, nullable=False, default=0)

    # Dates/timestamps
    last_active_local_date = Column(Date, nullable=True)
    last_active_at_utc = Column(DateTime(timezone=True), nullable=True)

    # Bumped on every write; updates are conditional on the value last read
    version = Column(Integer, nullable=False, default=1)

    created_at = Column(DateTime, server_default=text('CURRENT_TIMESTAMP'))
    updated_at = Column(DateTime, server_default=text('CURRENT_TIMESTAMP'))

    user = relationship("User", back_populates="streak")

    def __repr__(self) -> str:
        return (
            f"<UserStreak user_id={self.user_id} current={self.current_streak} "
            f"longest={self.longest_streak} last_local={self.last_active_local_date} "
            f"tz={self.timezone} v={self.version}>"
        )
