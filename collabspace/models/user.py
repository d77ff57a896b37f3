from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from collabspace.database import Base

class User(Base):
    """Workspace member, keyed by Firebase UID. Rows are created by the auth layer."""
    __tablename__ = "users"

    id = Column(String, primary_key=True)  # Firebase UID
    email = Column(String, unique=True, index=True, nullable=True)
    display_name = Column(String, nullable=True)
    state = Column(String, default="inactive", nullable=False)  # User activation state
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    streak = relationship("UserStreak", back_populates="user", uselist=False, cascade="all, delete-orphan")
    activities = relationship("ActivityRecord", back_populates="user", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<User id={self.id} email={self.email} display_name={self.display_name}>"
