from collabspace.database import Base
from collabspace.models.user import User
from collabspace.models.user_streak import UserStreak
from collabspace.models.activity_record import ActivityRecord

__all__ = ["Base", "User", "UserStreak", "ActivityRecord"]
