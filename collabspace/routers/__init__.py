# API Routers
from collabspace.routers import streaks, activity

__all__ = ["streaks", "activity"]
