from typing import List, Optional
from datetime import date, datetime

from collabspace.schemas.activity import CamelModel, ActivityRecordOut


class ActivityDay(CamelModel):
    day: date
    activity_count: int
    activities: List[ActivityRecordOut]


class StreakCounters(CamelModel):
    current_streak: int
    longest_streak: int
    total_active_days: int


class StreakDataResponse(StreakCounters):
    success: bool = True
    last_active_date: Optional[date] = None
    timezone: str
    today: date
    is_streak_active: bool
    activity_calendar: List[ActivityDay]
    motivational_message: str


class ActivityRecordedResponse(StreakCounters):
    success: bool = True
    last_active_date: Optional[date] = None
    is_new_streak_day: bool
    is_new_streak: bool
    activity: ActivityRecordOut
    motivational_message: str


class StreakTestResponse(CamelModel):
    success: bool = True
    message: str
    data: ActivityRecordedResponse


class StreakForceUpdateResponse(CamelModel):
    success: bool = True
    message: str
    data: StreakCounters


class DebugResponse(CamelModel):
    success: bool = True
    message: str
    timestamp: datetime
