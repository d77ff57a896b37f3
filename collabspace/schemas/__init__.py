from collabspace.schemas.user import CurrentUser
from collabspace.schemas.activity import (
    ActivityCreate, ActivityRecordOut, ActivityListResponse, ActivityPageResponse,
    ActivityTypeCount, ActivityDayCount, ActivityStats, ActivityStatsResponse
)
from collabspace.schemas.streak import (
    ActivityDay, StreakCounters, StreakDataResponse, ActivityRecordedResponse,
    StreakTestResponse, StreakForceUpdateResponse, DebugResponse
)

__all__ = [
    "CurrentUser",
    "ActivityCreate", "ActivityRecordOut", "ActivityListResponse", "ActivityPageResponse",
    "ActivityTypeCount", "ActivityDayCount", "ActivityStats", "ActivityStatsResponse",
    "ActivityDay", "StreakCounters", "StreakDataResponse", "ActivityRecordedResponse",
    "StreakTestResponse", "StreakForceUpdateResponse", "DebugResponse",
]
