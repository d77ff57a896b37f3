from collabspace.crud.user import (
    get_user,
    create_user,
    update_user_display_name,
)
from collabspace.crud.streak import (
    get_streak,
    get_today_in_tz,
    compute_effective_streak,
    compute_next_streak,
    apply_activity,
    force_streak,
    StreakUpdateConflict,
)
from collabspace.crud.activity import (
    create_activity,
    get_activities_for_date,
    get_activities,
    count_activities,
    count_activities_by_type,
    count_activities_by_date,
    count_active_days,
    get_activity_calendar,
)

__all__ = [
    # User operations
    "get_user",
    "create_user",
    "update_user_display_name",

    # Streak operations
    "get_streak",
    "get_today_in_tz",
    "compute_effective_streak",
    "compute_next_streak",
    "apply_activity",
    "force_streak",
    "StreakUpdateConflict",

    # Activity operations
    "create_activity",
    "get_activities_for_date",
    "get_activities",
    "count_activities",
    "count_activities_by_type",
    "count_activities_by_date",
    "count_active_days",
    "get_activity_calendar",
]
