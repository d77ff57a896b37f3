from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from typing import Any, List, Optional
from datetime import date, datetime


class CamelModel(BaseModel):
    """Base for API payloads: snake_case in Python, camelCase on the wire."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class ActivityCreate(CamelModel):
    # Optional here so a missing tag yields the 400 envelope, not a 422
    activity_type: Optional[str] = None
    details: Optional[Any] = None


class ActivityRecordOut(CamelModel):
    id: str
    activity_type: str
    details: Optional[Any] = None
    occurred_at: datetime
    activity_date: date


class ActivityListResponse(CamelModel):
    success: bool = True
    data: List[ActivityRecordOut]


class ActivityPageResponse(ActivityListResponse):
    total: int
    limit: int
    offset: int


class ActivityTypeCount(CamelModel):
    activity_type: str
    count: int


class ActivityDayCount(CamelModel):
    day: date
    count: int


class ActivityStats(CamelModel):
    total_activities: int
    activities_by_type: List[ActivityTypeCount]
    activities_by_date: List[ActivityDayCount]


class ActivityStatsResponse(CamelModel):
    success: bool = True
    data: ActivityStats
