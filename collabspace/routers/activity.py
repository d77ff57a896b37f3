from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session
from datetime import date, datetime, timedelta

from collabspace import crud
from collabspace.auth import get_current_user
from collabspace.config import ACTIVITY_STATS_DAYS
from collabspace.database import get_db
from collabspace.dependencies import get_utc_now
from collabspace.exceptions import InternalError
from collabspace.middleware.rate_limit import rate_limit_streak_read
from collabspace.schemas import (
    ActivityDayCount,
    ActivityListResponse,
    ActivityPageResponse,
    ActivityStats,
    ActivityStatsResponse,
    ActivityTypeCount,
    CurrentUser,
)
from collabspace.services.streak_service import activity_payload
from collabspace.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/activity", tags=["activity"])


@router.get("/date/{activity_date}", response_model=ActivityListResponse)
@rate_limit_streak_read
def get_activities_for_date(
    request: Request,
    activity_date: date,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Activities on one calendar day (YYYY-MM-DD, streak timezone), newest first."""
    try:
        records = crud.get_activities_for_date(db, current_user.id, activity_date)
    except Exception as e:
        logger.exception(f"Failed to fetch activities for {activity_date} for user {current_user.id}: {e}")
        raise InternalError("Failed to fetch activities")

    logger.debug(f"Retrieved {len(records)} activities for {activity_date}")
    return ActivityListResponse(data=[activity_payload(r) for r in records])


@router.get("/all", response_model=ActivityPageResponse)
@rate_limit_streak_read
def get_all_activities(
    request: Request,
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Page through the caller's activity log, newest first."""
    try:
        records = crud.get_activities(db, current_user.id, limit=limit, offset=offset)
        total = crud.count_activities(db, current_user.id)
    except Exception as e:
        logger.exception(f"Failed to fetch activity page for user {current_user.id}: {e}")
        raise InternalError("Failed to fetch activities")

    return ActivityPageResponse(
        data=[activity_payload(r) for r in records],
        total=total,
        limit=limit,
        offset=offset,
    )


@router.get("/stats", response_model=ActivityStatsResponse)
@rate_limit_streak_read
def get_activity_stats(
    request: Request,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    now_utc: datetime = Depends(get_utc_now),
):
    """Totals per activity type, and per day over the last 30 days."""
    since = now_utc - timedelta(days=ACTIVITY_STATS_DAYS)
    try:
        total = crud.count_activities(db, current_user.id)
        by_type = crud.count_activities_by_type(db, current_user.id)
        by_date = crud.count_activities_by_date(db, current_user.id, since)
    except Exception as e:
        logger.exception(f"Failed to compute activity stats for user {current_user.id}: {e}")
        raise InternalError("Failed to fetch activity statistics")

    return ActivityStatsResponse(
        data=ActivityStats(
            total_activities=total,
            activities_by_type=[ActivityTypeCount(activity_type=t, count=n) for t, n in by_type],
            activities_by_date=[ActivityDayCount(day=d, count=n) for d, n in by_date],
        )
    )
