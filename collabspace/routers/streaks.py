from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
from typing import Optional
from datetime import datetime, timezone as dt_timezone

from collabspace.database import get_db
from collabspace.auth import get_current_user
from collabspace.config import ACTIVITY_TYPES
from collabspace.dependencies import get_utc_now
from collabspace.exceptions import CollabSpaceError, InternalError, ValidationError, error_for_result
from collabspace.middleware.rate_limit import (
    rate_limit_activity_write,
    rate_limit_diagnostics,
    rate_limit_streak_read,
)
from collabspace.schemas import (
    ActivityCreate,
    ActivityRecordedResponse,
    CurrentUser,
    DebugResponse,
    StreakDataResponse,
    StreakForceUpdateResponse,
    StreakTestResponse,
)
from collabspace.services.motivation import get_motivational_message
from collabspace.services.streak_service import (
    force_update_streak,
    get_user_streak_data,
    record_activity,
)
from collabspace.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/streak", tags=["streak"])


def _validate_activity_type(activity_type):
    if not activity_type or not activity_type.strip():
        raise ValidationError("Activity type is required")
    if activity_type not in ACTIVITY_TYPES:
        raise ValidationError(f"Unsupported activity type: {activity_type}")


@router.get("/data", response_model=StreakDataResponse)
@rate_limit_streak_read
def get_streak_data(
    request: Request,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    now_utc: datetime = Depends(get_utc_now),
):
    """Get the caller's streak, activity calendar and motivational message."""
    try:
        result = get_user_streak_data(db, current_user.id, now_utc=now_utc)
    except Exception as e:
        logger.exception(f"Failed to get streak data for user {current_user.id}: {e}")
        raise InternalError()

    if not result["success"]:
        raise error_for_result(result)

    return StreakDataResponse(
        **result,
        motivational_message=get_motivational_message(result["current_streak"]),
    )


@router.post("/activity", response_model=ActivityRecordedResponse)
@rate_limit_activity_write
def post_activity(
    request: Request,
    body: Optional[ActivityCreate] = None,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    now_utc: datetime = Depends(get_utc_now),
):
    """Record an activity for the caller and return the updated streak."""
    # An absent or null body is treated like an empty object
    body = body or ActivityCreate()
    _validate_activity_type(body.activity_type)

    try:
        result = record_activity(db, current_user.id, body.activity_type, body.details, now_utc=now_utc)
    except Exception as e:
        logger.exception(f"Failed to record activity for user {current_user.id}: {e}")
        raise InternalError()

    if not result["success"]:
        raise error_for_result(result)

    return ActivityRecordedResponse(
        **result,
        motivational_message=get_motivational_message(result["current_streak"]),
    )


@router.post("/test", response_model=StreakTestResponse)
@rate_limit_diagnostics
def test_streak(
    request: Request,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    now_utc: datetime = Depends(get_utc_now),
):
    """Record a 'test' activity for the caller. Intended for test harnesses."""
    logger.info(f"Test streak update requested by user {current_user.id}")
    try:
        result = record_activity(db, current_user.id, "test", {"note": "Manual test activity"}, now_utc=now_utc)
        if not result["success"]:
            raise error_for_result(result)
    except CollabSpaceError:
        raise
    except Exception as e:
        logger.exception(f"Test streak failed for user {current_user.id}: {e}")
        raise InternalError()

    return StreakTestResponse(
        message="Test streak updated",
        data=ActivityRecordedResponse(
            **result,
            motivational_message=get_motivational_message(result["current_streak"]),
        ),
    )


@router.post("/force-update", response_model=StreakForceUpdateResponse)
@rate_limit_diagnostics
def force_update(
    request: Request,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    now_utc: datetime = Depends(get_utc_now),
):
    """Force the caller's streak to 1 ending today. Intended for test harnesses."""
    logger.info(f"Force streak update requested by user {current_user.id}")
    try:
        result = force_update_streak(db, current_user.id, now_utc=now_utc)
        if not result["success"]:
            raise error_for_result(result)
    except CollabSpaceError:
        raise
    except Exception as e:
        logger.exception(f"Force update failed for user {current_user.id}: {e}")
        raise InternalError()

    return StreakForceUpdateResponse(message="Streak force updated to 1", data=result)


@router.get("/debug", response_model=DebugResponse)
async def debug():
    """Unauthenticated liveness probe for the streak API."""
    logger.debug("Streak debug endpoint hit")
    return DebugResponse(message="Server is running", timestamp=datetime.now(dt_timezone.utc))
