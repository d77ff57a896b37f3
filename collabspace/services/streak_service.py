"""
Activity recording and streak read-out.

Every public function returns a result dict with a ``success`` flag.
Expected conditions (unknown user, no streak yet, a lost update race,
an unreachable database) come back as ``success=False`` results built
with ``collabspace.exceptions.failure``; nothing here raises for them.
"""
from __future__ import annotations
from typing import Any, Callable, Optional
from datetime import datetime, timedelta, timezone as dt_timezone

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from collabspace import crud
from collabspace.config import settings
from collabspace.crud.streak import StreakUpdateConflict
from collabspace.exceptions import failure, NOT_FOUND, CONFLICT
from collabspace.models import ActivityRecord
from collabspace.utils.logger import get_logger

logger = get_logger(__name__)


def _utc_now(now_utc: Optional[datetime]) -> datetime:
    return now_utc or datetime.now(dt_timezone.utc)


def _safe_rollback(db: Session):
    try:
        db.rollback()
    except Exception as rollback_error:
        logger.error(f"Error during rollback: {rollback_error}")


def _as_utc(value: datetime) -> datetime:
    # Backends without timezone support (SQLite) hand stored values back naive
    if value.tzinfo is None:
        return value.replace(tzinfo=dt_timezone.utc)
    return value.astimezone(dt_timezone.utc)


def activity_payload(record: ActivityRecord) -> dict:
    return {
        "id": record.id,
        "activity_type": record.activity_type,
        "details": record.details,
        "occurred_at": _as_utc(record.occurred_at),
        "activity_date": record.activity_date,
    }


def _write_with_retries(db: Session, user_id: str, action: str, write: Callable[[], dict]) -> dict:
    """
    Run ``write`` and commit, retrying when another request updated the
    same user's streak in between.
    """
    max_attempts = max(1, settings.STREAK_UPDATE_MAX_RETRIES)
    for attempt in range(1, max_attempts + 1):
        try:
            result = write()
            db.commit()
            return result
        except StreakUpdateConflict as e:
            _safe_rollback(db)
            logger.warning(f"{action}: concurrent streak update for user {user_id} (attempt {attempt}/{max_attempts}): {e}")

    logger.error(f"{action}: giving up on user {user_id} after {max_attempts} conflicting attempts")
    return failure("Streak is being updated by another request, please retry", CONFLICT)


def record_activity(
    db: Session,
    user_id: str,
    activity_type: str,
    details: Optional[Any] = None,
    now_utc: Optional[datetime] = None,
) -> dict:
    """
    Append an activity for the user and advance their streak.

    ``activity_type`` is expected to be validated by the caller.

    Returns:
        On success: current_streak, longest_streak, total_active_days,
        last_active_date, is_new_streak_day, is_new_streak and the stored
        activity.
    """
    now_utc = _utc_now(now_utc)
    logger.debug(f"Recording activity '{activity_type}' for user {user_id}")

    def write() -> dict:
        streak, today_local, is_new_day = crud.apply_activity(db, user_id, now_utc)
        record = crud.create_activity(db, user_id, activity_type, details, now_utc, today_local)
        return {
            "success": True,
            "current_streak": streak.current_streak,
            "longest_streak": streak.longest_streak,
            "total_active_days": streak.total_active_days,
            "last_active_date": streak.last_active_local_date,
            "is_new_streak_day": is_new_day,
            "is_new_streak": is_new_day and streak.current_streak == 1,
            "activity": activity_payload(record),
        }

    try:
        if crud.get_user(db, user_id) is None:
            logger.warning(f"Cannot record activity: user {user_id} not found")
            return failure("User not found", NOT_FOUND)

        result = _write_with_retries(db, user_id, "record_activity", write)
    except SQLAlchemyError as e:
        _safe_rollback(db)
        logger.exception(f"Failed to record activity for user {user_id}: {e}")
        return failure("Failed to record activity")

    if result["success"]:
        logger.info(
            f"Activity '{activity_type}' recorded for user {user_id}: "
            f"current={result['current_streak']}, longest={result['longest_streak']}, "
            f"new_day={result['is_new_streak_day']}"
        )
    return result


def get_user_streak_data(db: Session, user_id: str, now_utc: Optional[datetime] = None) -> dict:
    """
    Read-only streak projection with the activity calendar.

    ``current_streak`` is the effective streak for today: a streak whose
    last active day is before yesterday reads as 0 even though the stored
    row is left untouched until the next activity.
    """
    now_utc = _utc_now(now_utc)
    try:
        streak = crud.get_streak(db, user_id)
        if streak is None:
            if crud.get_user(db, user_id) is None:
                return failure("User not found", NOT_FOUND)
            return failure("No streak data found", NOT_FOUND)

        tz_name = streak.timezone or settings.STREAK_DEFAULT_TIMEZONE
        today_local = crud.get_today_in_tz(now_utc, tz_name)
        effective = crud.compute_effective_streak(streak.current_streak, streak.last_active_local_date, today_local)
        if effective != streak.current_streak:
            logger.debug(
                f"Streak for user {user_id} is stale: stored={streak.current_streak}, "
                f"last_active={streak.last_active_local_date}, today={today_local}"
            )

        since = today_local - timedelta(days=settings.STREAK_CALENDAR_DAYS)
        calendar = [
            {
                "day": day,
                "activity_count": len(records),
                "activities": [activity_payload(record) for record in records],
            }
            for day, records in crud.get_activity_calendar(db, user_id, since)
        ]
    except SQLAlchemyError as e:
        _safe_rollback(db)
        logger.exception(f"Failed to load streak data for user {user_id}: {e}")
        return failure("Failed to load streak data")

    return {
        "success": True,
        "current_streak": effective,
        "longest_streak": streak.longest_streak,
        "total_active_days": streak.total_active_days,
        "last_active_date": streak.last_active_local_date,
        "timezone": tz_name,
        "today": today_local,
        "is_streak_active": effective > 0,
        "activity_calendar": calendar,
    }


def force_update_streak(db: Session, user_id: str, now_utc: Optional[datetime] = None) -> dict:
    """Set the streak to 1 ending today. Test-harness hook."""
    now_utc = _utc_now(now_utc)

    def write() -> dict:
        total_active_days = crud.count_active_days(db, user_id)
        streak, _ = crud.force_streak(db, user_id, now_utc, total_active_days)
        return {
            "success": True,
            "current_streak": streak.current_streak,
            "longest_streak": streak.longest_streak,
            "total_active_days": streak.total_active_days,
        }

    try:
        if crud.get_user(db, user_id) is None:
            return failure("User not found", NOT_FOUND)
        result = _write_with_retries(db, user_id, "force_update_streak", write)
    except SQLAlchemyError as e:
        _safe_rollback(db)
        logger.exception(f"Failed to force-update streak for user {user_id}: {e}")
        return failure("Failed to update streak")

    if result["success"]:
        logger.info(f"Force updated streak for user {user_id} to 1")
    return result
