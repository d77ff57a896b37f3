from __future__ import annotations
from typing import Optional, Tuple
from datetime import date, datetime, timedelta, timezone as dt_timezone
import pytz
from sqlalchemy.orm import Session
from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.sql import func

from collabspace.config import settings
from collabspace.models.user_streak import UserStreak


class StreakUpdateConflict(Exception):
    """The streak row changed between our read and our conditional write."""


def get_today_in_tz(now_utc: datetime, tz_name: str) -> date:
    if now_utc.tzinfo is None:
        now_utc = now_utc.replace(tzinfo=dt_timezone.utc)
    tz = pytz.timezone(tz_name)
    return now_utc.astimezone(tz).date()


def _yesterday(d: date) -> date:
    return d - timedelta(days=1)


def compute_effective_streak(current_streak: int, last_active_local_date: Optional[date], today_local: date) -> int:
    """
    Streak as it stands today, without writing anything.

    A stored streak stays valid while the last active day is today or
    yesterday; once a full day has been missed it reads as 0.
    """
    if last_active_local_date is None:
        return 0
    if last_active_local_date < _yesterday(today_local):
        return 0
    return current_streak


def compute_next_streak(
    current_streak: int,
    longest_streak: int,
    last_active_local_date: Optional[date],
    today_local: date,
) -> Tuple[int, int, bool]:
    """
    Apply one activity on ``today_local`` to the stored counters.

    Returns:
        Tuple of (current_streak, longest_streak, is_new_day)
    """
    if last_active_local_date is None:
        return 1, max(longest_streak, 1), True

    # Same day, or a clock that went backwards: counters never move back
    if last_active_local_date >= today_local:
        return current_streak, max(longest_streak, current_streak), False

    if last_active_local_date == _yesterday(today_local):
        current = current_streak + 1
    else:
        current = 1
    return current, max(longest_streak, current), True


def get_streak(db: Session, user_id: str) -> Optional[UserStreak]:
    # populate_existing: always reflect the row as stored, not a cached copy
    return db.query(UserStreak).filter(UserStreak.user_id == user_id).populate_existing().first()


def _insert_streak(db: Session, streak: UserStreak) -> UserStreak:
    """
    Raises:
        StreakUpdateConflict: a concurrent request created the row first
    """
    db.add(streak)
    try:
        db.flush()
    except IntegrityError as e:
        raise StreakUpdateConflict(f"user_streaks row for {streak.user_id} already exists") from e
    return streak


def _compare_and_set(db: Session, streak: UserStreak, values: dict) -> UserStreak:
    """
    Write ``values`` only if the row still carries the version we read.

    Raises:
        StreakUpdateConflict: if another writer got there first
    """
    seen_version = streak.version
    result = db.execute(
        update(UserStreak)
        .where(UserStreak.user_id == streak.user_id, UserStreak.version == seen_version)
        .values(version=seen_version + 1, updated_at=func.now(), **values)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        raise StreakUpdateConflict(
            f"user_streaks row for {streak.user_id} moved past version {seen_version}"
        )
    db.refresh(streak)
    return streak


def apply_activity(db: Session, user_id: str, now_utc: datetime) -> Tuple[UserStreak, date, bool]:
    """
    Record activity for 'today' in the user's timezone.

    The caller owns the transaction: nothing is committed here.

    Returns:
        Tuple of (UserStreak, today_local_date, is_new_day)

    Raises:
        StreakUpdateConflict: lost a race against another update for this user,
            or against another request creating the first row
    """
    existing = get_streak(db, user_id)

    if existing is None:
        tz_name = settings.STREAK_DEFAULT_TIMEZONE
        today_local = get_today_in_tz(now_utc, tz_name)
        streak = _insert_streak(db, UserStreak(
            user_id=user_id,
            timezone=tz_name,
            current_streak=1,
            longest_streak=1,
            total_active_days=1,
            last_active_local_date=today_local,
            last_active_at_utc=now_utc,
            version=1,
        ))
        return streak, today_local, True

    tz_name = existing.timezone or settings.STREAK_DEFAULT_TIMEZONE
    today_local = get_today_in_tz(now_utc, tz_name)
    current, longest, is_new_day = compute_next_streak(
        existing.current_streak,
        existing.longest_streak,
        existing.last_active_local_date,
        today_local,
    )

    values = {
        "current_streak": current,
        "longest_streak": longest,
        "last_active_at_utc": now_utc,
    }
    if is_new_day:
        values["last_active_local_date"] = today_local
        values["total_active_days"] = existing.total_active_days + 1

    return _compare_and_set(db, existing, values), today_local, is_new_day


def force_streak(db: Session, user_id: str, now_utc: datetime, total_active_days: int) -> Tuple[UserStreak, date]:
    """
    Reset the streak to a single active day ending today (diagnostics only).

    The caller owns the transaction: nothing is committed here.

    Returns:
        Tuple of (UserStreak, today_local_date)
    """
    existing = get_streak(db, user_id)

    if existing is None:
        tz_name = settings.STREAK_DEFAULT_TIMEZONE
        today_local = get_today_in_tz(now_utc, tz_name)
        streak = _insert_streak(db, UserStreak(
            user_id=user_id,
            timezone=tz_name,
            current_streak=1,
            longest_streak=1,
            total_active_days=total_active_days,
            last_active_local_date=today_local,
            last_active_at_utc=now_utc,
            version=1,
        ))
        return streak, today_local

    today_local = get_today_in_tz(now_utc, existing.timezone or settings.STREAK_DEFAULT_TIMEZONE)
    streak = _compare_and_set(db, existing, {
        "current_streak": 1,
        "longest_streak": max(existing.longest_streak, 1),
        "total_active_days": total_active_days,
        "last_active_local_date": today_local,
        "last_active_at_utc": now_utc,
    })
    return streak, today_local
