from sqlalchemy.orm import Session
from sqlalchemy import func
from typing import Any, List, Optional, Tuple
from datetime import date, datetime
from itertools import groupby

from collabspace.models.activity_record import ActivityRecord


def create_activity(
    db: Session,
    user_id: str,
    activity_type: str,
    details: Optional[Any],
    occurred_at: datetime,
    activity_date: date,
) -> ActivityRecord:
    """Append an activity record. Flushed, not committed: the caller owns the transaction."""
    record = ActivityRecord(
        user_id=user_id,
        activity_type=activity_type,
        details=details,
        occurred_at=occurred_at,
        activity_date=activity_date,
    )
    db.add(record)
    db.flush()
    return record


def get_activities_for_date(db: Session, user_id: str, activity_date: date) -> List[ActivityRecord]:
    return (
        db.query(ActivityRecord)
        .filter(ActivityRecord.user_id == user_id, ActivityRecord.activity_date == activity_date)
        .order_by(ActivityRecord.occurred_at.desc())
        .all()
    )


def get_activities(db: Session, user_id: str, limit: int = 100, offset: int = 0) -> List[ActivityRecord]:
    return (
        db.query(ActivityRecord)
        .filter(ActivityRecord.user_id == user_id)
        .order_by(ActivityRecord.occurred_at.desc())
        .limit(limit)
        .offset(offset)
        .all()
    )


def count_activities(db: Session, user_id: str) -> int:
    return db.query(func.count(ActivityRecord.id)).filter(ActivityRecord.user_id == user_id).scalar() or 0


def count_activities_by_type(db: Session, user_id: str) -> List[Tuple[str, int]]:
    """(activity_type, count) pairs, most frequent first."""
    count = func.count(ActivityRecord.id)
    rows = (
        db.query(ActivityRecord.activity_type, count)
        .filter(ActivityRecord.user_id == user_id)
        .group_by(ActivityRecord.activity_type)
        .order_by(count.desc(), ActivityRecord.activity_type)
        .all()
    )
    return [(activity_type, n) for activity_type, n in rows]


def count_activities_by_date(db: Session, user_id: str, since: datetime) -> List[Tuple[date, int]]:
    """(activity_date, count) pairs for activities at or after ``since``, newest day first."""
    rows = (
        db.query(ActivityRecord.activity_date, func.count(ActivityRecord.id))
        .filter(ActivityRecord.user_id == user_id, ActivityRecord.occurred_at >= since)
        .group_by(ActivityRecord.activity_date)
        .order_by(ActivityRecord.activity_date.desc())
        .all()
    )
    return [(activity_date, n) for activity_date, n in rows]


def count_active_days(db: Session, user_id: str) -> int:
    return (
        db.query(func.count(func.distinct(ActivityRecord.activity_date)))
        .filter(ActivityRecord.user_id == user_id)
        .scalar()
    ) or 0


def get_activity_calendar(db: Session, user_id: str, since: date) -> List[Tuple[date, List[ActivityRecord]]]:
    """
    Activities grouped per calendar day, from ``since`` (inclusive) onward.

    Days are newest first; activities inside a day are newest first.
    """
    records = (
        db.query(ActivityRecord)
        .filter(ActivityRecord.user_id == user_id, ActivityRecord.activity_date >= since)
        .order_by(ActivityRecord.activity_date.desc(), ActivityRecord.occurred_at.desc())
        .all()
    )
    return [(day, list(day_records)) for day, day_records in groupby(records, key=lambda r: r.activity_date)]
