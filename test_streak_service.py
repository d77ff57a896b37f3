"""Activity recorder, streak calculator and diagnostics against a real database."""
from datetime import date, timedelta

import pytest
from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, OperationalError

from collabspace import crud
from collabspace.config import settings
from collabspace.crud import streak as streak_crud
from collabspace.database import get_session_local
from collabspace.models import ActivityRecord, UserStreak
from collabspace.services.streak_service import (
    force_update_streak,
    get_user_streak_data,
    record_activity,
)
from conftest import START


def days_later(n, hours=0):
    return START + timedelta(days=n, hours=hours)


def test_no_activity_means_not_found(db, user):
    result = get_user_streak_data(db, user.id, now_utc=START)

    assert result == {"success": False, "error": "No streak data found", "error_code": "not_found"}


def test_unknown_user_is_not_found(db):
    assert record_activity(db, "ghost", "message", now_utc=START)["error_code"] == "not_found"
    assert get_user_streak_data(db, "ghost", now_utc=START)["error"] == "User not found"


def test_first_activity_starts_streak(db, user):
    result = record_activity(db, user.id, "message-sent", {"roomId": "r1"}, now_utc=START)

    assert result["success"] is True
    assert result["current_streak"] == 1
    assert result["longest_streak"] == 1
    assert result["total_active_days"] == 1
    assert result["is_new_streak_day"] is True
    assert result["is_new_streak"] is True
    assert result["last_active_date"] == date(2026, 3, 10)
    assert result["activity"]["activity_type"] == "message-sent"
    assert result["activity"]["details"] == {"roomId": "r1"}


def test_same_day_activities_do_not_increment(db, user):
    record_activity(db, user.id, "message", now_utc=START)
    result = record_activity(db, user.id, "board-edited", now_utc=START + timedelta(hours=5))

    assert result["current_streak"] == 1
    assert result["total_active_days"] == 1
    assert result["is_new_streak_day"] is False
    assert result["is_new_streak"] is False
    assert db.query(ActivityRecord).filter_by(user_id=user.id).count() == 2


def test_consecutive_days_increment(db, user):
    for day in range(4):
        result = record_activity(db, user.id, "drawing", now_utc=days_later(day))

    assert result["current_streak"] == 4
    assert result["longest_streak"] == 4
    assert result["total_active_days"] == 4


def test_day_boundary_is_midnight_utc(db, user):
    late = START.replace(hour=23, minute=59)
    record_activity(db, user.id, "message", now_utc=late)
    result = record_activity(db, user.id, "message", now_utc=late + timedelta(minutes=2))

    assert result["current_streak"] == 2


def test_gap_restarts_at_one_and_keeps_longest(db, user):
    for day in range(3):
        record_activity(db, user.id, "message", now_utc=days_later(day))

    result = record_activity(db, user.id, "message", now_utc=days_later(5))

    assert result["current_streak"] == 1
    assert result["longest_streak"] == 3
    assert result["total_active_days"] == 4
    assert result["is_new_streak"] is True


def test_read_reports_streak_alive_through_yesterday(db, user):
    record_activity(db, user.id, "message", now_utc=START)
    record_activity(db, user.id, "message", now_utc=days_later(1))

    result = get_user_streak_data(db, user.id, now_utc=days_later(2))

    assert result["current_streak"] == 2
    assert result["is_streak_active"] is True


def test_read_collapses_stale_streak_without_writing(db, user):
    record_activity(db, user.id, "message", now_utc=START)
    record_activity(db, user.id, "message", now_utc=days_later(1))

    result = get_user_streak_data(db, user.id, now_utc=days_later(3))

    assert result["success"] is True
    assert result["current_streak"] == 0
    assert result["longest_streak"] == 2
    assert result["is_streak_active"] is False

    db.expire_all()
    stored = crud.get_streak(db, user.id)
    assert stored.current_streak == 2
    assert stored.version == 2


def test_calendar_groups_by_day_newest_first(db, user):
    record_activity(db, user.id, "message", now_utc=START)
    record_activity(db, user.id, "edit", now_utc=START + timedelta(hours=1))
    record_activity(db, user.id, "drawing", now_utc=days_later(1))

    calendar = get_user_streak_data(db, user.id, now_utc=days_later(1))["activity_calendar"]

    assert [entry["day"] for entry in calendar] == [date(2026, 3, 11), date(2026, 3, 10)]
    assert [entry["activity_count"] for entry in calendar] == [1, 2]
    assert [a["activity_type"] for a in calendar[1]["activities"]] == ["edit", "message"]


def test_calendar_window_excludes_old_days(db, user, monkeypatch):
    monkeypatch.setattr(settings, "STREAK_CALENDAR_DAYS", 7)
    record_activity(db, user.id, "message", now_utc=START)
    record_activity(db, user.id, "message", now_utc=days_later(10))

    result = get_user_streak_data(db, user.id, now_utc=days_later(10))

    assert [entry["day"] for entry in result["activity_calendar"]] == [date(2026, 3, 20)]
    assert result["total_active_days"] == 2


def test_streak_timezone_decides_the_calendar_day(db, user):
    record_activity(db, user.id, "message", now_utc=START)
    db.query(UserStreak).filter_by(user_id=user.id).update({"timezone": "America/New_York"})
    db.commit()

    # 01:30 UTC on the 12th is still the evening of the 11th in New York
    result = record_activity(db, user.id, "message", now_utc=days_later(1, hours=16))

    assert result["activity"]["activity_date"] == date(2026, 3, 11)
    assert result["current_streak"] == 2


def _bump_version_from_another_session(user_id):
    other = get_session_local()()
    try:
        other.execute(
            update(UserStreak)
            .where(UserStreak.user_id == user_id)
            .values(version=UserStreak.version + 1)
        )
        other.commit()
    finally:
        other.close()


def test_lost_update_is_retried_without_double_increment(db, user, monkeypatch):
    record_activity(db, user.id, "message", now_utc=START)

    real_compute = streak_crud.compute_next_streak
    calls = []

    def racing_compute(*args):
        calls.append(args)
        if len(calls) == 1:
            # another request writes the row between our read and our update
            _bump_version_from_another_session(user.id)
        return real_compute(*args)

    monkeypatch.setattr(streak_crud, "compute_next_streak", racing_compute)

    result = record_activity(db, user.id, "message", now_utc=days_later(1))

    assert len(calls) == 2
    assert result["success"] is True
    assert result["current_streak"] == 2
    assert db.query(ActivityRecord).filter_by(user_id=user.id).count() == 2


def test_gives_up_after_max_retries(db, user, monkeypatch):
    record_activity(db, user.id, "message", now_utc=START)
    monkeypatch.setattr(settings, "STREAK_UPDATE_MAX_RETRIES", 2)

    real_compute = streak_crud.compute_next_streak

    def always_racing(*args):
        _bump_version_from_another_session(user.id)
        return real_compute(*args)

    monkeypatch.setattr(streak_crud, "compute_next_streak", always_racing)

    result = record_activity(db, user.id, "message", now_utc=days_later(1))

    assert result["success"] is False
    assert result["error_code"] == "conflict"
    db.expire_all()
    assert db.query(ActivityRecord).filter_by(user_id=user.id).count() == 1
    assert crud.get_streak(db, user.id).current_streak == 1


def test_first_row_race_is_retried(db, user, monkeypatch):
    record_activity(db, user.id, "message", now_utc=START)
    # a fresh request has never loaded the row
    db.expunge_all()

    real_get_streak = streak_crud.get_streak
    calls = []

    def not_yet_visible(session, user_id):
        calls.append(user_id)
        if len(calls) == 1:
            # another request inserted the row after we looked
            return None
        return real_get_streak(session, user_id)

    monkeypatch.setattr(streak_crud, "get_streak", not_yet_visible)

    result = record_activity(db, user.id, "message", now_utc=days_later(1))

    assert len(calls) == 2
    assert result["success"] is True
    assert result["current_streak"] == 2
    assert db.query(ActivityRecord).filter_by(user_id=user.id).count() == 2


def test_failed_activity_insert_is_not_retried(db, user, monkeypatch):
    record_activity(db, user.id, "message", now_utc=START)
    calls = []

    def user_vanished(*args, **kwargs):
        calls.append(args)
        raise IntegrityError("INSERT INTO activity_records", {}, Exception("FOREIGN KEY constraint failed"))

    monkeypatch.setattr(crud, "create_activity", user_vanished)

    result = record_activity(db, user.id, "message", now_utc=days_later(1))

    assert len(calls) == 1
    assert result == {"success": False, "error": "Failed to record activity", "error_code": "internal"}
    db.expire_all()
    assert crud.get_streak(db, user.id).current_streak == 1


def test_database_failure_returns_failure_result(db, user, monkeypatch):
    def unreachable(*args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("connection refused"))

    monkeypatch.setattr(crud, "get_user", unreachable)

    result = record_activity(db, user.id, "message", now_utc=START)

    assert result == {"success": False, "error": "Failed to record activity", "error_code": "internal"}


def test_force_update_resets_to_one_and_keeps_longest(db, user):
    for day in range(3):
        record_activity(db, user.id, "message", now_utc=days_later(day))

    result = force_update_streak(db, user.id, now_utc=days_later(9))

    assert result == {"success": True, "current_streak": 1, "longest_streak": 3, "total_active_days": 3}
    streak_data = get_user_streak_data(db, user.id, now_utc=days_later(9))
    assert streak_data["current_streak"] == 1
    assert streak_data["last_active_date"] == date(2026, 3, 19)


def test_force_update_creates_missing_state(db, user):
    result = force_update_streak(db, user.id, now_utc=START)

    assert result["current_streak"] == 1
    assert result["longest_streak"] == 1
    assert result["total_active_days"] == 0


def test_force_update_unknown_user(db):
    assert force_update_streak(db, "ghost", now_utc=START)["error_code"] == "not_found"


def test_users_do_not_share_streaks(db, user, other_user):
    record_activity(db, user.id, "message", now_utc=START)
    record_activity(db, user.id, "message", now_utc=days_later(1))
    record_activity(db, other_user.id, "message", now_utc=days_later(1))

    assert get_user_streak_data(db, user.id, now_utc=days_later(1))["current_streak"] == 2
    assert get_user_streak_data(db, other_user.id, now_utc=days_later(1))["current_streak"] == 1
