from datetime import datetime, timezone as dt_timezone


def get_utc_now() -> datetime:
    """
    FastAPI dependency for the current time, timezone-aware UTC.

    Streak routes take "now" through this dependency so the calendar-day
    logic can be driven from tests via ``app.dependency_overrides``.
    """
    return datetime.now(dt_timezone.utc)
