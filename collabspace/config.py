import os
from pydantic_settings import BaseSettings
from typing import List

class Settings(BaseSettings):
    """Application settings."""
    # Base settings
    DEBUG: bool = False
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # CORS settings
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",  # React client (Vite proxy)
        "http://localhost:5173",  # Vite dev server
        "http://localhost:8000",  # Backend server
    ]

    # Firebase settings
    FIREBASE_ENABLED: bool = os.getenv("FIREBASE_ENABLED", "true").lower() == "true"
    FIREBASE_PROJECT_ID: str = ""
    # Explicit Firebase Admin SDK credentials JSON path
    FIREBASE_SERVICE_ACCOUNT_JSON: str = os.getenv("FIREBASE_SERVICE_ACCOUNT_JSON", "./firebase-service-account.json")

    # Database settings
    DB_HOST: str = os.getenv("DB_HOST", "localhost")
    DB_PORT: str = os.getenv("DB_PORT", "5432")
    DB_USER: str = os.getenv("DB_USER", "postgres")
    DB_PASSWORD: str = os.getenv("DB_PASSWORD", "postgres")
    DB_NAME: str = os.getenv("DB_NAME", "collabspace")
    DATABASE_URL: str = os.getenv(
        "DATABASE_URL",
        f"postgresql://{DB_USER}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}"
    )
    # Upper bound for connecting and for any single statement
    DB_TIMEOUT_SECONDS: int = int(os.getenv("DB_TIMEOUT_SECONDS", "10"))

    # Redis settings (rate limit storage)
    REDIS_HOST: str = os.getenv("REDIS_HOST", "localhost")
    REDIS_PORT: int = int(os.getenv("REDIS_PORT", "6379"))

    # Rate limiting
    RATE_LIMIT_ENABLED: bool = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"
    ACTIVITY_RATE_LIMIT: str = os.getenv("ACTIVITY_RATE_LIMIT", "120/minute")

    # Streak tracking
    # Calendar days are counted in this timezone unless a user row overrides it
    STREAK_DEFAULT_TIMEZONE: str = os.getenv("STREAK_DEFAULT_TIMEZONE", "UTC")
    STREAK_CALENDAR_DAYS: int = int(os.getenv("STREAK_CALENDAR_DAYS", "365"))
    STREAK_UPDATE_MAX_RETRIES: int = int(os.getenv("STREAK_UPDATE_MAX_RETRIES", "3"))

    class Config:
        env_file = ".env"
        case_sensitive = True

# Create settings instance
settings = Settings()

# Activity tags accepted by POST /api/streak/activity
ACTIVITY_TYPES = frozenset({
    "login",
    "logout",
    "message",
    "message-sent",
    "edit",
    "board-edited",
    "drawing",
    "points_given",
    "points_received",
    "download",
    "test",
})

# Window for GET /api/activity/stats per-day counts
ACTIVITY_STATS_DAYS = 30
