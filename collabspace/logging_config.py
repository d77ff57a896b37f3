from logging.config import dictConfig

from collabspace.config import settings
from collabspace.utils.logger import RequestAwareFormatter


APP_LOG_LEVEL = "DEBUG" if settings.DEBUG else settings.LOG_LEVEL.upper()

# Central logging configuration
LOGGING_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {
            "()": RequestAwareFormatter,
            "format": "%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] [%(user_id)s] - %(message)s",
        },
        "access": {
            "()": RequestAwareFormatter,
            "format": "%(asctime)s - %(levelname)s - [%(request_id)s] - %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "default",
        },
        "access_console": {
            "class": "logging.StreamHandler",
            "formatter": "access",
        },
    },
    "root": {  # Root logger for all logs
        "level": APP_LOG_LEVEL,
        "handlers": ["console"],
    },
    "loggers": {
        "collabspace": {  # Catch-all logger for all app modules
            "level": APP_LOG_LEVEL,
            "handlers": ["console"],
            "propagate": False,
        },
        "uvicorn": {
            "level": "INFO",
            "handlers": ["console"],
            "propagate": False,
        },
        "uvicorn.error": {
            "level": "INFO",
            "handlers": ["console"],
            "propagate": False,
        },
        "uvicorn.access": {
            "level": "INFO",
            "handlers": ["access_console"],
            "propagate": False,
        },
        "gunicorn.error": {
            "level": "INFO",
            "handlers": ["console"],
            "propagate": False,
        },
        "sqlalchemy.engine": {
            "level": "INFO" if settings.DEBUG else "WARNING",
            "handlers": ["console"],
            "propagate": False,
        },
        "slowapi": {
            "level": "WARNING",
            "handlers": ["console"],
            "propagate": False,
        },
    },
}

def configure_logging():
    """Configure logging for the application."""
    dictConfig(LOGGING_CONFIG)
