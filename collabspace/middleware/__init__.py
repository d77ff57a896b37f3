# Middleware package for CollabSpace API

from .request_id import RequestIDMiddleware
from .rate_limit import limiter, rate_limit_activity_write, rate_limit_streak_read, rate_limit_diagnostics

__all__ = [
    "RequestIDMiddleware",
    "limiter",
    "rate_limit_activity_write",
    "rate_limit_streak_read",
    "rate_limit_diagnostics",
]
