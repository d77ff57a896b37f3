from slowapi import Limiter
from slowapi.util import get_remote_address
from fastapi import Request
import redis
from collabspace.config import settings
from collabspace.utils.logger import get_logger

logger = get_logger(__name__)


def _connect_redis():
    """Redis backs the limiter counters when reachable; otherwise counters stay in memory."""
    if not settings.RATE_LIMIT_ENABLED:
        logger.info("Rate limiting disabled")
        return None
    try:
        client = redis.Redis(
            host=settings.REDIS_HOST,
            port=settings.REDIS_PORT,
            decode_responses=True,
            retry_on_timeout=True,
            socket_connect_timeout=5,
            socket_timeout=5
        )
        client.ping()
        logger.info(f"Rate limiting Redis connected: {settings.REDIS_HOST}:{settings.REDIS_PORT}")
        return client
    except redis.RedisError as e:
        logger.warning(f"Rate limiting Redis connection failed: {e}. Using in-memory fallback.")
        return None


redis_client = _connect_redis()


def get_user_id_or_ip(request: Request):
    """
    Key requests by authenticated user, falling back to client IP.
    request.state.user_id is set by collabspace.auth.get_current_user.
    """
    user_id = getattr(request.state, 'user_id', None)
    if user_id:
        return f"user:{user_id}"
    return f"ip:{get_remote_address(request)}"


limiter = Limiter(
    key_func=get_user_id_or_ip,
    storage_uri=f"redis://{settings.REDIS_HOST}:{settings.REDIS_PORT}" if redis_client else "memory://",
    default_limits=["1000/hour"],
    enabled=settings.RATE_LIMIT_ENABLED,
)

# Rate limits per endpoint group
RATE_LIMITS = {
    "activity_write": settings.ACTIVITY_RATE_LIMIT,
    "streak_read": "300/minute",
    "diagnostics": "30/minute",
}


def get_rate_limit_for_endpoint(endpoint: str) -> str:
    """Get rate limit configuration for specific endpoint."""
    return RATE_LIMITS.get(endpoint, "100/minute")


def rate_limit_activity_write(func):
    """Rate limit for activity-recording endpoints."""
    return limiter.limit(get_rate_limit_for_endpoint("activity_write"))(func)


def rate_limit_streak_read(func):
    """Rate limit for streak and history reads."""
    return limiter.limit(get_rate_limit_for_endpoint("streak_read"))(func)


def rate_limit_diagnostics(func):
    """Rate limit for test-harness endpoints."""
    return limiter.limit(get_rate_limit_for_endpoint("diagnostics"))(func)
