"""
Error taxonomy for the HTTP surface.

Services report expected conditions (missing state, unknown user, lost
update races) as ``{"success": False, "error": ..., "error_code": ...}``
dicts. Routes turn those into the exceptions below, and the handlers
registered in ``collabspace.main`` render every error as
``{"success": false, "error": "..."}``.
"""
from typing import Optional

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from collabspace.utils.logger import get_logger

logger = get_logger(__name__)

GENERIC_INTERNAL_ERROR = "Internal server error"

# error_code values used in service result dicts
NOT_FOUND = "not_found"
CONFLICT = "conflict"
INTERNAL = "internal"


class CollabSpaceError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = GENERIC_INTERNAL_ERROR

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(CollabSpaceError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class NotFoundError(CollabSpaceError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ConflictError(CollabSpaceError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflicting update"


class InternalError(CollabSpaceError):
    pass


def failure(error: str, error_code: str = INTERNAL) -> dict:
    """Build a service failure result."""
    return {"success": False, "error": error, "error_code": error_code}


def error_for_result(result: dict) -> CollabSpaceError:
    """
    Map a failed service result to the exception the route should raise.

    Not-found is a 404 and a lost update race a 409. Anything else is a
    500 that keeps the service's own description (services never put
    internals in it).
    """
    if result.get("error_code") == NOT_FOUND:
        return NotFoundError(result.get("error"))
    if result.get("error_code") == CONFLICT:
        return ConflictError(result.get("error"))
    return InternalError(result.get("error"))


def _error_body(message: str) -> dict:
    return {"success": False, "error": message}


async def collabspace_error_handler(request: Request, exc: CollabSpaceError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=_error_body(exc.message))


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg')}" if location else first.get("msg")
    else:
        message = ValidationError.default_message
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=_error_body(message))


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    """Rate limit exceeded, with a Retry-After hint for well-behaved clients."""
    logger.warning(f"Rate limit exceeded on {request.url.path}: {exc.detail}")
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content=_error_body(f"Rate limit exceeded: {exc.detail}. Please try again later."),
        headers={"Retry-After": "60"},
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(GENERIC_INTERNAL_ERROR),
    )
