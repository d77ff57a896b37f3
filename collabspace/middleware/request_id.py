import uuid
from typing import Callable
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from collabspace.utils.logger import set_request_context, clear_request_context, get_logger

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
CORRELATION_ID_HEADER = "X-Correlation-ID"


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Tags every request with an ID for log correlation.

    Reuses X-Correlation-ID or X-Request-ID from the client when present,
    otherwise generates a UUID4. The ID is stored on request.state, put in
    the logging context, and echoed back in the X-Request-ID header.
    """

    async def dispatch(self, request: Request, call_next: Callable):
        request_id = (
            request.headers.get(CORRELATION_ID_HEADER) or
            request.headers.get(REQUEST_ID_HEADER) or
            str(uuid.uuid4())
        )

        request.state.request_id = request_id
        set_request_context(request_id)

        logger.info(f"Request started: {request.method} {request.url.path}", request_id=request_id)

        try:
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = request_id
            logger.info(
                f"Request completed: {request.method} {request.url.path} - Status: {response.status_code}",
                request_id=request_id
            )
            return response
        except Exception as e:
            logger.error(
                f"Request failed: {request.method} {request.url.path} - Error: {str(e)}",
                request_id=request_id
            )
            raise
        finally:
            clear_request_context()
