import logging
import contextvars
from typing import Optional

# Context variables carried across async operations within one request
request_id_context = contextvars.ContextVar('request_id', default=None)
user_id_context = contextvars.ContextVar('user_id', default=None)


class RequestAwareFormatter(logging.Formatter):
    """
    Formatter that fills in request_id and user_id for every record.

    Values passed explicitly through ``extra`` win over the context
    variables; anything still missing is rendered as a placeholder so the
    format string never fails.
    """

    def format(self, record: logging.LogRecord) -> str:
        if not getattr(record, 'request_id', None):
            record.request_id = request_id_context.get() or "no-request-id"
        if not getattr(record, 'user_id', None):
            record.user_id = user_id_context.get() or "anonymous"
        return super().format(record)


class RequestAwareLogger:
    """
    A logger wrapper that automatically attaches the request context.

    Accepts an optional ``request_id=`` keyword on every call for code
    that runs before the context is established (middleware).
    """

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)
        self.name = name

    def _log_with_context(self, level: int, msg: str, *args, **kwargs):
        request_id = kwargs.pop('request_id', None) or request_id_context.get()
        user_id = user_id_context.get()

        extra = kwargs.get('extra', {})
        if request_id:
            extra['request_id'] = request_id
        if user_id:
            extra['user_id'] = user_id
        kwargs['extra'] = extra

        self.logger.log(level, msg, *args, **kwargs)

    def debug(self, msg: str, *args, **kwargs):
        self._log_with_context(logging.DEBUG, msg, *args, **kwargs)

    def info(self, msg: str, *args, **kwargs):
        self._log_with_context(logging.INFO, msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs):
        self._log_with_context(logging.WARNING, msg, *args, **kwargs)

    def error(self, msg: str, *args, **kwargs):
        self._log_with_context(logging.ERROR, msg, *args, **kwargs)

    def critical(self, msg: str, *args, **kwargs):
        self._log_with_context(logging.CRITICAL, msg, *args, **kwargs)

    def exception(self, msg: str, *args, **kwargs):
        self._log_with_context(logging.ERROR, msg, *args, **kwargs, exc_info=True)


def get_logger(name: str) -> RequestAwareLogger:
    """Get a request-aware logger for the specified name (usually ``__name__``)."""
    return RequestAwareLogger(name)


def set_request_context(request_id: str):
    """Set the request ID for the current request; called by RequestIDMiddleware."""
    request_id_context.set(request_id)


def set_user_context(user_id: Optional[str]):
    """Attach the authenticated user to subsequent log lines of this request."""
    user_id_context.set(user_id)


def clear_request_context():
    """Clear the current request and user context."""
    request_id_context.set(None)
    user_id_context.set(None)
