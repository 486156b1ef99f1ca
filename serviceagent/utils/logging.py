"""
Unified logging for ServiceAgent.

Usage:
    from serviceagent.utils.logging import get_logger

    logger = get_logger(__name__)
    logger.info("Scored lead", extra={"lead_id": "abc", "score": 42})

Records are emitted as JSON lines by default; set ``LOG_FORMAT=text`` for
human-readable output and ``LOG_LEVEL`` to change verbosity.
"""

import functools
import json
import logging
import sys
import time
import uuid
from contextvars import ContextVar
from typing import Optional, Union

from serviceagent.config import settings

# Attributes present on every LogRecord; anything else came in via ``extra``.
_RESERVED_ATTRS = set(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


class RequestContextFilter(logging.Filter):
    """Stamp every record with a request id so related lines can be grouped."""

    def __init__(self, request_id: Optional[str] = None):
        super().__init__()
        self.request_id = request_id or str(uuid.uuid4())

    def filter(self, record):
        record.request_id = getattr(record, "request_id", self.request_id)
        return True


class JsonFormatter(logging.Formatter):
    """Format log records as JSON for structured logging."""

    def format(self, record):
        log_data = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "request_id": getattr(record, "request_id", "-"),
        }

        # Fields passed through ``extra=`` and LogContext
        for key, value in vars(record).items():
            if key not in _RESERVED_ATTRS and key not in log_data:
                log_data[key] = value
        context = getattr(record, "context", None)
        if isinstance(context, dict):
            log_data.pop("context", None)
            log_data.update(context)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def setup_logger(
    name: str,
    level: Union[int, str, None] = None,
    log_format: Optional[str] = None,
    request_id: Optional[str] = None,
) -> logging.Logger:
    """
    Configure and return a logger.

    Args:
        name: The name of the logger (usually __name__)
        level: The logging level; defaults to LOG_LEVEL
        log_format: ``json`` or ``text``; defaults to LOG_FORMAT
        request_id: Optional request ID for tracking related log entries

    Returns:
        A configured logger instance
    """
    level = level or settings.LOG_LEVEL
    log_format = log_format or settings.LOG_FORMAT

    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Reconfiguring must not stack handlers or filters
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    for existing in logger.filters[:]:
        if isinstance(existing, RequestContextFilter):
            logger.removeFilter(existing)

    logger.addFilter(RequestContextFilter(request_id))

    if log_format.lower() == "json":
        formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(levelname)s - [%(request_id)s] - %(name)s - "
            "%(module)s.%(funcName)s:%(lineno)d - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)
    # Handled here; the root logger would print the line a second time
    logger.propagate = False

    return logger


def get_logger(
    name: str, level: Union[int, str, None] = None, request_id: Optional[str] = None
) -> logging.Logger:
    """Get a configured logger instance."""
    return setup_logger(name, level=level, request_id=request_id)


# Context pushed by LogContext; each thread and task sees its own
_log_context: ContextVar[dict] = ContextVar("serviceagent_log_context", default={})

_base_record_factory = logging.getLogRecordFactory()


def _context_record_factory(*args, **kwargs):
    record = _base_record_factory(*args, **kwargs)
    context = _log_context.get()
    if context:
        merged = dict(getattr(record, "context", {}) or {})
        merged.update(context)
        record.context = merged
    return record


logging.setLogRecordFactory(_context_record_factory)


class LogContext:
    """
    Context manager for temporarily adding context data to logs.

    Usage:
        with LogContext(logger, lead_id="abc"):
            logger.info("Scoring lead")  # record carries lead_id
    """

    def __init__(self, logger: logging.Logger, **context):
        self.logger = logger
        self.context = context
        self._token = None

    def __enter__(self):
        self._token = _log_context.set({**_log_context.get(), **self.context})
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        _log_context.reset(self._token)
        self._token = None


def log_execution_time(func):
    """
    Decorator to log function execution time at debug level.

    Failures are logged at error level and re-raised.
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        func_logger = logging.getLogger(func.__module__)
        start_time = time.time()

        try:
            result = func(*args, **kwargs)
        except Exception as e:
            execution_time = time.time() - start_time
            func_logger.error(
                f"Function '{func.__name__}' failed after {execution_time:.4f} seconds: {e}",
                extra={"execution_time": execution_time, "error": str(e)},
            )
            raise

        execution_time = time.time() - start_time
        func_logger.debug(
            f"Function '{func.__name__}' executed in {execution_time:.4f} seconds",
            extra={"execution_time": execution_time},
        )
        return result

    return wrapper


def set_log_level(level: Union[int, str], prefix: str = "serviceagent") -> None:
    """Change the level of every configured logger under ``prefix``."""
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    for name, logger in logging.Logger.manager.loggerDict.items():
        if isinstance(logger, logging.Logger) and (
            name == prefix or name.startswith(prefix + ".")
        ):
            logger.setLevel(level)
