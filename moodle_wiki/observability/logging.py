"""
Moodle Wiki — Structured Logging

JSON log formatting for the whole package. Every record emitted while a
site context is active carries the site id, so log lines from concurrent
requests against different sites can be told apart.
"""

import contextvars
import json
import logging
from collections.abc import Generator
from contextlib import contextmanager
from datetime import UTC, datetime

# Site id of the operation currently running in this context
_site_id_ctx: contextvars.ContextVar[str | None] = contextvars.ContextVar("site_id", default=None)

_RESERVED_ATTRS = frozenset(
    (
        "args",
        "msg",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "name",
        "message",
    )
)


class JSONFormatter(logging.Formatter):
    """JSON log formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            "timestamp": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        site_id = _site_id_ctx.get()
        if site_id:
            log_data["site_id"] = site_id

        # Add any extra fields from record.__dict__
        for key, value in record.__dict__.items():
            if key not in log_data and not key.startswith("_") and key not in _RESERVED_ATTRS:
                log_data[key] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def get_site_id() -> str | None:
    """Return the site id bound to the current context, if any."""
    return _site_id_ctx.get()


@contextmanager
def site_context(site_id: str | None) -> Generator[None, None, None]:
    """
    Bind a site id to log records emitted inside the block.

    Example:
        with site_context("school"):
            logger.info("Reading subwikis")
    """
    token = _site_id_ctx.set(site_id)
    try:
        yield
    finally:
        _site_id_ctx.reset(token)


def configure_logging(level: str | None = None) -> logging.Logger:
    """
    Install the JSON formatter on the package logger.

    Args:
        level: Log level name; defaults to the configured LOG_LEVEL

    Returns:
        The configured "moodle_wiki" logger
    """
    if level is None:
        from ..config import get_config

        level = str(get_config().log_level)

    logger = logging.getLogger("moodle_wiki")
    logger.handlers.clear()

    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter())
    logger.addHandler(handler)
    logger.setLevel(level.upper())

    return logger
