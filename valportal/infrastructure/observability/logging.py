"""Logging utilities for the portal.

Centralised logging configuration plus helpers for contextual logging, so a
request handled for one tenant carries ``domain=<tenant>`` on every line.
"""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Iterator

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# ---------------------------------------------------------------------------
# Context variables for structured logging
# ---------------------------------------------------------------------------

_log_context: ContextVar[dict[str, Any]] = ContextVar("log_context", default={})


class ContextualFormatter(logging.Formatter):
    """Formatter that appends context fields to log messages."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        ctx = _log_context.get()
        if ctx:
            ctx_str = " ".join(f"{k}={v}" for k, v in ctx.items())
            message = f"{message} [{ctx_str}]"
        return message


@contextmanager
def log_context(**fields: Any) -> Iterator[None]:
    """Temporarily add context fields to all log messages.

    Usage::

        with log_context(domain="lag", view="resources"):
            logger.info("Rendering portal")  # message includes context

    Fields are merged with any existing context and restored on exit.
    """
    current = _log_context.get()
    token = _log_context.set({**current, **fields})
    try:
        yield
    finally:
        _log_context.reset(token)


def current_log_context() -> dict[str, Any]:
    return dict(_log_context.get())


# ---------------------------------------------------------------------------
# Logging configuration
# ---------------------------------------------------------------------------

_configured = False


def configure_logging(
    level: int = logging.INFO,
    third_party_level: int = logging.WARNING,
) -> None:
    """Configure application-wide logging.

    Call this once at startup (CLI group, FastAPI lifespan) to set up
    consistent logging across the application. Later calls are no-ops.

    Args:
        level: Log level for application loggers (default INFO).
        third_party_level: Log level for third-party libraries (default WARNING).
    """
    global _configured
    if _configured:
        return
    _configured = True

    root = logging.getLogger()
    root.setLevel(level)
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(ContextualFormatter(LOG_FORMAT))
    root.addHandler(handler)

    for name in ("httpx", "httpcore", "asyncio", "uvicorn.access", "MARKDOWN"):
        logging.getLogger(name).setLevel(third_party_level)


def get_logger(name: str) -> logging.Logger:
    """Return a logger for the given name.

    If configure_logging() has not been called, a basic fallback configuration
    is applied to ensure the logger is usable.
    """
    logger = logging.getLogger(name)
    if not _configured and not logger.handlers and not logging.getLogger().handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(ContextualFormatter(LOG_FORMAT))
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
    return logger


# ---------------------------------------------------------------------------
# Convenience helpers
# ---------------------------------------------------------------------------


def log_exception(
    logger: logging.Logger,
    message: str,
    exc: BaseException,
    **context: Any,
) -> None:
    """Log a handled exception together with context fields."""
    with log_context(**context):
        logger.exception("%s: %s", message, exc)
