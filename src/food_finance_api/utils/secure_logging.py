"""Logging helpers that keep tenant data out of production logs."""

import logging
import re
from functools import lru_cache
from typing import Any

from food_finance_api.config import get_settings

_PATH_RE = re.compile(r"['\"]?(/[a-zA-Z0-9_./\-]+|[A-Z]:\\[^\s'\"]+)['\"]?")
_URL_RE = re.compile(r"(postgresql|postgres|sqlite|redis|rediss|http|https)(\+\w+)?://[^\s]+")
_EMAIL_RE = re.compile(r"[a-zA-Z0-9_.+-]+@[a-zA-Z0-9-]+\.[a-zA-Z0-9-.]+")
_TOKEN_RE = re.compile(r"[a-zA-Z0-9_\-]{32,}")
# SQL parameter dumps ("[parameters: (...)]") carry row values
_SQL_PARAMS_RE = re.compile(r"\[parameters: .*?\]", re.DOTALL)

MAX_MESSAGE_LENGTH = 200


@lru_cache(maxsize=1)
def is_debug_mode() -> bool:
    """Check if application is running in debug mode."""
    return get_settings().debug


def sanitize_exception_message(error: BaseException) -> str:
    """Sanitize an exception message for production logs.

    Strips file paths, connection URLs, e-mail addresses, long tokens and
    SQL parameter lists, then truncates.

    Args:
        error: The exception to sanitize

    Returns:
        Sanitized error message
    """
    error_msg = str(error)
    error_msg = _SQL_PARAMS_RE.sub("[parameters]", error_msg)
    error_msg = _URL_RE.sub("[URL]", error_msg)
    error_msg = _PATH_RE.sub("[PATH]", error_msg)
    error_msg = _EMAIL_RE.sub("[EMAIL]", error_msg)
    error_msg = _TOKEN_RE.sub("[TOKEN]", error_msg)

    if len(error_msg) > MAX_MESSAGE_LENGTH:
        error_msg = error_msg[: MAX_MESSAGE_LENGTH - 3] + "..."

    return error_msg


def log_error(
    logger: logging.Logger,
    message: str,
    error: BaseException | None = None,
    **context: Any,
) -> None:
    """Log an error, with traceback, at a detail level suited to the environment.

    The traceback is always attached so failures can be diagnosed; only the
    one-line summary is sanitized outside debug mode.

    Args:
        logger: The logger instance to use
        message: Generic log message
        error: Optional exception to include
        **context: Extra fields (e.g. tenant_id) attached to the record
    """
    if error is None:
        logger.error(message, extra=context)
        return

    detail = str(error) if is_debug_mode() else sanitize_exception_message(error)
    logger.error("%s: %s", message, detail, exc_info=error, extra=context)


def log_warning(
    logger: logging.Logger,
    message: str,
    error: BaseException | None = None,
    **context: Any,
) -> None:
    """Log a warning without traceback.

    Args:
        logger: The logger instance to use
        message: Generic log message
        error: Optional exception to include
        **context: Extra fields attached to the record
    """
    if error is None:
        logger.warning(message, extra=context)
        return

    detail = str(error) if is_debug_mode() else sanitize_exception_message(error)
    logger.warning("%s: %s", message, detail, extra=context)
