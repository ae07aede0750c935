"""Enhanced logging utilities with conditional debug logging."""

import logging
import traceback
from typing import Optional

from pulse.config import DEBUG

logger = logging.getLogger("Pulse")


def debug_log(message: str, *args, **kwargs) -> None:
    """
    Log a debug message only if APP_DEBUG is enabled.
    
    Args:
        message: Log message (supports % formatting)
        *args: Positional arguments for message formatting
        **kwargs: Keyword arguments (level, exc_info, etc.)
    """
    if DEBUG:
        level = kwargs.pop("level", logging.DEBUG)
        logger.log(level, message, *args, **kwargs)


def error_log(
    message: str,
    exc: Optional[Exception] = None,
    context: Optional[dict] = None,
    *args,
    **kwargs
) -> None:
    """
    Error logging with context and traceback.
    
    Args:
        message: Error message
        exc: Optional exception object
        context: Optional dictionary with additional context (activity id, table, etc.)
        *args: Additional positional arguments
        **kwargs: Additional keyword arguments for logger
    """
    parts = [message]
    
    if context:
        context_str = ", ".join(f"{k}={v}" for k, v in context.items())
        parts.append(f"Context: {context_str}")
    
    if exc:
        parts.append(f"Exception: {type(exc).__name__}: {exc}")
        if DEBUG:
            parts.append(f"Traceback:\n{''.join(traceback.format_exception(type(exc), exc, exc.__traceback__))}")
    
    full_message = " | ".join(parts)
    
    if exc:
        logger.error(full_message, exc_info=exc, *args, **kwargs)
    else:
        logger.error(full_message, *args, **kwargs)
