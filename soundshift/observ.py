"""Structured observability system using structlog.

Provides:
- Context-aware structured logging
- Language tracking for batch runs
- JSON output for production, pretty console for dev
- Performance timing utilities

Usage:
    from soundshift.observ import get_logger

    logger = get_logger(__name__)
    logger.info("rule_applied", rule_id="r1", before="pata", after="bata")
"""

import sys
import logging
from typing import Optional
from contextvars import ContextVar
from functools import wraps
from time import perf_counter

import structlog
from structlog.typing import EventDict, WrappedLogger

from soundshift.config import get_settings


# Context variable for the language currently being processed
language_id_var: ContextVar[Optional[str]] = ContextVar("language_id", default=None)


# ═════════════════════════════════════════════════════════════════════════════
# Structlog Configuration
# ═════════════════════════════════════════════════════════════════════════════

def add_context_fields(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict
) -> EventDict:
    """Add context variables to every log entry."""
    language_id = language_id_var.get()
    if language_id:
        event_dict["language_id"] = language_id

    return event_dict


def configure_logging() -> None:
    """Configure structlog based on environment settings."""
    settings = get_settings()

    is_dev = settings.debug or settings.log_level.upper() == "DEBUG"

    # stderr keeps CLI output on stdout clean
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, settings.log_level.upper(), logging.INFO)
    )

    processors = [
        structlog.contextvars.merge_contextvars,
        add_context_fields,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if is_dev:
        processors.extend([
            structlog.dev.set_exc_info,
            structlog.dev.ConsoleRenderer(colors=True)
        ])
    else:
        processors.extend([
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer()
        ])

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


# Initialize on module import
configure_logging()


# ═════════════════════════════════════════════════════════════════════════════
# Logger Factory
# ═════════════════════════════════════════════════════════════════════════════

def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger for the given module.

    Args:
        name: Module name (typically __name__)

    Returns:
        Bound logger with automatic context
    """
    return structlog.get_logger(name)


# ═════════════════════════════════════════════════════════════════════════════
# Context Management
# ═════════════════════════════════════════════════════════════════════════════

def set_language_id(language_id: str) -> None:
    """Set language ID for current context."""
    language_id_var.set(language_id)


def clear_context() -> None:
    """Clear all context variables."""
    language_id_var.set(None)


# ═════════════════════════════════════════════════════════════════════════════
# Performance Timing
# ═════════════════════════════════════════════════════════════════════════════

def timed(logger: Optional[structlog.stdlib.BoundLogger] = None):
    """Decorator to log function execution time.

    Example:
        @timed(logger)
        def batch_apply(words, rule_sets):
            ...
    """
    def decorator(func):
        nonlocal logger
        if logger is None:
            logger = get_logger(func.__module__)

        @wraps(func)
        def wrapper(*args, **kwargs):
            start = perf_counter()
            try:
                result = func(*args, **kwargs)
                duration = perf_counter() - start
                logger.debug(
                    "function_completed",
                    function=func.__qualname__,
                    duration_ms=round(duration * 1000, 2),
                    success=True
                )
                return result
            except Exception as e:
                duration = perf_counter() - start
                logger.error(
                    "function_failed",
                    function=func.__qualname__,
                    duration_ms=round(duration * 1000, 2),
                    error=str(e),
                    error_type=type(e).__name__,
                    success=False
                )
                raise

        return wrapper

    return decorator


class timer:
    """Context manager for timing code blocks.

    Example:
        with timer(logger, "fuzzy_search", entries=len(words)):
            results = fuzzy_search(query, words, inventory)
    """

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger,
        operation: str,
        **context
    ):
        self.logger = logger
        self.operation = operation
        self.context = context
        self.start_time: Optional[float] = None

    def __enter__(self):
        self.start_time = perf_counter()
        self.logger.debug(f"{self.operation}_started", **self.context)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        duration = perf_counter() - self.start_time
        if exc_type is None:
            self.logger.info(
                f"{self.operation}_completed",
                duration_ms=round(duration * 1000, 2),
                success=True,
                **self.context
            )
        else:
            self.logger.error(
                f"{self.operation}_failed",
                duration_ms=round(duration * 1000, 2),
                error=str(exc_val),
                error_type=exc_type.__name__,
                success=False,
                **self.context
            )
        return False  # Don't suppress exceptions
