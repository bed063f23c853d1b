"""
Centralized logging utilities for the client.

This module provides decorators and helpers that standardize how operations
are logged, without ever swallowing the errors they observe.

Features:
- Structured logging with contextual information
- Error classification by the client's error taxonomy
- Performance timing for every logged operation
"""

from __future__ import annotations

import functools
import logging
import time
from collections.abc import Awaitable, Callable
from contextlib import asynccontextmanager
from typing import Any, ParamSpec, TypeVar

import httpx
import structlog
from pydantic import ValidationError

from .llm.exceptions import LLMError

# Configure structured logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer(colors=True),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

# Type variables for generic decorators
P = ParamSpec("P")
T = TypeVar("T")
AsyncCallable = Callable[P, Awaitable[T]]

logger = structlog.get_logger(__name__)


def setup_logging(level: str | int = "INFO") -> None:
    """Apply a log level to the stdlib loggers structlog writes through."""
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level '{level}'")
        level = resolved

    logging.basicConfig(level=level, format="%(message)s")
    logging.getLogger("openai_lite").setLevel(level)


def classify_error(error: BaseException) -> str:
    """
    Classify an error into a category string.

    Args:
        error: The exception to classify

    Returns:
        The error category
    """
    if isinstance(error, LLMError):
        return error.category
    if isinstance(error, httpx.HTTPError):
        return "transport"
    if isinstance(error, ValidationError):
        return "parse"
    if isinstance(error, TimeoutError):
        return "timeout"
    if isinstance(error, ConnectionError | OSError):
        return "connection"
    return "unknown"


def log_operation(
    operation: str,
    *,
    log_result: bool = False,
    log_timing: bool = True,
    context: dict[str, Any] | None = None,
) -> Callable[[AsyncCallable[P, T]], AsyncCallable[P, T]]:
    """
    Decorator for logging async operations with structured context.

    Args:
        operation: Description of the operation being performed
        log_result: Whether to log function result
        log_timing: Whether to log execution timing
        context: Additional context to include in logs

    Returns:
        Decorated function with logging
    """
    def decorator(func: AsyncCallable[P, T]) -> AsyncCallable[P, T]:
        @functools.wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            operation_logger = logger.bind(
                operation=operation,
                function=func.__name__,
                **(context or {}),
            )
            operation_logger.debug("Operation started")

            start_time = time.perf_counter() if log_timing else None

            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                error_log_data: dict[str, Any] = {
                    "error_type": type(e).__name__,
                    "error_category": classify_error(e),
                    "error_message": str(e),
                }
                if start_time is not None:
                    error_log_data["duration_ms"] = _elapsed_ms(start_time)

                operation_logger.error("Operation failed", **error_log_data)
                raise

            end_log_data: dict[str, Any] = {}
            if start_time is not None:
                end_log_data["duration_ms"] = _elapsed_ms(start_time)
            if log_result:
                end_log_data["result"] = result

            operation_logger.debug("Operation completed successfully", **end_log_data)
            return result

        return wrapper
    return decorator


@asynccontextmanager
async def operation_context(
    operation: str,
    *,
    context: dict[str, Any] | None = None,
    log_timing: bool = True,
):
    """
    Async context manager for operation logging.

    Args:
        operation: Description of the operation
        context: Additional context for logging
        log_timing: Whether to log operation timing

    Yields:
        Bound logger for the operation
    """
    operation_logger = logger.bind(
        operation=operation,
        **(context or {}),
    )

    operation_logger.debug("Operation started")
    start_time = time.perf_counter() if log_timing else None

    try:
        yield operation_logger
    except Exception as e:
        error_log_data: dict[str, Any] = {
            "error_type": type(e).__name__,
            "error_category": classify_error(e),
            "error_message": str(e),
        }
        if start_time is not None:
            error_log_data["duration_ms"] = _elapsed_ms(start_time)

        operation_logger.error("Operation failed", **error_log_data)
        raise

    log_data: dict[str, Any] = {}
    if start_time is not None:
        log_data["duration_ms"] = _elapsed_ms(start_time)
    operation_logger.debug("Operation completed successfully", **log_data)


def _elapsed_ms(start_time: float) -> float:
    return round((time.perf_counter() - start_time) * 1000, 2)
