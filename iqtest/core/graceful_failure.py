"""
Graceful failure utilities.

Reusable helpers for non-critical work that must never block the user from
seeing their results: saving history, requesting analysis text, and similar
side effects. The pattern is:
1. Attempt the operation
2. Log any exception with context
3. Continue without raising

Usage:
    from iqtest.core.graceful_failure import graceful_failure

    with graceful_failure("save test history", logger, context={"user_id": uid}):
        store.save(uid, record)

    @graceful_failure_decorator("refresh history list", default=[])
    def refresh_history(user_id: str) -> list:
        ...
"""

import logging
from contextlib import contextmanager
from functools import wraps
from typing import Any, Callable, Generator, Optional, TypeVar

T = TypeVar("T")


@contextmanager
def graceful_failure(
    operation_name: str,
    logger: logging.Logger,
    *,
    log_level: int = logging.WARNING,
    exc_info: bool = False,
    context: Optional[dict[str, Any]] = None,
) -> Generator[None, None, None]:
    """Context manager for non-critical operations that should not block execution.

    Only ``Exception`` subclasses are absorbed; ``KeyboardInterrupt`` and
    ``SystemExit`` propagate.

    Args:
        operation_name: Human-readable name of the operation for logging
            (e.g., "save test history").
        logger: The logger instance to use for logging errors.
        log_level: Logging level for error messages. Defaults to WARNING.
        exc_info: Whether to include exception traceback in log. Defaults to False.
        context: Optional dictionary of additional context to include in log message
            (e.g., {"user_id": "abc", "iq_score": 106}).
    """
    try:
        yield
    except Exception as e:
        if context:
            context_str = ", ".join(f"{k}={v}" for k, v in context.items())
            message = f"Failed to {operation_name} ({context_str}): {e}"
        else:
            message = f"Failed to {operation_name}: {e}"

        logger.log(log_level, message, exc_info=exc_info)


class GracefulFailureDecorator:
    """Decorator wrapping a whole function in graceful failure handling.

    Returns ``default`` when the wrapped function raises.
    """

    def __init__(
        self,
        operation_name: str,
        *,
        logger: Optional[logging.Logger] = None,
        log_level: int = logging.WARNING,
        exc_info: bool = False,
        default: Any = None,
    ):
        self.operation_name = operation_name
        self._logger = logger
        self.log_level = log_level
        self.exc_info = exc_info
        self.default = default

    def __call__(self, func: Callable[..., T]) -> Callable[..., Optional[T]]:
        """Decorate the function with graceful failure handling."""

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Optional[T]:
            logger = self._logger or logging.getLogger(func.__module__)

            with graceful_failure(
                self.operation_name,
                logger,
                log_level=self.log_level,
                exc_info=self.exc_info,
            ):
                return func(*args, **kwargs)

            # Reached only when the wrapped call raised
            return self.default

        return wrapper


# Convenience alias for the decorator
graceful_failure_decorator = GracefulFailureDecorator
