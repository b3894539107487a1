"""
Utility decorators for logging engine operations.
"""

import functools
import inspect
import time
import uuid
from collections.abc import Callable
from typing import Any, TypeVar

from loguru import logger

F = TypeVar("F", bound=Callable[..., Any])

_CONTEXT_PARAMS = ("command", "symbol", "side", "qty", "price", "value")


def _serialize_parameter_value(value: Any) -> Any:
    """Serialize parameter value for logging."""
    if hasattr(value, "value") and hasattr(value, "name"):
        return str(value.value)  # Handle enum values
    if isinstance(value, bool | int | float | str) or value is None:
        return value
    if hasattr(value, "__dataclass_fields__"):
        return repr(value)  # Handle command objects
    return type(value).__name__


def _setup_logging_context(
    func: Callable[..., Any], args: tuple[Any, ...], kwargs: dict[str, Any]
) -> dict[str, Any]:
    """Build the logging context for one call."""
    bound_args = inspect.signature(func).bind(*args, **kwargs)
    bound_args.apply_defaults()

    context: dict[str, Any] = {"correlation_id": str(uuid.uuid4())[:8]}
    for param_name, value in bound_args.arguments.items():
        if param_name in _CONTEXT_PARAMS:
            context[param_name] = _serialize_parameter_value(value)
    return context


def log_operation(func: F) -> F:
    """Decorator to log an engine operation with a correlation id and timing.

    Logs at INFO on entry, SUCCESS on completion and ERROR on failure;
    exceptions are re-raised unchanged.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        context = _setup_logging_context(func, args, kwargs)
        func_name = func.__name__
        log = logger.bind(**context)

        log.info(f"Operation started: {func_name}")
        start_time = time.perf_counter()
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            elapsed_ms = round((time.perf_counter() - start_time) * 1000, 2)
            log.error(
                f"Operation failed: {func_name} after {elapsed_ms}ms "
                f"({type(e).__name__}: {e})"
            )
            raise
        elapsed_ms = round((time.perf_counter() - start_time) * 1000, 2)
        log.success(f"Operation completed: {func_name} in {elapsed_ms}ms")
        return result

    return wrapper  # type: ignore
