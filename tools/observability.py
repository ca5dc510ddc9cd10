"""Call instrumentation for the service's outbound dependencies.

Catalog reads, store writes and webhook posts are wrapped so each call logs
its dependency, outcome and duration under the active correlation id.
"""

from __future__ import annotations

import logging
import time
from functools import wraps
from typing import Any, Callable, Dict, ParamSpec, TypeVar

from dresser_app.logging_config import ensure_correlation_id, get_logger, log_event

LOGGER = get_logger(__name__)
P = ParamSpec("P")
R = TypeVar("R")


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)


def _result_shape(result: Any) -> Dict[str, Any]:
    if isinstance(result, (list, tuple)):
        return {"result_count": len(result)}
    if isinstance(result, bool):
        return {"result": result}
    return {}


def instrument_call(dependency: str) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Log start, completion or failure of calls into ``dependency``.

    Exceptions are logged with their traceback and re-raised untouched.
    """

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        operation = func.__qualname__

        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            correlation_id = ensure_correlation_id()
            log_event(
                LOGGER,
                logging.DEBUG,
                "dependency_call_started",
                dependency=dependency,
                operation=operation,
                correlation_id=correlation_id,
            )
            start = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as exc:
                log_event(
                    LOGGER,
                    logging.ERROR,
                    "dependency_call_failed",
                    dependency=dependency,
                    operation=operation,
                    correlation_id=correlation_id,
                    duration_ms=_elapsed_ms(start),
                    error_type=type(exc).__name__,
                    exc_info=True,
                )
                raise
            log_event(
                LOGGER,
                logging.INFO,
                "dependency_call_completed",
                dependency=dependency,
                operation=operation,
                correlation_id=correlation_id,
                duration_ms=_elapsed_ms(start),
                **_result_shape(result),
            )
            return result

        return wrapper

    return decorator


__all__ = ["instrument_call"]
