"""
logging decorators.
"""

import asyncio
import functools
import time
from typing import Any, Callable, TypeVar

from skitour_scout.observability.logger.logger import get_logger
from skitour_scout.observability.logger.pipeline_step import PipelineStep


F = TypeVar("F", bound=Callable[..., Any])


def time_profile(
    pipeline_step: PipelineStep = PipelineStep.SYSTEM
) -> Callable[[F], F]:
    """
    log how long the decorated function took, for sync and async functions.

    example:
        >>> @time_profile(PipelineStep.SCORING)
        ... def evaluate_routes(routes, weather, hazard):
        ...     ...
        # logs: [TIME PROFILE] evaluate_routes completed in 0.01s
    """
    def decorator(func: F) -> F:
        logger = get_logger(func.__module__, pipeline_step).with_prefix("[TIME PROFILE]")

        if asyncio.iscoroutinefunction(func):
            @functools.wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                start_time = time.perf_counter()
                result = await func(*args, **kwargs)
                logger.info(f"{func.__name__} completed in {time.perf_counter() - start_time:.2f}s")
                return result
            return async_wrapper  # type: ignore

        @functools.wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            start_time = time.perf_counter()
            result = func(*args, **kwargs)
            logger.info(f"{func.__name__} completed in {time.perf_counter() - start_time:.2f}s")
            return result
        return sync_wrapper  # type: ignore

    return decorator
