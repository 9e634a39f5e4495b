"""Retry decorator with exponential backoff for idempotent API reads.

Example:
    from scylla_cloud.retry import on_status_code, retry

    @retry(on=on_status_code(429, 503), max_attempts=3)
    async def get_cluster(cluster_id: int) -> Cluster:
        ...

Mutating calls (create, delete) must not be decorated: a retried create
could submit a second cluster.
"""

from __future__ import annotations

import asyncio
import functools
import random
from collections.abc import Awaitable, Callable
from typing import ParamSpec, TypeAlias, TypeVar

from loguru import logger

P = ParamSpec("P")
T = TypeVar("T")

RetryPredicate: TypeAlias = Callable[[Exception], bool]


def retry(
    on: type[Exception] | tuple[type[Exception], ...] | RetryPredicate = Exception,
    max_attempts: int = 5,
    base_delay: float = 1.0,
    exponential_base: float = 2.0,
    max_delay: float = 60.0,
    jitter: bool = True,
) -> Callable[[Callable[P, Awaitable[T]]], Callable[P, Awaitable[T]]]:
    """Decorator that retries async functions with exponential backoff.

    Args:
        on: Exception class, tuple of classes, or predicate deciding whether
            a failure is retryable.
        max_attempts: Maximum number of attempts (including the first one).
        base_delay: Initial delay in seconds before first retry.
        exponential_base: Multiplier applied per attempt.
        max_delay: Maximum delay cap in seconds.
        jitter: Add up to 10% random jitter to each delay.
    """
    if isinstance(on, type) and issubclass(on, Exception):
        should_retry: RetryPredicate = lambda e: isinstance(e, on)
    elif isinstance(on, tuple):
        should_retry = lambda e: isinstance(e, on)
    else:
        should_retry = on

    def decorator(func: Callable[P, Awaitable[T]]) -> Callable[P, Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            for attempt in range(max_attempts):
                try:
                    return await func(*args, **kwargs)
                except Exception as e:
                    has_retries_left = attempt < max_attempts - 1
                    if not (should_retry(e) and has_retries_left):
                        raise

                    delay = min(base_delay * (exponential_base**attempt), max_delay)
                    if jitter:
                        delay += random.uniform(0, delay * 0.1)

                    logger.bind(component="retry").warning(
                        "Retry {attempt}/{max} of {fn} after {exc}: {err}. Waiting {delay:.1f}s...",
                        attempt=attempt + 1,
                        max=max_attempts,
                        fn=func.__name__,
                        exc=type(e).__name__,
                        err=e,
                        delay=delay,
                    )
                    await asyncio.sleep(delay)
            raise AssertionError("unreachable")

        return wrapper

    return decorator


def on_status_code(*codes: int) -> RetryPredicate:
    """Retry when the exception exposes a `status` attribute in `codes`."""

    def predicate(e: Exception) -> bool:
        return getattr(e, "status", None) in codes

    return predicate
