"""Retry decorator for GitHub API calls that hit rate limits.

Only rate limit responses are retried. Any other failure propagates to the
caller unchanged.
"""

import asyncio
import functools
import inspect
import time
from typing import Any, Callable, Mapping, TypeVar

import structlog
from githubkit.exception import RateLimitExceeded, RequestFailed

logger = structlog.get_logger(__name__)

AsyncFunction = TypeVar("AsyncFunction", bound=Callable[..., Any])

RATE_LIMIT_STATUS_CODES = (403, 429)


def _wait_time_from_headers(headers: Mapping[str, str], default: float) -> float:
    """Seconds to wait according to retry-after, then x-ratelimit-reset, else the default."""
    retry_after = headers.get("retry-after")
    if retry_after:
        try:
            return float(retry_after)
        except ValueError:
            logger.warning("Ignoring unparsable retry-after header", retry_after=retry_after)

    reset_at = headers.get("x-ratelimit-reset")
    if reset_at:
        try:
            seconds_left = int(reset_at) - int(time.time())
        except ValueError:
            logger.warning("Ignoring unparsable x-ratelimit-reset header", reset_at=reset_at)
        else:
            if seconds_left > 0:
                return seconds_left + 1
    return default


def _rate_limit_wait(error: RequestFailed, delay: float) -> float | None:
    """How long to back off for a failed request, or None when it is not a rate limit."""
    if isinstance(error, RateLimitExceeded):
        return error.retry_after.total_seconds() if error.retry_after else delay
    if error.response.status_code in RATE_LIMIT_STATUS_CODES:
        return _wait_time_from_headers(error.response.headers, delay)
    return None


def retry_on_rate_limit(
    max_retries: int = 10,
    initial_delay: float = 10.0,
    max_delay: float = 300.0,
    exponential_base: float = 2.0,
) -> Callable[[AsyncFunction], AsyncFunction]:
    """Retry an async GitHub call while it is being rate limited.

    githubkit's rate limit exceptions wait for their ``retry_after``. Plain
    403/429 responses wait for the delay announced in the response headers.
    Without any hint the delay starts at ``initial_delay`` and grows by
    ``exponential_base`` per attempt. Every wait is capped at ``max_delay``.

    Example:
        @retry_on_rate_limit()
        async def list_repositories(org: str):
            return await github_client.rest.repos.async_list_for_org(org=org)
    """

    def decorator(func: AsyncFunction) -> AsyncFunction:
        if not inspect.iscoroutinefunction(func):
            raise TypeError(f"Function {func.__name__} decorated with @retry_on_rate_limit must be async.")

        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            delay = initial_delay
            attempt = 0
            while True:
                try:
                    return await func(*args, **kwargs)
                except RequestFailed as e:
                    wait_time = _rate_limit_wait(e, delay)
                    if wait_time is None:
                        raise
                    if attempt >= max_retries:
                        logger.error(
                            "Giving up after repeated GitHub rate limiting",
                            function=func.__name__,
                            attempts=attempt + 1,
                            status_code=e.response.status_code,
                        )
                        raise
                    error = e

                attempt += 1
                wait_time = min(wait_time, max_delay)
                logger.warning(
                    "GitHub rate limit hit, backing off",
                    function=func.__name__,
                    error_type=type(error).__name__,
                    attempt=attempt,
                    max_retries=max_retries,
                    wait_time=wait_time,
                )
                await asyncio.sleep(wait_time)
                delay = min(delay * exponential_base, max_delay)

        return wrapper  # type: ignore

    return decorator
