"""HTTP client utilities and helpers."""

from asyncio import sleep
from collections.abc import Awaitable, Callable
from functools import wraps

from typing import Any, ParamSpec, TypeVar

import httpx

from btog.helpers.constants import (
    DEFAULT_RETRIES,
    DEFAULT_TIMEOUT,
    RETRY_BASE_DELAY,
    RETRY_MAX_DELAY,
)
from btog.helpers.logging import get_logger


logger = get_logger(__name__)

P = ParamSpec("P")
T = TypeVar("T")


def is_retryable(exc: BaseException) -> bool:
    """Tell whether an httpx failure is worth another attempt.

    Transport failures (connect errors, timeouts, dropped connections) and
    5xx responses are retried; client errors and anything outside httpx are not.
    """
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code >= 500
    return isinstance(exc, httpx.TransportError)


def retry_with_backoff(
    max_retries: int = DEFAULT_RETRIES,
    base_delay: float = RETRY_BASE_DELAY,
    max_delay: float = RETRY_MAX_DELAY,
    *,
    log_errors: bool = True,
) -> Callable[[Callable[P, Awaitable[T]]], Callable[P, Awaitable[T]]]:
    """Decorator to retry async functions with exponential backoff.

    Args:
        max_retries: Maximum number of attempts (default: 1, i.e. no retry)
        base_delay: Initial delay in seconds (default: 1.0)
        max_delay: Maximum delay between retries (default: 60.0)
        log_errors: Whether to log retry attempts (default: True)

    Returns:
        Decorated function that retries on retryable httpx errors

    Example:
        ```python
        from btog.helpers.http import retry_with_backoff

        @retry_with_backoff(max_retries=3, base_delay=2.0)
        async def fetch(client: httpx.AsyncClient, url: str) -> httpx.Response:
            response = await client.get(url)
            response.raise_for_status()
            return response

        # Will try up to 3 times, sleeping 2s then 4s between attempts
        ```
    """
    if max_retries < 1:
        msg = f"max_retries must be at least 1, got {max_retries}"
        raise ValueError(msg)

    def decorator(func: Callable[P, Awaitable[T]]) -> Callable[P, Awaitable[T]]:
        @wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            for attempt in range(max_retries):
                try:
                    return await func(*args, **kwargs)
                except httpx.HTTPError as e:
                    if not is_retryable(e) or attempt == max_retries - 1:
                        if log_errors and attempt > 0:
                            logger.error(
                                "%s failed after %d attempts",
                                func.__name__,
                                attempt + 1,
                            )
                        raise
                    if log_errors:
                        logger.warning(
                            "%s HTTP error (attempt %d/%d): %s",
                            func.__name__,
                            attempt + 1,
                            max_retries,
                            e,
                        )

                delay = min(base_delay * (2**attempt), max_delay)
                await sleep(delay)

            # Unreachable: the last attempt either returns or raises
            msg = f"{func.__name__} failed without exception"
            raise RuntimeError(msg)

        return wrapper

    return decorator


def create_http_client(
    timeout: float = DEFAULT_TIMEOUT, **kwargs: Any
) -> httpx.AsyncClient:
    """Create a configured httpx AsyncClient.

    Args:
        timeout: Default timeout in seconds (default: DEFAULT_TIMEOUT)
        **kwargs: Additional httpx.AsyncClient kwargs

    Returns:
        Configured AsyncClient instance

    Example:
        ```python
        from btog.helpers.http import create_http_client

        async with create_http_client(timeout=10.0) as client:
            response = await client.get("http://bosun/api/metadata/metrics")
        ```
    """
    return httpx.AsyncClient(timeout=timeout, **kwargs)


async def post_json(
    client: httpx.AsyncClient,
    url: str,
    content: str,
    *,
    headers: dict[str, str] | None = None,
    timeout: float | None = None,
) -> Any:
    """Post a pre-serialized JSON body and return the decoded response.

    Args:
        client: HTTP client instance
        url: URL to post to
        content: JSON document, already encoded
        headers: Extra request headers
        timeout: Optional timeout override

    Returns:
        Parsed JSON response

    Raises:
        httpx.HTTPStatusError: If the server answers with an error status
        httpx.HTTPError: On transport failures
    """
    request_headers = {"Content-Type": "application/json", **(headers or {})}
    response = await client.post(
        url,
        content=content,
        headers=request_headers,
        timeout=timeout if timeout is not None else client.timeout,
    )
    response.raise_for_status()
    return response.json()


__all__ = [
    "create_http_client",
    "is_retryable",
    "post_json",
    "retry_with_backoff",
]
