"""HTTP session utilities for asb-fetch.

Creates an aiohttp session whose timeouts derive from the configured base
timeout, and provides the bounded retry loop shared by the release
resolver and the artifact downloader.
"""

import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import TypeVar

import aiohttp

from asb_fetch import __version__
from asb_fetch.config import FetchConfig
from asb_fetch.constants import HTTP_SERVER_ERROR_MIN
from asb_fetch.logger import get_logger

T = TypeVar("T")

logger = get_logger(__name__)


def build_timeout(timeout_seconds: int) -> aiohttp.ClientTimeout:
    """Compose a ClientTimeout from the configured base seconds."""
    return aiohttp.ClientTimeout(
        total=timeout_seconds * 60,
        sock_read=timeout_seconds * 3,
        sock_connect=timeout_seconds,
    )


@asynccontextmanager
async def create_http_session(
    config: FetchConfig,
) -> AsyncIterator[aiohttp.ClientSession]:
    """Create configured HTTP session.

    Args:
        config: Run configuration

    Yields:
        Configured aiohttp.ClientSession

    """
    connector = aiohttp.TCPConnector(
        limit=10,
        limit_per_host=max(len(config.components), 1),
    )

    async with aiohttp.ClientSession(
        timeout=build_timeout(config.timeout_seconds),
        connector=connector,
        headers={"User-Agent": f"asb-fetch/{__version__}"},
    ) as session:
        yield session


def is_retryable(error: BaseException) -> bool:
    """Return True for transient transport failures.

    Connection errors, timeouts, truncated payloads and 5xx answers are
    retried; 4xx answers are final.
    """
    if isinstance(error, aiohttp.ClientResponseError):
        return error.status >= HTTP_SERVER_ERROR_MIN
    return isinstance(
        error,
        aiohttp.ClientConnectionError
        | aiohttp.ClientPayloadError
        | TimeoutError,
    )


async def request_with_retry(
    session: aiohttp.ClientSession,
    url: str,
    process_callback: Callable[[aiohttp.ClientResponse], Awaitable[T]],
    description: str,
    retry_attempts: int,
    headers: dict[str, str] | None = None,
    cleanup_callback: Callable[[], None] | None = None,
    response_hook: Callable[[aiohttp.ClientResponse], None] | None = None,
) -> T:
    """GET ``url`` and process the response, retrying transient failures.

    Args:
        session: HTTP session
        url: URL to request
        process_callback: Coroutine consuming the successful response
        description: Human-readable subject for log lines
        retry_attempts: Total number of attempts
        headers: Extra request headers
        cleanup_callback: Called after every failed attempt
        response_hook: Called with every response before its status is
            checked

    Returns:
        Result of ``process_callback``

    Raises:
        aiohttp.ClientError: The last transport error once retries are
            exhausted, or the first non-retryable one
        TimeoutError: If the last attempt timed out

    """
    for attempt in range(1, retry_attempts + 1):
        try:
            async with session.get(url, headers=headers) as response:
                if response_hook:
                    response_hook(response)
                response.raise_for_status()
                return await process_callback(response)
        except (aiohttp.ClientError, TimeoutError) as e:
            if cleanup_callback:
                cleanup_callback()

            if not is_retryable(e) or attempt == retry_attempts:
                logger.debug(
                    "%s failed after %s attempt(s): %s",
                    description,
                    attempt,
                    e,
                )
                raise

            backoff = 2**attempt
            logger.warning(
                "Attempt %s/%s failed for %s: %s. Retrying in %s seconds...",
                attempt,
                retry_attempts,
                description,
                e,
                backoff,
            )
            await asyncio.sleep(backoff)

    msg = "retry_attempts must be at least 1"
    raise ValueError(msg)
