"""Tests for the shared HTTP session helpers."""

from unittest.mock import AsyncMock, MagicMock, patch

import aiohttp
import pytest

from asb_fetch.core.http_session import (
    build_timeout,
    create_http_session,
    is_retryable,
    request_with_retry,
)


def response_error(status: int) -> aiohttp.ClientResponseError:
    """Build a ClientResponseError with ``status``."""
    return aiohttp.ClientResponseError(
        request_info=MagicMock(), history=(), status=status
    )


@pytest.mark.parametrize(
    ("error", "expected"),
    [
        (aiohttp.ClientConnectionError(), True),
        (aiohttp.ClientPayloadError(), True),
        (TimeoutError(), True),
        (response_error(503), True),
        (response_error(404), False),
        (response_error(403), False),
        (ValueError(), False),
    ],
)
def test_is_retryable(error, expected):
    """Test only transient failures are retried."""
    assert is_retryable(error) is expected


def test_build_timeout():
    """Test timeouts scale from the base seconds."""
    timeout = build_timeout(10)
    assert timeout.total == 600
    assert timeout.sock_connect == 10
    assert timeout.sock_read == 30


@pytest.mark.asyncio
async def test_create_http_session(fetch_config):
    """Test the session carries the timeout and User-Agent."""
    async with create_http_session(fetch_config) as session:
        assert session.timeout.sock_connect == fetch_config.timeout_seconds
        assert session.headers["User-Agent"].startswith("asb-fetch/")
    assert session.closed


class TestRequestWithRetry:
    """request_with_retry() attempts and backoff."""

    @pytest.mark.asyncio
    async def test_backoff_then_give_up(self):
        """Test transient errors back off exponentially, then re-raise."""
        mock_session = MagicMock()
        mock_session.get.side_effect = aiohttp.ClientConnectionError("down")
        cleanup = MagicMock()
        process = AsyncMock()

        with patch(
            "asb_fetch.core.http_session.asyncio.sleep", new=AsyncMock()
        ) as sleep:
            with pytest.raises(aiohttp.ClientConnectionError):
                await request_with_retry(
                    mock_session,
                    "https://x.test",
                    process,
                    "test",
                    3,
                    cleanup_callback=cleanup,
                )

        assert [c.args[0] for c in sleep.await_args_list] == [2, 4]
        assert cleanup.call_count == 3
        process.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_hook_sees_response_before_status_check(self):
        """Test the response hook runs even for failing responses."""
        mock_response = AsyncMock()
        mock_response.__aenter__.return_value = mock_response
        mock_response.raise_for_status = MagicMock(
            side_effect=response_error(404)
        )
        mock_session = MagicMock()
        mock_session.get.return_value = mock_response
        hook = MagicMock()

        with pytest.raises(aiohttp.ClientResponseError):
            await request_with_retry(
                mock_session,
                "https://x.test",
                AsyncMock(),
                "test",
                3,
                response_hook=hook,
            )

        hook.assert_called_once_with(mock_response)
        assert mock_session.get.call_count == 1

    @pytest.mark.asyncio
    async def test_returns_processed_value(self):
        """Test the callback result is returned on success."""
        mock_response = AsyncMock()
        mock_response.__aenter__.return_value = mock_response
        mock_response.raise_for_status = MagicMock()
        mock_session = MagicMock()
        mock_session.get.return_value = mock_response

        result = await request_with_retry(
            mock_session,
            "https://x.test",
            AsyncMock(return_value=42),
            "test",
            1,
            headers={"Accept": "application/json"},
        )

        assert result == 42
        mock_session.get.assert_called_once_with(
            "https://x.test", headers={"Accept": "application/json"}
        )
