"""Tests for GitHubAuthManager."""

import time
from unittest.mock import MagicMock

import pytest

from asb_fetch.core.auth import GitHubAuthManager


@pytest.fixture
def token_store():
    """Provide a token store holding a valid token."""
    store = MagicMock()
    store.get.return_value = "ghp_" + "b" * 36
    return store


def test_apply_auth_with_token(token_store):
    """Test the Authorization header is added when a token exists."""
    headers = GitHubAuthManager(token_store).apply_auth({"Accept": "x"})
    assert headers == {
        "Accept": "x",
        "Authorization": "Bearer ghp_" + "b" * 36,
    }


def test_apply_auth_without_token():
    """Test headers are unchanged without a token."""
    store = MagicMock()
    store.get.return_value = None
    assert GitHubAuthManager(store).apply_auth({}) == {}


def test_keyring_read_once(token_store):
    """Test the keyring is only consulted once per manager."""
    manager = GitHubAuthManager(token_store)
    manager.apply_auth({})
    manager.apply_auth({})
    token_store.get.assert_called_once()


class TestRateLimit:
    """Rate-limit header tracking."""

    def test_exhausted(self, token_store):
        """Test zero remaining requests is reported as rate limited."""
        manager = GitHubAuthManager(token_store)
        reset = int(time.time()) + 120
        manager.update_rate_limit_info(
            {"X-RateLimit-Remaining": "0", "X-RateLimit-Reset": str(reset)}
        )

        assert manager.is_rate_limited()
        assert 0 < manager.get_reset_in_seconds() <= 120

    def test_not_limited(self, token_store):
        """Test remaining requests clear the rate-limited flag."""
        manager = GitHubAuthManager(token_store)
        manager.update_rate_limit_info({"X-RateLimit-Remaining": "59"})

        assert not manager.is_rate_limited()
        assert manager.get_reset_in_seconds() is None

    def test_invalid_headers(self, token_store, caplog):
        """Test unparsable headers are ignored with a warning."""
        manager = GitHubAuthManager(token_store)
        manager.update_rate_limit_info({"X-RateLimit-Remaining": "many"})

        assert not manager.is_rate_limited()
        assert "Invalid rate limit headers" in caplog.text
