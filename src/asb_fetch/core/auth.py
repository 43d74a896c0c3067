"""GitHub authentication and rate-limit tracking.

Applies the optional keyring token to GitHub API requests and records the
rate-limit headers of each response so an exhausted anonymous quota can
be reported clearly instead of surfacing as a bare 403.
"""

import time
from collections.abc import Mapping

from asb_fetch.core.token import KeyringTokenStore
from asb_fetch.logger import get_logger

logger = get_logger(__name__)


class GitHubAuthManager:
    """Manage GitHub authentication and rate limiting."""

    RATE_LIMIT_THRESHOLD: int = 10  # Warn below this many remaining calls

    def __init__(self, token_store: KeyringTokenStore | None = None) -> None:
        """Initialize the auth manager.

        Args:
            token_store: Optional token storage instance. If None, creates
                a default KeyringTokenStore instance.

        """
        self.token_store = (
            token_store if token_store is not None else KeyringTokenStore()
        )
        self._token: str | None = None
        self._token_loaded = False
        self._remaining_requests: int | None = None
        self._rate_limit_reset: int | None = None

    @classmethod
    def create_default(cls) -> "GitHubAuthManager":
        """Create auth manager with default keyring-based token storage."""
        return cls()

    def get_token(self) -> str | None:
        """Return the stored token, reading the keyring at most once."""
        if not self._token_loaded:
            self._token = self.token_store.get()
            self._token_loaded = True
        return self._token

    def apply_auth(self, headers: dict[str, str]) -> dict[str, str]:
        """Apply GitHub authentication to the given request headers.

        Args:
            headers: HTTP headers to update.

        Returns:
            Headers with the Authorization header set when a token is
            available, otherwise the original headers.

        """
        token = self.get_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"
            logger.debug("Applied GitHub authentication (token present)")
        return headers

    def update_rate_limit_info(self, headers: Mapping[str, str]) -> None:
        """Update rate-limit information from GitHub response headers."""
        try:
            remaining = headers.get("X-RateLimit-Remaining")
            reset = headers.get("X-RateLimit-Reset")
            if remaining is not None:
                self._remaining_requests = int(remaining)
            if reset is not None:
                self._rate_limit_reset = int(reset)
        except (ValueError, TypeError):
            # Don't expose header values in log output
            logger.warning("Invalid rate limit headers received")
            return

        if (
            self._remaining_requests is not None
            and self._remaining_requests < self.RATE_LIMIT_THRESHOLD
        ):
            logger.warning(
                "GitHub API rate limit nearly exhausted: %s requests left",
                self._remaining_requests,
            )

    def is_rate_limited(self) -> bool:
        """Return True when the last response reported no remaining calls."""
        return self._remaining_requests == 0

    def get_reset_in_seconds(self) -> int | None:
        """Return seconds until the rate limit resets, if known."""
        if self._rate_limit_reset is None:
            return None
        return max(0, self._rate_limit_reset - int(time.time()))
