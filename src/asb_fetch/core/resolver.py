"""Release resolution against a GitHub-style release index.

The index answers ``GET {index_url}`` with the JSON object of the latest
release; only its ``tag_name`` and ``assets[].digest`` fields are used.
Any failure is fatal: there is no fallback version.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import aiohttp
import orjson

from asb_fetch.constants import GITHUB_API_ACCEPT
from asb_fetch.core.auth import GitHubAuthManager
from asb_fetch.core.http_session import request_with_retry
from asb_fetch.domain import Release
from asb_fetch.exceptions import ResolutionError
from asb_fetch.logger import get_logger

if TYPE_CHECKING:
    from asb_fetch.config import FetchConfig

logger = get_logger(__name__)

HTTP_FORBIDDEN = 403


class GitHubReleaseResolver:
    """Resolve the latest release from the configured release index."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        config: FetchConfig,
        auth_manager: GitHubAuthManager | None = None,
    ) -> None:
        """Initialize the resolver.

        Args:
            session: aiohttp session for making requests
            config: Run configuration (index_url, retry_attempts)
            auth_manager: Optional GitHub authentication manager
                (creates default if not provided)

        """
        self.session = session
        self.index_url = config.index_url
        self.retry_attempts = config.retry_attempts
        self.auth_manager = auth_manager or GitHubAuthManager.create_default()

    async def resolve(self) -> Release:
        """Fetch and parse the latest release.

        Returns:
            Latest release with its published asset digests

        Raises:
            ResolutionError: If the index is unreachable, answers a
                non-success status, or has no usable tag_name

        """
        logger.debug("Resolving latest release from %s", self.index_url)
        headers = self.auth_manager.apply_auth(
            {"Accept": GITHUB_API_ACCEPT}
        )

        try:
            api_data = await request_with_retry(
                self.session,
                self.index_url,
                self._read_json,
                "release index",
                self.retry_attempts,
                headers=headers,
                response_hook=self._record_rate_limit,
            )
        except aiohttp.ClientResponseError as e:
            raise ResolutionError(
                self._describe_status_error(e), self.index_url
            ) from e
        except (aiohttp.ClientError, TimeoutError) as e:
            detail = str(e) or type(e).__name__
            msg = f"release index unreachable: {detail}"
            raise ResolutionError(msg, self.index_url) from e

        if not isinstance(api_data, dict):
            msg = "release index did not return a JSON object"
            raise ResolutionError(msg, self.index_url)

        try:
            release = Release.from_api_response(api_data)
        except ValueError as e:
            raise ResolutionError(str(e), self.index_url) from e

        logger.info("Resolved latest release %s", release.version)
        logger.debug(
            "Release publishes %d asset digest(s)", len(release.digests)
        )
        return release

    def _record_rate_limit(self, response: aiohttp.ClientResponse) -> None:
        self.auth_manager.update_rate_limit_info(response.headers)

    async def _read_json(
        self, response: aiohttp.ClientResponse
    ) -> Any:  # noqa: ANN401
        body = await response.read()
        try:
            return orjson.loads(body)
        except orjson.JSONDecodeError as e:
            msg = f"release index returned invalid JSON: {e}"
            raise ResolutionError(msg, self.index_url) from e

    def _describe_status_error(
        self, error: aiohttp.ClientResponseError
    ) -> str:
        message = f"HTTP {error.status} {error.message}".rstrip()
        if (
            error.status == HTTP_FORBIDDEN
            and self.auth_manager.is_rate_limited()
        ):
            reset = self.auth_manager.get_reset_in_seconds()
            message += " (GitHub API rate limit exhausted"
            if reset is not None:
                message += f", resets in {reset}s"
            message += "; store a token with 'keyring set "
            message += "asb-fetch-github-token token')"
        return message
