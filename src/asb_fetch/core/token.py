"""GitHub token storage using system keyring.

The release index is served by the GitHub API, which limits anonymous
clients to 60 requests per hour. A token stored in the system keyring
(SecretService on Linux, Keychain on macOS) lifts that limit:

    keyring set asb-fetch-github-token token
"""

import re

import keyring
from keyring.errors import KeyringError

from asb_fetch.constants import (
    KEYRING_SERVICE_NAME,
    KEYRING_USERNAME,
    MAX_TOKEN_LENGTH,
)
from asb_fetch.logger import get_logger

logger = get_logger(__name__)

_PREFIXED_TOKEN_PATTERNS = (
    r"^ghp_[A-Za-z0-9_]{36,251}$",  # Personal Access Tokens
    r"^gho_[A-Za-z0-9_]{36,251}$",  # OAuth Access tokens
    r"^ghu_[A-Za-z0-9_]{36,251}$",  # GitHub App user-to-server tokens
    r"^ghs_[A-Za-z0-9_]{36,251}$",  # GitHub App server-to-server tokens
    r"^ghr_[A-Za-z0-9_]{36,251}$",  # GitHub App refresh tokens
    r"^github_pat_[A-Za-z0-9_]{36,243}$",  # Fine-grained PATs
)


def validate_github_token(token: str | None) -> bool:
    """Validate GitHub token format.

    Accepts legacy 40-character hexadecimal tokens and the prefixed
    formats (``ghp_``, ``gho_``, ``ghu_``, ``ghs_``, ``ghr_``,
    ``github_pat_``).

    Args:
        token: The token to validate. ``None`` and non-string values are
            considered invalid.

    Returns:
        True if the token format is valid, False otherwise.

    """
    if not token or not isinstance(token, str):
        return False

    token = token.strip()
    if not token:
        return False

    if len(token) > MAX_TOKEN_LENGTH:
        logger.warning("Token exceeds maximum allowed length")
        return False

    if re.match(r"^[a-f0-9]{40}$", token):
        return True

    return any(
        re.match(pattern, token) for pattern in _PREFIXED_TOKEN_PATTERNS
    )


class KeyringTokenStore:
    """Read-only access to the GitHub token kept in the system keyring."""

    def __init__(
        self,
        service: str = KEYRING_SERVICE_NAME,
        username: str = KEYRING_USERNAME,
    ) -> None:
        """Initialize the keyring token store.

        Args:
            service: The service name for keyring storage.
            username: The username for keyring storage.

        """
        self.service = service
        self.username = username

    def get(self) -> str | None:
        """Retrieve the stored token from the keyring.

        Returns:
            The token if available and well-formed, None otherwise.

        """
        try:
            token = keyring.get_password(self.service, self.username)
        except KeyringError:
            # Expected in headless environments (no DBUS / no backend)
            logger.debug("Keyring unavailable, continuing without token")
            return None

        if not token:
            logger.debug("No token stored in keyring")
            return None
        if not validate_github_token(token):
            logger.warning(
                "Ignoring malformed GitHub token stored in keyring "
                "service '%s'",
                self.service,
            )
            return None

        logger.debug("GitHub token retrieved from keyring (value hidden)")
        return token.strip()
