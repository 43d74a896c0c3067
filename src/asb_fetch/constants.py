"""Centralized constants module for asb-fetch.

This module serves as the single source of truth for shared constants
across the asb-fetch codebase. Constants are organized by logical
categories and use typing.Final annotations to ensure immutability.

Usage:
    from asb_fetch.constants import CONFIG_VERSION
"""

from typing import Final

# =============================================================================
# Configuration Constants
# =============================================================================

CONFIG_VERSION: Final[str] = "1.0.0"
CONFIG_FILE_NAME: Final[str] = "settings.conf"
CONFIG_DIR_NAME: Final[str] = "asb-fetch"
DEFAULT_CONFIG_SUBDIR: Final[str] = ".config"

DEFAULT_LOG_LEVEL: Final[str] = "INFO"
DEFAULT_CONSOLE_LOG_LEVEL: Final[str] = "WARNING"
VALID_LOG_LEVELS: Final[tuple[str, ...]] = (
    "DEBUG",
    "INFO",
    "WARNING",
    "ERROR",
    "CRITICAL",
)

ISO_DATETIME_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

# Config section and key names
SECTION_DEFAULT: Final[str] = "DEFAULT"
SECTION_RELEASE: Final[str] = "release"
SECTION_NETWORK: Final[str] = "network"
SECTION_DIRECTORY: Final[str] = "directory"
SECTION_VERIFICATION: Final[str] = "verification"
SECTION_INSTALL: Final[str] = "install"

KEY_CONFIG_VERSION: Final[str] = "config_version"
KEY_LOG_LEVEL: Final[str] = "log_level"
KEY_CONSOLE_LOG_LEVEL: Final[str] = "console_log_level"

# =============================================================================
# Release Source Constants
# =============================================================================

DEFAULT_RELEASE_INDEX_URL: Final[str] = (
    "https://api.github.com/repos/eigenwallet/core/releases/latest"
)
DEFAULT_DOWNLOAD_BASE_URL: Final[str] = (
    "https://github.com/eigenwallet/core/releases/download"
)
DEFAULT_COMPONENTS: Final[tuple[str, ...]] = ("asb", "swap")

ARTIFACT_EXTENSION: Final[str] = ".tar"
PARTIAL_DOWNLOAD_SUFFIX: Final[str] = ".part"

GITHUB_API_ACCEPT: Final[str] = "application/vnd.github+json"

# =============================================================================
# Network Constants
# =============================================================================

DEFAULT_RETRY_ATTEMPTS: Final[int] = 3
DEFAULT_TIMEOUT_SECONDS: Final[int] = 10
DEFAULT_PARALLEL_DOWNLOADS: Final[bool] = True
MAX_RETRY_ATTEMPTS: Final[int] = 10

HTTP_SERVER_ERROR_MIN: Final[int] = 500

DOWNLOAD_CHUNK_SIZE: Final[int] = 8192

# =============================================================================
# Install Constants
# =============================================================================

EXECUTABLE_MODE: Final[int] = 0o755
EXTRACT_TMP_PREFIX: Final[str] = ".asb-fetch-extract-"

# =============================================================================
# Verification Constants
# =============================================================================

SUPPORTED_HASH_ALGORITHMS: Final[tuple[str, ...]] = ("sha256", "sha512")
HASH_READ_CHUNK_SIZE: Final[int] = 65536

# =============================================================================
# Authentication Constants
# =============================================================================

KEYRING_SERVICE_NAME: Final[str] = "asb-fetch-github-token"
KEYRING_USERNAME: Final[str] = "token"
MAX_TOKEN_LENGTH: Final[int] = 255

# =============================================================================
# Logging Constants
# =============================================================================

LOG_FILE_NAME: Final[str] = "asb-fetch.log"
LOG_DIR_ENV_VAR: Final[str] = "ASB_FETCH_LOG_DIR"
LOG_ROTATION_THRESHOLD_BYTES: Final[int] = 10 * 1024 * 1024
LOG_BACKUP_COUNT: Final[int] = 5

LOG_CONSOLE_FORMAT: Final[str] = (
    "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
LOG_CONSOLE_DATE_FORMAT: Final[str] = "%H:%M:%S"
LOG_FILE_FORMAT: Final[str] = (
    "%(asctime)s - %(name)s - %(levelname)s - "
    "%(funcName)s:%(lineno)d - %(message)s"
)
LOG_FILE_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

LOG_COLORS: Final[dict[str, str]] = {
    "DEBUG": "\033[36m",
    "INFO": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
    "CRITICAL": "\033[35m",
    "RESET": "\033[0m",
}
