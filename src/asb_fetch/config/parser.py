"""INI parser utilities for asb-fetch configuration.

Helpers for reading the settings file with inline comments and for
writing it back with user-facing documentation.
"""

import configparser
from datetime import UTC, datetime

from asb_fetch.constants import (
    CONFIG_VERSION,
    ISO_DATETIME_FORMAT,
    KEY_CONFIG_VERSION,
    SECTION_DEFAULT,
    SECTION_DIRECTORY,
    SECTION_INSTALL,
    SECTION_NETWORK,
    SECTION_RELEASE,
    SECTION_VERIFICATION,
)


def create_parser() -> configparser.ConfigParser:
    """Create a ConfigParser that understands inline comments."""
    return configparser.ConfigParser(
        inline_comment_prefixes=("#", ";"),
        interpolation=None,
    )


class ConfigCommentManager:
    """Manages configuration file comments for user-friendly documentation."""

    @staticmethod
    def get_file_header() -> str:
        """Generate file header comment with description and timestamp."""
        timestamp = datetime.now(tz=UTC).strftime(ISO_DATETIME_FORMAT)
        return f"""# asb-fetch configuration
# Settings for downloading and installing the ASB and swap binaries.
#
# Last updated: {timestamp}
# Configuration version: {CONFIG_VERSION}

"""

    @staticmethod
    def get_section_comments() -> dict[str, str]:
        """Get comments for each configuration section.

        Returns:
            Dictionary mapping section names to their comment strings

        """
        return {
            SECTION_DEFAULT: """# ========================================
# MAIN CONFIGURATION
# ========================================
# config_version: Version of configuration format (DO NOT EDIT)
# log_level: Detail level for log files (DEBUG, INFO, WARNING, ERROR)
# console_log_level: Console output detail level (DEBUG, INFO, etc.)

""",
            SECTION_RELEASE: """
# ========================================
# RELEASE SOURCE
# ========================================
# index_url: Release index returning JSON with a tag_name field
# base_url: Download base; archives are fetched from
#           {base_url}/{version}/{component}_{version}_{os}_{arch}.tar
# components: Comma-separated binaries to install

""",
            SECTION_NETWORK: """
# ========================================
# NETWORK CONFIGURATION
# ========================================
# retry_attempts: Attempts per request on transient failures (1-10)
# timeout_seconds: Seconds to wait before timing out requests
# parallel_downloads: Download component archives concurrently

""",
            SECTION_DIRECTORY: """
# ========================================
# DIRECTORY PATHS
# ========================================
# Relative paths are resolved against the working directory.
#
# install: Where the asb and swap binaries are installed
# staging: Temporary location for downloaded archives
# logs: Log files location

""",
            SECTION_VERIFICATION: """
# ========================================
# VERIFICATION
# ========================================
# require_digest: Fail when the release publishes no digest for an archive

""",
            SECTION_INSTALL: """
# ========================================
# INSTALL
# ========================================
# keep_failed_archives: Keep staged archives when extraction fails

""",
        }

    @staticmethod
    def get_key_comments() -> dict[str, dict[str, str]]:
        """Get inline comments for specific configuration keys."""
        return {
            SECTION_DEFAULT: {
                KEY_CONFIG_VERSION: "# DO NOT MODIFY - Config format version",
            },
        }
