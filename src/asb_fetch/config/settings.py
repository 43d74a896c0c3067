"""Settings manager for the INI configuration file.

The settings file is read once per run and turned into an immutable
FetchConfig that every stage receives explicitly.
"""

import configparser
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from asb_fetch.config.parser import ConfigCommentManager, create_parser
from asb_fetch.config.paths import Paths
from asb_fetch.constants import (
    CONFIG_VERSION,
    DEFAULT_COMPONENTS,
    DEFAULT_CONSOLE_LOG_LEVEL,
    DEFAULT_DOWNLOAD_BASE_URL,
    DEFAULT_LOG_LEVEL,
    DEFAULT_PARALLEL_DOWNLOADS,
    DEFAULT_RELEASE_INDEX_URL,
    DEFAULT_RETRY_ATTEMPTS,
    DEFAULT_TIMEOUT_SECONDS,
    KEY_CONFIG_VERSION,
    KEY_CONSOLE_LOG_LEVEL,
    KEY_LOG_LEVEL,
    MAX_RETRY_ATTEMPTS,
    SECTION_DEFAULT,
    SECTION_DIRECTORY,
    SECTION_INSTALL,
    SECTION_NETWORK,
    SECTION_RELEASE,
    SECTION_VERIFICATION,
    VALID_LOG_LEVELS,
)
from asb_fetch.domain.artifact import is_valid_component_name
from asb_fetch.exceptions import ConfigError, FilesystemError
from asb_fetch.logger import get_logger

logger = get_logger(__name__)

RawConfigDict = dict[str, str | dict[str, str]]


@dataclass(slots=True, frozen=True)
class FetchConfig:
    """Explicit configuration for one fetch-and-install run.

    Attributes:
        config_dir: Directory holding settings.conf
        index_url: Release index endpoint returning JSON with tag_name
        base_url: Base URL artifacts are downloaded from
        components: Binaries to fetch and install
        install_dir: Directory receiving the executables
        staging_dir: Directory holding archives until extraction
        logs_dir: Directory for the rotating log file
        retry_attempts: Attempts per request on transient failures
        timeout_seconds: Base network timeout
        parallel_downloads: Whether archives download concurrently
        require_digest: Fail when an archive has no published digest
        keep_failed_archives: Keep staged archives after failed extraction
        log_level: File log level
        console_log_level: Console log level

    """

    config_dir: Path
    index_url: str
    base_url: str
    components: tuple[str, ...]
    install_dir: Path
    staging_dir: Path
    logs_dir: Path
    retry_attempts: int = DEFAULT_RETRY_ATTEMPTS
    timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS
    parallel_downloads: bool = DEFAULT_PARALLEL_DOWNLOADS
    require_digest: bool = False
    keep_failed_archives: bool = True
    log_level: str = DEFAULT_LOG_LEVEL
    console_log_level: str = DEFAULT_CONSOLE_LOG_LEVEL

    def with_overrides(
        self, **overrides: Any  # noqa: ANN401
    ) -> "FetchConfig":
        """Return a copy with the non-None overrides applied."""
        changes = {
            key: value for key, value in overrides.items() if value is not None
        }
        return replace(self, **changes) if changes else self


class SettingsManager:
    """Loads and saves the INI settings file."""

    def __init__(self, config_dir: Path | None = None) -> None:
        """Initialize settings manager.

        Args:
            config_dir: Configuration directory path
                (defaults to ~/.config/asb-fetch)

        """
        self.config_dir = config_dir or Paths.CONFIG_DIR
        self.settings_file = Paths.settings_file(self.config_dir)

    def get_defaults(self) -> RawConfigDict:
        """Get default configuration values as raw INI strings."""
        return {
            KEY_CONFIG_VERSION: CONFIG_VERSION,
            KEY_LOG_LEVEL: DEFAULT_LOG_LEVEL,
            KEY_CONSOLE_LOG_LEVEL: DEFAULT_CONSOLE_LOG_LEVEL,
            SECTION_RELEASE: {
                "index_url": DEFAULT_RELEASE_INDEX_URL,
                "base_url": DEFAULT_DOWNLOAD_BASE_URL,
                "components": ", ".join(DEFAULT_COMPONENTS),
            },
            SECTION_NETWORK: {
                "retry_attempts": str(DEFAULT_RETRY_ATTEMPTS),
                "timeout_seconds": str(DEFAULT_TIMEOUT_SECONDS),
                "parallel_downloads": str(DEFAULT_PARALLEL_DOWNLOADS).lower(),
            },
            SECTION_DIRECTORY: {
                "install": "./bin",
                "staging": str(self.config_dir / "staging"),
                "logs": str(self.config_dir / "logs"),
            },
            SECTION_VERIFICATION: {"require_digest": "false"},
            SECTION_INSTALL: {"keep_failed_archives": "true"},
        }

    def _create_config_from_defaults(
        self, defaults: RawConfigDict
    ) -> configparser.ConfigParser:
        config = create_parser()
        flat_defaults = {
            key: value
            for key, value in defaults.items()
            if not isinstance(value, dict)
        }
        config.read_dict({SECTION_DEFAULT: flat_defaults})
        for key, value in defaults.items():
            if isinstance(value, dict):
                config.add_section(key)
                for subkey, subvalue in value.items():
                    config.set(key, subkey, subvalue)
        return config

    def load(self) -> FetchConfig:
        """Load configuration, creating the settings file on first run.

        Returns:
            Validated FetchConfig

        Raises:
            ConfigError: If a value in the file is invalid
            FilesystemError: If the default file cannot be written

        """
        defaults = self.get_defaults()
        config = self._create_config_from_defaults(defaults)

        if self.settings_file.exists():
            try:
                config.read(self.settings_file, encoding="utf-8")
            except configparser.Error as e:
                raise ConfigError(str(e), str(self.settings_file)) from e
            logger.debug("Loaded settings from %s", self.settings_file)
        else:
            self.save(config)

        return self._to_fetch_config(config)

    def save(self, config: configparser.ConfigParser) -> None:
        """Write configuration with section comments.

        Args:
            config: Parsed configuration to persist

        Raises:
            FilesystemError: If the settings file cannot be written

        """
        comments = ConfigCommentManager()
        section_comments = comments.get_section_comments()
        key_comments = comments.get_key_comments()

        lines = [comments.get_file_header(), section_comments[SECTION_DEFAULT]]
        lines.append(f"[{SECTION_DEFAULT}]\n")
        for key, value in config.defaults().items():
            inline = key_comments.get(SECTION_DEFAULT, {}).get(key, "")
            suffix = f"  {inline}" if inline else ""
            lines.append(f"{key} = {value}{suffix}\n")

        for section in config.sections():
            lines.append(section_comments.get(section, "\n"))
            lines.append(f"[{section}]\n")
            for key, value in config.items(section, raw=True):
                if key in config.defaults():
                    continue
                lines.append(f"{key} = {value}\n")

        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            self.settings_file.write_text("".join(lines), encoding="utf-8")
        except OSError as e:
            msg = f"Cannot write settings file: {e}"
            raise FilesystemError(msg, str(self.settings_file)) from e
        logger.debug("Wrote settings file %s", self.settings_file)

    def _to_fetch_config(
        self, config: configparser.ConfigParser
    ) -> FetchConfig:
        log_level = self._get_log_level(config, KEY_LOG_LEVEL)
        console_log_level = self._get_log_level(config, KEY_CONSOLE_LOG_LEVEL)

        components = tuple(
            name.strip()
            for name in config.get(SECTION_RELEASE, "components").split(",")
            if name.strip()
        )
        if not components:
            raise ConfigError("component list is empty", "release.components")
        for name in components:
            if not is_valid_component_name(name):
                raise ConfigError(
                    f"invalid component name {name!r}", "release.components"
                )

        retry_attempts = self._get_int(
            config, SECTION_NETWORK, "retry_attempts"
        )
        if not 1 <= retry_attempts <= MAX_RETRY_ATTEMPTS:
            raise ConfigError(
                f"must be between 1 and {MAX_RETRY_ATTEMPTS}",
                "network.retry_attempts",
            )
        timeout_seconds = self._get_int(
            config, SECTION_NETWORK, "timeout_seconds"
        )
        if timeout_seconds <= 0:
            raise ConfigError("must be positive", "network.timeout_seconds")

        return FetchConfig(
            config_dir=self.config_dir,
            index_url=self._get_url(config, "index_url"),
            base_url=self._get_url(config, "base_url").rstrip("/"),
            components=components,
            install_dir=Paths.expand_path(
                config.get(SECTION_DIRECTORY, "install")
            ),
            staging_dir=Paths.expand_path(
                config.get(SECTION_DIRECTORY, "staging")
            ),
            logs_dir=Paths.expand_path(config.get(SECTION_DIRECTORY, "logs")),
            retry_attempts=retry_attempts,
            timeout_seconds=timeout_seconds,
            parallel_downloads=self._get_bool(
                config, SECTION_NETWORK, "parallel_downloads"
            ),
            require_digest=self._get_bool(
                config, SECTION_VERIFICATION, "require_digest"
            ),
            keep_failed_archives=self._get_bool(
                config, SECTION_INSTALL, "keep_failed_archives"
            ),
            log_level=log_level,
            console_log_level=console_log_level,
        )

    @staticmethod
    def _get_int(
        config: configparser.ConfigParser, section: str, key: str
    ) -> int:
        try:
            return config.getint(section, key)
        except ValueError as e:
            raise ConfigError("must be an integer", f"{section}.{key}") from e

    @staticmethod
    def _get_bool(
        config: configparser.ConfigParser, section: str, key: str
    ) -> bool:
        try:
            return config.getboolean(section, key)
        except ValueError as e:
            msg = "must be true or false"
            raise ConfigError(msg, f"{section}.{key}") from e

    @staticmethod
    def _get_log_level(config: configparser.ConfigParser, key: str) -> str:
        level = config.get(SECTION_DEFAULT, key).upper()
        if level not in VALID_LOG_LEVELS:
            raise ConfigError(f"unknown log level {level!r}", key)
        return level

    @staticmethod
    def _get_url(config: configparser.ConfigParser, key: str) -> str:
        url = config.get(SECTION_RELEASE, key).strip()
        if not url.startswith(("https://", "http://")):
            raise ConfigError(
                "must be an http(s) URL", f"{SECTION_RELEASE}.{key}"
            )
        return url
