"""Path constants and utilities for asb-fetch configuration."""

from pathlib import Path

from asb_fetch.constants import (
    CONFIG_DIR_NAME,
    CONFIG_FILE_NAME,
    DEFAULT_CONFIG_SUBDIR,
)


class Paths:
    """Application paths and directory structure."""

    HOME_DIR = Path.home()
    CONFIG_DIR = HOME_DIR / DEFAULT_CONFIG_SUBDIR / CONFIG_DIR_NAME

    @classmethod
    def settings_file(cls, config_dir: Path | None = None) -> Path:
        """Get path to the settings file inside a config directory."""
        return (config_dir or cls.CONFIG_DIR) / CONFIG_FILE_NAME

    @classmethod
    def expand_path(cls, path_str: str, base: Path | None = None) -> Path:
        """Expand ~ and resolve a relative path against ``base``.

        Args:
            path_str: Path string to expand (e.g., "~/bin" or "./bin")
            base: Directory relative paths are resolved against
                (defaults to the current working directory)

        Returns:
            Absolute Path object

        Example:
            >>> Paths.expand_path("./bin", Path("/srv/asb"))
            PosixPath('/srv/asb/bin')

        """
        path = Path(path_str).expanduser()
        if not path.is_absolute():
            path = (base or Path.cwd()) / path
        return path.resolve(strict=False)
