"""Configuration management - settings file, paths and parser helpers.

This package provides:
- SettingsManager: INI settings file loading and saving
- FetchConfig: Immutable per-run configuration passed to every stage
- Paths: Path constants and utilities
"""

from asb_fetch.config.parser import ConfigCommentManager, create_parser
from asb_fetch.config.paths import Paths
from asb_fetch.config.settings import FetchConfig, SettingsManager

__all__ = [
    "ConfigCommentManager",
    "FetchConfig",
    "Paths",
    "SettingsManager",
    "create_parser",
]
