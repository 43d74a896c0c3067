"""Tests for SettingsManager and FetchConfig."""

import pytest

from asb_fetch.config import Paths, SettingsManager
from asb_fetch.exceptions import ConfigError, FilesystemError


@pytest.fixture
def config_dir(tmp_path, monkeypatch):
    """Provide an empty config directory and run from tmp_path."""
    monkeypatch.chdir(tmp_path)
    return tmp_path / "config"


def write_settings(config_dir, body: str) -> None:
    """Write a settings file holding ``body``."""
    config_dir.mkdir(parents=True, exist_ok=True)
    Paths.settings_file(config_dir).write_text(body, encoding="utf-8")


class TestLoad:
    """SettingsManager.load()."""

    def test_first_run_writes_defaults(self, config_dir, tmp_path):
        """Test defaults are used and persisted on first run."""
        config = SettingsManager(config_dir).load()

        assert config.components == ("asb", "swap")
        assert config.install_dir == (tmp_path / "bin").resolve()
        assert config.staging_dir == (config_dir / "staging").resolve()
        assert config.retry_attempts == 3
        assert config.parallel_downloads is True
        assert config.require_digest is False
        assert config.keep_failed_archives is True
        assert config.index_url.endswith("/releases/latest")

        text = Paths.settings_file(config_dir).read_text(encoding="utf-8")
        assert text.startswith("# asb-fetch configuration")
        assert "[network]" in text

    def test_saved_file_round_trips(self, config_dir):
        """Test the written file loads back to the same configuration."""
        first = SettingsManager(config_dir).load()
        second = SettingsManager(config_dir).load()
        assert first == second

    def test_user_values(self, config_dir, tmp_path):
        """Test values from the file override defaults."""
        write_settings(
            config_dir,
            """
[DEFAULT]
log_level = debug

[release]
components = asb  # only the maker
base_url = https://mirror.example.test/download/

[network]
retry_attempts = 5
parallel_downloads = no

[directory]
install = ~/asb-bin

[verification]
require_digest = true
""",
        )

        config = SettingsManager(config_dir).load()

        assert config.components == ("asb",)
        assert config.base_url == "https://mirror.example.test/download"
        assert config.retry_attempts == 5
        assert config.parallel_downloads is False
        assert config.require_digest is True
        assert config.log_level == "DEBUG"
        assert config.install_dir == Paths.expand_path("~/asb-bin")

    @pytest.mark.parametrize(
        ("body", "target"),
        [
            ("[network]\nretry_attempts = many\n", "network.retry_attempts"),
            ("[network]\nretry_attempts = 0\n", "network.retry_attempts"),
            ("[network]\ntimeout_seconds = -1\n", "network.timeout_seconds"),
            ("[network]\nparallel_downloads = maybe\n", "network.parallel"),
            ("[release]\ncomponents = ,\n", "release.components"),
            ("[release]\ncomponents = asb, a_b\n", "release.components"),
            ("[release]\nindex_url = ftp://x\n", "release.index_url"),
            ("[DEFAULT]\nlog_level = LOUD\n", "log_level"),
        ],
    )
    def test_invalid_values(self, config_dir, body, target):
        """Test invalid values name the offending key."""
        write_settings(config_dir, body)

        with pytest.raises(ConfigError) as exc_info:
            SettingsManager(config_dir).load()

        assert exc_info.value.target.startswith(target)
        assert exc_info.value.exit_code == 1

    def test_unparsable_file(self, config_dir):
        """Test a syntactically broken file is a configuration error."""
        write_settings(config_dir, "no section header\n")

        with pytest.raises(ConfigError):
            SettingsManager(config_dir).load()

    def test_unwritable_config_dir(self, tmp_path):
        """Test failing to write defaults is a filesystem error."""
        blocker = tmp_path / "config"
        blocker.write_text("a file, not a directory")

        with pytest.raises(FilesystemError):
            SettingsManager(blocker).load()


class TestFetchConfig:
    """FetchConfig.with_overrides()."""

    def test_none_values_ignored(self, fetch_config):
        """Test None overrides keep the configured value."""
        assert fetch_config.with_overrides(install_dir=None) is fetch_config

    def test_overrides_applied(self, fetch_config, tmp_path):
        """Test overrides produce a modified copy."""
        updated = fetch_config.with_overrides(
            install_dir=tmp_path / "elsewhere", parallel_downloads=False
        )

        assert updated.install_dir == tmp_path / "elsewhere"
        assert updated.parallel_downloads is False
        assert fetch_config.parallel_downloads is True


def test_expand_path_relative(tmp_path):
    """Test relative paths resolve against the given base."""
    assert Paths.expand_path("./bin", tmp_path) == (tmp_path / "bin").resolve()
