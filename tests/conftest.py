"""Pytest configuration and fixtures for asb-fetch tests."""

import io
import logging
import os
import tarfile
import tempfile
from collections.abc import AsyncGenerator
from pathlib import Path

import pytest

# Keep test logs out of the user's config directory. Must run before any
# asb_fetch module creates its logger.
os.environ.setdefault(
    "ASB_FETCH_LOG_DIR", tempfile.mkdtemp(prefix="asb-fetch-test-logs-")
)

from asb_fetch.config import FetchConfig  # noqa: E402
from asb_fetch.domain import (  # noqa: E402
    ArtifactSpec,
    PlatformKey,
    ReleaseVersion,
)

INDEX_URL = "https://api.example.test/repos/eigenwallet/core/releases/latest"
BASE_URL = "https://downloads.example.test/releases/download"

# =============================================================================
# Helpers
# =============================================================================


async def async_chunk_gen(
    chunks: list[bytes],
) -> AsyncGenerator[bytes, None]:
    """Async generator yielding chunks for simulating HTTP responses."""
    for chunk in chunks:
        yield chunk


def make_tar(
    path: Path,
    members: dict[str, bytes],
    mode: int = 0o644,
) -> Path:
    """Write a tar archive holding ``members`` (name -> content)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with tarfile.open(path, "w") as tar:
        for name, content in members.items():
            info = tarfile.TarInfo(name)
            info.size = len(content)
            info.mode = mode
            tar.addfile(info, io.BytesIO(content))
    return path


def make_config(tmp_path: Path, **overrides) -> FetchConfig:
    """Build a FetchConfig rooted in ``tmp_path``."""
    values = {
        "config_dir": tmp_path / "config",
        "index_url": INDEX_URL,
        "base_url": BASE_URL,
        "components": ("asb", "swap"),
        "install_dir": tmp_path / "bin",
        "staging_dir": tmp_path / "staging",
        "logs_dir": tmp_path / "logs",
        "retry_attempts": 3,
        "timeout_seconds": 10,
        "parallel_downloads": True,
    }
    values.update(overrides)
    return FetchConfig(**values)


def make_spec(
    component: str = "asb",
    tag: str = "v1.2.3",
    digest: str | None = None,
) -> ArtifactSpec:
    """Build the Linux x86_64 ArtifactSpec of a component."""
    return ArtifactSpec(
        component=component,
        version=ReleaseVersion(tag),
        platform=PlatformKey("Linux", "x86_64"),
        base_url=BASE_URL,
        digest=digest,
    )


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def enable_log_propagation():
    """Enable log propagation for all loggers during tests.

    This allows pytest's caplog fixture to capture logs from all loggers,
    even those created with propagate=False in production code.
    """
    original_propagation = {}
    for name, logger in list(logging.Logger.manager.loggerDict.items()):
        # Placeholders must not be turned into loggers
        if name.startswith("asb_fetch") and isinstance(logger, logging.Logger):
            original_propagation[name] = logger.propagate
            logger.propagate = True

    yield

    for name, propagate_value in original_propagation.items():
        logger = logging.getLogger(name)
        logger.propagate = propagate_value


@pytest.fixture
def fetch_config(tmp_path: Path) -> FetchConfig:
    """Provide a FetchConfig whose directories live in tmp_path."""
    return make_config(tmp_path)
