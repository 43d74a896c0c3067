"""Fetch-and-install workflow.

A run moves through a fixed sequence of stages and never retries a
stage:

    START -> VERSION_RESOLVED -> PLATFORM_DETECTED -> DOWNLOADED
          -> INSTALLED -> DONE

Any error moves the run to FAILED; the error is re-raised with the name
of the step that failed recorded on it.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from asb_fetch.core.download import ArtifactFetcher
from asb_fetch.core.http_session import create_http_session
from asb_fetch.core.installer import Installer
from asb_fetch.core.resolver import GitHubReleaseResolver
from asb_fetch.domain import (
    PlatformKey,
    ReleaseVersion,
    build_artifact_specs,
    detect_platform,
)
from asb_fetch.exceptions import AsbFetchError
from asb_fetch.logger import get_logger

if TYPE_CHECKING:
    from pathlib import Path

    from asb_fetch.config import FetchConfig
    from asb_fetch.core.auth import GitHubAuthManager
    from asb_fetch.core.protocols import Downloader, VersionResolver

logger = get_logger(__name__)


class RunStage(Enum):
    """Stages of a run, in order."""

    START = "start"
    VERSION_RESOLVED = "version_resolved"
    PLATFORM_DETECTED = "platform_detected"
    DOWNLOADED = "downloaded"
    INSTALLED = "installed"
    DONE = "done"
    FAILED = "failed"


# Step attempted while leaving each stage
_STEP_NAMES = {
    RunStage.START: "resolve",
    RunStage.VERSION_RESOLVED: "detect-platform",
    RunStage.PLATFORM_DETECTED: "download",
    RunStage.DOWNLOADED: "install",
}


@dataclass(slots=True)
class RunResult:
    """Outcome of a successful run."""

    version: ReleaseVersion
    platform: PlatformKey
    installed: list[Path] = field(default_factory=list)


class InstallWorkflow:
    """Drive one run through its stages."""

    def __init__(
        self,
        config: FetchConfig,
        resolver: VersionResolver,
        downloader: Downloader,
        installer: Installer | None = None,
        platform_detector: Callable[[], PlatformKey] | None = None,
    ) -> None:
        """Initialize the workflow.

        Args:
            config: Run configuration
            resolver: Resolves the latest release
            downloader: Stages the release archives
            installer: Installs staged archives (defaults to Installer)
            platform_detector: Returns the host PlatformKey
                (defaults to detect_platform)

        """
        self.config = config
        self.resolver = resolver
        self.downloader = downloader
        self.installer = installer or Installer(config)
        self.platform_detector = platform_detector or detect_platform
        self.stage = RunStage.START
        self.history: list[RunStage] = [RunStage.START]

    def _advance(self, stage: RunStage) -> None:
        logger.debug("Stage %s -> %s", self.stage.value, stage.value)
        self.stage = stage
        self.history.append(stage)

    async def run(self) -> RunResult:
        """Resolve, download and install the configured components.

        Returns:
            Version, platform and installed binary paths

        Raises:
            AsbFetchError: Subclass matching the failed step, with
                ``stage`` set to that step's name

        """
        if self.stage is not RunStage.START:
            msg = "a workflow instance can only run once"
            raise RuntimeError(msg)

        try:
            release = await self.resolver.resolve()
            logger.info("Latest release: %s", release.version)
            self._advance(RunStage.VERSION_RESOLVED)

            platform = self.platform_detector()
            logger.info("Detected platform: %s", platform)
            self._advance(RunStage.PLATFORM_DETECTED)

            specs = build_artifact_specs(
                release,
                platform,
                self.config.components,
                self.config.base_url,
            )
            staged = await self.downloader.fetch(specs)
            self._advance(RunStage.DOWNLOADED)

            installed = await asyncio.to_thread(self.installer.install, staged)
            self._advance(RunStage.INSTALLED)
        except AsbFetchError as e:
            e.stage = _STEP_NAMES.get(self.stage)
            logger.debug("Run failed during %s: %s", e.stage, e)
            self._advance(RunStage.FAILED)
            raise

        self._advance(RunStage.DONE)
        return RunResult(
            version=release.version, platform=platform, installed=installed
        )


async def run_install(
    config: FetchConfig, auth_manager: GitHubAuthManager | None = None
) -> RunResult:
    """Run the workflow with the network and archive implementations.

    Args:
        config: Run configuration
        auth_manager: Optional GitHub authentication manager

    Returns:
        Result of the completed run

    """
    async with create_http_session(config) as session:
        workflow = InstallWorkflow(
            config,
            resolver=GitHubReleaseResolver(session, config, auth_manager),
            downloader=ArtifactFetcher(session, config),
            installer=Installer(config),
        )
        return await workflow.run()
