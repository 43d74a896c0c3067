"""Collaborator interfaces used by the install workflow.

The workflow only depends on these protocols, so tests can replace the
network and archive layers with fakes:

    class FakeResolver:
        async def resolve(self) -> Release:
            return Release(ReleaseVersion("v1.2.3"))

    workflow = InstallWorkflow(config, resolver=FakeResolver(), ...)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from pathlib import Path

    from asb_fetch.domain import ArtifactSpec, Release, StagedArtifact


@runtime_checkable
class VersionResolver(Protocol):
    """Resolves the latest published release."""

    async def resolve(self) -> Release:
        """Return the latest release.

        Raises:
            ResolutionError: If no usable release can be resolved

        """
        ...


@runtime_checkable
class Downloader(Protocol):
    """Downloads artifact archives into a staging directory."""

    async def fetch(self, specs: list[ArtifactSpec]) -> list[StagedArtifact]:
        """Download every archive or none of them.

        Raises:
            DownloadError: If any archive cannot be retrieved
            FilesystemError: If the staging directory is unusable

        """
        ...


@runtime_checkable
class Extractor(Protocol):
    """Unpacks an archive into a directory."""

    def extract(self, archive: Path, destination: Path) -> list[Path]:
        """Extract ``archive`` into ``destination``.

        Returns:
            Paths of the extracted regular files

        Raises:
            ExtractionError: If the archive is corrupt or unsafe

        """
        ...
