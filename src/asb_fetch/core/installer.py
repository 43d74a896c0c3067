"""Installation of staged archives into the install directory.

Installation runs in two phases so a corrupt archive never leaves an
executable behind:

1. every archive is extracted into a private temporary directory inside
   the install directory and its expected binary is located;
2. each binary is marked executable and moved onto its final name with
   an atomic ``os.replace``, overwriting a previous install.

Staged archives are deleted whether or not installation succeeds,
except after an extraction failure: those archives are kept for
inspection unless ``keep_failed_archives`` is disabled.
"""

from __future__ import annotations

import os
import shutil
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING

from asb_fetch.constants import EXECUTABLE_MODE, EXTRACT_TMP_PREFIX
from asb_fetch.core.download import remove_file
from asb_fetch.core.extract import TarExtractor
from asb_fetch.exceptions import ExtractionError, FilesystemError
from asb_fetch.logger import get_logger

if TYPE_CHECKING:
    from asb_fetch.config import FetchConfig
    from asb_fetch.core.protocols import Extractor
    from asb_fetch.domain import StagedArtifact

logger = get_logger(__name__)


class Installer:
    """Extract staged archives and install their binaries."""

    def __init__(
        self, config: FetchConfig, extractor: Extractor | None = None
    ) -> None:
        """Initialize the installer.

        Args:
            config: Run configuration (install_dir, keep_failed_archives)
            extractor: Archive extractor (defaults to TarExtractor)

        """
        self.install_dir = config.install_dir
        self.keep_failed_archives = config.keep_failed_archives
        self.extractor = extractor or TarExtractor()

    def binary_path(self, component: str) -> Path:
        """Final path of an installed component."""
        return self.install_dir / component

    def install(self, staged: list[StagedArtifact]) -> list[Path]:
        """Install the binary of every staged archive.

        Args:
            staged: Fully downloaded archives

        Returns:
            Paths of the installed executables, in the order of ``staged``

        Raises:
            ExtractionError: If an archive is corrupt or lacks its binary
            FilesystemError: If the install directory is unusable

        """
        try:
            work_dir = self._create_work_dir()
            try:
                binaries = self._extract_all(staged, work_dir)
                installed = self._activate(binaries)
            finally:
                shutil.rmtree(work_dir, ignore_errors=True)
        except ExtractionError:
            if self.keep_failed_archives:
                logger.warning(
                    "Keeping staged archives for inspection: %s",
                    ", ".join(str(artifact.path) for artifact in staged),
                )
            else:
                self.remove_archives(staged)
            raise
        except BaseException:
            self.remove_archives(staged)
            raise

        self.remove_archives(staged)
        return installed

    def remove_archives(self, staged: list[StagedArtifact]) -> None:
        """Delete staged archives, best effort."""
        for artifact in staged:
            remove_file(artifact.path)

    def _create_work_dir(self) -> Path:
        try:
            self.install_dir.mkdir(parents=True, exist_ok=True)
            return Path(
                tempfile.mkdtemp(
                    prefix=EXTRACT_TMP_PREFIX, dir=self.install_dir
                )
            )
        except OSError as e:
            msg = f"cannot prepare install directory: {e}"
            raise FilesystemError(msg, str(self.install_dir)) from e

    def _extract_all(
        self, staged: list[StagedArtifact], work_dir: Path
    ) -> list[tuple[str, Path]]:
        binaries = []
        for artifact in staged:
            component = artifact.spec.component
            files = self.extractor.extract(artifact.path, work_dir / component)
            binaries.append((component, self._find_binary(artifact, files)))
        return binaries

    @staticmethod
    def _find_binary(artifact: StagedArtifact, files: list[Path]) -> Path:
        component = artifact.spec.component
        candidates = [
            path
            for path in files
            if path.name == component
            and path.is_file()
            and not path.is_symlink()
        ]
        if not candidates:
            msg = f"archive does not contain the '{component}' binary"
            raise ExtractionError(msg, str(artifact.path))
        # Prefer the binary closest to the archive root
        return min(candidates, key=lambda path: len(path.parts))

    def _activate(self, binaries: list[tuple[str, Path]]) -> list[Path]:
        installed = []
        for component, binary in binaries:
            target = self.binary_path(component)
            try:
                binary.chmod(EXECUTABLE_MODE)
                os.replace(binary, target)
            except OSError as e:
                msg = f"cannot install binary: {e}"
                raise FilesystemError(msg, str(target)) from e
            logger.info("Installed %s", target)
            installed.append(target)
        return installed
