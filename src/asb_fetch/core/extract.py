"""Tar archive extraction."""

from __future__ import annotations

import tarfile
from typing import TYPE_CHECKING

from asb_fetch.exceptions import ExtractionError
from asb_fetch.logger import get_logger

if TYPE_CHECKING:
    from pathlib import Path

logger = get_logger(__name__)


class TarExtractor:
    """Extract tar archives (any compression tarfile understands).

    Members are extracted with the ``data`` filter, which rejects absolute
    paths, ``..`` components, links escaping the destination and device
    files.
    """

    def extract(self, archive: Path, destination: Path) -> list[Path]:
        """Extract ``archive`` into ``destination``.

        Args:
            archive: Tar archive to read
            destination: Existing or creatable directory to extract into

        Returns:
            Paths of the extracted regular files

        Raises:
            ExtractionError: If the archive is corrupt, unreadable or
                contains unsafe members

        """
        logger.debug("Extracting %s into %s", archive.name, destination)
        try:
            destination.mkdir(parents=True, exist_ok=True)
            with tarfile.open(archive, "r:*") as tar:
                tar.extractall(destination, filter="data")
                # Report names as the filter rewrote them (leading "/" dropped)
                files = [
                    destination / tarfile.data_filter(m, str(destination)).name
                    for m in tar.getmembers()
                    if m.isfile()
                ]
        except tarfile.FilterError as e:
            msg = f"archive contains an unsafe member: {e}"
            raise ExtractionError(msg, str(archive)) from e
        except tarfile.TarError as e:
            msg = f"archive is corrupt or not a tar file: {e}"
            raise ExtractionError(msg, str(archive)) from e
        except OSError as e:
            msg = f"cannot read archive: {e}"
            raise ExtractionError(msg, str(archive)) from e

        logger.debug("Extracted %d file(s) from %s", len(files), archive.name)
        return files
