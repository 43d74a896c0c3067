"""Artifact download service.

Downloads release archives into the staging directory. Each archive is
streamed to ``<name>.part`` and only renamed to its final name once the
transfer is complete and its digest has been checked, so a file with a
final name in the staging directory is always a complete archive.

Fetching is all-or-nothing: when any archive fails, every archive of the
run is removed from the staging directory before the error propagates.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import TYPE_CHECKING

import aiofiles
import aiohttp

from asb_fetch.constants import DOWNLOAD_CHUNK_SIZE, PARTIAL_DOWNLOAD_SUFFIX
from asb_fetch.core.http_session import request_with_retry
from asb_fetch.core.verification import Verifier
from asb_fetch.domain import ArtifactSpec, StagedArtifact
from asb_fetch.exceptions import (
    DownloadError,
    FilesystemError,
    VerificationError,
)
from asb_fetch.logger import get_logger

if TYPE_CHECKING:
    from asb_fetch.config import FetchConfig

logger = get_logger(__name__)


def remove_file(path: Path) -> None:
    """Delete ``path`` if it exists, logging instead of raising."""
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.warning("Could not remove %s: %s", path, e)
    else:
        logger.debug("Removed %s", path)


class ArtifactFetcher:
    """Download artifact archives into the staging directory."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        config: FetchConfig,
    ) -> None:
        """Initialize the fetcher.

        Args:
            session: aiohttp session for downloads
            config: Run configuration (staging_dir, retry_attempts,
                parallel_downloads, require_digest)

        """
        self.session = session
        self.staging_dir = config.staging_dir
        self.retry_attempts = config.retry_attempts
        self.parallel = config.parallel_downloads
        self.require_digest = config.require_digest

    def staged_path(self, spec: ArtifactSpec) -> Path:
        """Final staging path of an archive."""
        return self.staging_dir / spec.filename

    def partial_path(self, spec: ArtifactSpec) -> Path:
        """Temporary path an archive is written to while downloading."""
        return self.staging_dir / f"{spec.filename}{PARTIAL_DOWNLOAD_SUFFIX}"

    def discard(self, specs: list[ArtifactSpec]) -> None:
        """Remove every staged or partial archive of ``specs``."""
        for spec in specs:
            remove_file(self.partial_path(spec))
            remove_file(self.staged_path(spec))

    def _ensure_staging_dir(self) -> None:
        try:
            self.staging_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            msg = f"cannot create staging directory: {e}"
            raise FilesystemError(msg, str(self.staging_dir)) from e

    async def fetch(self, specs: list[ArtifactSpec]) -> list[StagedArtifact]:
        """Download every archive or none of them.

        Args:
            specs: Archives to download

        Returns:
            Staged archives, in the order of ``specs``

        Raises:
            DownloadError: If any archive cannot be retrieved
            VerificationError: If any archive fails its digest check
            FilesystemError: If the staging directory is unusable

        """
        self._ensure_staging_dir()
        logger.debug(
            "Fetching %d archive(s) into %s (%s)",
            len(specs),
            self.staging_dir,
            "parallel" if self.parallel else "sequential",
        )

        try:
            if self.parallel and len(specs) > 1:
                return await self._fetch_parallel(specs)
            return [await self.download_artifact(spec) for spec in specs]
        except BaseException:
            self.discard(specs)
            raise

    async def _fetch_parallel(
        self, specs: list[ArtifactSpec]
    ) -> list[StagedArtifact]:
        tasks = [
            asyncio.create_task(
                self.download_artifact(spec), name=f"download-{spec.component}"
            )
            for spec in specs
        ]
        try:
            done, pending = await asyncio.wait(
                tasks, return_when=asyncio.FIRST_EXCEPTION
            )
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        if pending:
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)

        # Every finished task's exception is retrieved, not only the first
        errors = [task.exception() for task in tasks if task in done]
        for error in errors:
            if error is not None:
                logger.debug(
                    "Cancelled %d sibling download(s) after failure",
                    len(pending),
                )
                raise error

        return [task.result() for task in tasks]

    async def download_artifact(self, spec: ArtifactSpec) -> StagedArtifact:
        """Download, verify and stage one archive.

        The partial file is removed on any failure, including
        cancellation.

        Args:
            spec: Archive to download

        Returns:
            The staged archive

        Raises:
            DownloadError: If the archive cannot be retrieved
            VerificationError: If the archive fails its digest check
            FilesystemError: If the archive cannot be written

        """
        part = self.partial_path(spec)
        dest = self.staged_path(spec)
        logger.info("Downloading %s", spec.filename)

        try:
            await self._download_to(spec, part)
            await asyncio.to_thread(self._verify, spec, part)
            try:
                part.replace(dest)
            except OSError as e:
                msg = f"cannot stage archive: {e}"
                raise FilesystemError(msg, str(dest)) from e
        except BaseException:
            remove_file(part)
            raise

        logger.debug("Staged %s", dest)
        return StagedArtifact(spec=spec, path=dest)

    async def _download_to(self, spec: ArtifactSpec, part: Path) -> None:
        async def process(response: aiohttp.ClientResponse) -> int:
            # Content-Length counts encoded bytes when a body is compressed
            total = 0
            if not response.headers.get("Content-Encoding"):
                total = int(response.headers.get("Content-Length", 0) or 0)
            written = 0
            async with aiofiles.open(part, mode="wb") as f:
                async for chunk in response.content.iter_chunked(
                    DOWNLOAD_CHUNK_SIZE
                ):
                    if chunk:
                        await f.write(chunk)
                        written += len(chunk)

            if total and written != total:
                msg = f"received {written} of {total} bytes"
                raise aiohttp.ClientPayloadError(msg)

            logger.debug("Downloaded %s (%s bytes)", part.name, f"{written:,}")
            return written

        def cleanup() -> None:
            remove_file(part)

        try:
            await request_with_retry(
                self.session,
                spec.url,
                process,
                spec.filename,
                self.retry_attempts,
                cleanup_callback=cleanup,
            )
        except aiohttp.ClientResponseError as e:
            msg = f"HTTP {e.status} {e.message}".rstrip()
            raise DownloadError(
                msg, spec.url, status=e.status, reason=e.message
            ) from e
        except (aiohttp.ClientError, TimeoutError) as e:
            reason = str(e) or type(e).__name__
            raise DownloadError(reason, spec.url, reason=reason) from e
        except OSError as e:
            msg = f"cannot write archive: {e}"
            raise FilesystemError(msg, str(part)) from e

    def _verify(self, spec: ArtifactSpec, part: Path) -> None:
        if spec.digest:
            Verifier(part).verify_digest(spec.digest, spec.url)
            return

        if self.require_digest:
            msg = "release publishes no digest for this archive"
            raise VerificationError(msg, spec.url)

        logger.warning(
            "No digest published for %s; integrity not verified",
            spec.filename,
        )

