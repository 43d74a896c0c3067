"""Tests for the install workflow state machine."""

from unittest.mock import patch

import pytest

from asb_fetch.core.installer import Installer
from asb_fetch.core.protocols import Downloader, VersionResolver
from asb_fetch.core.workflow import InstallWorkflow, RunStage, run_install
from asb_fetch.domain import (
    PlatformKey,
    Release,
    ReleaseVersion,
    StagedArtifact,
)
from asb_fetch.exceptions import (
    DownloadError,
    ExtractionError,
    ResolutionError,
    UnsupportedPlatformError,
)
from tests.conftest import make_tar

LINUX_X86_64 = PlatformKey("Linux", "x86_64")


class FakeResolver:
    """Resolver returning a fixed release or raising."""

    def __init__(self, tag: str = "v1.2.3", error: Exception | None = None):
        self.tag = tag
        self.error = error
        self.calls = 0

    async def resolve(self) -> Release:
        self.calls += 1
        if self.error:
            raise self.error
        return Release(ReleaseVersion(self.tag))


class FakeDownloader:
    """Downloader writing a tar archive per artifact into the staging dir."""

    def __init__(self, staging_dir, error: Exception | None = None):
        self.staging_dir = staging_dir
        self.error = error
        self.requested = []

    async def fetch(self, specs):
        self.requested.append([spec.filename for spec in specs])
        if self.error:
            raise self.error
        staged = []
        for spec in specs:
            content = f"{spec.component} {spec.version}".encode()
            path = make_tar(
                self.staging_dir / spec.filename, {spec.component: content}
            )
            staged.append(StagedArtifact(spec=spec, path=path))
        return staged


def test_fakes_satisfy_protocols(tmp_path):
    """Test the fakes match the collaborator protocols."""
    assert isinstance(FakeResolver(), VersionResolver)
    assert isinstance(FakeDownloader(tmp_path), Downloader)


class TestRun:
    """InstallWorkflow.run() transitions."""

    @pytest.mark.asyncio
    async def test_success(self, fetch_config):
        """Test a run passes every stage and installs both binaries."""
        downloader = FakeDownloader(fetch_config.staging_dir)
        workflow = InstallWorkflow(
            fetch_config,
            resolver=FakeResolver(),
            downloader=downloader,
            platform_detector=lambda: LINUX_X86_64,
        )

        result = await workflow.run()

        assert workflow.history == [
            RunStage.START,
            RunStage.VERSION_RESOLVED,
            RunStage.PLATFORM_DETECTED,
            RunStage.DOWNLOADED,
            RunStage.INSTALLED,
            RunStage.DONE,
        ]
        assert downloader.requested == [
            ["asb_v1.2.3_Linux_x86_64.tar", "swap_v1.2.3_Linux_x86_64.tar"]
        ]
        assert str(result.version) == "v1.2.3"
        assert result.platform == LINUX_X86_64
        assert result.installed == [
            fetch_config.install_dir / "asb",
            fetch_config.install_dir / "swap",
        ]
        assert (fetch_config.install_dir / "swap").read_bytes() == (
            b"swap v1.2.3"
        )

    @pytest.mark.asyncio
    async def test_rerun_is_idempotent(self, fetch_config):
        """Test running twice leaves one set of up-to-date binaries."""
        for _ in range(2):
            workflow = InstallWorkflow(
                fetch_config,
                resolver=FakeResolver(),
                downloader=FakeDownloader(fetch_config.staging_dir),
                platform_detector=lambda: LINUX_X86_64,
            )
            await workflow.run()

        assert sorted(p.name for p in fetch_config.install_dir.iterdir()) == [
            "asb",
            "swap",
        ]
        assert list(fetch_config.staging_dir.iterdir()) == []

    @pytest.mark.asyncio
    async def test_resolution_failure_stops_run(self, fetch_config):
        """Test an unreachable index means no download or install."""
        downloader = FakeDownloader(fetch_config.staging_dir)
        workflow = InstallWorkflow(
            fetch_config,
            resolver=FakeResolver(
                error=ResolutionError("unreachable", "index")
            ),
            downloader=downloader,
            platform_detector=lambda: LINUX_X86_64,
        )

        with pytest.raises(ResolutionError) as exc_info:
            await workflow.run()

        assert exc_info.value.stage == "resolve"
        assert workflow.stage is RunStage.FAILED
        assert downloader.requested == []
        assert not fetch_config.install_dir.exists()

    @pytest.mark.asyncio
    async def test_unsupported_platform(self, fetch_config):
        """Test an unsupported host fails before any download."""

        def detector():
            raise UnsupportedPlatformError("no artifacts", "Windows")

        downloader = FakeDownloader(fetch_config.staging_dir)
        workflow = InstallWorkflow(
            fetch_config,
            resolver=FakeResolver(),
            downloader=downloader,
            platform_detector=detector,
        )

        with pytest.raises(UnsupportedPlatformError) as exc_info:
            await workflow.run()

        assert exc_info.value.stage == "detect-platform"
        assert workflow.history[-2:] == [
            RunStage.VERSION_RESOLVED,
            RunStage.FAILED,
        ]
        assert downloader.requested == []

    @pytest.mark.asyncio
    async def test_download_failure(self, fetch_config):
        """Test a download failure installs nothing."""
        workflow = InstallWorkflow(
            fetch_config,
            resolver=FakeResolver(),
            downloader=FakeDownloader(
                fetch_config.staging_dir,
                error=DownloadError("HTTP 404", "https://x.test/swap.tar"),
            ),
            platform_detector=lambda: LINUX_X86_64,
        )

        with pytest.raises(DownloadError) as exc_info:
            await workflow.run()

        assert exc_info.value.stage == "download"
        assert not fetch_config.install_dir.exists()

    @pytest.mark.asyncio
    async def test_extraction_failure(self, fetch_config):
        """Test an extraction error is reported at the install step."""

        class BrokenExtractor:
            def extract(self, archive, destination):
                raise ExtractionError("corrupt", str(archive))

        workflow = InstallWorkflow(
            fetch_config,
            resolver=FakeResolver(),
            downloader=FakeDownloader(fetch_config.staging_dir),
            installer=Installer(fetch_config, extractor=BrokenExtractor()),
            platform_detector=lambda: LINUX_X86_64,
        )

        with pytest.raises(ExtractionError) as exc_info:
            await workflow.run()

        assert exc_info.value.stage == "install"
        assert list(fetch_config.install_dir.iterdir()) == []

    @pytest.mark.asyncio
    async def test_single_use(self, fetch_config):
        """Test a finished workflow cannot be run again."""
        workflow = InstallWorkflow(
            fetch_config,
            resolver=FakeResolver(),
            downloader=FakeDownloader(fetch_config.staging_dir),
            platform_detector=lambda: LINUX_X86_64,
        )
        await workflow.run()

        with pytest.raises(RuntimeError):
            await workflow.run()


@pytest.mark.asyncio
async def test_run_install_wires_collaborators(fetch_config):
    """Test run_install builds the network collaborators in one session."""
    with (
        patch(
            "asb_fetch.core.workflow.GitHubReleaseResolver",
            return_value=FakeResolver(),
        ) as resolver_cls,
        patch(
            "asb_fetch.core.workflow.ArtifactFetcher",
            return_value=FakeDownloader(fetch_config.staging_dir),
        ) as fetcher_cls,
        patch(
            "asb_fetch.core.workflow.detect_platform",
            return_value=LINUX_X86_64,
        ),
    ):
        result = await run_install(fetch_config)

    session = resolver_cls.call_args.args[0]
    assert fetcher_cls.call_args.args[0] is session
    assert len(result.installed) == 2
