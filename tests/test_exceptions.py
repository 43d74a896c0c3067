"""Tests for the exception hierarchy."""

import pytest

from asb_fetch.exceptions import (
    AsbFetchError,
    ConfigError,
    DownloadError,
    ExtractionError,
    FilesystemError,
    ResolutionError,
    UnsupportedPlatformError,
    VerificationError,
)


def test_message_names_target():
    """Test the formatted message names the failing resource."""
    error = DownloadError(
        "HTTP 404 Not Found",
        "https://x.test/asb.tar",
        status=404,
        reason="Not Found",
    )

    assert str(error) == (
        "Download failed for 'https://x.test/asb.tar': HTTP 404 Not Found"
    )
    assert error.url == "https://x.test/asb.tar"
    assert error.status == 404


def test_message_without_target():
    """Test errors without a target still format cleanly."""
    assert str(ExtractionError("corrupt")) == "Extraction failed: corrupt"


def test_exit_codes_are_distinct():
    """Test every failure class has its own exit code."""
    classes = [
        ConfigError,
        ResolutionError,
        UnsupportedPlatformError,
        DownloadError,
        ExtractionError,
        FilesystemError,
        VerificationError,
    ]
    codes = [cls.exit_code for cls in classes]
    assert len(set(codes)) == len(codes)
    assert all(code != 0 for code in codes)


@pytest.mark.parametrize(
    "cls", [ResolutionError, DownloadError, VerificationError]
)
def test_subclasses_share_base(cls):
    """Test callers can catch every failure through the base class."""
    assert issubclass(cls, AsbFetchError)
    assert cls("x").stage is None
