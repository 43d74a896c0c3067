"""Exception classes for asb-fetch operations.

Every error is terminal for a run. The CLI maps each class to its own
non-zero exit code and prints the formatted message, which names the
failing stage and resource.
"""


class AsbFetchError(Exception):
    """Base exception for asb-fetch operations."""

    error_prefix: str = "Operation failed"
    exit_code: int = 1

    def __init__(self, message: str, target: str | None = None) -> None:
        """Initialize error with message and optional target.

        Args:
            message: Error message describing the failure.
            target: Optional name of the resource that failed
                (URL, path, component or platform value).

        """
        super().__init__(message)
        self.message = message
        self.target = target
        self.stage: str | None = None

    def __str__(self) -> str:
        """Return formatted error message."""
        if self.target:
            return f"{self.error_prefix} for '{self.target}': {self.message}"
        return f"{self.error_prefix}: {self.message}"


class ConfigError(AsbFetchError):
    """Raised when the settings file holds an invalid value."""

    error_prefix = "Invalid configuration"


class ResolutionError(AsbFetchError):
    """Raised when the latest release version cannot be resolved."""

    error_prefix = "Release resolution failed"
    exit_code = 2


class UnsupportedPlatformError(AsbFetchError):
    """Raised when the host OS or architecture has no published artifact."""

    error_prefix = "Unsupported platform"
    exit_code = 3


class DownloadError(AsbFetchError):
    """Raised when an artifact cannot be retrieved."""

    error_prefix = "Download failed"
    exit_code = 4

    def __init__(
        self,
        message: str,
        target: str | None = None,
        status: int | None = None,
        reason: str | None = None,
    ) -> None:
        """Initialize download error with transport details.

        Args:
            message: Error message describing the failure.
            target: URL of the artifact that failed.
            status: HTTP status of the failed response, if any.
            reason: HTTP reason phrase or transport error text.

        """
        super().__init__(message, target)
        self.url = target
        self.status = status
        self.reason = reason


class VerificationError(DownloadError):
    """Raised when a downloaded archive does not match its digest."""

    error_prefix = "Verification failed"
    exit_code = 7


class ExtractionError(AsbFetchError):
    """Raised when an archive is corrupt, unsafe or incomplete."""

    error_prefix = "Extraction failed"
    exit_code = 5


class FilesystemError(AsbFetchError):
    """Raised when a staging or install directory cannot be used."""

    error_prefix = "Filesystem operation failed"
    exit_code = 6
