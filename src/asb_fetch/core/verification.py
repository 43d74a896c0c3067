"""Digest verification for downloaded archives.

GitHub publishes a ``digest`` of the form ``"sha256:<hex>"`` for every
release asset. A downloaded archive is compared against it before it is
promoted from its partial name in the staging directory.
"""

from __future__ import annotations

import hashlib
from typing import TYPE_CHECKING

from asb_fetch.constants import HASH_READ_CHUNK_SIZE, SUPPORTED_HASH_ALGORITHMS
from asb_fetch.exceptions import VerificationError
from asb_fetch.logger import get_logger

if TYPE_CHECKING:
    from pathlib import Path

logger = get_logger(__name__)

BYTES_PER_UNIT = 1024.0


def format_bytes(num_bytes: float) -> str:
    """Convert a byte count to a human-readable string.

    Raises ``ValueError`` if the input is negative.
    """
    if num_bytes < 0:
        message = "Byte size cannot be negative"
        raise ValueError(message)

    units = ["B", "KB", "MB", "GB", "TB"]
    size = float(num_bytes)
    unit_index = 0

    while size >= BYTES_PER_UNIT and unit_index < len(units) - 1:
        size /= BYTES_PER_UNIT
        unit_index += 1

    return f"{size:.1f} {units[unit_index]}"


def parse_digest(expected_digest: str) -> tuple[str, str]:
    """Split ``"algo:hex"`` into its algorithm and lowercase hash.

    Raises:
        VerificationError: If the digest is malformed or its algorithm
            is not supported

    """
    algo, _, hash_value = expected_digest.strip().partition(":")
    algo = algo.lower()
    if not hash_value:
        message = f"Invalid digest format: {expected_digest!r}"
        raise VerificationError(message)
    if algo not in SUPPORTED_HASH_ALGORITHMS:
        message = f"Unsupported digest algorithm: {algo}"
        raise VerificationError(message)
    return algo, hash_value.lower()


class Verifier:
    """Handles verification of one downloaded file."""

    def __init__(self, file_path: Path) -> None:
        """Create verifier for a downloaded file."""
        self.file_path: Path = file_path

    def compute_hash(self, algo: str) -> str:
        """Compute the hex digest of the file with ``algo``."""
        hasher = hashlib.new(algo)
        with self.file_path.open("rb") as f:
            while chunk := f.read(HASH_READ_CHUNK_SIZE):
                hasher.update(chunk)
        return hasher.hexdigest()

    def verify_digest(self, expected_digest: str, target: str) -> None:
        """Verify the file against a GitHub API digest.

        Args:
            expected_digest: Digest in ``"algo:hex"`` form
            target: URL or name reported in the error

        Raises:
            VerificationError: If the digest is malformed, unsupported or
                does not match

        """
        try:
            algo, expected_hash = parse_digest(expected_digest)
        except VerificationError as e:
            e.target = target
            e.url = target
            raise

        file_size = self.file_path.stat().st_size
        logger.debug(
            "Verifying %s (%s) with %s",
            self.file_path.name,
            format_bytes(file_size),
            algo.upper(),
        )

        actual_hash = self.compute_hash(algo)
        if actual_hash != expected_hash:
            logger.error("Digest verification FAILED for %s", target)
            logger.error("   Expected: %s", expected_hash)
            logger.error("   Actual:   %s", actual_hash)
            message = (
                f"{algo} digest mismatch (expected {expected_hash}, "
                f"got {actual_hash})"
            )
            raise VerificationError(message, target)

        logger.debug("Digest verification passed for %s", self.file_path.name)
