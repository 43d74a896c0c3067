"""Host platform detection.

Maps the operating-system name and machine architecture reported by the
host to the naming used in release artifact filenames. Both values are
normalized through a fixed alias table before lookup.
"""

from __future__ import annotations

import platform
from dataclasses import dataclass

from asb_fetch.exceptions import UnsupportedPlatformError

OS_ALIASES: dict[str, str] = {
    "linux": "Linux",
    "darwin": "Darwin",
    "macos": "Darwin",
    "macosx": "Darwin",
    "osx": "Darwin",
}

ARCH_ALIASES: dict[str, str] = {
    "x86_64": "x86_64",
    "amd64": "x86_64",
    "arm64": "aarch64",
    "aarch64": "aarch64",
}


@dataclass(slots=True, frozen=True)
class PlatformKey:
    """Normalized (operating system, architecture) pair."""

    os_name: str
    arch: str

    def __str__(self) -> str:
        """Return the artifact suffix form, e.g. ``Linux_x86_64``."""
        return f"{self.os_name}_{self.arch}"


def normalize_os(system: str) -> str:
    """Normalize an OS name, e.g. "linux" -> "Linux".

    Raises:
        UnsupportedPlatformError: If the OS is not supported

    """
    try:
        return OS_ALIASES[system.strip().lower()]
    except KeyError:
        msg = "no release artifacts are published for this operating system"
        raise UnsupportedPlatformError(msg, system) from None


def normalize_arch(machine: str) -> str:
    """Normalize an architecture name, e.g. "amd64" -> "x86_64".

    Raises:
        UnsupportedPlatformError: If the architecture is not supported

    """
    try:
        return ARCH_ALIASES[machine.strip().lower()]
    except KeyError:
        msg = "no release artifacts are published for this architecture"
        raise UnsupportedPlatformError(msg, machine) from None


def detect_platform(
    system: str | None = None, machine: str | None = None
) -> PlatformKey:
    """Detect the PlatformKey of the host.

    Args:
        system: OS name override (defaults to platform.system())
        machine: Architecture override (defaults to platform.machine())

    Returns:
        Normalized PlatformKey

    Raises:
        UnsupportedPlatformError: If the OS or architecture is unsupported

    """
    system = platform.system() if system is None else system
    machine = platform.machine() if machine is None else machine
    return PlatformKey(
        os_name=normalize_os(system), arch=normalize_arch(machine)
    )
