"""Artifact naming and staging models."""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, replace
from pathlib import Path
from typing import TYPE_CHECKING

from asb_fetch.constants import ARTIFACT_EXTENSION

if TYPE_CHECKING:
    from asb_fetch.domain.platform import PlatformKey
    from asb_fetch.domain.release import Release, ReleaseVersion

_COMPONENT_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9.-]*$")


def is_valid_component_name(name: str) -> bool:
    """Check that a component name is a plain file name without ``_``."""
    return bool(_COMPONENT_RE.match(name))


@dataclass(slots=True, frozen=True)
class ArtifactSpec:
    """One platform-specific archive of a release component.

    Attributes:
        component: Binary name inside the archive (e.g. "asb")
        version: Release the archive belongs to
        platform: Target platform of the archive
        base_url: Download base URL without trailing slash
        digest: Published digest ("sha256:<hex>") or None

    """

    component: str
    version: ReleaseVersion
    platform: PlatformKey
    base_url: str
    digest: str | None = None

    @property
    def filename(self) -> str:
        """Archive filename, e.g. ``asb_v1.2.3_Linux_x86_64.tar``."""
        return (
            f"{self.component}_{self.version}_"
            f"{self.platform.os_name}_{self.platform.arch}{ARTIFACT_EXTENSION}"
        )

    @property
    def url(self) -> str:
        """Download URL of the archive."""
        return f"{self.base_url}/{self.version}/{self.filename}"


@dataclass(slots=True, frozen=True)
class StagedArtifact:
    """A fully downloaded archive waiting in the staging directory."""

    spec: ArtifactSpec
    path: Path


def build_artifact_specs(
    release: Release,
    platform: PlatformKey,
    components: Iterable[str],
    base_url: str,
) -> list[ArtifactSpec]:
    """Build the ArtifactSpec of every component for a release.

    Args:
        release: Resolved release (version and published digests)
        platform: Host platform
        components: Component names to fetch
        base_url: Download base URL

    Returns:
        One ArtifactSpec per component, in the given order

    """
    specs = []
    for component in components:
        spec = ArtifactSpec(
            component=component,
            version=release.version,
            platform=platform,
            base_url=base_url.rstrip("/"),
        )
        specs.append(replace(spec, digest=release.digest_for(spec.filename)))
    return specs
