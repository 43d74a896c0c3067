"""Domain models: release versions, platforms and artifacts."""

from asb_fetch.domain.artifact import (
    ArtifactSpec,
    StagedArtifact,
    build_artifact_specs,
)
from asb_fetch.domain.platform import PlatformKey, detect_platform
from asb_fetch.domain.release import Release, ReleaseVersion

__all__ = [
    "ArtifactSpec",
    "PlatformKey",
    "Release",
    "ReleaseVersion",
    "StagedArtifact",
    "build_artifact_specs",
    "detect_platform",
]
