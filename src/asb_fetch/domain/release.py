"""Release domain model."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

_FORBIDDEN_TAGS = frozenset({".", ".."})


def is_valid_tag(tag: str) -> bool:
    """Check that a tag can be embedded in a filename and a URL path.

    Args:
        tag: Raw release tag

    Returns:
        True if the tag is non-empty and has no separators or whitespace

    """
    if not tag or tag in _FORBIDDEN_TAGS:
        return False
    return not any(ch in tag for ch in "/\\") and not any(
        ch.isspace() for ch in tag
    )


@dataclass(slots=True, frozen=True)
class ReleaseVersion:
    """Opaque, immutable release identifier (the published tag)."""

    tag: str

    def __post_init__(self) -> None:
        """Reject tags that cannot be used in artifact names."""
        if not is_valid_tag(self.tag):
            msg = f"Invalid release tag: {self.tag!r}"
            raise ValueError(msg)

    def __str__(self) -> str:
        """Return the tag unchanged."""
        return self.tag


@dataclass(slots=True, frozen=True)
class Release:
    """The latest published release as seen in the release index.

    Attributes:
        version: Resolved release version
        digests: Published digests keyed by asset name,
            e.g. {"asb_v1.2.3_Linux_x86_64.tar": "sha256:ab12..."}

    """

    version: ReleaseVersion
    digests: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_api_response(cls, api_data: dict[str, Any]) -> Release:
        """Create Release from a GitHub release JSON object.

        Args:
            api_data: Decoded release index response

        Returns:
            Release instance

        Raises:
            ValueError: If tag_name is missing or unusable

        """
        tag_name = api_data.get("tag_name")
        if not isinstance(tag_name, str):
            msg = "Release index response has no tag_name"
            raise ValueError(msg)  # noqa: TRY004

        digests: dict[str, str] = {}
        assets = api_data.get("assets") or []
        if isinstance(assets, list):
            for asset in assets:
                if not isinstance(asset, dict):
                    continue
                name = asset.get("name")
                digest = asset.get("digest")
                if not isinstance(name, str) or not isinstance(digest, str):
                    continue
                if digest.strip():
                    digests[name] = digest.strip()

        return cls(version=ReleaseVersion(tag_name.strip()), digests=digests)

    def digest_for(self, asset_name: str) -> str | None:
        """Return the published digest of an asset, if any."""
        return self.digests.get(asset_name)
