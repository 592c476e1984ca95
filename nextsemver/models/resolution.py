"""Resolution data model for nextsemver."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

import semver

from nextsemver.models.manifest import Manifest


@dataclass(frozen=True)
class Resolution:
    """Result of one nextsemver run.

    Attributes:
        manifest: Manifest the declared version was read from.
        declared: Version declared in the manifest.
        latest: Version of the latest release (``0.0.0`` when none).
        latest_tag: Raw tag of the latest release, or ``None`` when the
            repository has no release yet.
        next_version: Version to release next.
        tag: ``next_version`` decorated with the configured prefix/suffix.
    """

    manifest: Manifest
    declared: semver.Version
    latest: semver.Version
    latest_tag: Optional[str]
    next_version: semver.Version
    tag: str

    @property
    def has_previous_release(self) -> bool:
        """Return ``True`` if a release existed before this run."""
        return self.latest_tag is not None

    @property
    def is_bumped(self) -> bool:
        """Return ``True`` if the latest release was patch-bumped.

        ``False`` means the declared manifest version was used.
        """
        return self.latest >= self.declared

    def to_json(self) -> Dict[str, Any]:
        """Return a JSON-serializable representation."""
        return {
            "manifest": str(self.manifest.path),
            "declared_version": str(self.declared),
            "latest_version": str(self.latest),
            "latest_tag": self.latest_tag,
            "version": str(self.next_version),
            "tag": self.tag,
            "bumped": self.is_bumped,
        }
