"""
Unified data model exports for nextsemver.

Example:
    >>> from nextsemver.models import Manifest, ReleaseFound, Resolution
"""

from __future__ import annotations

from nextsemver.models.manifest import Manifest, ManifestKind
from nextsemver.models.resolution import Resolution
from nextsemver.models.release import (
    ReleaseFound,
    ReleaseLookup,
    ReleaseLookupFailed,
    ReleaseNotFound,
)

__all__ = [
    "Manifest",
    "ManifestKind",
    "ReleaseFound",
    "ReleaseLookup",
    "ReleaseLookupFailed",
    "ReleaseNotFound",
    "Resolution",
]
