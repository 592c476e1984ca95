"""
Core functionality exports for nextsemver.

Importing from here keeps user-facing imports clean and stable:

    from nextsemver.core import run_pipeline, resolve_next_version
"""

from __future__ import annotations

from nextsemver.core.versioning import (
    DEFAULT,
    clean_version,
    format_tag,
    normalize_tag,
    parse_version,
    resolve_next_version,
)
from nextsemver.core.manifest import (
    find_manifest,
    pep440_to_semver,
    read_manifest,
    write_manifest_version,
)
from nextsemver.core.releases import (
    GitHubReleaseHost,
    ReleaseHost,
    lookup_latest_version,
)
from nextsemver.core.pipeline import run_pipeline

__all__ = [
    "DEFAULT",
    "clean_version",
    "format_tag",
    "normalize_tag",
    "parse_version",
    "resolve_next_version",
    "find_manifest",
    "pep440_to_semver",
    "read_manifest",
    "write_manifest_version",
    "GitHubReleaseHost",
    "ReleaseHost",
    "lookup_latest_version",
    "run_pipeline",
]
