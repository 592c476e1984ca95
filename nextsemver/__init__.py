"""
nextsemver — next semantic-version tag for CI pipelines

nextsemver compares the version declared in a package manifest
(``package.json`` or ``pyproject.toml``) with the latest release published
on GitHub and computes the version and tag the pipeline should release next:

    • The declared version wins when it is ahead of the latest release
    • Otherwise the latest release gets a patch bump
    • Tag prefixes and suffixes (``v1.2.3``, ``1.2.3-web``) are handled
    • Results are written as GitHub Actions step outputs

nextsemver never creates or pushes tags itself.
"""

from __future__ import annotations

from nextsemver.__version__ import __version__
from nextsemver.core.versioning import (
    clean_version,
    format_tag,
    normalize_tag,
    parse_version,
    resolve_next_version,
)

# ---------------------------------------------------------------------------
# Package Metadata
# ---------------------------------------------------------------------------

__author__ = "nextsemver Contributors"
__license__ = "Apache-2.0"
__url__ = "https://github.com/nextsemver/nextsemver"
__description__ = "Compute the next semantic-version release tag in CI."

__all__ = [
    "__version__",
    "clean_version",
    "format_tag",
    "normalize_tag",
    "parse_version",
    "resolve_next_version",
]
