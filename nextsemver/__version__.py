"""
nextsemver version information.

Single source of truth for the package version. nextsemver versions itself
with the same rules it applies to the repositories it runs in:
``MAJOR.MINOR.PATCH[-PRERELEASE][+BUILD]``.
"""

from __future__ import annotations

import semver

__version__ = "0.3.0"

#: Structured form of :data:`__version__`.
VERSION_INFO = semver.Version.parse(__version__)

#: Human-readable version (for CLI)
VERSION_STRING = f"nextsemver {__version__}"
