"""
Semantic version parsing and next-version resolution.

This module holds the decision logic of nextsemver:

- :func:`parse_version` validates raw version strings (manifest values and
  normalized release tags) into :class:`semver.Version` objects.
- :func:`normalize_tag` strips a project's tag prefix/suffix.
- :func:`resolve_next_version` picks the version to release next.
- :func:`format_tag` decorates a version back into a tag.

All functions are pure. Versions are compared with SemVer 2.0.0 precedence,
where build metadata never affects ordering.

Example::

    >>> latest = parse_version(normalize_tag("v1.0.0", "v", ""))
    >>> declared = parse_version("1.0.0")
    >>> format_tag(resolve_next_version(declared, latest), "v", "")
    'v1.0.1'
"""

from __future__ import annotations

from typing import Optional

import semver

from nextsemver.constants import DEFAULT_VERSION
from nextsemver.exceptions import InvalidVersionError

__all__ = [
    "DEFAULT",
    "clean_version",
    "format_tag",
    "normalize_tag",
    "parse_version",
    "resolve_next_version",
]


def parse_version(raw: Optional[str], *, source: Optional[str] = None) -> semver.Version:
    """Parse a semantic version string.

    Leading/trailing whitespace is ignored, and so is any run of leading
    ``=``, ``v`` or ``V`` characters, as npm's ``semver.clean`` does
    (``" v1.2.3"`` and ``"v=1.2.3"`` parse as ``1.2.3``). Nothing else is
    corrected: partial versions like ``1.2`` are rejected.

    Args:
        raw: Version string to parse.
        source: Optional origin of the value, recorded on errors.

    Returns:
        The parsed version.

    Raises:
        InvalidVersionError: ``raw`` is ``None``, empty or not a semantic
            version.
    """
    if not isinstance(raw, str):
        raise InvalidVersionError(
            f"Invalid semver string: {raw}",
            version=None if raw is None else str(raw),
            source=source,
        )

    text = raw.strip().lstrip("=vV")

    try:
        return semver.Version.parse(text)
    except (ValueError, TypeError) as exc:
        raise InvalidVersionError(
            f"Invalid semver string: {raw}",
            version=raw,
            source=source,
        ) from exc


def clean_version(raw: Optional[str]) -> str:
    """Return the canonical ``MAJOR.MINOR.PATCH[-PRERELEASE]`` form of ``raw``.

    Build metadata is dropped.

    >>> clean_version("  =v1.2.3-rc.1+build.5 ")
    '1.2.3-rc.1'
    """
    return str(parse_version(raw).replace(build=None))


def normalize_tag(tag: str, prefix: str = "", suffix: str = "") -> str:
    """Strip the configured prefix and suffix from a release tag.

    The prefix is removed first, then the suffix, each at most once and
    only when present. Tags that do not carry them are returned unchanged.

    >>> normalize_tag("v1.2.3", "v", "")
    '1.2.3'
    >>> normalize_tag("1.2.3-rc", "", "-rc")
    '1.2.3'
    """
    if prefix and tag.startswith(prefix):
        tag = tag[len(prefix):]
    if suffix and tag.endswith(suffix):
        tag = tag[: len(tag) - len(suffix)]
    return tag


def resolve_next_version(
    declared: semver.Version,
    latest: semver.Version,
) -> semver.Version:
    """Compute the next version to release.

    If the latest release is at or above the declared version the manifest
    was not bumped since that release, so the latest release gets a patch
    bump (prerelease and build cleared). Otherwise the declared version is
    used as is, minus build metadata.

    The result is always strictly greater than ``latest`` when
    ``latest >= declared``, which keeps tags increasing across runs.

    Args:
        declared: Version declared in the manifest.
        latest: Version of the latest release, or :data:`DEFAULT` when
            there is none.

    Returns:
        The version to release next.
    """
    if latest >= declared:
        return latest.bump_patch()
    return declared.replace(build=None)


def format_tag(version: semver.Version, prefix: str = "", suffix: str = "") -> str:
    """Build the release tag for ``version``."""
    return f"{prefix}{version}{suffix}"


#: Latest-release version used when the repository has no release yet.
DEFAULT: semver.Version = parse_version(DEFAULT_VERSION)
