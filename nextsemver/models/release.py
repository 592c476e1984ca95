"""Typed outcome of a latest-release lookup.

A release host answers with exactly one of three variants:

- :class:`ReleaseFound` — a latest release exists; carries its tag name.
- :class:`ReleaseNotFound` — the repository has no release yet. This is a
  normal outcome, not a failure.
- :class:`ReleaseLookupFailed` — anything else (transport failure,
  authentication, rate limiting, unexpected payload). Fatal for the run.

Callers branch on the variant type instead of inspecting HTTP status codes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from nextsemver.exceptions import ReleaseHostError


@dataclass(frozen=True)
class ReleaseFound:
    """The latest published release and its raw tag name."""

    tag_name: str


@dataclass(frozen=True)
class ReleaseNotFound:
    """The repository has no published release yet."""


@dataclass(frozen=True)
class ReleaseLookupFailed:
    """The release host could not answer; ``error`` describes why."""

    error: ReleaseHostError


ReleaseLookup = Union[ReleaseFound, ReleaseNotFound, ReleaseLookupFailed]
