"""
Centralized constants for nextsemver.

This module defines immutable configuration values used across nextsemver,
including release-host settings, manifest names, CI integration variables,
and logging formats. All values are intended to be treated as read-only.
"""

from typing import Final, Sequence

# ---------------------------------------------------------------------------
# Project metadata
# ---------------------------------------------------------------------------

#: HTTP User-Agent template used for outbound requests.
USER_AGENT_TEMPLATE: Final[str] = (
    "nextsemver/{version} (https://github.com/nextsemver/nextsemver)"
)

# ---------------------------------------------------------------------------
# Versioning
# ---------------------------------------------------------------------------

#: Version assumed for the latest release when the repository has none.
DEFAULT_VERSION: Final[str] = "0.0.0"

#: Generic failure message for errors outside the nextsemver taxonomy.
GENERIC_FAILURE_MESSAGE: Final[str] = "Unable to generate next version"

# ---------------------------------------------------------------------------
# GitHub release host
# ---------------------------------------------------------------------------

#: Default base URL of the GitHub REST API.
GITHUB_API_URL: Final[str] = "https://api.github.com"

#: Endpoint returning the latest published (non-draft, non-prerelease) release.
LATEST_RELEASE_ENDPOINT: Final[str] = "{api_url}/repos/{owner}/{repo}/releases/latest"

#: Media type requested from the GitHub REST API.
GITHUB_ACCEPT: Final[str] = "application/vnd.github+json"

#: Pinned GitHub REST API version.
GITHUB_API_VERSION: Final[str] = "2022-11-28"

# ---------------------------------------------------------------------------
# HTTP configuration
# ---------------------------------------------------------------------------

#: Default network timeout in seconds.
DEFAULT_TIMEOUT: Final[int] = 30

# ---------------------------------------------------------------------------
# Manifests
# ---------------------------------------------------------------------------

#: Manifest file names searched under ``package_root``, in priority order.
MANIFEST_FILE_NAMES: Final[Sequence[str]] = (
    "package.json",
    "pyproject.toml",
)

#: Maximum allowed manifest size (in bytes).
MAX_FILE_SIZE: Final[int] = 1024 * 1024  # 1 MB

# ---------------------------------------------------------------------------
# Outputs
# ---------------------------------------------------------------------------

#: Names of the outputs nextsemver can emit.
OUTPUT_NAMES: Final[Sequence[str]] = ("version", "tag", "manifest")

#: Outputs emitted when none are configured.
DEFAULT_OUTPUTS: Final[Sequence[str]] = ("version", "tag")

# ---------------------------------------------------------------------------
# Environment variables (GitHub Actions runner)
# ---------------------------------------------------------------------------

ENV_WORKSPACE: Final[str] = "GITHUB_WORKSPACE"
ENV_REPOSITORY: Final[str] = "GITHUB_REPOSITORY"
ENV_TOKEN: Final[str] = "GITHUB_TOKEN"
ENV_API_URL: Final[str] = "GITHUB_API_URL"
ENV_OUTPUT: Final[str] = "GITHUB_OUTPUT"
ENV_ACTIONS: Final[str] = "GITHUB_ACTIONS"
ENV_RUNNER_DEBUG: Final[str] = "RUNNER_DEBUG"

# ---------------------------------------------------------------------------
# Logging configuration
# ---------------------------------------------------------------------------

#: Timestamp format for verbose logging.
LOG_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

#: Default log format (non-verbose).
LOG_DEFAULT_FORMAT: Final[str] = "%(levelname)s: %(message)s"

#: Verbose log format including timestamp and logger name.
LOG_VERBOSE_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
