"""Single-pass next-version pipeline.

Composes the stages of a run in order:

1. **Manifest** — locate and read the manifest, parse the declared version.
2. **Preconditions** — credential and repository identity are checked
   before any network call.
3. **Release lookup** — latest release tag, normalized and parsed;
   ``0.0.0`` when the repository has no release yet.
4. **Resolution** — :func:`~nextsemver.core.versioning.resolve_next_version`
   and tag formatting.

The pipeline has no side effects besides the release-host request. Writing
the manifest back and emitting outputs are left to the caller.
"""

from __future__ import annotations

from typing import Optional

from nextsemver.config import RunConfiguration
from nextsemver.constants import ENV_TOKEN
from nextsemver.exceptions import MissingCredentialError
from nextsemver.models import Resolution
from nextsemver.utils import HTTPClient, get_logger
from nextsemver.core.manifest import find_manifest, read_manifest
from nextsemver.core.releases import (
    GitHubReleaseHost,
    ReleaseHost,
    lookup_latest_version,
)
from nextsemver.core.versioning import (
    format_tag,
    parse_version,
    resolve_next_version,
)

logger = get_logger("core.pipeline")


async def run_pipeline(
    config: RunConfiguration,
    host: Optional[ReleaseHost] = None,
) -> Resolution:
    """Compute the next version and tag for one run.

    Args:
        config: Run configuration.
        host: Release host to query. Defaults to GitHub, using
            ``config.token`` and ``config.api_url``.

    Returns:
        The :class:`Resolution` of this run.

    Raises:
        MissingManifestError: No manifest under ``config.manifest_dir``.
        InvalidVersionError: Manifest version or release tag is invalid.
        MissingCredentialError: ``config.token`` is empty.
        ConfigError: ``config.repository`` is missing or malformed.
        ReleaseHostError: The release host failed.
    """
    logger.debug("Run configuration: %s", config.to_log_dict())

    manifest = read_manifest(find_manifest(config.manifest_dir))
    declared = parse_version(manifest.version, source="manifest")

    if not config.token:
        raise MissingCredentialError(
            f"Invalid or missing {ENV_TOKEN}.",
            variable=ENV_TOKEN,
        )
    owner, repo = config.owner_and_repo()

    if host is None:
        async with HTTPClient(timeout=config.timeout) as http:
            github = GitHubReleaseHost(http, token=config.token, api_url=config.api_url)
            latest_tag, latest = await lookup_latest_version(
                github, owner, repo, config.tag_prefix, config.tag_suffix
            )
    else:
        latest_tag, latest = await lookup_latest_version(
            host, owner, repo, config.tag_prefix, config.tag_suffix
        )

    next_version = resolve_next_version(declared, latest)

    logger.debug("Package version: %s", declared)
    logger.debug("Previous release version: %s", latest)
    logger.debug("Next release version: %s", next_version)

    return Resolution(
        manifest=manifest,
        declared=declared,
        latest=latest,
        latest_tag=latest_tag,
        next_version=next_version,
        tag=format_tag(next_version, config.tag_prefix, config.tag_suffix),
    )
