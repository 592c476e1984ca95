"""Latest-release lookup against GitHub.

:class:`GitHubReleaseHost` asks the GitHub REST API for a repository's
latest published release and answers with a typed
:data:`~nextsemver.models.release.ReleaseLookup` instead of raising on HTTP
status codes. :func:`lookup_latest_version` turns that answer into the
version the resolver compares against.

Typical usage::

    async with HTTPClient() as http:
        host = GitHubReleaseHost(http, token=token)
        tag, latest = await lookup_latest_version(host, "octo", "app", "v", "")
"""

from __future__ import annotations

from typing import Dict, Optional, Protocol, Tuple

import semver

from nextsemver.exceptions import NetworkError, ReleaseHostError
from nextsemver.core.versioning import DEFAULT, normalize_tag, parse_version
from nextsemver.utils import HTTPClient, get_logger
from nextsemver.models.release import (
    ReleaseFound,
    ReleaseLookup,
    ReleaseLookupFailed,
    ReleaseNotFound,
)
from nextsemver.constants import (
    GITHUB_ACCEPT,
    GITHUB_API_URL,
    GITHUB_API_VERSION,
    LATEST_RELEASE_ENDPOINT,
)

logger = get_logger("core.releases")

__all__ = ["GitHubReleaseHost", "ReleaseHost", "lookup_latest_version"]


class ReleaseHost(Protocol):
    """Anything that can report a repository's latest release."""

    async def latest_release(self, owner: str, repo: str) -> ReleaseLookup:
        ...


class GitHubReleaseHost:
    """GitHub REST API implementation of :class:`ReleaseHost`.

    Args:
        http: Open HTTP client used for the request.
        token: Bearer token for the API.
        api_url: Base URL of the REST API (GitHub Enterprise uses its own).
    """

    def __init__(
        self,
        http: HTTPClient,
        *,
        token: str,
        api_url: str = GITHUB_API_URL,
    ) -> None:
        self.http = http
        self.api_url = api_url.rstrip("/")
        self._token = token

    def _headers(self) -> Dict[str, str]:
        return {
            "Accept": GITHUB_ACCEPT,
            "Authorization": f"Bearer {self._token}",
            "X-GitHub-Api-Version": GITHUB_API_VERSION,
        }

    async def latest_release(self, owner: str, repo: str) -> ReleaseLookup:
        """Fetch the tag name of the latest published release.

        Returns:
            :class:`ReleaseFound` on 200, :class:`ReleaseNotFound` on 404,
            :class:`ReleaseLookupFailed` for everything else.
        """
        repository = f"{owner}/{repo}"
        url = LATEST_RELEASE_ENDPOINT.format(api_url=self.api_url, owner=owner, repo=repo)
        logger.debug("GitHub context: owner -> %s; repo -> %s", owner, repo)

        try:
            response = await self.http.get(url, headers=self._headers())
        except NetworkError as exc:
            return ReleaseLookupFailed(
                ReleaseHostError(
                    f"Could not reach release host: {exc.message}",
                    repository=repository,
                    url=exc.url,
                )
            )

        if response.status_code == 404:
            logger.info("No releases found for %s", repository)
            return ReleaseNotFound()

        if response.status_code != 200:
            return ReleaseLookupFailed(
                ReleaseHostError(
                    f"Release host returned HTTP {response.status_code}",
                    repository=repository,
                    url=url,
                    status_code=response.status_code,
                    response_body=response.text,
                )
            )

        try:
            data = self.http.json_object(response)
        except NetworkError as exc:
            return ReleaseLookupFailed(
                ReleaseHostError(
                    exc.message,
                    repository=repository,
                    url=url,
                    status_code=response.status_code,
                )
            )

        logger.debug("Latest release response: %s", data)

        tag_name = data.get("tag_name")
        if not isinstance(tag_name, str) or not tag_name:
            return ReleaseLookupFailed(
                ReleaseHostError(
                    "Latest release has no tag name",
                    repository=repository,
                    url=url,
                    status_code=response.status_code,
                )
            )

        logger.debug("Latest release tag: %s", tag_name)
        return ReleaseFound(tag_name)


async def lookup_latest_version(
    host: ReleaseHost,
    owner: str,
    repo: str,
    prefix: str = "",
    suffix: str = "",
) -> Tuple[Optional[str], semver.Version]:
    """Return the latest release tag and its version.

    A repository without releases yields ``(None, 0.0.0)``.

    Raises:
        ReleaseHostError: The host could not answer.
        InvalidVersionError: The normalized tag is not a semantic version.
    """
    result = await host.latest_release(owner, repo)

    if isinstance(result, ReleaseFound):
        normalized = normalize_tag(result.tag_name, prefix, suffix)
        return result.tag_name, parse_version(normalized, source="release")

    if isinstance(result, ReleaseNotFound):
        return None, DEFAULT

    raise result.error
