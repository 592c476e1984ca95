"""
HTTP client utilities for nextsemver.

This module provides a thin asynchronous HTTP client over ``httpx``. It
does not retry and does not interpret status codes: a release lookup is a
single request, and deciding whether a status means "no releases yet" or
"fatal" belongs to the caller. Transport-level failures (DNS, connection,
timeout) are normalized to :class:`NetworkError`.
"""

from __future__ import annotations

import httpx
from typing import Any, Dict, Mapping, Optional, cast

from nextsemver.utils.logger import get_logger
from nextsemver.__version__ import __version__
from nextsemver.exceptions import NetworkError
from nextsemver.constants import DEFAULT_TIMEOUT, USER_AGENT_TEMPLATE

logger = get_logger("http")


class HTTPClient:
    """Asynchronous HTTP client bound to one run.

    Args:
        timeout: Request timeout in seconds.
        verify_ssl: Whether to verify SSL certificates.
        user_agent: Custom User-Agent header value.
        headers: Extra headers sent with every request.
        transport: Optional httpx transport (used by tests).

    Example:
        >>> async with HTTPClient() as client:
        ...     response = await client.get("https://api.github.com/zen")
    """

    def __init__(
        self,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        verify_ssl: bool = True,
        user_agent: Optional[str] = None,
        headers: Optional[Mapping[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.timeout = timeout
        self.verify_ssl = verify_ssl
        self.user_agent = user_agent or USER_AGENT_TEMPLATE.format(version=__version__)
        self.headers: Dict[str, str] = dict(headers) if headers else {}
        self._transport = transport

        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "HTTPClient":
        await self._ensure_client()
        return self

    async def __aexit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        await self.close()

    async def _ensure_client(self) -> None:
        """Initialize the underlying httpx client if needed."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                http2=True,
                verify=self.verify_ssl,
                follow_redirects=True,
                headers={"User-Agent": self.user_agent, **self.headers},
                transport=self._transport,
            )

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Send one request and return the response, whatever its status.

        Raises:
            NetworkError: The request could not be completed.
        """
        await self._ensure_client()
        assert self._client is not None

        clean_url = url.strip().strip("\"'")
        logger.debug("%s %s", method, clean_url)

        try:
            response = await self._client.request(method, clean_url, **kwargs)
        except httpx.TimeoutException as exc:
            raise NetworkError(
                f"Request timed out after {self.timeout}s: {clean_url}",
                url=clean_url,
            ) from exc
        except httpx.HTTPError as exc:
            raise NetworkError(
                f"Request failed: {exc}",
                url=clean_url,
            ) from exc

        logger.debug("%s %s -> %d", method, clean_url, response.status_code)
        return response

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        """Perform a GET request."""
        return await self.request("GET", url, **kwargs)

    @staticmethod
    def json_object(response: httpx.Response) -> Dict[str, Any]:
        """Decode a response body that must be a JSON object.

        Raises:
            NetworkError: The body is not JSON or not an object.
        """
        url = str(response.request.url)

        try:
            data = response.json()
        except ValueError as exc:
            raise NetworkError(
                f"Invalid JSON response from {url}",
                url=url,
                status_code=response.status_code,
                response_body=response.text,
            ) from exc

        if not isinstance(data, dict):
            raise NetworkError(
                f"Expected JSON object from {url}",
                url=url,
                status_code=response.status_code,
                response_body=response.text,
            )

        return cast(Dict[str, Any], data)
