"""
Custom exception hierarchy for nextsemver.

This module defines structured exception types used across nextsemver.
All exceptions inherit from :class:`NextSemverError` and support optional
structured metadata via the ``details`` attribute to improve diagnostics
and logging.

Every :class:`NextSemverError` aborts a run with its own message. Anything
else is reported with a generic message so the failure text stays stable.
"""

from __future__ import annotations

from typing import Any, Mapping, MutableMapping, Optional


class NextSemverError(Exception):
    """Base exception for all nextsemver errors.

    Args:
        message: Human-readable error message.
        details: Optional structured metadata describing the error.
    """

    __slots__ = ("message", "details")

    def __init__(
        self,
        message: str,
        details: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.message: str = message
        # Internally normalize to a mutable dict
        self.details: MutableMapping[str, Any] = dict(details) if details else {}
        super().__init__(message)

    def __str__(self) -> str:
        if not self.details:
            return self.message
        formatted = ", ".join(f"{k}={v}" for k, v in self.details.items())
        return f"{self.message} ({formatted})"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, details={dict(self.details)!r})"
        )


def _add_if(details: MutableMapping[str, Any], key: str, value: Any) -> None:
    """Add a key to ``details`` only if ``value`` is not ``None``."""
    if value is not None:
        details[key] = value


def _truncate(text: str, max_length: int = 200) -> str:
    """Truncate long text for safe logging or error reporting."""
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."


class InvalidVersionError(NextSemverError):
    """Raised when a string is not a valid semantic version.

    Args:
        message: Error description.
        version: The offending raw value.
        source: Where the value came from (``manifest`` or ``release``).
    """

    __slots__ = ("version", "source")

    def __init__(
        self,
        message: str,
        *,
        version: Optional[str] = None,
        source: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "source", source)

        super().__init__(message, details)

        self.version = version
        self.source = source


class MissingManifestError(NextSemverError):
    """Raised when no usable manifest exists under the package root.

    Args:
        message: Error description.
        search_path: Directory or file that was inspected.
        reason: Underlying parse or lookup failure, if any.
    """

    __slots__ = ("search_path", "reason")

    def __init__(
        self,
        message: str,
        *,
        search_path: Optional[str] = None,
        reason: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "path", search_path)
        _add_if(details, "reason", reason)

        super().__init__(message, details)

        self.search_path = search_path
        self.reason = reason


class MissingCredentialError(NextSemverError):
    """Raised when no token is available for the release host.

    Args:
        message: Error description.
        variable: Environment variable expected to hold the token.
    """

    __slots__ = ("variable",)

    def __init__(self, message: str, *, variable: Optional[str] = None) -> None:
        super().__init__(message)
        self.variable = variable


class ConfigError(NextSemverError):
    """Raised for invalid or unreadable configuration.

    Args:
        message: Error description.
        config_path: Path of the configuration file involved.
        option: Name of the offending option.
    """

    __slots__ = ("config_path", "option")

    def __init__(
        self,
        message: str,
        *,
        config_path: Optional[str] = None,
        option: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "config", config_path)
        _add_if(details, "option", option)

        super().__init__(message, details)

        self.config_path = config_path
        self.option = option


class NetworkError(NextSemverError):
    """Raised when HTTP or network operations fail.

    Args:
        message: Error description.
        url: URL being accessed.
        status_code: HTTP status code, if available.
        response_body: Raw response body, truncated for safety.
    """

    __slots__ = ("url", "status_code", "response_body")

    def __init__(
        self,
        message: str,
        *,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
        response_body: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "url", url)
        _add_if(details, "status_code", status_code)

        if response_body is not None:
            details["response"] = _truncate(response_body)

        super().__init__(message, details)

        self.url = url
        self.status_code = status_code
        self.response_body = response_body


class ReleaseHostError(NetworkError):
    """Raised for release-host failures other than "no releases yet".

    Args:
        message: Error description.
        repository: ``owner/repo`` identity that was queried.
        **kwargs: Additional arguments forwarded to ``NetworkError``.
    """

    __slots__ = ("repository",)

    def __init__(
        self,
        message: str,
        *,
        repository: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)

        self.repository = repository
        if repository is not None:
            self.details["repository"] = repository


class FileOperationError(NextSemverError):
    """Raised when file system operations fail.

    Args:
        message: Error description.
        file_path: Path to the file involved.
        operation: Operation being performed (read/write).
        original_error: Original exception that triggered this error.
    """

    __slots__ = ("file_path", "operation", "original_error")

    def __init__(
        self,
        message: str,
        *,
        file_path: Optional[str] = None,
        operation: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "path", file_path)
        _add_if(details, "operation", operation)
        _add_if(
            details,
            "original_error",
            str(original_error) if original_error else None,
        )

        super().__init__(message, details)

        self.file_path = file_path
        self.operation = operation
        self.original_error = original_error
