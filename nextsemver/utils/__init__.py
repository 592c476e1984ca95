"""
Utility helpers for nextsemver.

This package provides reusable utilities used across nextsemver, including:

- Console output helpers (Rich-based)
- Logging configuration and retrieval
- Filesystem safety helpers
- Async HTTP client
- CI output sink

Only symbols listed in ``__all__`` are considered part of the public API.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Filesystem utilities
# ---------------------------------------------------------------------------

from nextsemver.utils.filesystem import (
    find_first_file,
    list_existing,
    safe_read_file,
    safe_write_file,
)

# ---------------------------------------------------------------------------
# Logging utilities
# ---------------------------------------------------------------------------

from nextsemver.utils.logger import (
    disable_logging,
    get_logger,
    runner_debug_enabled,
    setup_logging,
)

# ---------------------------------------------------------------------------
# Console utilities
# ---------------------------------------------------------------------------

from nextsemver.utils.console import (
    get_raw_console,
    print_error,
    print_success,
    print_table,
    print_warning,
    reconfigure_console,
)

# ---------------------------------------------------------------------------
# HTTP utilities
# ---------------------------------------------------------------------------

from nextsemver.utils.http import HTTPClient

# ---------------------------------------------------------------------------
# CI outputs
# ---------------------------------------------------------------------------

from nextsemver.utils.outputs import OutputSink

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

__all__ = [
    # Console
    "print_error",
    "print_table",
    "print_success",
    "print_warning",
    "get_raw_console",
    "reconfigure_console",
    # Logging
    "get_logger",
    "setup_logging",
    "disable_logging",
    "runner_debug_enabled",
    # Filesystem
    "safe_read_file",
    "safe_write_file",
    "find_first_file",
    "list_existing",
    # HTTP
    "HTTPClient",
    # Outputs
    "OutputSink",
]
