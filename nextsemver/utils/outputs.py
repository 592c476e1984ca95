"""
CI output sink for nextsemver.

Results are published as GitHub Actions step outputs when the runner
provides a ``GITHUB_OUTPUT`` file, and printed as ``name=value`` lines on
stdout otherwise. Failure annotations (``::error::``) are only emitted when
running inside GitHub Actions.

Outputs are buffered and written in one go by :meth:`OutputSink.flush`, so
a failed run never leaves partial outputs behind.
"""

from __future__ import annotations

import os
import sys
import uuid
from pathlib import Path
from typing import IO, Dict, List, Mapping, Optional, Tuple

from nextsemver.utils.logger import escape_command_data, get_logger
from nextsemver.exceptions import FileOperationError
from nextsemver.constants import ENV_ACTIONS, ENV_OUTPUT

logger = get_logger("outputs")


def format_output(name: str, value: str) -> str:
    """Format one output in ``GITHUB_OUTPUT`` file syntax.

    Multi-line values use the heredoc form with a random delimiter.
    """
    if "\n" not in value and "\r" not in value:
        return f"{name}={value}\n"

    delimiter = f"ghadelimiter_{uuid.uuid4()}"
    return f"{name}<<{delimiter}\n{value}\n{delimiter}\n"


class OutputSink:
    """Collects named results and publishes them for the calling pipeline.

    Args:
        output_file: Path of the ``GITHUB_OUTPUT`` file. ``None`` prints to
            ``stream`` instead.
        stream: Text stream for plain output and annotations; defaults to
            ``sys.stdout``.
        annotate: Emit workflow-command annotations for warnings/failures.
    """

    def __init__(
        self,
        output_file: Optional[Path] = None,
        *,
        stream: Optional[IO[str]] = None,
        annotate: bool = False,
    ) -> None:
        self.output_file = output_file
        self.annotate = annotate
        self._stream = stream
        self._pending: List[Tuple[str, str]] = []

    @classmethod
    def from_environ(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        *,
        stream: Optional[IO[str]] = None,
    ) -> "OutputSink":
        """Build a sink from the runner environment."""
        env = os.environ if environ is None else environ
        output = env.get(ENV_OUTPUT)
        return cls(
            Path(output) if output else None,
            stream=stream,
            annotate=env.get(ENV_ACTIONS) == "true",
        )

    @property
    def stream(self) -> IO[str]:
        return self._stream or sys.stdout

    @property
    def pending(self) -> Dict[str, str]:
        """Outputs queued but not yet written."""
        return dict(self._pending)

    def emit(self, name: str, value: str) -> None:
        """Queue an output for :meth:`flush`."""
        logger.debug("Output %s=%s", name, value)
        self._pending.append((name, value))

    def flush(self) -> None:
        """Write every queued output and clear the queue."""
        if not self._pending:
            return

        payload = "".join(format_output(name, value) for name, value in self._pending)

        if self.output_file is None:
            self.stream.write(payload)
            self.stream.flush()
        else:
            self._append(payload)
            logger.debug("Wrote %d output(s) to %s", len(self._pending), self.output_file)

        self._pending.clear()

    def ensure_writable(self) -> None:
        """Check that :meth:`flush` can append to the output file.

        Raises:
            FileOperationError: The output file cannot be opened for append.
        """
        if self.output_file is not None:
            self._append("")

    def _append(self, payload: str) -> None:
        assert self.output_file is not None
        try:
            with open(self.output_file, "a", encoding="utf-8") as fh:
                fh.write(payload)
        except OSError as exc:
            raise FileOperationError(
                f"Failed to write step outputs: {exc}",
                file_path=str(self.output_file),
                operation="write",
                original_error=exc,
            ) from exc

    def discard(self) -> None:
        """Drop every queued output."""
        self._pending.clear()

    def fail(self, message: str) -> None:
        """Publish a failure annotation for ``message``."""
        if self.annotate:
            self.stream.write(f"::error::{escape_command_data(message)}\n")
            self.stream.flush()

    def warn(self, message: str) -> None:
        """Publish a warning annotation for ``message``."""
        if self.annotate:
            self.stream.write(f"::warning::{escape_command_data(message)}\n")
            self.stream.flush()
