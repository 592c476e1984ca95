"""
Filesystem utilities for nextsemver.

Safe helpers for reading manifests, writing them back atomically, and
locating them under a package root. All filesystem errors are normalized
to ``FileOperationError``.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Iterable, List, Optional, Union

from nextsemver.utils.logger import get_logger
from nextsemver.exceptions import FileOperationError
from nextsemver.constants import MAX_FILE_SIZE


logger = get_logger("filesystem")

PathLike = Union[str, Path]


def _validated_file(path: Path) -> Path:
    """Validate and resolve an existing file path."""
    if not path.exists():
        raise FileOperationError(
            f"File not found: {path}",
            file_path=str(path),
            operation="read",
        )
    if not path.is_file():
        raise FileOperationError(
            f"Not a file: {path}",
            file_path=str(path),
            operation="read",
        )
    return path.resolve()


def _atomic_write(target: Path, content: str) -> None:
    """Atomically write text to a file using a temporary file + replace."""
    temp_path: Optional[Path] = None

    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            newline="",
            dir=str(target.parent),
            delete=False,
            prefix=f".{target.name}.",
            suffix=".tmp",
        ) as tmp:
            temp_path = Path(tmp.name)
            tmp.write(content)
            tmp.flush()
            os.fsync(tmp.fileno())

        if target.exists():
            os.chmod(temp_path, target.stat().st_mode)
        temp_path.replace(target)

    except OSError as exc:
        if temp_path and temp_path.exists():
            try:
                temp_path.unlink()
                logger.debug("Cleaned up temporary file: %s", temp_path)
            except OSError as cleanup_exc:
                logger.warning(
                    "Failed to clean up temporary file %s: %s",
                    temp_path,
                    cleanup_exc,
                )

        raise FileOperationError(
            f"Atomic write failed: {exc}",
            file_path=str(target),
            operation="write",
            original_error=exc,
        ) from exc


def safe_read_file(
    file_path: PathLike,
    *,
    max_size: Optional[int] = MAX_FILE_SIZE,
    encoding: str = "utf-8",
) -> str:
    """Safely read a text file with optional size limits.

    Args:
        file_path: Path to the file.
        max_size: Maximum allowed file size in bytes (None disables limit).
        encoding: Text encoding.

    Returns:
        File contents as a string.
    """
    path = _validated_file(Path(file_path))
    size = path.stat().st_size

    if max_size is not None and size > max_size:
        raise FileOperationError(
            f"File too large: {size} bytes (max {max_size})",
            file_path=str(path),
            operation="read",
        )

    try:
        with open(path, encoding=encoding, newline="") as fh:
            return fh.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise FileOperationError(
            f"Failed to read file: {exc}",
            file_path=str(path),
            operation="read",
            original_error=exc,
        ) from exc


def safe_write_file(file_path: PathLike, content: str) -> Path:
    """Write text to an existing directory using atomic replacement.

    Line endings in ``content`` are written as given.

    Returns:
        The path that was written.
    """
    path = Path(file_path)
    if not path.parent.is_dir():
        raise FileOperationError(
            f"Directory not found: {path.parent}",
            file_path=str(path),
            operation="write",
        )

    _atomic_write(path, content)
    logger.debug("Wrote %d bytes to %s", len(content), path)
    return path


def find_first_file(directory: PathLike, names: Iterable[str]) -> Optional[Path]:
    """Return the first of ``names`` that exists as a file in ``directory``.

    Only ``directory`` itself is searched, not its subdirectories.
    """
    root = Path(directory)
    if not root.is_dir():
        return None

    for name in names:
        candidate = root / name
        if candidate.is_file():
            return candidate.resolve()
    return None


def list_existing(directory: PathLike, names: Iterable[str]) -> List[Path]:
    """Return every one of ``names`` present as a file in ``directory``."""
    root = Path(directory)
    return [root / name for name in names if (root / name).is_file()]
