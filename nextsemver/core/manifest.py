"""Manifest discovery, reading and version write-back.

A manifest is the file declaring the version the project intends to
release next. Two formats are supported, searched in this order under the
package root:

- ``package.json`` — top-level ``"version"`` string.
- ``pyproject.toml`` — ``[project].version``, falling back to
  ``[tool.poetry].version``. PEP 440 spellings that are not SemVer
  (``1.2.0rc1``) are translated (``1.2.0-rc.1``).

Writing back touches only the version: ``package.json`` keeps its key
order and indentation, and ``pyproject.toml`` has just the one
``version = "..."`` line rewritten.

Typical usage::

    path = find_manifest(config.manifest_dir)
    manifest = read_manifest(path)
    write_manifest_version(manifest, "1.4.0")
"""

from __future__ import annotations

import re
import json
import tomli as tomllib
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from packaging.version import InvalidVersion, Version

from nextsemver.constants import MANIFEST_FILE_NAMES
from nextsemver.models.manifest import Manifest, ManifestKind
from nextsemver.core.versioning import parse_version
from nextsemver.exceptions import (
    FileOperationError,
    InvalidVersionError,
    MissingManifestError,
)
from nextsemver.utils import (
    find_first_file,
    get_logger,
    list_existing,
    safe_read_file,
    safe_write_file,
)

logger = get_logger("core.manifest")

__all__ = [
    "find_manifest",
    "pep440_to_semver",
    "read_manifest",
    "write_manifest_version",
]

# pyproject.toml tables that may own the version, in lookup order
_PYPROJECT_TABLES: Tuple[Tuple[str, ...], ...] = (("project",), ("tool", "poetry"))

_PEP440_PRE_LABELS = {"a": "alpha", "b": "beta", "rc": "rc"}

_TABLE_HEADER_RE = re.compile(r"^\s*\[")
_VERSION_LINE_RE = re.compile(
    r"""^(?P<lead>\s*version\s*=\s*)(?P<quote>["'])(?P<value>[^"']*)(?P=quote)""",
)
_INDENT_RE = re.compile(r"^\{\r?\n([ \t]+)\S")


# ---------------------------------------------------------------------------
# Discovery
# ---------------------------------------------------------------------------


def find_manifest(package_root: Path) -> Path:
    """Locate the manifest under ``package_root``.

    Raises:
        MissingManifestError: ``package_root`` is not a directory or holds
            no supported manifest.
    """
    if not package_root.is_dir():
        raise MissingManifestError(
            f"Package root does not exist: {package_root}",
            search_path=str(package_root),
        )

    found = find_first_file(package_root, MANIFEST_FILE_NAMES)
    if found is None:
        raise MissingManifestError(
            f"No manifest found; expected one of {', '.join(MANIFEST_FILE_NAMES)}",
            search_path=str(package_root),
        )

    present = list_existing(package_root, MANIFEST_FILE_NAMES)
    if len(present) > 1:
        logger.info(
            "Multiple manifests in %s, using %s",
            package_root,
            found.name,
        )

    logger.debug("Using manifest %s", found)
    return found


# ---------------------------------------------------------------------------
# Reading
# ---------------------------------------------------------------------------


def read_manifest(path: Path) -> Manifest:
    """Read the declared version from a manifest file.

    A leading UTF-8 byte order mark is ignored.

    Raises:
        MissingManifestError: The file is missing, unreadable, not a
            supported format or cannot be parsed.
        InvalidVersionError: The manifest has no string version field.
    """
    kind = ManifestKind.from_path(path)
    if kind is None:
        raise MissingManifestError(
            f"Unsupported manifest: {path.name}",
            search_path=str(path),
        )

    try:
        text = safe_read_file(path, encoding="utf-8-sig")
    except FileOperationError as exc:
        raise MissingManifestError(
            f"{kind.value} cannot be read",
            search_path=str(path),
            reason=exc.message,
        ) from exc

    if kind is ManifestKind.PACKAGE_JSON:
        manifest = _read_package_json(path, text)
    else:
        manifest = _read_pyproject(path, text)

    logger.debug("Detected manifest version %s", manifest.version)
    return manifest


def _read_package_json(path: Path, text: str) -> Manifest:
    try:
        data = json.loads(text)
    except ValueError as exc:
        raise MissingManifestError(
            "package.json is not valid JSON",
            search_path=str(path),
            reason=str(exc),
        ) from exc

    if not isinstance(data, dict):
        raise MissingManifestError(
            "package.json must contain a JSON object",
            search_path=str(path),
        )

    version = data.get("version")
    if not isinstance(version, str):
        raise InvalidVersionError(
            f"Invalid semver string: {version}",
            version=None if version is None else str(version),
            source="manifest",
        )

    return Manifest(path=path.resolve(), kind=ManifestKind.PACKAGE_JSON, version=version)


def _read_pyproject(path: Path, text: str) -> Manifest:
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        raise MissingManifestError(
            "pyproject.toml is not valid TOML",
            search_path=str(path),
            reason=str(exc),
        ) from exc

    for keys in _PYPROJECT_TABLES:
        table = _get_table(data, keys)
        if table is None or "version" not in table:
            continue

        version = table["version"]
        if not isinstance(version, str):
            break

        converted = None if _is_semver(version) else pep440_to_semver(version)
        if converted is not None:
            logger.debug("Translated PEP 440 version %s to %s", version, converted)
            version = converted

        return Manifest(
            path=path.resolve(),
            kind=ManifestKind.PYPROJECT,
            version=version,
            table=".".join(keys),
        )

    raise InvalidVersionError(
        "pyproject.toml does not declare a static version",
        source="manifest",
    )


def _is_semver(value: str) -> bool:
    try:
        parse_version(value)
    except InvalidVersionError:
        return False
    return True


def _get_table(data: Dict[str, Any], keys: Tuple[str, ...]) -> Optional[Dict[str, Any]]:
    node: Any = data
    for key in keys:
        if not isinstance(node, dict):
            return None
        node = node.get(key)
    return node if isinstance(node, dict) else None


def pep440_to_semver(value: str) -> Optional[str]:
    """Translate a PEP 440 version into SemVer spelling.

    Returns ``None`` when ``value`` is not PEP 440 or cannot be expressed
    (non-zero epoch, more than three release components).

    >>> pep440_to_semver("1.2.0rc1")
    '1.2.0-rc.1'
    >>> pep440_to_semver("2.0")
    '2.0.0'
    """
    try:
        parsed = Version(value)
    except InvalidVersion:
        return None

    if parsed.epoch or len(parsed.release) > 3:
        return None

    release = list(parsed.release) + [0] * (3 - len(parsed.release))
    result = ".".join(str(part) for part in release)

    prerelease: List[str] = []
    if parsed.pre is not None:
        label, number = parsed.pre
        prerelease += [_PEP440_PRE_LABELS[label], str(number)]
    if parsed.dev is not None:
        prerelease += ["dev", str(parsed.dev)]
    if prerelease:
        result += "-" + ".".join(prerelease)

    build: List[str] = []
    if parsed.post is not None:
        build += ["post", str(parsed.post)]
    if parsed.local is not None:
        build += parsed.local.split(".")
    if build:
        result += "+" + ".".join(build)

    return result


# ---------------------------------------------------------------------------
# Writing
# ---------------------------------------------------------------------------


def write_manifest_version(manifest: Manifest, version: str) -> Path:
    """Persist ``version`` into the manifest file.

    Returns:
        Path of the updated manifest.

    Raises:
        FileOperationError: The file cannot be rewritten.
    """
    text = safe_read_file(manifest.path, encoding="utf-8-sig")

    if manifest.kind is ManifestKind.PACKAGE_JSON:
        updated = _update_package_json(text, version)
    else:
        updated = _update_pyproject(text, version, manifest.table or "project", manifest.path)

    safe_write_file(manifest.path, updated)
    logger.info("Updated %s to version %s", manifest.path, version)
    return manifest.path


def _update_package_json(text: str, version: str) -> str:
    data = json.loads(text)
    data["version"] = version

    match = _INDENT_RE.match(text)
    indent = match.group(1) if match else 2
    newline = "\r\n" if "\r\n" in text else "\n"

    rendered = json.dumps(data, indent=indent, ensure_ascii=False)
    return rendered.replace("\n", newline) + newline


def _update_pyproject(text: str, version: str, table: str, path: Path) -> str:
    lines = text.splitlines(keepends=True)
    header_re = re.compile(
        r"^\s*\[\s*" + r"\s*\.\s*".join(re.escape(k) for k in table.split(".")) + r"\s*\]"
    )

    in_table = False
    for index, line in enumerate(lines):
        if _TABLE_HEADER_RE.match(line):
            in_table = bool(header_re.match(line))
            continue
        if not in_table:
            continue

        match = _VERSION_LINE_RE.match(line)
        if match:
            start, end = match.span("value")
            lines[index] = line[:start] + version + line[end:]
            return "".join(lines)

    raise FileOperationError(
        f"No version field found in [{table}]",
        file_path=str(path),
        operation="write",
    )
