"""Manifest data model for nextsemver."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from dataclasses import dataclass
from typing import Any, Dict, Optional


class ManifestKind(str, Enum):
    """Manifest formats nextsemver can read and update."""

    PACKAGE_JSON = "package.json"
    PYPROJECT = "pyproject.toml"

    @classmethod
    def from_path(cls, path: Path) -> Optional["ManifestKind"]:
        """Return the kind matching ``path``'s file name, if supported."""
        for kind in cls:
            if path.name == kind.value:
                return kind
        return None


@dataclass(frozen=True)
class Manifest:
    """Declared version read from a project manifest.

    Attributes:
        path: Resolved path of the manifest file.
        kind: Manifest format.
        version: Raw version string as it appears in the manifest
            (already translated to SemVer spelling for PEP 440 values).
        table: For ``pyproject.toml``, the TOML table that owns the
            ``version`` key (``project`` or ``tool.poetry``).
    """

    path: Path
    kind: ManifestKind
    version: str
    table: Optional[str] = None

    def to_log_dict(self) -> Dict[str, Any]:
        """Return the manifest as a dictionary for debug logging."""
        return {
            "path": str(self.path),
            "kind": self.kind.value,
            "version": self.version,
            "table": self.table,
        }
