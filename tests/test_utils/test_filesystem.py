from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from nextsemver.exceptions import FileOperationError
from nextsemver.utils.filesystem import (
    _atomic_write,
    _validated_file,
    find_first_file,
    list_existing,
    safe_read_file,
    safe_write_file,
)


@pytest.mark.unit
class TestValidatedFile:
    """Tests for _validated_file."""

    def test_existing_file(self, tmp_path: Path) -> None:
        path = tmp_path / "a.txt"
        path.write_text("x", encoding="utf-8")

        assert _validated_file(path) == path.resolve()

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileOperationError, match="File not found"):
            _validated_file(tmp_path / "missing")

    def test_directory(self, tmp_path: Path) -> None:
        with pytest.raises(FileOperationError, match="Not a file"):
            _validated_file(tmp_path)


@pytest.mark.unit
class TestSafeReadFile:
    """Tests for safe_read_file."""

    def test_reads_content(self, tmp_path: Path) -> None:
        path = tmp_path / "package.json"
        path.write_text('{"version": "1.0.0"}', encoding="utf-8")

        assert safe_read_file(path) == '{"version": "1.0.0"}'

    def test_preserves_crlf(self, tmp_path: Path) -> None:
        path = tmp_path / "pyproject.toml"
        path.write_bytes(b"[project]\r\nversion = \"1.0.0\"\r\n")

        assert "\r\n" in safe_read_file(path)

    def test_size_limit(self, tmp_path: Path) -> None:
        path = tmp_path / "big.json"
        path.write_text("x" * 100, encoding="utf-8")

        with pytest.raises(FileOperationError, match="too large"):
            safe_read_file(path, max_size=10)

    def test_size_limit_disabled(self, tmp_path: Path) -> None:
        path = tmp_path / "big.json"
        path.write_text("x" * 100, encoding="utf-8")

        assert len(safe_read_file(path, max_size=None)) == 100

    def test_decode_error(self, tmp_path: Path) -> None:
        path = tmp_path / "bin.json"
        path.write_bytes(b"\xff\xfe\x00")

        with pytest.raises(FileOperationError, match="Failed to read"):
            safe_read_file(path)


@pytest.mark.unit
class TestSafeWriteFile:
    """Tests for safe_write_file and _atomic_write."""

    def test_replaces_content(self, tmp_path: Path) -> None:
        path = tmp_path / "package.json"
        path.write_text("old", encoding="utf-8")

        result = safe_write_file(path, "new")

        assert result == path
        assert path.read_text(encoding="utf-8") == "new"

    def test_creates_file(self, tmp_path: Path) -> None:
        path = tmp_path / "new.json"

        safe_write_file(path, "{}")

        assert path.read_text(encoding="utf-8") == "{}"

    def test_missing_directory(self, tmp_path: Path) -> None:
        with pytest.raises(FileOperationError, match="Directory not found"):
            safe_write_file(tmp_path / "nope" / "package.json", "{}")

    def test_no_temp_files_left(self, tmp_path: Path) -> None:
        path = tmp_path / "package.json"

        safe_write_file(path, "{}")

        assert [p.name for p in tmp_path.iterdir()] == ["package.json"]

    @pytest.mark.skipif(os.name == "nt", reason="POSIX permissions")
    def test_keeps_permissions(self, tmp_path: Path) -> None:
        path = tmp_path / "package.json"
        path.write_text("{}", encoding="utf-8")
        path.chmod(0o640)

        safe_write_file(path, '{"a": 1}')

        assert path.stat().st_mode & 0o777 == 0o640

    def test_failed_replace_cleans_up(self, tmp_path: Path) -> None:
        path = tmp_path / "package.json"
        path.write_text("old", encoding="utf-8")

        with patch.object(Path, "replace", side_effect=OSError("disk full")):
            with pytest.raises(FileOperationError, match="Atomic write failed"):
                _atomic_write(path, "new")

        assert path.read_text(encoding="utf-8") == "old"
        assert [p.name for p in tmp_path.iterdir()] == ["package.json"]


@pytest.mark.unit
class TestFindFiles:
    """Tests for find_first_file and list_existing."""

    def test_first_match_in_order(self, tmp_path: Path) -> None:
        (tmp_path / "b.json").write_text("", encoding="utf-8")
        (tmp_path / "a.json").write_text("", encoding="utf-8")

        assert find_first_file(tmp_path, ["a.json", "b.json"]) == (tmp_path / "a.json").resolve()

    def test_no_match(self, tmp_path: Path) -> None:
        assert find_first_file(tmp_path, ["a.json"]) is None

    def test_missing_directory(self, tmp_path: Path) -> None:
        assert find_first_file(tmp_path / "nope", ["a.json"]) is None

    def test_directories_ignored(self, tmp_path: Path) -> None:
        (tmp_path / "package.json").mkdir()

        assert find_first_file(tmp_path, ["package.json"]) is None

    def test_list_existing(self, tmp_path: Path) -> None:
        (tmp_path / "b.json").write_text("", encoding="utf-8")

        assert list_existing(tmp_path, ["a.json", "b.json"]) == [tmp_path / "b.json"]
