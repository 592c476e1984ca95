from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from nextsemver.config import (
    NextSemverConfig,
    RunConfiguration,
    build_run_configuration,
    discover_config_file,
    load_config,
    validate_outputs,
    _parse_section,
    _pyproject_has_nextsemver_section,
    _read_toml,
)
from nextsemver.exceptions import ConfigError


@pytest.mark.unit
class TestNextSemverConfig:
    """Tests for NextSemverConfig dataclass."""

    def test_default_initialization(self) -> None:
        """Test NextSemverConfig initializes with correct defaults."""
        config = NextSemverConfig()

        assert config.package_root == "."
        assert config.tag_prefix == ""
        assert config.tag_suffix == ""
        assert config.write_manifest is False
        assert config.outputs == ("version", "tag")
        assert config.api_url is None
        assert config.source_path is None

    def test_to_log_dict(self) -> None:
        """Test to_log_dict returns configuration without metadata."""
        config = NextSemverConfig(tag_prefix="v", source_path=Path("/test/path.toml"))

        result = config.to_log_dict()

        assert result["tag_prefix"] == "v"
        assert result["outputs"] == ["version", "tag"]
        assert "source_path" not in result


@pytest.mark.unit
class TestRunConfiguration:
    """Tests for RunConfiguration."""

    def test_manifest_dir(self, tmp_path: Path) -> None:
        config = RunConfiguration(workspace=tmp_path, package_root="packages/web")

        assert config.manifest_dir == tmp_path / "packages" / "web"

    def test_frozen(self, tmp_path: Path) -> None:
        config = RunConfiguration(workspace=tmp_path)

        with pytest.raises(AttributeError):
            config.tag_prefix = "v"  # type: ignore[misc]

    def test_owner_and_repo(self, tmp_path: Path) -> None:
        config = RunConfiguration(workspace=tmp_path, repository="octo/app")

        assert config.owner_and_repo() == ("octo", "app")

    def test_missing_repository(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="GITHUB_REPOSITORY") as exc_info:
            RunConfiguration(workspace=tmp_path).owner_and_repo()

        assert exc_info.value.option == "repository"

    @pytest.mark.parametrize("repository", ["octo", "octo/", "/app", "a/b/c"])
    def test_malformed_repository(self, tmp_path: Path, repository: str) -> None:
        config = RunConfiguration(workspace=tmp_path, repository=repository)

        with pytest.raises(ConfigError, match="owner/repo"):
            config.owner_and_repo()

    def test_token_hidden(self, tmp_path: Path) -> None:
        config = RunConfiguration(workspace=tmp_path, token="s3cret")

        assert "s3cret" not in repr(config)
        assert config.to_log_dict()["token"] == "***"
        assert "s3cret" not in str(config.to_log_dict())

    def test_token_absent_logged_as_none(self, tmp_path: Path) -> None:
        assert RunConfiguration(workspace=tmp_path).to_log_dict()["token"] is None


@pytest.mark.unit
class TestDiscoverConfigFile:
    """Tests for discover_config_file function."""

    def test_explicit_path_priority(self, tmp_path: Path) -> None:
        """Test explicit path is used when provided and exists."""
        config_file = tmp_path / "custom.toml"
        config_file.write_text("[nextsemver]\n", encoding="utf-8")
        (tmp_path / "nextsemver.toml").write_text("[nextsemver]\n", encoding="utf-8")

        with patch("nextsemver.config.Path.cwd", return_value=tmp_path):
            result = discover_config_file(config_file)

        assert result == config_file.resolve()

    def test_explicit_path_not_found_raises_error(self, tmp_path: Path) -> None:
        missing = tmp_path / "missing.toml"

        with pytest.raises(ConfigError, match="not found") as exc_info:
            discover_config_file(missing)

        assert exc_info.value.config_path == str(missing)

    def test_nextsemver_toml_before_pyproject(self, tmp_path: Path) -> None:
        (tmp_path / "nextsemver.toml").write_text("[nextsemver]\n", encoding="utf-8")
        (tmp_path / "pyproject.toml").write_text("[tool.nextsemver]\n", encoding="utf-8")

        with patch("nextsemver.config.Path.cwd", return_value=tmp_path):
            result = discover_config_file()

        assert result == tmp_path / "nextsemver.toml"

    def test_pyproject_with_section(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text(
            '[tool.nextsemver]\ntag_prefix = "v"\n', encoding="utf-8"
        )

        with patch("nextsemver.config.Path.cwd", return_value=tmp_path):
            result = discover_config_file()

        assert result == tmp_path / "pyproject.toml"

    def test_pyproject_without_section_ignored(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text(
            '[project]\nname = "x"\nversion = "1.0.0"\n', encoding="utf-8"
        )

        with patch("nextsemver.config.Path.cwd", return_value=tmp_path):
            assert discover_config_file() is None

    def test_no_config(self, tmp_path: Path) -> None:
        with patch("nextsemver.config.Path.cwd", return_value=tmp_path):
            assert discover_config_file() is None


@pytest.mark.unit
class TestPyprojectHasSection:
    """Tests for _pyproject_has_nextsemver_section."""

    def test_section_present(self, tmp_path: Path) -> None:
        path = tmp_path / "pyproject.toml"
        path.write_text("[tool.nextsemver]\n", encoding="utf-8")

        assert _pyproject_has_nextsemver_section(path) is True

    def test_other_tool(self, tmp_path: Path) -> None:
        path = tmp_path / "pyproject.toml"
        path.write_text("[tool.black]\n", encoding="utf-8")

        assert _pyproject_has_nextsemver_section(path) is False

    def test_invalid_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "pyproject.toml"
        path.write_text("[tool\n", encoding="utf-8")

        assert _pyproject_has_nextsemver_section(path) is False


@pytest.mark.unit
class TestReadToml:
    """Tests for _read_toml."""

    def test_valid(self, tmp_path: Path) -> None:
        path = tmp_path / "x.toml"
        path.write_text('a = "b"\n', encoding="utf-8")

        assert _read_toml(path) == {"a": "b"}

    def test_invalid(self, tmp_path: Path) -> None:
        path = tmp_path / "x.toml"
        path.write_text("a = \n", encoding="utf-8")

        with pytest.raises(ConfigError, match="Invalid TOML"):
            _read_toml(path)

    def test_unreadable(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="Cannot read"):
            _read_toml(tmp_path / "missing.toml")


@pytest.mark.unit
class TestLoadConfig:
    """Tests for load_config."""

    def test_defaults_without_file(self, tmp_path: Path) -> None:
        with patch("nextsemver.config.Path.cwd", return_value=tmp_path):
            config = load_config()

        assert config == NextSemverConfig()

    def test_loads_nextsemver_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "nextsemver.toml"
        path.write_text(
            "[nextsemver]\n"
            'package_root = "web"\n'
            'tag_prefix = "web-v"\n'
            "write_manifest = true\n"
            'outputs = ["version", "manifest"]\n'
            "timeout = 5\n",
            encoding="utf-8",
        )

        config = load_config(path)

        assert config.package_root == "web"
        assert config.tag_prefix == "web-v"
        assert config.write_manifest is True
        assert config.outputs == ("version", "manifest")
        assert config.timeout == 5
        assert config.source_path == path.resolve()

    def test_loads_pyproject_section(self, tmp_path: Path) -> None:
        path = tmp_path / "pyproject.toml"
        path.write_text('[tool.nextsemver]\ntag_suffix = "-api"\n', encoding="utf-8")

        assert load_config(path).tag_suffix == "-api"

    def test_empty_section_uses_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "nextsemver.toml"
        path.write_text("[nextsemver]\n", encoding="utf-8")

        config = load_config(path)

        assert config.tag_prefix == ""
        assert config.source_path == path.resolve()

    def test_non_table_section(self, tmp_path: Path) -> None:
        path = tmp_path / "nextsemver.toml"
        path.write_text('nextsemver = "v"\n', encoding="utf-8")

        with pytest.raises(ConfigError, match="must be a table"):
            load_config(path)


@pytest.mark.unit
class TestParseSection:
    """Tests for _parse_section validation."""

    def test_unknown_key(self) -> None:
        with pytest.raises(ConfigError, match="Unknown configuration keys: colour"):
            _parse_section({"colour": True}, config_path="x.toml")

    def test_string_option_type(self) -> None:
        with pytest.raises(ConfigError, match="tag_prefix must be a string") as exc_info:
            _parse_section({"tag_prefix": 1}, config_path="x.toml")

        assert exc_info.value.option == "tag_prefix"

    def test_write_manifest_type(self) -> None:
        with pytest.raises(ConfigError, match="boolean"):
            _parse_section({"write_manifest": "yes"}, config_path="x.toml")

    @pytest.mark.parametrize("value", [0, -1, True, "10"])
    def test_invalid_timeout(self, value: object) -> None:
        with pytest.raises(ConfigError, match="timeout"):
            _parse_section({"timeout": value}, config_path="x.toml")

    def test_api_url(self) -> None:
        config = _parse_section({"api_url": "https://ghe/api/v3"}, config_path="x.toml")

        assert config.api_url == "https://ghe/api/v3"


@pytest.mark.unit
class TestValidateOutputs:
    """Tests for validate_outputs."""

    def test_deduplicates_in_order(self) -> None:
        assert validate_outputs(["tag", "version", "tag"]) == ("tag", "version")

    def test_unknown_name(self) -> None:
        with pytest.raises(ConfigError, match="Unknown output 'notes'"):
            validate_outputs(["version", "notes"])

    def test_string_rejected(self) -> None:
        with pytest.raises(ConfigError, match="must be a list"):
            validate_outputs("version")

    def test_empty_rejected(self) -> None:
        with pytest.raises(ConfigError, match="at least one"):
            validate_outputs([])


@pytest.mark.unit
class TestBuildRunConfiguration:
    """Tests for build_run_configuration precedence."""

    def test_environment_values(self, tmp_path: Path) -> None:
        environ = {
            "GITHUB_WORKSPACE": str(tmp_path),
            "GITHUB_REPOSITORY": "octo/app",
            "GITHUB_TOKEN": "t",
        }

        config = build_run_configuration(NextSemverConfig(), environ)

        assert config.workspace == tmp_path
        assert config.repository == "octo/app"
        assert config.token == "t"
        assert config.api_url == "https://api.github.com"
        assert config.outputs == ("version", "tag")

    def test_workspace_defaults_to_cwd(self, tmp_path: Path) -> None:
        with patch("nextsemver.config.Path.cwd", return_value=tmp_path):
            config = build_run_configuration(NextSemverConfig(), {})

        assert config.workspace == tmp_path
        assert config.token is None
        assert config.repository is None

    def test_empty_token_is_missing(self, tmp_path: Path) -> None:
        environ = {"GITHUB_WORKSPACE": str(tmp_path), "GITHUB_TOKEN": ""}

        assert build_run_configuration(NextSemverConfig(), environ).token is None

    def test_cli_overrides_file(self, tmp_path: Path) -> None:
        file_config = NextSemverConfig(
            package_root="web", tag_prefix="web-v", write_manifest=True, outputs=("version",)
        )

        config = build_run_configuration(
            file_config,
            {"GITHUB_WORKSPACE": str(tmp_path)},
            tag_prefix="v",
            write_manifest=False,
            outputs=["tag"],
        )

        assert config.package_root == "web"
        assert config.tag_prefix == "v"
        assert config.write_manifest is False
        assert config.outputs == ("tag",)

    def test_empty_cli_string_overrides_file(self, tmp_path: Path) -> None:
        file_config = NextSemverConfig(tag_prefix="v")

        config = build_run_configuration(
            file_config, {"GITHUB_WORKSPACE": str(tmp_path)}, tag_prefix=""
        )

        assert config.tag_prefix == ""

    def test_repository_option_over_environment(self, tmp_path: Path) -> None:
        environ = {"GITHUB_WORKSPACE": str(tmp_path), "GITHUB_REPOSITORY": "octo/app"}

        config = build_run_configuration(NextSemverConfig(), environ, repository="other/lib")

        assert config.repository == "other/lib"

    def test_api_url_environment_over_file(self, tmp_path: Path) -> None:
        file_config = NextSemverConfig(api_url="https://file.example.com/api")
        environ = {
            "GITHUB_WORKSPACE": str(tmp_path),
            "GITHUB_API_URL": "https://ghe.example.com/api/v3/",
        }

        config = build_run_configuration(file_config, environ)

        assert config.api_url == "https://ghe.example.com/api/v3"

    def test_api_url_from_file(self, tmp_path: Path) -> None:
        file_config = NextSemverConfig(api_url="https://file.example.com/api")

        config = build_run_configuration(file_config, {"GITHUB_WORKSPACE": str(tmp_path)})

        assert config.api_url == "https://file.example.com/api"

    def test_invalid_cli_outputs(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError):
            build_run_configuration(
                NextSemverConfig(), {"GITHUB_WORKSPACE": str(tmp_path)}, outputs=["nope"]
            )
