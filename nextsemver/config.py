"""Configuration loading for nextsemver.

Handles discovery, loading, parsing, and validation of configuration files,
and assembles the final :class:`RunConfiguration` handed to the core.
Supports two file formats:

- ``nextsemver.toml`` — settings under ``[nextsemver]`` table
- ``pyproject.toml`` — settings under ``[tool.nextsemver]`` table

Discovery order:

1. Explicit path from ``--config`` or ``NEXTSEMVER_CONFIG``
2. ``nextsemver.toml`` in current directory
3. ``pyproject.toml`` with ``[tool.nextsemver]`` section

Configuration precedence: defaults < config file < environment < CLI args.

Typical usage::

    file_config = load_config()
    run_config = build_run_configuration(file_config, os.environ, tag_prefix="v")

Example (``nextsemver.toml``)::

    [nextsemver]
    package_root = "web"
    tag_prefix = "web-v"
    write_manifest = true
    outputs = ["version", "tag", "manifest"]
"""

from __future__ import annotations


import tomli as tomllib
from pathlib import Path
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from nextsemver.exceptions import ConfigError
from nextsemver.utils.logger import get_logger
from nextsemver.constants import (
    DEFAULT_OUTPUTS,
    DEFAULT_TIMEOUT,
    ENV_API_URL,
    ENV_REPOSITORY,
    ENV_TOKEN,
    ENV_WORKSPACE,
    GITHUB_API_URL,
    OUTPUT_NAMES,
)

logger = get_logger("config")


@dataclass
class NextSemverConfig:
    """Settings read from ``nextsemver.toml`` or ``pyproject.toml``.

    All fields have defaults, so empty config files are valid.

    Attributes:
        package_root: Directory holding the manifest, relative to the
            workspace.
        tag_prefix: String prepended to every managed tag.
        tag_suffix: String appended to every managed tag.
        write_manifest: Write the resolved version back into the manifest.
        outputs: Names of the outputs to emit.
        api_url: Base URL of the GitHub REST API.
        timeout: Release-host request timeout in seconds.
        source_path: Path to loaded config file, or ``None`` if using defaults.
    """

    package_root: str = "."
    tag_prefix: str = ""
    tag_suffix: str = ""
    write_manifest: bool = False
    outputs: Tuple[str, ...] = tuple(DEFAULT_OUTPUTS)
    api_url: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT

    # Metadata (not a user-facing option)
    source_path: Optional[Path] = field(default=None, repr=False)

    def to_log_dict(self) -> Dict[str, Any]:
        """Return configuration as dictionary for debug logging.

        Excludes ``source_path`` metadata.
        """
        return {
            "package_root": self.package_root,
            "tag_prefix": self.tag_prefix,
            "tag_suffix": self.tag_suffix,
            "write_manifest": self.write_manifest,
            "outputs": list(self.outputs),
            "api_url": self.api_url,
            "timeout": self.timeout,
        }


@dataclass(frozen=True)
class RunConfiguration:
    """Everything one run needs, gathered once from file, environment and CLI.

    The core never reads the process environment; it only sees this object.

    Attributes:
        workspace: Repository checkout root (``$GITHUB_WORKSPACE``).
        package_root: Manifest directory, relative to ``workspace``.
        tag_prefix: String prepended to every managed tag.
        tag_suffix: String appended to every managed tag.
        repository: ``owner/repo`` identity on the release host.
        token: Bearer token for the release host. Never logged.
        api_url: Base URL of the GitHub REST API.
        write_manifest: Write the resolved version back into the manifest.
        outputs: Names of the outputs to emit.
        timeout: Release-host request timeout in seconds.
    """

    workspace: Path
    package_root: str = "."
    tag_prefix: str = ""
    tag_suffix: str = ""
    repository: Optional[str] = None
    token: Optional[str] = field(default=None, repr=False)
    api_url: str = GITHUB_API_URL
    write_manifest: bool = False
    outputs: Tuple[str, ...] = tuple(DEFAULT_OUTPUTS)
    timeout: float = DEFAULT_TIMEOUT

    @property
    def manifest_dir(self) -> Path:
        """Directory searched for the manifest."""
        return self.workspace / self.package_root

    def owner_and_repo(self) -> Tuple[str, str]:
        """Split :attr:`repository` into ``(owner, repo)``.

        Raises:
            ConfigError: The repository is missing or not ``owner/repo``.
        """
        if not self.repository:
            raise ConfigError(
                f"Repository is not set; pass --repository or set {ENV_REPOSITORY}",
                option="repository",
            )

        owner, sep, repo = self.repository.strip().partition("/")
        if not sep or not owner or not repo or "/" in repo:
            raise ConfigError(
                f"Repository must be in 'owner/repo' form, got {self.repository!r}",
                option="repository",
            )
        return owner, repo

    def to_log_dict(self) -> Dict[str, Any]:
        """Return configuration as dictionary for debug logging.

        The token is reported only as present or absent.
        """
        return {
            "workspace": str(self.workspace),
            "package_root": self.package_root,
            "tag_prefix": self.tag_prefix,
            "tag_suffix": self.tag_suffix,
            "repository": self.repository,
            "token": "***" if self.token else None,
            "api_url": self.api_url,
            "write_manifest": self.write_manifest,
            "outputs": list(self.outputs),
            "timeout": self.timeout,
        }


def discover_config_file(explicit_path: Optional[Path] = None) -> Optional[Path]:
    """Find the configuration file to load.

    Search order:

    1. ``explicit_path`` (from ``--config`` or ``NEXTSEMVER_CONFIG``)
    2. ``nextsemver.toml`` in current directory
    3. ``pyproject.toml`` with ``[tool.nextsemver]`` section in current directory

    Args:
        explicit_path: Explicit config path. If provided, must exist.

    Returns:
        Resolved path to config file, or ``None`` if not found.

    Raises:
        ConfigError: Explicit path provided but does not exist.
    """
    if explicit_path is not None:
        resolved = explicit_path.resolve()
        if not resolved.is_file():
            raise ConfigError(
                f"Configuration file not found: {explicit_path}",
                config_path=str(explicit_path),
            )
        logger.debug("Using explicit config: %s", resolved)
        return resolved

    cwd = Path.cwd()

    nextsemver_toml = cwd / "nextsemver.toml"
    if nextsemver_toml.is_file():
        logger.debug("Found nextsemver.toml: %s", nextsemver_toml)
        return nextsemver_toml

    pyproject_toml = cwd / "pyproject.toml"
    if pyproject_toml.is_file():
        if _pyproject_has_nextsemver_section(pyproject_toml):
            logger.debug("Found [tool.nextsemver] in pyproject.toml: %s", pyproject_toml)
            return pyproject_toml

    logger.debug("No configuration file found")
    return None


def _pyproject_has_nextsemver_section(path: Path) -> bool:
    """Check if pyproject.toml contains a [tool.nextsemver] section.

    Parse errors are ignored here; a broken pyproject.toml is reported by
    the manifest reader if it is the manifest in use.
    """
    try:
        raw = _read_toml(path)
    except ConfigError:
        return False
    tool = raw.get("tool", {})
    return isinstance(tool, dict) and "nextsemver" in tool


def load_config(config_path: Optional[Path] = None) -> NextSemverConfig:
    """Load and validate the nextsemver configuration file.

    Args:
        config_path: Explicit path to config file. If ``None``, uses
            auto-discovery (see :func:`discover_config_file`).

    Returns:
        Validated :class:`NextSemverConfig` with values from file or defaults.

    Raises:
        ConfigError: File cannot be parsed, has unknown keys, or invalid values.
    """
    resolved = discover_config_file(config_path)

    if resolved is None:
        logger.debug("No config file found, using defaults")
        return NextSemverConfig()

    logger.info("Loading configuration from %s", resolved)
    raw = _read_toml(resolved)

    if resolved.name == "pyproject.toml":
        section = raw.get("tool", {}).get("nextsemver", {})
    else:
        section = raw.get("nextsemver", {})

    if not section:
        logger.debug("Config file found but no nextsemver section, using defaults")
        return NextSemverConfig(source_path=resolved)

    if not isinstance(section, dict):
        raise ConfigError(
            "nextsemver configuration must be a table",
            config_path=str(resolved),
        )

    config = _parse_section(section, config_path=str(resolved))
    config.source_path = resolved

    logger.debug("Loaded configuration: %s", config.to_log_dict())
    return config


def _read_toml(path: Path) -> Dict[str, Any]:
    """Read and parse a TOML file.

    Raises:
        ConfigError: File cannot be read or is invalid TOML.
    """
    try:
        with open(path, "rb") as fh:
            return tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(
            f"Invalid TOML in {path.name}: {exc}",
            config_path=str(path),
        ) from exc
    except OSError as exc:
        raise ConfigError(
            f"Cannot read configuration file {path}: {exc}",
            config_path=str(path),
        ) from exc


_STRING_OPTIONS = ("package_root", "tag_prefix", "tag_suffix", "api_url")


def _parse_section(
    section: Dict[str, Any],
    *,
    config_path: str,
) -> NextSemverConfig:
    """Parse and validate a ``[nextsemver]`` / ``[tool.nextsemver]`` table.

    Raises:
        ConfigError: Unknown keys or incorrect types.
    """
    config = NextSemverConfig()

    known_top = set(_STRING_OPTIONS) | {"write_manifest", "outputs", "timeout"}

    unknown_top = set(section.keys()) - known_top
    if unknown_top:
        raise ConfigError(
            f"Unknown configuration keys: {', '.join(sorted(unknown_top))}",
            config_path=config_path,
        )

    for option in _STRING_OPTIONS:
        if option in section:
            val = section[option]
            if not isinstance(val, str):
                raise ConfigError(
                    f"{option} must be a string, got {type(val).__name__}",
                    config_path=config_path,
                    option=option,
                )
            setattr(config, option, val)

    if "write_manifest" in section:
        val = section["write_manifest"]
        if not isinstance(val, bool):
            raise ConfigError(
                f"write_manifest must be a boolean, got {type(val).__name__}",
                config_path=config_path,
                option="write_manifest",
            )
        config.write_manifest = val

    if "outputs" in section:
        config.outputs = validate_outputs(section["outputs"], config_path=config_path)

    if "timeout" in section:
        val = section["timeout"]
        if isinstance(val, bool) or not isinstance(val, (int, float)) or val <= 0:
            raise ConfigError(
                f"timeout must be a positive number, got {val!r}",
                config_path=config_path,
                option="timeout",
            )
        config.timeout = val

    return config


def validate_outputs(
    value: Any,
    *,
    config_path: Optional[str] = None,
) -> Tuple[str, ...]:
    """Validate a list of output names, dropping duplicates in order.

    Raises:
        ConfigError: Not a list of known output names, or empty.
    """
    if isinstance(value, str) or not isinstance(value, (list, tuple)):
        raise ConfigError(
            f"outputs must be a list, got {type(value).__name__}",
            config_path=config_path,
            option="outputs",
        )

    names: Tuple[str, ...] = ()
    for item in value:
        if item not in OUTPUT_NAMES:
            raise ConfigError(
                f"Unknown output {item!r}; expected one of {', '.join(OUTPUT_NAMES)}",
                config_path=config_path,
                option="outputs",
            )
        if item not in names:
            names += (item,)

    if not names:
        raise ConfigError(
            "outputs must name at least one output",
            config_path=config_path,
            option="outputs",
        )
    return names


def build_run_configuration(
    file_config: NextSemverConfig,
    environ: Mapping[str, str],
    *,
    package_root: Optional[str] = None,
    tag_prefix: Optional[str] = None,
    tag_suffix: Optional[str] = None,
    repository: Optional[str] = None,
    write_manifest: Optional[bool] = None,
    outputs: Optional[Sequence[str]] = None,
) -> RunConfiguration:
    """Merge file settings, runner environment and CLI overrides.

    Keyword arguments left as ``None`` (or an empty ``outputs``) fall back
    to the file value. CLI options already fold in their ``INPUT_*``
    environment variables through click.

    Args:
        file_config: Settings loaded by :func:`load_config`.
        environ: Process environment (usually ``os.environ``).

    Returns:
        The run configuration handed to the pipeline.
    """
    workspace = environ.get(ENV_WORKSPACE) or str(Path.cwd())
    api_url = environ.get(ENV_API_URL) or file_config.api_url or GITHUB_API_URL

    return RunConfiguration(
        workspace=Path(workspace),
        package_root=_pick(package_root, file_config.package_root) or ".",
        tag_prefix=_pick(tag_prefix, file_config.tag_prefix),
        tag_suffix=_pick(tag_suffix, file_config.tag_suffix),
        repository=repository or environ.get(ENV_REPOSITORY) or None,
        token=environ.get(ENV_TOKEN) or None,
        api_url=api_url.rstrip("/"),
        write_manifest=_pick(write_manifest, file_config.write_manifest),
        outputs=validate_outputs(list(outputs)) if outputs else file_config.outputs,
        timeout=file_config.timeout,
    )


def _pick(override: Any, default: Any) -> Any:
    return default if override is None else override
