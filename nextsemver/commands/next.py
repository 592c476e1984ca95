"""Next command implementation for nextsemver.

Resolves the version and tag the calling pipeline should release next and
publishes them as step outputs.

The command runs the pipeline in :mod:`nextsemver.core.pipeline`, then
takes care of everything the pipeline deliberately does not do:

1. **Manifest write-back** — when ``--write-manifest`` is enabled, the
   resolved version is persisted into the manifest.
2. **Outputs** — ``version``, ``tag`` and ``manifest`` are emitted through
   :class:`~nextsemver.utils.outputs.OutputSink` (``$GITHUB_OUTPUT`` or
   stdout), only after every other step succeeded.
3. **Failure reporting** — nextsemver errors are reported with their own
   message, anything else with a fixed generic message.

Typical usage::

    # In a GitHub Actions step
    $ nextsemver next --tag-prefix v

    # Persist the version into package.json and expose its path
    $ nextsemver next --write-manifest -o version -o tag -o manifest

    # Inspect the decision locally
    $ GITHUB_TOKEN=... nextsemver -vv next --repository octo/app --format table
"""

from __future__ import annotations

import os
import sys
import json
import click
import asyncio
from pathlib import Path
from typing import Optional, Tuple

from nextsemver.models import Resolution
from nextsemver.core import run_pipeline, write_manifest_version
from nextsemver.exceptions import NextSemverError
from nextsemver.context import pass_context, NextSemverContext
from nextsemver.config import RunConfiguration, build_run_configuration
from nextsemver.constants import GENERIC_FAILURE_MESSAGE, OUTPUT_NAMES
from nextsemver.utils import (
    OutputSink,
    get_logger,
    print_error,
    print_success,
    print_table,
    print_warning,
)

logger = get_logger("commands.next")


@click.command(name="next")
@click.option(
    "--package-root",
    type=str,
    default=None,
    envvar="INPUT_PACKAGE_ROOT",
    help="Directory holding the manifest, relative to the workspace.",
)
@click.option(
    "--tag-prefix",
    type=str,
    default=None,
    envvar="INPUT_TAG_PREFIX",
    help="String prepended to every release tag (e.g. 'v').",
)
@click.option(
    "--tag-suffix",
    type=str,
    default=None,
    envvar="INPUT_TAG_SUFFIX",
    help="String appended to every release tag.",
)
@click.option(
    "--repository",
    type=str,
    default=None,
    envvar="INPUT_REPOSITORY",
    help="Repository as owner/repo. Defaults to $GITHUB_REPOSITORY.",
)
@click.option(
    "--write-manifest/--no-write-manifest",
    default=None,
    envvar="INPUT_WRITE_MANIFEST",
    help="Write the resolved version back into the manifest.",
)
@click.option(
    "--output",
    "-o",
    "outputs",
    multiple=True,
    type=click.Choice(list(OUTPUT_NAMES), case_sensitive=False),
    envvar="INPUT_OUTPUTS",
    help="Output to emit (repeatable). Defaults to version and tag.",
)
@click.option(
    "--format",
    "-f",
    type=click.Choice(["plain", "json", "table"], case_sensitive=False),
    default="plain",
    help="How to report the result on the terminal.",
)
@pass_context
def next_version(
    ctx: NextSemverContext,
    package_root: Optional[str],
    tag_prefix: Optional[str],
    tag_suffix: Optional[str],
    repository: Optional[str],
    write_manifest: Optional[bool],
    outputs: Tuple[str, ...],
    format: str,
) -> None:
    """Resolve the next release version and tag.

    Reads the version declared in ``package.json`` or ``pyproject.toml``
    and compares it with the latest GitHub release. If the latest release
    is at or above the declared version, the next version is the latest
    release with its patch number bumped; otherwise the declared version
    is used.

    Requires ``GITHUB_TOKEN`` in the environment.

    Exits:
        0 on success, 1 if the version could not be resolved.
    """
    sink = OutputSink.from_environ()

    try:
        config = build_run_configuration(
            ctx.config,
            os.environ,
            package_root=package_root,
            tag_prefix=tag_prefix,
            tag_suffix=tag_suffix,
            repository=repository,
            write_manifest=write_manifest,
            outputs=[name.lower() for name in outputs],
        )
        resolution = asyncio.run(run_pipeline(config))
        manifest_path = publish(resolution, config, sink, format=format)

    except NextSemverError as e:
        sink.discard()
        logger.debug("Failure details: %s", e.details or "<none>")
        sink.fail(e.message)
        print_error(e.message)
        sys.exit(1)
    except Exception:
        sink.discard()
        logger.debug("Error in next command", exc_info=True)
        sink.fail(GENERIC_FAILURE_MESSAGE)
        print_error(GENERIC_FAILURE_MESSAGE)
        sys.exit(1)

    if format == "plain":
        note = "" if resolution.has_previous_release else " (no previous release)"
        print_success(f"Next release: {resolution.tag}{note}")
        if manifest_path is not None:
            print_success(f"Updated {manifest_path}")


# ---------------------------------------------------------------------------
# Publishing
# ---------------------------------------------------------------------------


def publish(
    resolution: Resolution,
    config: RunConfiguration,
    sink: OutputSink,
    *,
    format: str = "plain",
) -> Optional[Path]:
    """Write the manifest back (if enabled) and emit the configured outputs.

    Nothing is emitted if the write-back fails, and the manifest is left
    untouched when the output file cannot be written.

    Returns:
        Path of the updated manifest, or ``None`` when write-back is off.
    """
    manifest_path: Optional[Path] = None
    if config.write_manifest:
        sink.ensure_writable()
        manifest_path = write_manifest_version(
            resolution.manifest, str(resolution.next_version)
        )

    for name in config.outputs:
        if name == "version":
            sink.emit("version", str(resolution.next_version))
        elif name == "tag":
            sink.emit("tag", resolution.tag)
        elif manifest_path is not None:
            sink.emit("manifest", str(manifest_path))
        else:
            message = "Output 'manifest' requested but write-back is disabled"
            print_warning(message)
            sink.warn(message)

    if format == "json":
        _display_json(resolution, manifest_path)
        if sink.output_file is None:
            # The JSON document already carries every value
            sink.discard()
    elif format == "table":
        _display_table(resolution)

    sink.flush()
    return manifest_path


def _display_json(resolution: Resolution, manifest_path: Optional[Path]) -> None:
    data = resolution.to_json()
    data["manifest_written"] = manifest_path is not None
    click.echo(json.dumps(data, indent=2))


def _display_table(resolution: Resolution) -> None:
    """Render the decision as a two-column table."""
    rows = [
        {"Field": "Manifest", "Value": str(resolution.manifest.path)},
        {"Field": "Declared version", "Value": str(resolution.declared)},
        {
            "Field": "Latest release",
            "Value": resolution.latest_tag or "(none)",
        },
        {"Field": "Latest version", "Value": str(resolution.latest)},
        {
            "Field": "Decision",
            "Value": "patch bump" if resolution.is_bumped else "declared version",
        },
        {"Field": "Next version", "Value": str(resolution.next_version)},
        {"Field": "Tag", "Value": resolution.tag},
    ]
    print_table(
        rows,
        headers=["Field", "Value"],
        title="Next Release",
        column_styles={"Field": {"style": "bold"}, "Value": {"style": "cyan"}},
    )
