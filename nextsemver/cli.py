"""
Command-line interface for nextsemver.

The ``nextsemver`` group owns the options shared by every command
(configuration file, verbosity, color), sets up logging for the current
environment and loads the configuration file into a
:class:`~nextsemver.context.NextSemverContext`. Commands live in
:mod:`nextsemver.commands`.
"""

from __future__ import annotations

import os
import sys
import logging
from pathlib import Path
from typing import Optional

import click

from nextsemver.config import load_config
from nextsemver.__version__ import __version__
from nextsemver.context import NextSemverContext
from nextsemver.constants import GENERIC_FAILURE_MESSAGE
from nextsemver.exceptions import ConfigError, NextSemverError
from nextsemver.commands.next import next_version
from nextsemver.utils.console import print_error, print_warning, reconfigure_console
from nextsemver.utils.logger import (
    get_logger,
    in_github_actions,
    runner_debug_enabled,
    setup_logging,
)

logger = get_logger("cli")

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130


def _log_level(verbose: int) -> int:
    if verbose >= 2:
        return logging.DEBUG
    if verbose == 1:
        return logging.INFO
    return logging.WARNING


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    envvar="NEXTSEMVER_CONFIG",
    help="Configuration file (default: nextsemver.toml or [tool.nextsemver]).",
)
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (-v info, -vv debug). RUNNER_DEBUG=1 implies -vv.",
)
@click.option(
    "--color/--no-color",
    default=True,
    envvar="NEXTSEMVER_COLOR",
    help="Enable or disable colored terminal output.",
)
@click.version_option(
    version=__version__,
    prog_name="nextsemver",
    message="%(prog)s %(version)s",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config: Optional[Path],
    verbose: int,
    color: bool,
) -> None:
    """Compute the next release version and tag in CI.

    \b
    Commands:
      nextsemver next        Resolve and publish the next version

    \b
    Examples:
      nextsemver next --tag-prefix v
      nextsemver next --package-root web --write-manifest
      nextsemver -vv next --repository octo/app --format table
    """
    if runner_debug_enabled():
        verbose = max(verbose, 2)

    if not color:
        os.environ["NO_COLOR"] = "1"
        reconfigure_console()

    setup_logging(
        level=_log_level(verbose),
        verbose=verbose > 1,
        actions=in_github_actions(),
    )
    logger.debug("nextsemver v%s (verbosity %d)", __version__, verbose)

    try:
        file_config = load_config(config)
    except ConfigError as exc:
        print_error(exc.message)
        logger.debug("Failure details: %s", exc.details)
        ctx.exit(EXIT_FAILURE)

    state = ctx.ensure_object(NextSemverContext)
    state.config_path = file_config.source_path
    state.verbose = verbose
    state.color = color
    state.config = file_config


cli.add_command(next_version)


def main() -> int:
    """Run the CLI and translate the outcome into a process exit code.

    Returns:
        0 on success, 1 when the run failed, 2 on usage errors and 130 when
        interrupted.
    """
    try:
        result = cli.main(prog_name="nextsemver", standalone_mode=False)
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except (click.Abort, KeyboardInterrupt):
        print_warning("Interrupted")
        return EXIT_INTERRUPTED
    except NextSemverError as exc:
        print_error(exc.message)
        logger.debug("Failure details: %s", exc.details, exc_info=True)
        return EXIT_FAILURE
    except Exception:
        logger.debug("Unhandled exception", exc_info=True)
        print_error(GENERIC_FAILURE_MESSAGE)
        return EXIT_FAILURE

    # click returns the exit code of ctx.exit() and --help in this mode
    return result if isinstance(result, int) else EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
