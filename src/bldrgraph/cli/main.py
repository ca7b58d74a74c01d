"""bldr-graph CLI: explore a package graph and check it for version conflicts.

Entry point for the ``bldr-graph`` command-line tool. Without a subcommand
it loads the package store, builds the graph and starts the interactive
shell. Subcommands run a single query and exit.

Commands:
    shell    Start the interactive shell (the default).
    stats    Print graph statistics.
    top      Packages with the most reverse dependencies.
    find     Search latest identifiers.
    resolve  Latest identifier of ``origin/name``.
    rdeps    Transitive reverse dependencies.
    deps     Direct dependencies.
    check    Validate the latest dependencies of a package.
    export   Write latest identifiers to a file.

Usage::

    bldr-graph --config bldr-graph.toml
    bldr-graph -c bldr-graph.toml check core/openssl
    bldr-graph -c bldr-graph.toml --log-level debug rdeps core/zlib 50
"""

from __future__ import annotations

import logging
import sys

import click

from bldrgraph import __version__
from bldrgraph.cli.check_cmd import check_command
from bldrgraph.cli.query_cmd import (
    deps_command,
    export_command,
    find_command,
    rdeps_command,
    resolve_command,
    stats_command,
    top_command,
)
from bldrgraph.cli.session import open_session
from bldrgraph.cli.shell import run_shell
from bldrgraph.config import Config
from bldrgraph.exceptions import ConfigError

LOG_LEVELS = ("debug", "info", "warning", "error", "critical")


def setup_logging(level_name: str) -> None:
    """Configure root logging for the CLI."""
    level = getattr(logging, level_name.upper(), logging.WARNING)
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def load_config(config_path: str | None) -> Config:
    """Load the configuration file, or defaults when none is given."""
    if config_path is None:
        return Config()
    try:
        return Config.from_file(config_path)
    except ConfigError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)


@click.group(invoke_without_command=True)
@click.version_option(version=__version__)
@click.option(
    "--config", "-c", "config_path",
    type=click.Path(exists=True, dir_okay=False),
    envvar="BLDR_GRAPH_CONFIG",
    default=None,
    help="Path to the TOML configuration file.",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Logging level (default: log_level from the config, else warning).",
)
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, log_level: str | None) -> None:
    """bldr-graph: package graph dev tool.

    Explore a package dependency graph and check packages for transitive
    version conflicts. Runs the interactive shell when no command is given.
    """
    config = load_config(config_path)
    setup_logging(log_level or config.log_level)
    ctx.obj = config

    if ctx.invoked_subcommand is None:
        ctx.invoke(shell_command)


@click.command("shell")
@click.pass_obj
def shell_command(config: Config) -> None:
    """Start the interactive shell."""
    session = open_session(config, announce=True)
    run_shell(session)


# Register all subcommands
cli.add_command(shell_command)
cli.add_command(stats_command)
cli.add_command(top_command)
cli.add_command(find_command)
cli.add_command(resolve_command)
cli.add_command(rdeps_command)
cli.add_command(deps_command)
cli.add_command(check_command)
cli.add_command(export_command)
