"""One-shot query subcommands: ``stats``, ``top``, ``find``, ``resolve``,
``rdeps``, ``deps`` and ``export``.

Each loads the package store quietly, runs the same function the shell
verb runs, and exits.

Exit Codes:
    0 -- Query ran (including "nothing found" answers).
    1 -- The package store or config could not be loaded, or the export
         file could not be written.
"""

from __future__ import annotations

import sys

import click

from bldrgraph.cli import commands
from bldrgraph.cli.session import open_session
from bldrgraph.config import Config

filter_option = click.option(
    "--filter", "-f", "origin_filter",
    default="",
    help="Only show identifiers starting with this origin prefix.",
)


@click.command("stats")
@click.pass_obj
def stats_command(config: Config) -> None:
    """Print node, edge and component counts and whether the graph is cyclic."""
    commands.do_stats(open_session(config, announce=False))


@click.command("top")
@click.argument("count", type=click.IntRange(min=0), default=10)
@click.pass_obj
def top_command(config: Config, count: int) -> None:
    """Print the COUNT packages with the most reverse dependencies."""
    commands.do_top(open_session(config, announce=False), count)


@click.command("find")
@click.argument("term")
@click.argument("max_items", metavar="MAX", type=click.IntRange(min=0), default=10)
@click.pass_obj
def find_command(config: Config, term: str, max_items: int) -> None:
    """Find packages whose latest identifier contains TERM."""
    commands.do_find(open_session(config, announce=False), term.lower(), max_items)


@click.command("resolve")
@click.argument("name")
@click.pass_obj
def resolve_command(config: Config, name: str) -> None:
    """Print the latest identifier of the package NAME (origin/name)."""
    commands.do_resolve(open_session(config, announce=False), name.lower())


@click.command("rdeps")
@click.argument("name")
@click.argument("max_items", metavar="MAX", type=click.IntRange(min=0), default=10)
@filter_option
@click.pass_obj
def rdeps_command(config: Config, name: str, max_items: int, origin_filter: str) -> None:
    """Print packages that depend on NAME, directly or transitively."""
    session = open_session(config, announce=False, origin_filter=origin_filter)
    commands.do_rdeps(session, name.lower(), max_items)


@click.command("deps")
@click.argument("name")
@filter_option
@click.pass_obj
def deps_command(config: Config, name: str, origin_filter: str) -> None:
    """Print the direct dependencies of NAME (origin/name or full identifier)."""
    session = open_session(config, announce=False, origin_filter=origin_filter)
    commands.do_deps(session, name.lower())


@click.command("export")
@click.argument("filename", type=click.Path(dir_okay=False, writable=True))
@filter_option
@click.pass_obj
def export_command(config: Config, filename: str, origin_filter: str) -> None:
    """Write the latest identifier of every package to FILENAME."""
    session = open_session(config, announce=False, origin_filter=origin_filter)
    try:
        commands.do_export(session, filename)
    except OSError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)
