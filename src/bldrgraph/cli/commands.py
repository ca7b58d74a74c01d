"""Command implementations shared by the interactive shell and the subcommands.

Each ``do_*`` function runs one query against a ``Session`` and prints its
result. Timings are wall-clock seconds.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path

import click

from bldrgraph.cli.output import print_check_report, print_stats, print_top
from bldrgraph.cli.session import Session
from bldrgraph.core.check import check_conflicts, dependencies
from bldrgraph.core.report import CheckReport, format_elapsed

logger = logging.getLogger(__name__)

HELP_TEXT = """\
Commands:
  help                    Print this message
  stats                   Print graph statistics
  top     [<count>]       Print nodes with the most reverse dependencies
  filter  [<origin>]      Filter outputs to the specified origin
  resolve <name>          Find the most recent version of the package 'origin/name'
  find    <term> [<max>]  Find packages that match the search term, up to max items
  rdeps   <name> [<max>]  Print the reverse dependencies for the package, up to max
  deps    <name>|<ident>  Print the forward dependencies for the package
  check   <name>|<ident>  Validate the latest dependencies for the package
  export  <filename>      Export data from graph to specified file
  exit                    Exit the application
"""


def do_help() -> None:
    click.echo(HELP_TEXT)


def do_stats(session: Session) -> None:
    print_stats(session.graph.stats())


def do_top(session: Session, count: int = 10) -> None:
    start = time.perf_counter()
    top = session.graph.top(count)
    elapsed = time.perf_counter() - start

    click.echo(f"OK: {len(top)} items ({format_elapsed(elapsed)} sec)\n")
    print_top(top)
    click.echo()


def do_filter(session: Session, origin: str | None) -> None:
    """Set or clear the session's origin filter."""
    if origin:
        session.origin_filter = origin
        click.echo(f"New filter: {origin}\n")
    else:
        session.origin_filter = ""
        click.echo("Removed filter\n")


def do_find(session: Session, phrase: str, max_items: int = 10) -> None:
    start = time.perf_counter()
    found = session.graph.search(phrase)
    elapsed = time.perf_counter() - start

    click.echo(f"OK: {len(found)} items ({format_elapsed(elapsed)} sec)\n")
    if not found:
        click.echo("No matching packages found")
    for ident in found[:max_items]:
        click.echo(ident)
    click.echo()


def do_resolve(session: Session, name: str) -> None:
    start = time.perf_counter()
    result = session.graph.resolve(name)
    elapsed = time.perf_counter() - start

    click.echo(f"OK: ({format_elapsed(elapsed)} sec)\n")
    click.echo(result if result is not None else "No matching packages found")
    click.echo()


def do_rdeps(session: Session, name: str, max_items: int = 10) -> None:
    """Print transitive reverse dependencies whose short name matches the filter."""
    origin_filter = session.origin_filter
    start = time.perf_counter()
    rdeps = session.graph.rdeps(name)
    elapsed = time.perf_counter() - start

    if rdeps is None:
        click.echo("No entries found\n")
        return

    filtered = [(s, ident) for s, ident in rdeps if s.startswith(origin_filter)]
    click.echo(f"OK: {len(filtered)} items ({format_elapsed(elapsed)} sec)\n")
    if origin_filter:
        click.echo(f"Results filtered by: {origin_filter}")
    for short, ident in filtered[:max_items]:
        click.echo(f"{short} ({ident})")
    click.echo()


def do_deps(session: Session, name: str) -> None:
    """Print the direct dependencies of a package, resolving short names first."""
    origin_filter = session.origin_filter
    result = dependencies(session.store, session.graph, name, origin_filter)

    click.echo(f"Dependencies for: {result.ident}")
    if not result.found:
        click.echo("No matching package found\n")
        return

    click.echo(f"OK: {result.total} items ({format_elapsed(result.elapsed)} sec)\n")
    if origin_filter:
        click.echo(f"Results filtered by: {origin_filter}\n")
    for dep in result.deps:
        click.echo(dep)
    click.echo()


def do_check(session: Session, name: str) -> CheckReport:
    """Run a conflict check and print its report."""
    report = check_conflicts(session.store, session.graph, name, session.origin_filter)
    print_check_report(report)
    click.echo()
    return report


def do_export(session: Session, filename: str) -> int:
    """Write the latest identifier of every package matching the filter to *filename*.

    Returns:
        The number of identifiers written.
    """
    origin_filter = session.origin_filter
    start = time.perf_counter()
    latest = session.graph.latest()
    elapsed = time.perf_counter() - start
    click.echo(f"\nTime: {format_elapsed(elapsed)} sec\n")

    if origin_filter:
        click.echo(f"Checks filtered by: {origin_filter}\n")

    selected = [ident for ident in latest if ident.startswith(origin_filter)]
    path = Path(filename)
    with open(path, "w", encoding="utf-8") as f:
        for ident in selected:
            f.write(f"{ident}\n")
    logger.info("Exported %d identifiers to %s", len(selected), path)
    click.echo(f"Exported {len(selected)} items to {path}\n")
    return len(selected)
