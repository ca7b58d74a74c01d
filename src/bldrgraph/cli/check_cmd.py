"""``bldr-graph check <name>`` -- Validate the latest dependencies of a package.

Resolves NAME, moves each direct dependency to its latest version, walks
the resulting dependency closure and reports every short name for which
two different identifiers are in use.

Exit Codes:
    0 -- No conflicts found.
    1 -- One or more conflicts found (or the package store failed to load).
    2 -- The root package was not found.
"""

from __future__ import annotations

import json
import sys

import click

from bldrgraph.cli import commands
from bldrgraph.cli.session import open_session
from bldrgraph.config import Config
from bldrgraph.core.check import check_conflicts
from bldrgraph.core.report import CheckReport


def _report_to_json(report: CheckReport) -> dict:
    """Convert a check report to a JSON-serializable dict."""
    return {
        "root": report.root,
        "root_found": report.root_found,
        "filter": report.origin_filter,
        "updates": [
            {"original": u.original, "latest": u.latest} for u in report.updates
        ],
        "conflicts": [
            {"ident": c.ident, "recorded": c.recorded, "found": c.found}
            for c in report.conflicts
        ],
        "missing": [m.ident for m in report.missing],
        "cycles": [list(c.path) for c in report.cycles],
        "elapsed": report.elapsed,
    }


@click.command("check")
@click.argument("name")
@click.option(
    "--filter", "-f", "origin_filter",
    default="",
    help="Only consider dependencies starting with this origin prefix.",
)
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text).",
)
@click.pass_obj
def check_command(config: Config, name: str, origin_filter: str, output_format: str) -> None:
    """Validate the latest dependencies for NAME (origin/name or full identifier).

    Exit code 0 if no conflicts, 1 if conflicts exist, 2 if NAME is unknown.
    """
    session = open_session(config, announce=False, origin_filter=origin_filter)

    if output_format == "json":
        report = check_conflicts(session.store, session.graph, name.lower(), origin_filter)
        click.echo(json.dumps(_report_to_json(report), indent=2))
    else:
        report = commands.do_check(session, name.lower())

    if not report.root_found:
        sys.exit(2)
    sys.exit(1 if report.has_conflicts else 0)
