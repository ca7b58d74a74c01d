"""Rich output formatting helpers for the bldr-graph CLI.

Tabular results (graph statistics, reverse-dependency rankings) are drawn
with Rich tables; everything else is plain text so it can be grepped and
diffed.
"""

from __future__ import annotations

from rich.console import Console
from rich.table import Table
from rich.text import Text

from bldrgraph.core.graph import GraphStats
from bldrgraph.core.report import CheckReport, Conflict, CycleDetected, MissingPackage

_EVENT_STYLES: dict[type, str] = {
    Conflict: "bold red",
    MissingPackage: "yellow",
    CycleDetected: "magenta",
}

console = Console(highlight=False)


def event_style(event: object) -> str:
    """Return the Rich style string for a check report event."""
    return _EVENT_STYLES.get(type(event), "")


def print_stats(stats: GraphStats) -> None:
    """Print graph statistics as a two-column table.

    Args:
        stats: Statistics from ``PackageGraph.stats()``.
    """
    table = Table(title="Graph Statistics", show_header=False)
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")
    table.add_row("Node count", str(stats.node_count))
    table.add_row("Edge count", str(stats.edge_count))
    table.add_row("Connected components", str(stats.connected_comp))
    cyclic = Text("true", style="bold red") if stats.is_cyclic else Text("false", style="green")
    table.add_row("Is cyclic", cyclic)
    console.print(table)


def print_top(items: list[tuple[str, int]]) -> None:
    """Print the reverse-dependency ranking from ``PackageGraph.top()``."""
    if not items:
        console.print("[dim]Graph is empty.[/dim]")
        return

    table = Table(title="Most Reverse Dependencies", show_header=True, header_style="bold")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Package", style="bold")
    table.add_column("Reverse deps", justify="right")
    for rank, (name, count) in enumerate(items, start=1):
        table.add_row(str(rank), name, str(count))
    console.print(table)


def print_check_report(report: CheckReport) -> None:
    """Print a check report, colouring conflicts, missing packages and cycles.

    Line content is exactly ``report.lines()``; each line takes the style of
    the event that produced it.
    """
    for event, line in report.render():
        console.print(Text(line, style=event_style(event)), soft_wrap=True)
