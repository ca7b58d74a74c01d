"""Report events and text rendering for dependency checks.

A check produces an ordered list of events in the order they are
discovered. Nothing is deduplicated: a conflict reached through two paths
is reported twice. ``CheckReport.lines()`` renders the events as the text
printed by the ``check`` command.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DependencyUpdate:
    """A direct dependency of the root and the latest version it resolves to."""

    original: str
    latest: str

    def lines(self) -> list[str]:
        return [f"{self.original} -> {self.latest}"]


@dataclass(frozen=True)
class Conflict:
    """Two identifiers recorded for the same short name within one check.

    Attributes:
        ident: The package being walked when the disagreement was found.
        recorded: The identifier the ledger already holds for the short name.
        found: The dependency identifier declared by ``ident``.
    """

    ident: str
    recorded: str
    found: str

    def lines(self) -> list[str]:
        return [f"Conflict: {self.ident}", f"  {self.recorded}", f"  {self.found}"]


@dataclass(frozen=True)
class MissingPackage:
    """A package reached during the walk that the store does not have."""

    ident: str

    def lines(self) -> list[str]:
        return [f"No matching package found for {self.ident}"]


@dataclass(frozen=True)
class CycleDetected:
    """A dependency edge leading back onto the current walk path."""

    path: tuple[str, ...]

    def lines(self) -> list[str]:
        return [f"Cycle: {' -> '.join(self.path)}"]


ReportEvent = Union[DependencyUpdate, Conflict, MissingPackage, CycleDetected]


# ---------------------------------------------------------------------------
# CheckReport
# ---------------------------------------------------------------------------


@dataclass
class CheckReport:
    """Result of one conflict check.

    Attributes:
        root: The root identifier after name resolution.
        origin_filter: Prefix every considered dependency had to match.
        root_found: False if the root package was not in the store.
        events: Report events in discovery order.
        elapsed: Wall-clock duration of the check in seconds.
    """

    root: str
    origin_filter: str = ""
    root_found: bool = False
    events: list[ReportEvent] = field(default_factory=list)
    elapsed: float = 0.0

    @property
    def updates(self) -> list[DependencyUpdate]:
        return [e for e in self.events if isinstance(e, DependencyUpdate)]

    @property
    def conflicts(self) -> list[Conflict]:
        return [e for e in self.events if isinstance(e, Conflict)]

    @property
    def missing(self) -> list[MissingPackage]:
        return [e for e in self.events if isinstance(e, MissingPackage)]

    @property
    def cycles(self) -> list[CycleDetected]:
        return [e for e in self.events if isinstance(e, CycleDetected)]

    @property
    def has_conflicts(self) -> bool:
        return any(isinstance(e, Conflict) for e in self.events)

    def render(self) -> list[tuple[ReportEvent | None, str]]:
        """Render the report as ``(event, line)`` pairs.

        Each line is paired with the event that produced it, or None for
        headings, blank separators and the elapsed time.
        """
        out: list[tuple[ReportEvent | None, str]] = []
        if not self.root_found:
            out.append((None, "No matching package found"))
        else:
            if self.origin_filter:
                out.append((None, f"Checks filtered by: {self.origin_filter}"))
                out.append((None, ""))
            out.append((None, "Dependency version updates:"))
            for update in self.updates:
                out.extend((update, line) for line in update.lines())
            out.append((None, ""))
            for event in self.events:
                if not isinstance(event, DependencyUpdate):
                    out.extend((event, line) for line in event.lines())
        out.append((None, ""))
        out.append((None, f"Time: {format_elapsed(self.elapsed)} sec"))
        return out

    def lines(self) -> list[str]:
        """Render the report as output lines, ending with the elapsed time."""
        return [line for _, line in self.render()]


def format_elapsed(seconds: float) -> str:
    """Format a duration the way every command reports timings."""
    return f"{seconds:.3f}"
