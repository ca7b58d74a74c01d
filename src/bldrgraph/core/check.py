"""Transitive dependency-conflict detection.

``check`` answers: "if every direct dependency of this package were moved to
its latest version, would the dependency closure still agree on one version
per package?" It works in two phases:

1. Each direct dependency of the root (matching the origin filter) is
   resolved to the latest identifier of its short name. These candidates
   seed a ``ConflictLedger`` and are reported as version updates.
2. Each candidate is walked depth-first. Every dependency edge met in the
   walk is checked against the ledger: the first identifier recorded for a
   short name wins, and any later, different identifier for that short name
   is reported as a conflict. The walk continues into the dependency either
   way.

The ledger is shared by the whole closure of one check and discarded at the
end. Packages missing from the store end only their own branch. The walk
keeps the identifiers on the current path and does not re-enter them, so
cyclic dependency data produces a ``CycleDetected`` event instead of an
endless walk; packages reached again through a different path (a diamond)
are walked and reported again. The walk keeps its own stack, so chain
depth is not limited by the interpreter recursion limit.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from bldrgraph.core.graph import PackageGraph
from bldrgraph.core.ident import PackageIdent
from bldrgraph.core.report import (
    CheckReport,
    Conflict,
    CycleDetected,
    DependencyUpdate,
    MissingPackage,
)
from bldrgraph.exceptions import IdentParseError, PackageNotFoundError

if TYPE_CHECKING:
    from bldrgraph.datastore import DataStore

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Name resolution
# ---------------------------------------------------------------------------


def resolve_name(graph: PackageGraph, name: str) -> str:
    """Resolve ``origin/name`` to the latest identifier known to the graph.

    Anything that is not a two-part short name (a fully qualified identifier,
    a partial ``origin/name/version``, or an unparseable string) is returned
    unchanged, as is a short name the graph does not know. Callers detect
    "no resolution happened" by comparing input and output.
    """
    try:
        ident = PackageIdent.parse(name)
    except IdentParseError:
        return name
    if ident.version is not None:
        return name
    return graph.resolve(ident.short_name) or name


# ---------------------------------------------------------------------------
# ConflictLedger
# ---------------------------------------------------------------------------


class ConflictLedger:
    """First-write-wins mapping from short name to identifier.

    The first identifier recorded for a short name is authoritative for the
    rest of the check; later identifiers never overwrite it.
    """

    def __init__(self) -> None:
        self._entries: dict[str, str] = {}

    def record(self, short_name: str, ident: str) -> str:
        """Record *ident* for *short_name* if absent.

        Returns:
            The identifier held for *short_name* after the call. It differs
            from *ident* exactly when the two disagree.
        """
        return self._entries.setdefault(short_name, ident)

    def get(self, short_name: str) -> str | None:
        return self._entries.get(short_name)

    def items(self) -> Iterator[tuple[str, str]]:
        return iter(self._entries.items())

    def __contains__(self, short_name: object) -> bool:
        return short_name in self._entries

    def __len__(self) -> int:
        return len(self._entries)


# ---------------------------------------------------------------------------
# ConflictChecker
# ---------------------------------------------------------------------------


class ConflictChecker:
    """Walks a package's dependency closure looking for version conflicts.

    Args:
        store: Source of each package's declared dependencies.
        graph: Source of the latest identifier per short name.
        origin_filter: Only dependency identifiers starting with this prefix
            are resolved, recorded, reported or followed. Empty matches all.
    """

    def __init__(
        self,
        store: DataStore,
        graph: PackageGraph,
        origin_filter: str = "",
    ) -> None:
        self._store = store
        self._graph = graph
        self._filter = origin_filter

    def check(self, name: str) -> CheckReport:
        """Check the package *name* (short name or full identifier).

        Returns:
            A ``CheckReport``. If the root package cannot be found the report
            has ``root_found=False`` and no events.
        """
        start = time.perf_counter()
        ledger = ConflictLedger()
        ident = resolve_name(self._graph, name)
        report = CheckReport(root=ident, origin_filter=self._filter)

        try:
            package = self._store.get_job_graph_package(ident)
        except PackageNotFoundError:
            logger.debug("Root package %s not found", ident)
            report.elapsed = time.perf_counter() - start
            return report
        report.root_found = True

        new_deps: list[str] = []
        for dep in package.get_deps():
            dep_ident = str(dep)
            if not dep_ident.startswith(self._filter):
                continue
            latest = resolve_name(self._graph, dep.short_name)
            ledger.record(dep.short_name, latest)
            new_deps.append(latest)
            report.events.append(DependencyUpdate(dep_ident, latest))

        for new_dep in new_deps:
            self._check_package(new_dep, ledger, report, [ident])

        report.elapsed = time.perf_counter() - start
        logger.debug(
            "Checked %s: %d conflicts, %d ledger entries",
            ident, len(report.conflicts), len(ledger),
        )
        return report

    def _check_package(
        self,
        start: str,
        ledger: ConflictLedger,
        report: CheckReport,
        path: list[str],
    ) -> None:
        """Walk the closure of *start* depth-first using an explicit stack.

        Each frame is ``(ident, dependency iterator)``; *path* holds the
        frame identifiers and is restored when the walk finishes.
        """
        stack: list[tuple[str, Iterator[PackageIdent]]] = []

        def enter(ident: str) -> None:
            try:
                package = self._store.get_job_graph_package(ident)
            except PackageNotFoundError:
                report.events.append(MissingPackage(ident))
                return
            path.append(ident)
            stack.append((ident, iter(package.get_deps())))

        enter(start)
        while stack:
            ident, deps = stack[-1]
            for dep in deps:
                dep_ident = str(dep)
                if not dep_ident.startswith(self._filter):
                    continue

                recorded = ledger.record(dep.short_name, dep_ident)
                if recorded != dep_ident:
                    report.events.append(Conflict(ident, recorded, dep_ident))

                if dep_ident in path:
                    cycle = tuple(path[path.index(dep_ident):]) + (dep_ident,)
                    logger.warning("Dependency cycle: %s", " -> ".join(cycle))
                    report.events.append(CycleDetected(cycle))
                    continue

                logger.debug("Walking %s -> %s", ident, dep_ident)
                enter(dep_ident)
                break
            else:
                path.pop()
                stack.pop()


def check_conflicts(
    store: DataStore,
    graph: PackageGraph,
    name: str,
    origin_filter: str = "",
) -> CheckReport:
    """Convenience wrapper: ``ConflictChecker(store, graph, origin_filter).check(name)``."""
    return ConflictChecker(store, graph, origin_filter).check(name)


# ---------------------------------------------------------------------------
# Forward dependencies
# ---------------------------------------------------------------------------


@dataclass
class DepsResult:
    """Direct dependencies of one package, as shown by the ``deps`` command.

    Attributes:
        ident: The identifier after name resolution.
        found: False if the store has no such package.
        total: Number of declared dependencies before filtering.
        deps: Dependency identifiers matching the filter, in declared order.
        elapsed: Wall-clock duration of the lookup in seconds.
    """

    ident: str
    found: bool = False
    total: int = 0
    deps: list[str] = field(default_factory=list)
    elapsed: float = 0.0


def dependencies(
    store: DataStore,
    graph: PackageGraph,
    name: str,
    origin_filter: str = "",
) -> DepsResult:
    """Resolve *name* and list its direct dependencies matching *origin_filter*."""
    start = time.perf_counter()
    ident = resolve_name(graph, name)
    result = DepsResult(ident=ident)
    try:
        package = store.get_job_graph_package(ident)
    except PackageNotFoundError:
        result.elapsed = time.perf_counter() - start
        return result

    all_deps = [str(dep) for dep in package.get_deps()]
    result.found = True
    result.total = len(all_deps)
    result.deps = [d for d in all_deps if d.startswith(origin_filter)]
    result.elapsed = time.perf_counter() - start
    return result
