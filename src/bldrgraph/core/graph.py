"""Package graph data structure and graph algorithms.

Nodes are package short names (``origin/name``). For every short name the
graph remembers the latest published identifier, and that identifier's
declared dependencies become the node's outgoing edges. Older versions of a
package contribute nothing beyond "this short name exists".

The graph answers the exploratory queries of the shell: statistics, cycle
detection, reverse-dependency ranking, substring search, latest-version
resolution, and transitive reverse dependencies.
"""

from __future__ import annotations

import logging
from collections import defaultdict, deque
from collections.abc import Iterable
from dataclasses import dataclass

from bldrgraph.core.ident import Package, PackageIdent

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GraphStats:
    """Summary statistics printed by the ``stats`` command."""

    node_count: int
    edge_count: int
    connected_comp: int
    is_cyclic: bool


class PackageGraph:
    """Short-name dependency graph built from a flat package list.

    Thread safety: This class is NOT thread-safe. External synchronization is
    required for concurrent access.
    """

    def __init__(self) -> None:
        self._latest: dict[str, PackageIdent] = {}
        self._deps: dict[str, list[str]] = {}
        self._rdeps: dict[str, list[str]] = defaultdict(list)

    # -- Construction -------------------------------------------------------

    def build(
        self, packages: Iterable[Package], use_build_deps: bool = False
    ) -> tuple[int, int]:
        """Add packages to the graph.

        A package replaces the current latest identifier of its short name
        only if it sorts strictly newer; when it does, its dependencies
        replace the short name's outgoing edges. Calling ``build`` again
        extends the existing graph.

        Args:
            packages: Package records, in any order.
            use_build_deps: Also add edges for build dependencies.

        Returns:
            A ``(node_count, edge_count)`` tuple for the whole graph.
        """
        for package in packages:
            ident = package.ident
            name = ident.short_name
            self._deps.setdefault(name, [])

            current = self._latest.get(name)
            if current is not None and ident.sort_key() <= current.sort_key():
                continue
            self._latest[name] = ident

            deps = list(package.deps)
            if use_build_deps:
                deps.extend(package.build_deps)

            edges: list[str] = []
            for dep in deps:
                dep_name = dep.short_name
                self._deps.setdefault(dep_name, [])
                if dep_name not in edges:
                    edges.append(dep_name)
            self._deps[name] = edges

        self._reindex()
        logger.info(
            "Graph built: %d nodes, %d edges", self.node_count, self.edge_count
        )
        return self.node_count, self.edge_count

    def _reindex(self) -> None:
        self._rdeps = defaultdict(list)
        for name in sorted(self._deps):
            for dep_name in self._deps[name]:
                self._rdeps[dep_name].append(name)

    # -- Basic queries ------------------------------------------------------

    @property
    def node_count(self) -> int:
        """Return the number of short-name nodes."""
        return len(self._deps)

    @property
    def edge_count(self) -> int:
        """Return the number of dependency edges."""
        return sum(len(edges) for edges in self._deps.values())

    def __contains__(self, short_name: object) -> bool:
        return short_name in self._deps

    def resolve(self, short_name: str) -> str | None:
        """Return the latest identifier known for ``origin/name``, or None."""
        ident = self._latest.get(short_name)
        return str(ident) if ident is not None else None

    def latest(self) -> list[str]:
        """Return the latest identifier of every known package, sorted."""
        return sorted(str(ident) for ident in self._latest.values())

    def search(self, phrase: str) -> list[str]:
        """Return latest identifiers containing *phrase* (case-insensitive), sorted."""
        needle = phrase.lower()
        return sorted(
            str(ident) for ident in self._latest.values()
            if needle in str(ident).lower()
        )

    def top(self, count: int) -> list[tuple[str, int]]:
        """Return the *count* short names with the most direct reverse dependencies.

        Ties are broken by short name so the ranking is deterministic.
        """
        ranked = sorted(
            ((name, len(self._rdeps.get(name, ()))) for name in self._deps),
            key=lambda item: (-item[1], item[0]),
        )
        return ranked[:count]

    def rdeps(self, short_name: str) -> list[tuple[str, str]] | None:
        """Compute the transitive reverse dependencies of a short name.

        Uses BFS over the reverse edges, so closer dependents come first.

        Args:
            short_name: The ``origin/name`` to start from.

        Returns:
            List of ``(short_name, latest_ident)`` pairs, excluding the start
            node itself, or None if *short_name* is not in the graph.
        """
        if short_name not in self._deps:
            return None

        visited: set[str] = {short_name}
        queue: deque[str] = deque([short_name])
        result: list[tuple[str, str]] = []

        while queue:
            current = queue.popleft()
            for dependent in self._rdeps.get(current, ()):
                if dependent in visited:
                    continue
                visited.add(dependent)
                queue.append(dependent)
                result.append((dependent, self.resolve(dependent) or dependent))

        return result

    # -- Structure ----------------------------------------------------------

    def connected_components(self) -> int:
        """Count weakly connected components."""
        seen: set[str] = set()
        components = 0
        for start in self._deps:
            if start in seen:
                continue
            components += 1
            seen.add(start)
            queue: deque[str] = deque([start])
            while queue:
                current = queue.popleft()
                neighbours = list(self._deps.get(current, ()))
                neighbours.extend(self._rdeps.get(current, ()))
                for other in neighbours:
                    if other not in seen:
                        seen.add(other)
                        queue.append(other)
        return components

    def detect_cycles(self) -> list[list[str]]:
        """Detect circular dependencies using iterative DFS.

        Returns:
            A list of cycles, where each cycle is a list of short names forming
            the cycle path (e.g., ["a/x", "a/y", "a/x"]). Empty if no cycles.
        """
        WHITE, GRAY, BLACK = 0, 1, 2
        color: dict[str, int] = {name: WHITE for name in self._deps}
        cycles: list[list[str]] = []

        for start in sorted(self._deps):
            if color[start] != WHITE:
                continue
            color[start] = GRAY
            stack = [(start, iter(self._deps[start]))]

            while stack:
                node, children = stack[-1]
                for child in children:
                    if color[child] == GRAY:
                        # Back edge: the cycle is the stack suffix from child
                        path = [n for n, _ in stack]
                        cycles.append(path[path.index(child):] + [child])
                    elif color[child] == WHITE:
                        color[child] = GRAY
                        stack.append((child, iter(self._deps[child])))
                        break
                else:
                    color[node] = BLACK
                    stack.pop()

        return cycles

    def stats(self) -> GraphStats:
        """Return node/edge counts, component count and cyclicity."""
        return GraphStats(
            node_count=self.node_count,
            edge_count=self.edge_count,
            connected_comp=self.connected_components(),
            is_cyclic=bool(self.detect_cycles()),
        )
