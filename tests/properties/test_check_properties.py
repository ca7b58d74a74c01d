"""Property-based tests for conflict-check invariants.

Verifies, over randomly generated package sets (cycles included):
- Name resolution leaves fully qualified identifiers untouched
- The ledger keeps the first identifier recorded for each short name
- Every reported conflict names two different versions of one package
- A store with one version per package never reports a conflict
- The origin filter excludes everything outside its prefix
- The walk terminates and every reported cycle is closed
"""
from __future__ import annotations

from hypothesis import given, settings
from hypothesis import strategies as st

from bldrgraph.config import Config
from bldrgraph.core.check import ConflictLedger, check_conflicts, resolve_name
from bldrgraph.core.graph import PackageGraph
from bldrgraph.core.ident import short_name
from bldrgraph.datastore import DataStore


# ---------------------------------------------------------------------------
# Strategies for generating random package sets
# ---------------------------------------------------------------------------

origins = st.sampled_from(["core", "acme"])
names = st.sampled_from(["alpha", "beta", "gamma", "delta", "epsilon"])
versions = st.sampled_from(["1.0", "1.2", "2.0"])


@st.composite
def package_sets(draw: st.DrawFn, max_versions: int = 2) -> dict[str, list[str]]:
    """Generate ``{ident: [dep idents]}`` where deps point at idents in the set."""
    shorts = draw(
        st.lists(st.tuples(origins, names), min_size=2, max_size=5, unique=True)
    )
    idents: list[str] = []
    for origin, name in shorts:
        vers = draw(
            st.lists(versions, min_size=1, max_size=max_versions, unique=True)
        )
        idents.extend(f"{origin}/{name}/{v}/20170101000000" for v in vers)

    packages: dict[str, list[str]] = {}
    for ident in idents:
        deps = draw(st.lists(st.sampled_from(idents), max_size=3, unique=True))
        packages[ident] = [d for d in deps if short_name(d) != short_name(ident)]
    return packages


def _world(packages: dict[str, list[str]]) -> tuple[DataStore, PackageGraph]:
    store = DataStore(Config())
    store.load([{"ident": i, "deps": d} for i, d in packages.items()])
    graph = PackageGraph()
    graph.build(store.get_job_graph_packages())
    return store, graph


# ---------------------------------------------------------------------------
# Name resolution and ledger
# ---------------------------------------------------------------------------


@given(packages=package_sets())
@settings(max_examples=50)
def test_resolve_name_keeps_full_idents(packages: dict[str, list[str]]) -> None:
    _, graph = _world(packages)
    for ident in packages:
        assert resolve_name(graph, ident) == ident


@given(packages=package_sets())
@settings(max_examples=50)
def test_resolve_name_returns_latest_known(packages: dict[str, list[str]]) -> None:
    _, graph = _world(packages)
    for ident in packages:
        resolved = resolve_name(graph, short_name(ident))
        assert resolved in packages
        assert short_name(resolved) == short_name(ident)


@given(
    entries=st.lists(
        st.tuples(st.sampled_from(["a/x", "a/y", "b/z"]), st.text(min_size=1, max_size=5)),
        max_size=20,
    )
)
@settings(max_examples=50)
def test_ledger_first_write_wins(entries: list[tuple[str, str]]) -> None:
    ledger = ConflictLedger()
    first: dict[str, str] = {}
    for short, ident in entries:
        held = ledger.record(short, ident)
        first.setdefault(short, ident)
        assert held == first[short]
    assert dict(ledger.items()) == first


# ---------------------------------------------------------------------------
# Check invariants
# ---------------------------------------------------------------------------


@given(packages=package_sets(), root_index=st.integers(min_value=0, max_value=20))
@settings(max_examples=50, deadline=None)
def test_conflicts_are_genuine(packages: dict[str, list[str]], root_index: int) -> None:
    store, graph = _world(packages)
    root = list(packages)[root_index % len(packages)]
    report = check_conflicts(store, graph, root)

    assert report.root_found
    for conflict in report.conflicts:
        assert conflict.recorded != conflict.found
        assert short_name(conflict.recorded) == short_name(conflict.found)


@given(packages=package_sets(max_versions=1), root_index=st.integers(min_value=0, max_value=20))
@settings(max_examples=50, deadline=None)
def test_single_version_store_has_no_conflicts(
    packages: dict[str, list[str]], root_index: int
) -> None:
    store, graph = _world(packages)
    root = list(packages)[root_index % len(packages)]
    report = check_conflicts(store, graph, root)
    assert not report.has_conflicts
    assert report.missing == []


@given(
    packages=package_sets(),
    root_index=st.integers(min_value=0, max_value=20),
    origin=origins,
)
@settings(max_examples=50, deadline=None)
def test_filter_excludes_other_origins(
    packages: dict[str, list[str]], root_index: int, origin: str
) -> None:
    store, graph = _world(packages)
    root = list(packages)[root_index % len(packages)]
    prefix = f"{origin}/"
    report = check_conflicts(store, graph, root, origin_filter=prefix)

    for update in report.updates:
        assert update.original.startswith(prefix)
        assert update.latest.startswith(prefix)
    for conflict in report.conflicts:
        assert conflict.found.startswith(prefix)
        assert conflict.recorded.startswith(prefix)


@given(packages=package_sets(), root_index=st.integers(min_value=0, max_value=20))
@settings(max_examples=50, deadline=None)
def test_walk_terminates_and_cycles_close(
    packages: dict[str, list[str]], root_index: int
) -> None:
    store, graph = _world(packages)
    root = list(packages)[root_index % len(packages)]
    report = check_conflicts(store, graph, root)

    assert len(report.updates) == len(packages[root])
    for cycle in report.cycles:
        assert len(cycle.path) >= 3
        assert cycle.path[0] == cycle.path[-1]
    assert report.lines()[-1].startswith("Time: ")
