"""Shared fixtures for bldr-graph tests."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path

import pytest

from bldrgraph.config import Config
from bldrgraph.core.graph import PackageGraph
from bldrgraph.datastore import DataStore

GLIBC_OLD = "core/glibc/2.22/20170513201042"
GLIBC_NEW = "core/glibc/2.25/20170601000000"
ZLIB_OLD = "core/zlib/1.2.8/20170513201911"
ZLIB_NEW = "core/zlib/1.2.11/20170601000100"
OPENSSL = "core/openssl/1.0.2l/20170513215008"
APP = "acme/app/1.0.0/20170701000000"
THING = "other/thing/1.0/1"

# acme/app pins an old zlib and pulls in openssl, which was built against the
# old glibc and zlib. Moving everything to latest yields two conflicts.
SAMPLE_PACKAGES: dict[str, list[str]] = {
    GLIBC_OLD: [],
    GLIBC_NEW: [],
    ZLIB_OLD: [GLIBC_OLD],
    ZLIB_NEW: [GLIBC_NEW],
    OPENSSL: [GLIBC_OLD, ZLIB_OLD],
    APP: [OPENSSL, ZLIB_OLD, THING],
    THING: [],
}


def _records(packages: dict[str, list[str]]) -> list[dict]:
    return [{"ident": ident, "deps": deps} for ident, deps in packages.items()]


@pytest.fixture
def make_store() -> Callable[[dict[str, list[str]]], DataStore]:
    """Factory building an in-memory store from ``{ident: [dep idents]}``."""

    def _make(packages: dict[str, list[str]]) -> DataStore:
        store = DataStore(Config())
        store.load(_records(packages))
        return store

    return _make


@pytest.fixture
def make_world(
    make_store: Callable[[dict[str, list[str]]], DataStore],
) -> Callable[[dict[str, list[str]]], tuple[DataStore, PackageGraph]]:
    """Factory returning a ``(store, graph)`` pair built from the same packages."""

    def _make(packages: dict[str, list[str]]) -> tuple[DataStore, PackageGraph]:
        store = make_store(packages)
        graph = PackageGraph()
        graph.build(store.get_job_graph_packages())
        return store, graph

    return _make


@pytest.fixture
def sample_world(make_world) -> tuple[DataStore, PackageGraph]:
    """Store and graph for ``SAMPLE_PACKAGES``."""
    return make_world(SAMPLE_PACKAGES)


@pytest.fixture
def sample_data_file(tmp_path: Path) -> Path:
    """Write ``SAMPLE_PACKAGES`` to a JSON package file."""
    path = tmp_path / "packages.json"
    path.write_text(json.dumps({"packages": _records(SAMPLE_PACKAGES)}))
    return path


@pytest.fixture
def sample_config_file(tmp_path: Path, sample_data_file: Path) -> Path:
    """Write a TOML config pointing at the sample package file."""
    path = tmp_path / "bldr-graph.toml"
    path.write_text(
        'log_level = "warning"\n'
        'features_enabled = ""\n'
        "\n"
        "[datastore]\n"
        f'path = "{sample_data_file.name}"\n'
    )
    return path
