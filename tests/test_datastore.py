"""Tests for the file-backed package store."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from bldrgraph.config import Config, DataStoreConfig
from bldrgraph.core.ident import PackageIdent
from bldrgraph.datastore import DataStore
from bldrgraph.exceptions import DataStoreError, PackageNotFoundError


def _store_for(path: Path) -> DataStore:
    return DataStore(Config(datastore=DataStoreConfig(path=path)))


class TestSetup:
    """Tests for loading package files."""

    def test_loads_object_form(self, sample_data_file: Path) -> None:
        store = _store_for(sample_data_file)
        store.setup()
        assert len(store) == 7

    def test_loads_list_form(self, tmp_path: Path) -> None:
        path = tmp_path / "list.json"
        path.write_text(json.dumps([{"ident": "core/zlib/1.2.8/1"}]))
        store = _store_for(path)
        store.setup()
        assert [str(p.ident) for p in store.get_job_graph_packages()] == ["core/zlib/1.2.8/1"]

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(DataStoreError, match="Cannot read"):
            _store_for(tmp_path / "absent.json").setup()

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        with pytest.raises(DataStoreError, match="Invalid JSON"):
            _store_for(path).setup()

    def test_wrong_top_level_shape(self) -> None:
        with pytest.raises(DataStoreError):
            DataStore(Config()).load({"packages": "nope"})

    def test_record_without_ident(self) -> None:
        with pytest.raises(DataStoreError, match="no 'ident'"):
            DataStore(Config()).load([{"deps": []}])

    def test_malformed_dependency(self) -> None:
        with pytest.raises(DataStoreError, match="malformed"):
            DataStore(Config()).load([{"ident": "core/a/1/1", "deps": ["oops"]}])

    def test_short_name_ident_rejected(self) -> None:
        with pytest.raises(DataStoreError, match="not fully qualified"):
            DataStore(Config()).load([{"ident": "core/a"}])

    def test_duplicate_keeps_later_record(self, caplog: pytest.LogCaptureFixture) -> None:
        store = DataStore(Config())
        store.load([
            {"ident": "core/a/1/1", "deps": ["core/b/1/1"]},
            {"ident": "core/a/1/1", "deps": ["core/c/1/1"]},
        ])
        assert len(store) == 1
        assert store.get_job_graph_package("core/a/1/1").deps == [
            PackageIdent.parse("core/c/1/1")
        ]
        assert "Duplicate package" in caplog.text


class TestLookup:
    """Tests for exact-identifier lookups."""

    def test_found(self, make_store) -> None:
        store = make_store({"core/a/1/1": ["core/b/1/1", "core/c/1/1"]})
        package = store.get_job_graph_package("core/a/1/1")
        assert [str(d) for d in package.get_deps()] == ["core/b/1/1", "core/c/1/1"]

    def test_not_found(self, make_store) -> None:
        store = make_store({"core/a/1/1": []})
        with pytest.raises(PackageNotFoundError) as exc_info:
            store.get_job_graph_package("core/a/1/2")
        assert exc_info.value.ident == "core/a/1/2"
        assert str(exc_info.value) == "No matching package found for core/a/1/2"

    def test_short_name_is_not_a_key(self, make_store) -> None:
        store = make_store({"core/a/1/1": []})
        with pytest.raises(PackageNotFoundError):
            store.get_job_graph_package("core/a")

    def test_build_deps_loaded(self) -> None:
        store = DataStore(Config())
        store.load([{"ident": "core/a/1/1", "build_deps": ["core/gcc/5/1"]}])
        package = store.get_job_graph_package("core/a/1/1")
        assert package.build_deps == [PackageIdent.parse("core/gcc/5/1")]
        assert package.deps == []
