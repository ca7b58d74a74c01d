"""File-backed package store.

The store holds the flat package list the graph is built from and answers
exact-identifier lookups for a package's declared dependencies. The data
file is JSON, either a bare list of package records or an object with a
``packages`` list::

    {
      "packages": [
        {
          "ident": "core/openssl/1.0.2l/20170513215008",
          "deps": ["core/glibc/2.22/20170513201042", "core/zlib/1.2.8/20170513201911"],
          "build_deps": ["core/gcc/5.2.0/20170513202244"]
        }
      ]
    }
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from bldrgraph.config import Config
from bldrgraph.core.ident import Package, PackageIdent
from bldrgraph.exceptions import DataStoreError, IdentParseError, PackageNotFoundError

logger = logging.getLogger(__name__)


class DataStore:
    """Package store loaded from the JSON file named in the configuration.

    Example::

        store = DataStore(Config.from_file("bldr-graph.toml"))
        store.setup()
        package = store.get_job_graph_package("core/zlib/1.2.8/20170513201911")
    """

    def __init__(self, config: Config) -> None:
        self.path: Path = config.datastore.path
        self._packages: dict[str, Package] = {}

    def setup(self) -> None:
        """Load and validate the package file.

        Raises:
            DataStoreError: If the file is missing, is not valid JSON, or a
                record is malformed.
        """
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except OSError as exc:
            raise DataStoreError(f"Cannot read package file {self.path}: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise DataStoreError(f"Invalid JSON in {self.path}: {exc}") from exc

        self.load(data)

    def load(self, data: Any) -> None:
        """Replace the store's contents with parsed package records."""
        records = data.get("packages") if isinstance(data, dict) else data
        if not isinstance(records, list):
            raise DataStoreError("Package data must be a list of package records")

        packages: dict[str, Package] = {}
        for index, record in enumerate(records):
            package = _package_from_record(record, index)
            key = str(package.ident)
            if key in packages:
                logger.warning("Duplicate package %s; keeping the later record", key)
                del packages[key]
            packages[key] = package

        self._packages = packages
        logger.info("Loaded %d packages from %s", len(packages), self.path)

    def get_job_graph_packages(self) -> list[Package]:
        """Return every package in store order."""
        return list(self._packages.values())

    def get_job_graph_package(self, ident: str) -> Package:
        """Return the package with exactly this identifier.

        Raises:
            PackageNotFoundError: If no such package is stored.
        """
        logger.debug("Fetching package %s", ident)
        package = self._packages.get(ident)
        if package is None:
            raise PackageNotFoundError(ident)
        return package

    def __len__(self) -> int:
        return len(self._packages)


def _package_from_record(record: Any, index: int) -> Package:
    if not isinstance(record, dict) or "ident" not in record:
        raise DataStoreError(f"Package record #{index} has no 'ident'")
    try:
        ident = PackageIdent.parse(record["ident"])
        deps = [PackageIdent.parse(d) for d in record.get("deps", [])]
        build_deps = [PackageIdent.parse(d) for d in record.get("build_deps", [])]
    except (IdentParseError, AttributeError, TypeError) as exc:
        raise DataStoreError(f"Package record #{index} is malformed: {exc}") from exc
    if not ident.fully_qualified:
        raise DataStoreError(
            f"Package record #{index} ident {str(ident)!r} is not fully qualified"
        )
    return Package(ident=ident, deps=deps, build_deps=build_deps)
