"""Package graph, identifiers, and dependency-conflict checking.

All public names are re-exported here so callers can write
``from bldrgraph.core import PackageGraph, check_conflicts``.
"""

from bldrgraph.core.ident import (
    Package,
    PackageIdent,
    is_fully_qualified,
    release_key,
    short_name,
    version_key,
)
from bldrgraph.core.graph import (
    GraphStats,
    PackageGraph,
)
from bldrgraph.core.report import (
    CheckReport,
    Conflict,
    CycleDetected,
    DependencyUpdate,
    MissingPackage,
    format_elapsed,
)
from bldrgraph.core.check import (
    ConflictChecker,
    ConflictLedger,
    DepsResult,
    check_conflicts,
    dependencies,
    resolve_name,
)

__all__ = [
    "Package",
    "PackageIdent",
    "is_fully_qualified",
    "release_key",
    "short_name",
    "version_key",
    "GraphStats",
    "PackageGraph",
    "CheckReport",
    "Conflict",
    "CycleDetected",
    "DependencyUpdate",
    "MissingPackage",
    "format_elapsed",
    "ConflictChecker",
    "ConflictLedger",
    "DepsResult",
    "check_conflicts",
    "dependencies",
    "resolve_name",
]
