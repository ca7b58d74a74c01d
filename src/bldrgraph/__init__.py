"""bldr-graph: explore a package dependency graph and check it for version conflicts."""

from __future__ import annotations

__version__ = "0.1.0"
