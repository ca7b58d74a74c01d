"""Loaded state shared by every command: store, graph, features and filter."""

from __future__ import annotations

import logging
import sys
import time
from dataclasses import dataclass

import click

from bldrgraph.config import Config
from bldrgraph.core.graph import PackageGraph
from bldrgraph.core.report import format_elapsed
from bldrgraph.datastore import DataStore
from bldrgraph.exceptions import BldrGraphError
from bldrgraph.features import FEATURE_NAMES, Feature, enable_features

logger = logging.getLogger(__name__)


@dataclass
class Session:
    """Everything a command needs to answer a query.

    Attributes:
        store: Package store, for exact-identifier dependency lookups.
        graph: Package graph, for latest-version and structural queries.
        features: Feature flags enabled from the configuration.
        origin_filter: Active origin prefix; empty matches everything.
    """

    store: DataStore
    graph: PackageGraph
    features: Feature = Feature.NONE
    origin_filter: str = ""

    @classmethod
    def open(cls, config: Config, announce: bool = True) -> Session:
        """Load the package store and build the graph.

        Args:
            config: Loaded configuration.
            announce: Print progress lines while loading (the shell does,
                one-shot commands do not). When false the feature listing
                goes to stderr.

        Raises:
            DataStoreError: If the package file cannot be loaded.
        """
        features = enable_features(config)
        if Feature.LIST in features:
            # Quiet sessions keep stdout for the command's own output
            quiet = not announce
            click.echo(f"Listing possible feature flags: {sorted(FEATURE_NAMES)}", err=quiet)
            click.echo("Enable features by populating 'features_enabled' in config", err=quiet)

        if announce:
            click.echo(f"Loading packages from {config.datastore.path}")
        store = DataStore(config)
        store.setup()

        if announce:
            click.echo("Building graph... please wait.")
        graph = PackageGraph()
        start = time.perf_counter()
        ncount, ecount = graph.build(
            store.get_job_graph_packages(),
            use_build_deps=Feature.BUILD_DEPS in features,
        )
        elapsed = time.perf_counter() - start
        if announce:
            click.echo(f"OK: {ncount} nodes, {ecount} edges ({format_elapsed(elapsed)} sec)")

        return cls(store=store, graph=graph, features=features)


def open_session(config: Config, announce: bool = True, origin_filter: str = "") -> Session:
    """Open a session for a CLI command, exiting with code 1 on load errors."""
    try:
        session = Session.open(config, announce=announce)
    except BldrGraphError as exc:
        logger.error("Failed to load packages: %s", exc)
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)
    session.origin_filter = origin_filter
    return session
