"""Shared fixtures for CLI tests."""

from __future__ import annotations

import pytest
from click.testing import CliRunner

from bldrgraph.cli.session import Session


@pytest.fixture
def runner() -> CliRunner:
    """Create a Click CliRunner for invoking commands."""
    return CliRunner()


@pytest.fixture
def session(sample_world) -> Session:
    """A shell session over the sample packages, with no filter."""
    store, graph = sample_world
    return Session(store=store, graph=graph)
