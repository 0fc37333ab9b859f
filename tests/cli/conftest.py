"""Shared fixtures for CLI tests.

Commands run against a ``FakeBackend`` by patching ``Session.connect``;
each invocation gets a fresh session over the same backend, so state the
backend accumulates (installed extensions, synced inventories) is
visible to later invocations within a test.
"""

from __future__ import annotations

from collections.abc import Callable
from unittest.mock import patch

import pytest
from click.testing import CliRunner, Result

from tests.helpers import FakeBackend
from vsynx.cli.main import cli
from vsynx.config import Settings
from vsynx.session import Session


@pytest.fixture
def runner() -> CliRunner:
    """Create a Click CliRunner for invoking commands."""
    return CliRunner()


@pytest.fixture
def invoke(
    runner: CliRunner, backend: FakeBackend, fast_settings: Settings
) -> Callable[..., Result]:
    """Invoke ``vsynx`` with the given arguments against ``backend``."""

    def _invoke(*args: str) -> Result:
        with patch(
            "vsynx.cli.runner.Session.connect",
            side_effect=lambda _settings: Session(backend, fast_settings),
        ):
            return runner.invoke(cli, list(args))

    return _invoke
