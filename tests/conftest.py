"""Shared fixtures for vsynx tests."""

import pytest

from tests.helpers import FakeBackend
from vsynx.config import Settings
from vsynx.core.notices import Notices


@pytest.fixture
def backend() -> FakeBackend:
    """An in-memory backend with vscode, windsurf and cursor available."""
    return FakeBackend()


@pytest.fixture
def notices() -> Notices:
    return Notices()


@pytest.fixture
def fast_settings() -> Settings:
    """Settings with short timers so debounce and reset tests stay quick."""
    return Settings(debounce_delay=0.01, sync_reset_delay=0.01)
