"""Tests for ``vsynx marketplace``."""

from __future__ import annotations

import json

import pytest

from tests.helpers import FakeBackend, make_meta
from vsynx.exceptions import BackendError


@pytest.fixture(autouse=True)
def _marketplace(backend: FakeBackend) -> None:
    backend.marketplace = [make_meta(f"py.tool{i}") for i in range(5)]
    backend.marketplace.append(make_meta("esbenp.prettier-vscode"))


class TestSearch:
    """Explicit marketplace searches."""

    def test_table(self, invoke) -> None:
        result = invoke("marketplace", "search", "prettier")
        assert result.exit_code == 0
        assert "Marketplace results" in result.output

    def test_json_with_limit(self, invoke) -> None:
        result = invoke("marketplace", "search", "py", "--limit", "3", "--format", "json")
        assert result.exit_code == 0
        assert [m["id"] for m in json.loads(result.output)] == [
            "py.tool0", "py.tool1", "py.tool2",
        ]

    def test_no_results_is_not_an_error(self, invoke) -> None:
        result = invoke("marketplace", "search", "zzz")
        assert result.exit_code == 0
        assert 'No extensions found matching "zzz"' in result.output

    def test_blank_query(self, invoke, backend: FakeBackend) -> None:
        result = invoke("marketplace", "search", "  ")
        assert result.exit_code == 1
        assert "Please enter a search term" in result.output
        assert backend.calls_to("search_marketplace") == []

    def test_backend_failure(self, invoke, backend: FakeBackend) -> None:
        backend.fail("search_marketplace", BackendError("502 Bad Gateway"))
        result = invoke("marketplace", "search", "py")
        assert result.exit_code == 1
        assert "Failed to search marketplace: 502 Bad Gateway" in result.output


class TestOpen:
    """Marketplace page URLs."""

    def test_url(self, invoke) -> None:
        result = invoke("marketplace", "open", "ms-python.python")
        assert result.exit_code == 0
        assert result.output.strip() == (
            "https://marketplace.visualstudio.com/items?itemName=ms-python.python"
        )

    def test_json(self, invoke) -> None:
        result = invoke("marketplace", "open", "a.one", "--format", "json")
        assert json.loads(result.output)["extensionId"] == "a.one"
