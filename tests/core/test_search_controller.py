"""Tests for SearchController: debounce, suppression, keyboard, results."""

from __future__ import annotations

import asyncio

import pytest

from tests.helpers import FakeBackend, make_meta, make_verdict
from vsynx.backend.models import TrustLevel
from vsynx.core.notices import Notices
from vsynx.core.search import Key, SearchController
from vsynx.core.search.controller import EMPTY_QUERY_MESSAGE
from vsynx.exceptions import BackendError


@pytest.fixture
def search(backend: FakeBackend, notices: Notices) -> SearchController:
    backend.marketplace = [make_meta(f"py.tool{i}") for i in range(10)]
    backend.marketplace.append(make_meta("esbenp.prettier-vscode"))
    return SearchController(backend, notices, debounce_delay=0.01)


async def _type(search: SearchController, value: str) -> None:
    search.on_input(value)
    await search.wait_for_suggestions()


# ---------------------------------------------------------------------------
# Tests: autocomplete
# ---------------------------------------------------------------------------


class TestAutocomplete:
    """Debounced suggestions."""

    def test_short_query_issues_no_request(
        self, backend: FakeBackend, search: SearchController
    ) -> None:
        async def _run() -> None:
            search.on_input("p")
            await asyncio.sleep(0.05)

        asyncio.run(_run())
        assert backend.calls_to("search_marketplace") == []
        assert not search.show_suggestions

    def test_suggestions_are_capped(
        self, backend: FakeBackend, search: SearchController
    ) -> None:
        asyncio.run(_type(search, "py"))
        assert backend.calls_to("search_marketplace") == [("py",)]
        assert len(search.suggestions) == 8
        assert search.show_suggestions
        assert search.highlighted == -1

    def test_typing_burst_issues_one_request(
        self, backend: FakeBackend, search: SearchController
    ) -> None:
        async def _run() -> None:
            search.on_input("py")
            search.on_input("py.")
            search.on_input("py.tool")
            await search.wait_for_suggestions()

        asyncio.run(_run())
        assert backend.calls_to("search_marketplace") == [("py.tool",)]

    def test_query_is_trimmed(self, backend: FakeBackend, search: SearchController) -> None:
        asyncio.run(_type(search, "  py  "))
        assert backend.calls_to("search_marketplace") == [("py",)]

    def test_shrinking_below_minimum_hides(self, search: SearchController) -> None:
        async def _run() -> None:
            await _type(search, "py")
            search.on_input("p")

        asyncio.run(_run())
        assert search.suggestions == []
        assert not search.show_suggestions

    def test_failure_clears_suggestions(
        self, backend: FakeBackend, notices: Notices, search: SearchController
    ) -> None:
        backend.fail("search_marketplace", BackendError("offline"))
        asyncio.run(_type(search, "py"))
        assert search.suggestions == []
        assert notices.error is None


class TestSuppression:
    """An explicit search beats a late autocomplete response."""

    def test_search_during_inflight_autocomplete(
        self, backend: FakeBackend, search: SearchController
    ) -> None:
        async def _run() -> None:
            gate = backend.gate("search_marketplace")
            search.on_input("py")
            await asyncio.sleep(0.05)
            assert backend.calls_to("search_marketplace") == [("py",)]
            task = asyncio.create_task(search.search())
            await asyncio.sleep(0)
            gate.set()
            await task
            await search.wait_for_suggestions()
            await asyncio.sleep(0.02)

        asyncio.run(_run())
        assert search.suppressed
        assert not search.show_suggestions
        assert search.suggestions == []
        assert len(search.results) == 10

    def test_suppressed_response_is_dropped(
        self, backend: FakeBackend, search: SearchController
    ) -> None:
        async def _run() -> None:
            gate = backend.gate("search_marketplace")
            search.on_input("py")
            await asyncio.sleep(0.05)
            search.suppressed = True
            gate.set()
            await search.wait_for_suggestions()

        asyncio.run(_run())
        assert search.suggestions == []
        assert not search.show_suggestions

    def test_typing_again_lifts_suppression(self, search: SearchController) -> None:
        async def _run() -> None:
            search.query = "py"
            await search.search()
            await _type(search, "py.tool1")

        asyncio.run(_run())
        assert not search.suppressed
        assert search.show_suggestions


# ---------------------------------------------------------------------------
# Tests: keyboard
# ---------------------------------------------------------------------------


class TestKeyboard:
    """Highlight movement and commit keys."""

    def test_highlight_is_clamped(self, search: SearchController) -> None:
        async def _run() -> list[int]:
            await _type(search, "py")
            seen = []
            for _ in range(10):
                await search.on_key(Key.ARROW_DOWN)
            seen.append(search.highlighted)
            for _ in range(12):
                await search.on_key(Key.ARROW_UP)
            seen.append(search.highlighted)
            return seen

        assert asyncio.run(_run()) == [7, -1]

    def test_enter_on_highlight_selects_suggestion(
        self, backend: FakeBackend, search: SearchController
    ) -> None:
        backend.verdicts["py.tool1"] = make_verdict("py.tool1", TrustLevel.LEGITIMATE)

        async def _run() -> None:
            await _type(search, "py")
            await search.on_key(Key.ARROW_DOWN)
            await search.on_key(Key.ARROW_DOWN)
            await search.on_key(Key.ENTER)

        asyncio.run(_run())
        assert search.query == "py.tool1"
        assert not search.show_suggestions
        assert search.selected_result is not None
        assert search.selected_result.id == "py.tool1"
        assert search.detail is not None
        assert search.detail.trust_level is TrustLevel.LEGITIMATE
        assert backend.calls_to("validate_extension") == [("py.tool1",)]

    def test_enter_without_highlight_searches(
        self, backend: FakeBackend, search: SearchController
    ) -> None:
        async def _run() -> None:
            await _type(search, "prettier")
            await search.on_key(Key.ENTER)

        asyncio.run(_run())
        assert not search.show_suggestions
        assert [m.id for m in search.results] == ["esbenp.prettier-vscode"]
        assert backend.calls_to("validate_extension") == []

    def test_enter_with_hidden_list_searches(
        self, backend: FakeBackend, search: SearchController
    ) -> None:
        search.query = "prettier"
        asyncio.run(search.on_key(Key.ENTER))
        assert backend.calls_to("search_marketplace") == [("prettier",)]

    def test_arrows_ignored_when_hidden(self, search: SearchController) -> None:
        asyncio.run(search.on_key(Key.ARROW_DOWN))
        assert search.highlighted == -1

    def test_escape_hides(self, search: SearchController) -> None:
        async def _run() -> None:
            await _type(search, "py")
            await search.on_key(Key.ARROW_DOWN)
            await search.on_key(Key.ESCAPE)

        asyncio.run(_run())
        assert not search.show_suggestions
        assert search.highlighted == -1


# ---------------------------------------------------------------------------
# Tests: explicit search and detail
# ---------------------------------------------------------------------------


class TestSearch:
    """Explicit searches and their notices."""

    def test_empty_query(
        self, backend: FakeBackend, notices: Notices, search: SearchController
    ) -> None:
        search.query = "   "
        assert asyncio.run(search.search()) is None
        assert notices.error == EMPTY_QUERY_MESSAGE
        assert backend.calls_to("search_marketplace") == []

    def test_no_results(self, notices: Notices, search: SearchController) -> None:
        search.query = "zzz"
        assert asyncio.run(search.search()) == []
        assert notices.error == 'No extensions found matching "zzz"'

    def test_backend_failure(
        self, backend: FakeBackend, notices: Notices, search: SearchController
    ) -> None:
        backend.fail("search_marketplace", BackendError("502"))
        search.query = "py"
        assert asyncio.run(search.search()) is None
        assert notices.error == "Failed to search marketplace: 502"
        assert not search.loading

    def test_search_clears_previous_selection(self, search: SearchController) -> None:
        search.select_result(make_meta("py.tool3"))
        search.query = "py"
        asyncio.run(search.search())
        assert search.selected_result is None
        assert search.detail is None

    def test_detail_failure(
        self, backend: FakeBackend, notices: Notices, search: SearchController
    ) -> None:
        backend.fail("validate_extension", BackendError("timeout"))
        assert asyncio.run(search.load_detail("py.tool1")) is None
        assert notices.error == "Failed to validate: timeout"
        assert not search.detail_loading
