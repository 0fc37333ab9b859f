"""Marketplace search with debounced autocomplete.

Typing arms a debounce task; when it fires it fetches suggestions unless
an explicit search has happened since. An explicit search sets the
suppression flag and cancels the debounce task, so a late autocomplete
response can never reopen the suggestion list over fresh results. The
flag is cleared once the user types a query long enough to autocomplete.

Keyboard handling mirrors a combobox: the highlight moves over the
visible suggestions within ``[-1, len - 1]`` where ``-1`` is "nothing
highlighted".
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum

from vsynx.backend.base import ExtensionBackend
from vsynx.backend.models import ExtensionMetadata, ValidationResult
from vsynx.config import (
    DEFAULT_DEBOUNCE_DELAY,
    DEFAULT_MIN_QUERY_LENGTH,
    DEFAULT_SUGGESTION_LIMIT,
)
from vsynx.core.notices import Notices
from vsynx.exceptions import BackendError

logger = logging.getLogger(__name__)

EMPTY_QUERY_MESSAGE = "Please enter a search term (e.g., python, prettier, eslint)"


class Key(str, Enum):
    """Keys the search box reacts to."""

    ARROW_DOWN = "ArrowDown"
    ARROW_UP = "ArrowUp"
    ENTER = "Enter"
    ESCAPE = "Escape"


class SearchController:
    """State of the marketplace search box, its suggestions and results.

    Args:
        backend: Backend used for searches and detail validation.
        notices: Sink for user-visible errors.
        debounce_delay: Seconds of typing inactivity before autocomplete.
        min_query_length: Shortest trimmed query that autocompletes.
        suggestion_limit: Maximum number of suggestions shown.
    """

    def __init__(
        self,
        backend: ExtensionBackend,
        notices: Notices,
        *,
        debounce_delay: float = DEFAULT_DEBOUNCE_DELAY,
        min_query_length: int = DEFAULT_MIN_QUERY_LENGTH,
        suggestion_limit: int = DEFAULT_SUGGESTION_LIMIT,
    ) -> None:
        self._backend = backend
        self._notices = notices
        self._debounce_delay = debounce_delay
        self._min_query_length = min_query_length
        self._suggestion_limit = suggestion_limit
        self._debounce_task: asyncio.Task[None] | None = None
        self.query = ""
        self.suggestions: list[ExtensionMetadata] = []
        self.show_suggestions = False
        self.highlighted = -1
        self.suppressed = False
        self.results: list[ExtensionMetadata] = []
        self.loading = False
        self.selected_result: ExtensionMetadata | None = None
        self.detail: ValidationResult | None = None
        self.detail_loading = False

    # -- Autocomplete --

    def _cancel_debounce(self) -> None:
        if self._debounce_task is not None and not self._debounce_task.done():
            self._debounce_task.cancel()
        self._debounce_task = None

    def on_input(self, value: str) -> None:
        """Handle a change of the query text.

        Must be called from inside a running event loop.
        """
        self.query = value
        self.highlighted = -1
        self._cancel_debounce()

        trimmed = value.strip()
        if len(trimmed) < self._min_query_length:
            self.suggestions = []
            self.show_suggestions = False
            return

        self.suppressed = False
        self._debounce_task = asyncio.get_running_loop().create_task(
            self._fetch_suggestions(trimmed)
        )

    async def _fetch_suggestions(self, query: str) -> None:
        await asyncio.sleep(self._debounce_delay)
        try:
            found = await self._backend.search_marketplace(query)
        except BackendError as exc:
            logger.warning("Autocomplete failed for %r: %s", query, exc)
            self.suggestions = []
            return
        if self.suppressed:
            logger.debug("Dropping suggestions for %r after explicit search", query)
            return
        self.suggestions = list(found[: self._suggestion_limit])
        self.show_suggestions = True

    async def wait_for_suggestions(self) -> None:
        """Wait for the pending autocomplete task, if any, to settle."""
        task = self._debounce_task
        if task is not None:
            await asyncio.wait({task})

    # -- Keyboard --

    async def on_key(self, key: Key) -> None:
        """Handle a key press in the search box."""
        if not self.show_suggestions or not self.suggestions:
            if key is Key.ENTER:
                await self.search()
            return

        if key is Key.ARROW_DOWN:
            self.highlighted = min(self.highlighted + 1, len(self.suggestions) - 1)
        elif key is Key.ARROW_UP:
            self.highlighted = max(self.highlighted - 1, -1)
        elif key is Key.ENTER:
            if 0 <= self.highlighted < len(self.suggestions):
                await self.select_suggestion(self.suggestions[self.highlighted])
            else:
                self.show_suggestions = False
                await self.search()
        elif key is Key.ESCAPE:
            self.show_suggestions = False
            self.highlighted = -1

    # -- Selection and search --

    async def select_suggestion(self, meta: ExtensionMetadata) -> ValidationResult | None:
        """Commit a suggestion: fill the query with its id and validate it."""
        self.query = meta.id
        self.show_suggestions = False
        self.suggestions = []
        self.highlighted = -1
        self.selected_result = meta
        return await self.load_detail(meta.id)

    async def load_detail(self, extension_id: str) -> ValidationResult | None:
        """Fetch the trust verdict of a marketplace extension."""
        self.detail = None
        self.detail_loading = True
        self._notices.clear_error()
        try:
            result = await self._backend.validate_extension(extension_id)
        except BackendError as exc:
            self._notices.post_error(f"Failed to validate: {exc}")
            return None
        finally:
            self.detail_loading = False
        self.detail = result
        return result

    def select_result(self, meta: ExtensionMetadata) -> None:
        """Pick an entry of the result list without validating it."""
        self.selected_result = meta

    async def search(self) -> list[ExtensionMetadata] | None:
        """Run an explicit search for the current query.

        Returns:
            The new result list, or None on a validation or backend error.
        """
        query = self.query.strip()
        if not query:
            self._notices.post_error(EMPTY_QUERY_MESSAGE)
            return None

        self.suppressed = True
        self._cancel_debounce()
        self.show_suggestions = False
        self.suggestions = []
        self.highlighted = -1
        self.selected_result = None
        self.detail = None
        self.loading = True
        self._notices.clear_error()
        try:
            found = await self._backend.search_marketplace(query)
        except BackendError as exc:
            self._notices.post_error(f"Failed to search marketplace: {exc}")
            return None
        finally:
            self.loading = False

        self.results = list(found)
        if not self.results:
            self._notices.post_error(f'No extensions found matching "{self.query}"')
        logger.info("Marketplace search for %r returned %d result(s)", query, len(self.results))
        return self.results

    def close(self) -> None:
        """Drop any pending autocomplete task."""
        self._cancel_debounce()
