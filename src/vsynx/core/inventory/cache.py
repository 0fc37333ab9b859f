"""Per-editor extension-id index, populated lazily.

Answers "does target X already have extension Y" without querying the
backend on every check. Entries are installed and removed whole; a
partially populated set is never observable.
"""

from __future__ import annotations

import asyncio
import logging

from vsynx.backend.base import ExtensionBackend
from vsynx.core.inventory.models import NOT_LOADED, InventoryState, Loaded

logger = logging.getLogger(__name__)


class InventoryCache:
    """Lazily loaded map of editor id to installed extension ids.

    Concurrent ``ensure_loaded`` calls for the same unloaded editor share
    one in-flight fetch, so at most one inventory request is issued per
    editor until the entry is invalidated.
    """

    def __init__(self, backend: ExtensionBackend) -> None:
        self._backend = backend
        self._entries: dict[str, Loaded] = {}
        self._inflight: dict[str, asyncio.Future[Loaded]] = {}

    def state(self, editor_id: str) -> InventoryState:
        return self._entries.get(editor_id, NOT_LOADED)

    def is_loaded(self, editor_id: str) -> bool:
        return editor_id in self._entries

    def has(self, editor_id: str, extension_id: str) -> bool:
        """Membership test; always False for an unloaded editor.

        A negative answer is only meaningful once ``is_loaded`` is True.
        """
        entry = self._entries.get(editor_id)
        return entry is not None and extension_id in entry

    def loaded_editors(self) -> list[str]:
        return list(self._entries)

    async def ensure_loaded(self, editor_id: str) -> Loaded:
        """Fetch the inventory of ``editor_id`` unless already cached.

        Returns:
            The cached (or freshly installed) entry.

        Raises:
            BackendError: If the inventory fetch fails; the entry stays
                unloaded.
        """
        entry = self._entries.get(editor_id)
        if entry is not None:
            return entry
        pending = self._inflight.get(editor_id)
        if pending is not None:
            return await asyncio.shield(pending)

        future: asyncio.Future[Loaded] = asyncio.get_running_loop().create_future()
        self._inflight[editor_id] = future
        try:
            records = await self._backend.list_editor_extensions(editor_id)
        except asyncio.CancelledError:
            future.cancel()
            raise
        except Exception as exc:
            future.set_exception(exc)
            # Mark retrieved so a failure nobody shares is not reported.
            future.exception()
            raise
        finally:
            self._inflight.pop(editor_id, None)

        loaded = Loaded(frozenset(r.key for r in records))
        self._entries[editor_id] = loaded
        future.set_result(loaded)
        logger.debug("Loaded inventory for %s: %d extension(s)", editor_id, loaded.size)
        return loaded

    def invalidate(self, editor_id: str) -> None:
        """Drop the entry so the next ``ensure_loaded`` fetches again."""
        self._entries.pop(editor_id, None)

    def clear(self) -> None:
        self._entries.clear()
