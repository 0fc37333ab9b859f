"""One orchestration session: a backend plus every controller wired to it.

All controllers share one ``Notices`` sink and one ``EditorDirectory``.
The inventory cache belongs to the sync orchestrator.

Usage::

    async with Session.connect(Settings()) as session:
        await session.start()
        await session.sync.load_source()
"""

from __future__ import annotations

import logging

from vsynx.backend.base import ExtensionBackend
from vsynx.backend.http import HttpBackend
from vsynx.config import Settings
from vsynx.core.audit.session import AuditSessionController
from vsynx.core.install.workflow import InstallSyncWorkflow
from vsynx.core.inventory.cache import InventoryCache
from vsynx.core.notices import Notices
from vsynx.core.search.controller import SearchController
from vsynx.core.sync.orchestrator import SyncOrchestrator
from vsynx.editors.directory import EditorDirectory

logger = logging.getLogger(__name__)


class Session:
    """Controllers of one user session over a single backend.

    Args:
        backend: Backend every controller talks to.
        settings: Timing and limits; defaults apply when omitted.
    """

    def __init__(self, backend: ExtensionBackend, settings: Settings | None = None) -> None:
        self.settings = settings or Settings()
        self.backend = backend
        self.notices = Notices()
        self.directory = EditorDirectory(backend, self.notices)
        self.inventory = InventoryCache(backend)
        self.audit = AuditSessionController(
            backend,
            self.notices,
            self.directory,
            current_editor=self.settings.source_editor,
        )
        self.sync = SyncOrchestrator(
            backend,
            self.notices,
            self.inventory,
            self.directory,
            source_editor=self.settings.source_editor,
            reset_delay=self.settings.sync_reset_delay,
        )
        self.search = SearchController(
            backend,
            self.notices,
            debounce_delay=self.settings.debounce_delay,
            min_query_length=self.settings.min_query_length,
            suggestion_limit=self.settings.suggestion_limit,
        )
        self.install = InstallSyncWorkflow(backend, self.notices, self.directory, self.search)

    @classmethod
    def connect(cls, settings: Settings) -> Session:
        """Create a session over the HTTP backend named in ``settings``."""
        backend = HttpBackend(settings.backend_url, timeout=settings.http_timeout)
        return cls(backend, settings)

    async def start(self) -> bool:
        """Load the editor directory; returns False if the backend failed."""
        return await self.directory.load()

    async def aclose(self) -> None:
        """Cancel pending timers and release the backend's connections."""
        self.search.close()
        self.sync.close()
        if isinstance(self.backend, HttpBackend):
            await self.backend.aclose()

    async def __aenter__(self) -> Session:
        if isinstance(self.backend, HttpBackend):
            await self.backend.__aenter__()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
