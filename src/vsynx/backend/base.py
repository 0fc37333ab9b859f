"""Abstract contract of the extension-management backend.

Defines the ``ExtensionBackend`` abstract base class that every transport
(HTTP, in-process test doubles) implements. All calls are request/response
coroutines; failures raise ``BackendError`` with a human-readable message.
The orchestration layer never performs file I/O, trust computation or
ranking itself -- it only calls these methods.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from vsynx.backend.models import (
    AuditReport,
    CLIStatus,
    EditorProfile,
    EditorStatus,
    ExtensionMetadata,
    ExtensionRecord,
    SyncReport,
    ValidationResult,
)


class ExtensionBackend(ABC):
    """Request/response boundary to the extension-management backend."""

    # -- Inventory --

    @abstractmethod
    async def list_editor_extensions(self, editor_id: str) -> list[ExtensionRecord]:
        """List extensions installed in a known editor."""

    @abstractmethod
    async def list_installed_extensions(self, path: str) -> list[ExtensionRecord]:
        """List extensions installed in an arbitrary extensions directory."""

    # -- Trust --

    @abstractmethod
    async def validate_extension(self, extension_id: str) -> ValidationResult:
        """Validate one extension against the public registries."""

    @abstractmethod
    async def audit_extensions(self, path: str) -> AuditReport:
        """Validate every extension found under ``path``."""

    # -- Marketplace --

    @abstractmethod
    async def search_marketplace(self, keyword: str) -> list[ExtensionMetadata]:
        """Search the marketplace; results arrive ranked by the backend."""

    # -- Editors --

    @abstractmethod
    async def get_editor_profiles(self) -> list[EditorProfile]:
        """Return every editor profile known to the backend."""

    @abstractmethod
    async def get_editor_statuses(self) -> list[EditorStatus]:
        """Return the current availability of every known editor."""

    @abstractmethod
    async def get_cli_status(self) -> CLIStatus:
        """Return which VS Code family CLIs are on PATH."""

    @abstractmethod
    async def install_extension(self, cli_command: str, extension_id: str) -> None:
        """Install one extension through an editor CLI."""

    # -- Sync --

    @abstractmethod
    async def sync_extensions(
        self,
        source_editor: str,
        target_editors: Sequence[str],
        extension_ids: Sequence[str],
        overwrite: bool,
    ) -> SyncReport:
        """Copy extensions from the source editor into every target.

        Args:
            source_editor: Editor id to copy from.
            target_editors: Editor ids to copy into.
            extension_ids: Extensions to copy.
            overwrite: Replace extensions that already exist in a target.

        Returns:
            One report covering all targets.
        """

    @abstractmethod
    async def detect_conflicts(
        self,
        source_editor: str,
        target_editor: str,
        extension_ids: Sequence[str],
    ) -> list[str]:
        """Return the ids among ``extension_ids`` already in ``target_editor``."""
