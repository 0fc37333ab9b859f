"""JSON-over-HTTP implementation of the backend contract.

Each call is ``POST {base_url}/api/{Method}`` whose body is the JSON array
of positional arguments and whose response body is the JSON return value.
Method names follow the backend's own bindings (``GetEditorExtensions``,
``SyncExtensions``, ...).

Usage::

    async with HttpBackend("http://127.0.0.1:34115") as backend:
        statuses = await backend.get_editor_statuses()
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import httpx

from vsynx.backend.base import ExtensionBackend
from vsynx.backend.http_client import USER_AGENT, post_json
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
from vsynx.config import DEFAULT_HTTP_TIMEOUT
from vsynx.exceptions import BackendError

logger = logging.getLogger(__name__)


def _as_list(data: Any, method: str) -> list[Any]:
    """Treat ``null`` as an empty list; reject any other non-list."""
    if data is None:
        return []
    if not isinstance(data, list):
        raise BackendError(f"{method} returned {type(data).__name__}, expected a list")
    return data


def _as_dict(data: Any, method: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise BackendError(f"{method} returned {type(data).__name__}, expected an object")
    return data


class HttpBackend(ExtensionBackend):
    """Backend client speaking JSON over HTTP.

    Args:
        base_url: Root URL of the backend (no trailing ``/api``).
        timeout: Transport timeout per request, in seconds.
    """

    def __init__(self, base_url: str, *, timeout: float = DEFAULT_HTTP_TIMEOUT) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._client: httpx.AsyncClient | None = None

    @property
    def base_url(self) -> str:
        return self._base_url

    async def __aenter__(self) -> HttpBackend:
        self._client = httpx.AsyncClient(
            timeout=self._timeout,
            headers={"User-Agent": USER_AGENT},
            follow_redirects=True,
        )
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _call(self, method: str, *args: Any) -> Any:
        url = f"{self._base_url}/api/{method}"
        logger.debug("Calling %s with %d argument(s)", method, len(args))
        return await post_json(url, list(args), timeout=self._timeout, client=self._client)

    # -- Inventory --

    async def list_editor_extensions(self, editor_id: str) -> list[ExtensionRecord]:
        data = await self._call("GetEditorExtensions", editor_id)
        return [ExtensionRecord.from_dict(d) for d in _as_list(data, "GetEditorExtensions")]

    async def list_installed_extensions(self, path: str) -> list[ExtensionRecord]:
        data = await self._call("GetInstalledExtensions", path)
        return [
            ExtensionRecord.from_dict(d) for d in _as_list(data, "GetInstalledExtensions")
        ]

    # -- Trust --

    async def validate_extension(self, extension_id: str) -> ValidationResult:
        data = await self._call("ValidateExtension", extension_id)
        return ValidationResult.from_dict(_as_dict(data, "ValidateExtension"))

    async def audit_extensions(self, path: str) -> AuditReport:
        data = await self._call("AuditAllExtensions", path)
        return AuditReport.from_dict(_as_dict(data, "AuditAllExtensions"))

    # -- Marketplace --

    async def search_marketplace(self, keyword: str) -> list[ExtensionMetadata]:
        data = await self._call("SearchMarketplace", keyword)
        return [ExtensionMetadata.from_dict(d) for d in _as_list(data, "SearchMarketplace")]

    # -- Editors --

    async def get_editor_profiles(self) -> list[EditorProfile]:
        data = await self._call("GetEditorProfiles")
        return [EditorProfile.from_dict(d) for d in _as_list(data, "GetEditorProfiles")]

    async def get_editor_statuses(self) -> list[EditorStatus]:
        data = await self._call("GetAllEditorStatuses")
        return [EditorStatus.from_dict(d) for d in _as_list(data, "GetAllEditorStatuses")]

    async def get_cli_status(self) -> CLIStatus:
        data = await self._call("GetCLIStatus")
        return CLIStatus.from_dict(_as_dict(data, "GetCLIStatus"))

    async def install_extension(self, cli_command: str, extension_id: str) -> None:
        await self._call("InstallExtensionViaCLI", cli_command, extension_id)

    # -- Sync --

    async def sync_extensions(
        self,
        source_editor: str,
        target_editors: Sequence[str],
        extension_ids: Sequence[str],
        overwrite: bool,
    ) -> SyncReport:
        data = await self._call(
            "SyncExtensions",
            source_editor,
            list(target_editors),
            list(extension_ids),
            overwrite,
        )
        return SyncReport.from_dict(_as_dict(data, "SyncExtensions"))

    async def detect_conflicts(
        self,
        source_editor: str,
        target_editor: str,
        extension_ids: Sequence[str],
    ) -> list[str]:
        data = await self._call(
            "DetectSyncConflicts", source_editor, target_editor, list(extension_ids)
        )
        return [str(c) for c in _as_list(data, "DetectSyncConflicts")]
