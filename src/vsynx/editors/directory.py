"""Session catalog of editor profiles and their live availability.

Profiles are fetched once per session and never change afterwards.
Statuses (availability, extension counts) are recomputed by ``reload``.
The directory also remembers which editor receives CLI installs, chosen
at load time as the first VS Code family editor whose CLI is on PATH.
"""

from __future__ import annotations

import logging

from vsynx.backend.base import ExtensionBackend
from vsynx.backend.models import CLIStatus, EditorProfile, EditorStatus
from vsynx.core.notices import Notices
from vsynx.editors.registry import INSTALL_TARGET_PREFERENCE, VSCODE
from vsynx.exceptions import BackendError, UnknownEditorError

logger = logging.getLogger(__name__)


class EditorDirectory:
    """Known editors, their availability and the CLI install target.

    Usage::

        directory = EditorDirectory(backend, notices)
        await directory.load()
        for status in directory.statuses:
            print(status.editor.name, status.is_available)
    """

    def __init__(self, backend: ExtensionBackend, notices: Notices) -> None:
        self._backend = backend
        self._notices = notices
        self._profiles: dict[str, EditorProfile] = {}
        self._statuses: dict[str, EditorStatus] = {}
        self._cli_status = CLIStatus()
        self._loaded = False
        self.install_target: str = VSCODE

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def profiles(self) -> list[EditorProfile]:
        return list(self._profiles.values())

    @property
    def statuses(self) -> list[EditorStatus]:
        return [self._statuses[eid] for eid in self._profiles if eid in self._statuses]

    @property
    def cli_status(self) -> CLIStatus:
        return self._cli_status

    async def load(self) -> bool:
        """Fetch profiles, statuses and CLI availability.

        Returns:
            True if the directory loaded; False if the backend failed
            (a notice is posted and the directory stays unloaded).
        """
        try:
            profiles = await self._backend.get_editor_profiles()
            statuses = await self._backend.get_editor_statuses()
            cli_status = await self._backend.get_cli_status()
        except BackendError as exc:
            self._notices.post_error(f"Failed to load editor data: {exc}")
            return False

        self._profiles = {p.id: p for p in profiles}
        self._statuses = {s.editor.id: s for s in statuses}
        self._cli_status = cli_status
        for editor_id in INSTALL_TARGET_PREFERENCE:
            if cli_status.command_for(editor_id):
                self.install_target = editor_id
                break
        self._loaded = True
        logger.info(
            "Loaded %d editor profiles (%d available)",
            len(self._profiles), len(self.available_ids()),
        )
        return True

    async def reload(self) -> bool:
        """Recompute editor statuses; profiles stay as loaded."""
        try:
            statuses = await self._backend.get_editor_statuses()
        except BackendError as exc:
            self._notices.post_error(f"Failed to refresh editor status: {exc}")
            return False
        self._statuses = {
            s.editor.id: s for s in statuses if s.editor.id in self._profiles
        }
        return True

    def profile(self, editor_id: str) -> EditorProfile:
        try:
            return self._profiles[editor_id]
        except KeyError:
            raise UnknownEditorError(f"unknown editor type: {editor_id}") from None

    def status(self, editor_id: str) -> EditorStatus | None:
        self.profile(editor_id)
        return self._statuses.get(editor_id)

    def is_available(self, editor_id: str) -> bool:
        if editor_id not in self._profiles:
            return False
        status = self._statuses.get(editor_id)
        return status is not None and status.is_available

    def disabled_reason(self, editor_id: str) -> str:
        if editor_id not in self._profiles:
            return f"unknown editor type: {editor_id}"
        status = self._statuses.get(editor_id)
        if status is None:
            return "Editor status not loaded"
        return status.disabled_reason

    def available_ids(self) -> list[str]:
        return [eid for eid in self._profiles if self.is_available(eid)]

    def vscode_family(self) -> list[EditorProfile]:
        return [p for p in self._profiles.values() if p.is_vscode_family]

    def clones(self) -> list[EditorProfile]:
        return [p for p in self._profiles.values() if not p.is_vscode_family]

    def extensions_dir(self, editor_id: str) -> str:
        return self.profile(editor_id).extensions_dir

    def install_command(self) -> str | None:
        """CLI command for the current install target, or None."""
        return self._cli_status.command_for(self.install_target)
