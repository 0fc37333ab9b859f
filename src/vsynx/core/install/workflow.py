"""Install a marketplace extension, then copy it to other editors.

The workflow is two-phase and not transactional:

1. install the selected search result into the install target through
   its CLI;
2. only if that succeeded, sync the one extension from the install
   target to every chosen editor.

A failed phase 2 leaves the installation in place. Phase 2 always passes
``overwrite=True``: unlike the guided sync there is no conflict
confirmation, an existing copy in a target is replaced.
"""

from __future__ import annotations

import logging

from vsynx.backend.base import ExtensionBackend
from vsynx.backend.models import ExtensionMetadata, SyncReport
from vsynx.core.notices import Notices
from vsynx.core.search.controller import SearchController
from vsynx.editors.directory import EditorDirectory
from vsynx.exceptions import BackendError

logger = logging.getLogger(__name__)


class InstallSyncWorkflow:
    """Install-then-sync shortcut for the selected marketplace result.

    Args:
        backend: Backend used for the CLI install and the sync.
        notices: Sink for user-visible messages.
        directory: Provides the install target and CLI availability.
        search: Holds the selected marketplace result.
    """

    def __init__(
        self,
        backend: ExtensionBackend,
        notices: Notices,
        directory: EditorDirectory,
        search: SearchController,
    ) -> None:
        self._backend = backend
        self._notices = notices
        self._directory = directory
        self._search = search
        self._targets: list[str] = []
        self.in_progress = False
        self.installing = False

    @property
    def targets(self) -> tuple[str, ...]:
        return tuple(self._targets)

    def open(self) -> None:
        """Start a fresh target selection."""
        self._targets = []

    def toggle_target(self, editor_id: str) -> bool:
        """Add or remove a sync target; returns True if it is now selected.

        Only available editors outside the VS Code family qualify, and
        never the install target itself.
        """
        if editor_id in self._targets:
            self._targets.remove(editor_id)
            return False
        if editor_id == self._directory.install_target:
            self._notices.post_error("Target editor must differ from the install target")
            return False
        if not self._directory.is_available(editor_id):
            reason = self._directory.disabled_reason(editor_id)
            self._notices.post_error(f"Editor {editor_id} is not available: {reason}")
            return False
        if self._directory.profile(editor_id).is_vscode_family:
            self._notices.post_error(
                f"Editor {editor_id} has its own CLI; install into it directly"
            )
            return False
        self._targets.append(editor_id)
        return True

    def _cli_command(self) -> str | None:
        if not self._directory.cli_status.any_available:
            self._notices.post_error("No VS Code CLI available")
            return None
        command = self._directory.install_command()
        if command is None:
            self._notices.post_error(f"CLI not available for {self._directory.install_target}")
        return command

    async def install_only(self, extension_id: str | None = None) -> bool:
        """Install one extension into the install target without syncing.

        Args:
            extension_id: Extension to install; defaults to the selected
                search result.

        Returns:
            True if the install succeeded.
        """
        if extension_id is None:
            selected = self._search.selected_result
            if selected is None:
                self._notices.post_error("Please select an extension to install")
                return False
            extension_id = selected.id
        command = self._cli_command()
        if command is None:
            return False

        target = self._directory.install_target
        self.installing = True
        self._notices.clear_error()
        try:
            await self._backend.install_extension(command, extension_id)
        except BackendError as exc:
            self._notices.post_error(f"Failed to install: {exc}")
            return False
        finally:
            self.installing = False
        self._notices.post_info(f"Successfully installed {extension_id} to {target}")
        return True

    async def run(self) -> SyncReport | None:
        """Install the selected result, then sync it to the chosen targets.

        Returns:
            The sync report, or None if a precondition or either phase
            failed.
        """
        selected: ExtensionMetadata | None = self._search.selected_result
        if selected is None:
            self._notices.post_error("Please select an extension to install")
            return None
        if not self._directory.cli_status.any_available:
            self._notices.post_error("No VS Code CLI available")
            return None
        if not self._targets:
            self._notices.post_error("Please select at least one target editor")
            return None
        command = self._cli_command()
        if command is None:
            return None

        source = self._directory.install_target
        targets = list(self._targets)
        self.in_progress = True
        self._notices.clear_error()
        try:
            logger.info("Install+Sync: installing %s via %s", selected.id, command)
            try:
                await self._backend.install_extension(command, selected.id)
            except BackendError as exc:
                self._notices.post_error(f"Install+Sync failed: {exc}")
                return None

            logger.info("Install+Sync: syncing %s to %s", selected.id, ", ".join(targets))
            try:
                report = await self._backend.sync_extensions(
                    source, targets, [selected.id], True
                )
            except BackendError as exc:
                self._notices.post_error(
                    f"Installed {selected.id}, but syncing to other editors failed: {exc}"
                )
                return None
        finally:
            self.in_progress = False

        self._targets = []
        if report.has_errors:
            self._notices.post_error(f"Installed and synced with {report.total_errors} errors")
        else:
            self._notices.post_info(
                f"Successfully installed {selected.id} and synced to "
                f"{report.total_copied} target(s)"
            )
        return report
