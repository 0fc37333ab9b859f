"""Multi-target extension sync with a conflict pre-flight.

The orchestrator owns the selection (extension ids), the source editor,
the ordered set of target editors and the inventory cache of those
targets. A sync attempt runs in three steps:

1. **Pre-flight**: one conflict query per target, issued concurrently.
   The conflict set is the union over all targets; a target whose query
   fails contributes nothing and is named in an error notice.
2. **Confirmation**: a non-empty conflict set parks the orchestrator in
   ``CONFLICT_CONFIRMATION`` until the user skips or overwrites.
3. **Execution**: a single backend request; its report is applied in one
   step, shown for ``reset_delay`` seconds, then all selection state is
   cleared for the next sync.

The candidate list shown to the user is a pure projection (id filter and
missing/present mode) and never changes the selection.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable

from vsynx.backend.base import ExtensionBackend
from vsynx.backend.models import ExtensionRecord, SyncReport
from vsynx.config import DEFAULT_SYNC_RESET_DELAY
from vsynx.core.inventory.cache import InventoryCache
from vsynx.core.notices import Notices
from vsynx.core.sync.models import FilterMode, SyncPhase
from vsynx.editors.directory import EditorDirectory
from vsynx.editors.registry import VSCODE
from vsynx.exceptions import BackendError, InvalidStateError

logger = logging.getLogger(__name__)


class SyncOrchestrator:
    """Selection, conflict detection and execution of extension syncs.

    Args:
        backend: Backend used for inventory, conflict and sync calls.
        notices: Sink for user-visible messages.
        inventory: Cache of target inventories (owned by this orchestrator).
        directory: Editor availability; when omitted every editor is
            treated as available.
        source_editor: Editor extensions are copied from.
        reset_delay: Seconds the final report stays before the reset.
    """

    def __init__(
        self,
        backend: ExtensionBackend,
        notices: Notices,
        inventory: InventoryCache,
        directory: EditorDirectory | None = None,
        *,
        source_editor: str = VSCODE,
        reset_delay: float = DEFAULT_SYNC_RESET_DELAY,
    ) -> None:
        self._backend = backend
        self._notices = notices
        self._inventory = inventory
        self._directory = directory
        self._reset_delay = reset_delay
        self._targets: list[str] = []
        self._reset_task: asyncio.Task[None] | None = None
        self.source_editor = source_editor
        self.candidates: list[ExtensionRecord] = []
        self.selection: set[str] = set()
        self.conflicts: frozenset[str] = frozenset()
        self.report: SyncReport | None = None
        self.phase = SyncPhase.SELECTING
        self.loading = False
        self.search_filter = ""
        self.filter_mode = FilterMode.ALL

    # -- Source --

    @property
    def targets(self) -> tuple[str, ...]:
        return tuple(self._targets)

    def set_source(self, editor_id: str) -> bool:
        """Switch the source editor.

        The selection is cleared (its ids belong to the old source) and
        the new source is dropped from the targets.

        Returns:
            False if the editor is unavailable.
        """
        if not self._editor_available(editor_id):
            return False
        if editor_id == self.source_editor:
            return True
        self.source_editor = editor_id
        self.selection = set()
        self.candidates = []
        if editor_id in self._targets:
            self._targets.remove(editor_id)
        return True

    async def load_source(self, editor_id: str | None = None) -> list[ExtensionRecord] | None:
        """Fetch the source editor's extensions as the candidate list."""
        if editor_id is not None and not self.set_source(editor_id):
            return None
        self.loading = True
        try:
            records = await self._backend.list_editor_extensions(self.source_editor)
        except BackendError as exc:
            self._notices.post_error(f"Failed to load extensions: {exc}")
            return None
        finally:
            self.loading = False
        self.candidates = list(records)
        return self.candidates

    # -- View projection --

    @property
    def targets_loaded(self) -> bool:
        """True once every selected target's inventory is cached."""
        return all(self._inventory.is_loaded(t) for t in self._targets)

    def _present_anywhere(self, extension_id: str) -> bool:
        return any(self._inventory.has(t, extension_id) for t in self._targets)

    def is_missing_from_all_targets(self, extension_id: str) -> bool:
        """View helper; False until targets exist and are all loaded."""
        if not self._targets or not self.targets_loaded:
            return False
        return not self._present_anywhere(extension_id)

    def exists_in_any_target(self, extension_id: str) -> bool:
        """View helper; False until targets exist and are all loaded."""
        if not self._targets or not self.targets_loaded:
            return False
        return self._present_anywhere(extension_id)

    def visible(self) -> list[ExtensionRecord]:
        """Candidates passing the id filter and the filter mode."""
        needle = self.search_filter.lower()
        shown: list[ExtensionRecord] = []
        for record in self.candidates:
            if needle and needle not in record.key:
                continue
            if self.filter_mode is FilterMode.MISSING and not self.is_missing_from_all_targets(record.id):
                continue
            if self.filter_mode is FilterMode.PRESENT and not self.exists_in_any_target(record.id):
                continue
            shown.append(record)
        return shown

    def missing_count(self) -> int:
        return sum(1 for r in self.candidates if self.is_missing_from_all_targets(r.id))

    def present_count(self) -> int:
        return sum(1 for r in self.candidates if self.exists_in_any_target(r.id))

    # -- Selection --

    def toggle_extension(self, extension_id: str) -> bool:
        """Flip membership of ``extension_id``; returns the new membership."""
        if extension_id in self.selection:
            self.selection.discard(extension_id)
            return False
        self.selection.add(extension_id)
        return True

    def _select(self, ids: Iterable[str]) -> None:
        self.selection |= set(ids)

    def select_all_visible(self) -> None:
        self._select(r.id for r in self.visible())

    def select_missing(self) -> None:
        """Add visible candidates found in no target.

        An unloaded target counts as not containing the extension.
        """
        self._select(r.id for r in self.visible() if not self._present_anywhere(r.id))

    def select_present(self) -> None:
        """Add visible candidates found in at least one target."""
        self._select(r.id for r in self.visible() if self._present_anywhere(r.id))

    def clear_selection(self) -> None:
        self.selection = set()

    # -- Targets --

    def _editor_available(self, editor_id: str) -> bool:
        if self._directory is None or self._directory.is_available(editor_id):
            return True
        reason = self._directory.disabled_reason(editor_id)
        self._notices.post_error(f"Editor {editor_id} is not available: {reason}")
        return False

    async def toggle_target(self, editor_id: str) -> bool:
        """Add or remove a target editor.

        Adding fetches the target's inventory, discarding any entry cached
        from an earlier selection. Removing keeps the cached entry.

        Returns:
            True if ``editor_id`` is a target afterwards.
        """
        if editor_id in self._targets:
            self._targets.remove(editor_id)
            return False
        if editor_id == self.source_editor:
            self._notices.post_error("Target editor must differ from the source editor")
            return False
        if not self._editor_available(editor_id):
            return False

        self._inventory.invalidate(editor_id)
        self._targets.append(editor_id)
        try:
            await self._inventory.ensure_loaded(editor_id)
        except BackendError as exc:
            self._notices.post_error(
                f"Failed to load target editor extensions for {editor_id}: {exc}"
            )
        return True

    # -- Sync --

    def _check_ready(self) -> bool:
        if not self.selection:
            self._notices.post_error("Please select at least one extension to sync")
            return False
        if not self._targets:
            self._notices.post_error("Please select at least one target editor")
            return False
        return True

    async def _detect_for_target(
        self, target: str, ids: list[str]
    ) -> frozenset[str] | BackendError:
        try:
            conflicts = await self._backend.detect_conflicts(self.source_editor, target, ids)
        except BackendError as exc:
            logger.warning("Conflict detection failed for %s: %s", target, exc)
            return exc
        return frozenset(conflicts)

    async def detect_conflicts(self) -> dict[str, frozenset[str]]:
        """Query every target for conflicts with the current selection.

        Targets whose query failed are left out and named in an error
        notice; the sync treats them as conflict-free.

        Returns:
            Conflicting ids per target.
        """
        ids = sorted(self.selection)
        targets = list(self._targets)
        results = await asyncio.gather(*(self._detect_for_target(t, ids) for t in targets))
        per_target: dict[str, frozenset[str]] = {}
        failures: list[str] = []
        for target, result in zip(targets, results):
            if isinstance(result, BackendError):
                failures.append(f"{target}: {result}")
            else:
                per_target[target] = result
        if failures:
            self._notices.post_error(
                f"Failed to detect conflicts for {'; '.join(failures)}"
            )
        return per_target

    async def start_sync(self) -> SyncReport | None:
        """Run the conflict pre-flight and execute when there is nothing to confirm.

        Returns:
            The report if the sync executed immediately, else None (a
            validation error, or conflicts awaiting confirmation).

        A call while another request is loading is ignored.

        Raises:
            InvalidStateError: If conflicts await confirmation or a report
                is being shown.
        """
        if self.loading:
            logger.debug("Ignoring sync start while a request is in flight")
            return None
        if self.phase is not SyncPhase.SELECTING:
            raise InvalidStateError(f"Cannot start a sync while {self.phase.value}")
        if not self._check_ready():
            return None

        self.loading = True
        self._notices.clear_error()
        try:
            per_target = await self.detect_conflicts()
        finally:
            self.loading = False

        conflicts = frozenset().union(*per_target.values())
        if conflicts:
            self.conflicts = conflicts
            self.phase = SyncPhase.CONFLICT_CONFIRMATION
            logger.info("Sync paused on %d conflicting extension(s)", len(conflicts))
            return None
        return await self._execute(overwrite=False)

    def _require_confirmation(self) -> None:
        if self.phase is not SyncPhase.CONFLICT_CONFIRMATION:
            raise InvalidStateError("No conflicts are awaiting confirmation")

    async def skip_conflicts(self) -> SyncReport | None:
        """Sync, leaving conflicting extensions untouched in the targets."""
        self._require_confirmation()
        return await self._execute(overwrite=False)

    async def overwrite_all(self) -> SyncReport | None:
        """Sync, replacing conflicting extensions in the targets."""
        self._require_confirmation()
        return await self._execute(overwrite=True)

    def cancel_conflicts(self) -> None:
        """Abandon the pending confirmation and keep the selection."""
        self._require_confirmation()
        self.conflicts = frozenset()
        self.phase = SyncPhase.SELECTING

    async def execute(self, overwrite: bool) -> SyncReport | None:
        """Send one sync request for the current selection and targets.

        Per-target errors in the report are a partial success and are not
        rolled back. After ``reset_delay`` the orchestrator resets.

        Returns:
            The report, or None if validation or the backend call failed.
        """
        self._notices.clear_error()
        return await self._execute(overwrite)

    async def _execute(self, overwrite: bool) -> SyncReport | None:
        if self.phase in (SyncPhase.EXECUTING, SyncPhase.REPORTING):
            raise InvalidStateError(f"Cannot execute a sync while {self.phase.value}")
        if not self._check_ready():
            return None

        targets = list(self._targets)
        ids = sorted(self.selection)
        self.phase = SyncPhase.EXECUTING
        self.loading = True
        logger.info(
            "Syncing %d extension(s) from %s to %s (overwrite=%s)",
            len(ids), self.source_editor, ", ".join(targets), overwrite,
        )
        try:
            report = await self._backend.sync_extensions(
                self.source_editor, targets, ids, overwrite
            )
        except BackendError as exc:
            self.conflicts = frozenset()
            self.phase = SyncPhase.SELECTING
            self._notices.post_error(f"Failed to sync: {exc}")
            return None
        finally:
            self.loading = False

        self.report = report
        self.phase = SyncPhase.REPORTING
        if report.has_errors:
            self._notices.post_error(
                f"Sync completed with {report.total_errors} errors. "
                f"{report.total_copied} extensions copied."
            )
        else:
            self._notices.post_info(
                f"Sync complete! {report.total_copied} extensions copied "
                f"to {len(targets)} editor(s)."
            )
        self._reset_task = asyncio.get_running_loop().create_task(self._reset_later())
        return report

    async def _reset_later(self) -> None:
        await asyncio.sleep(self._reset_delay)
        self._reset_task = None
        self.reset()

    async def wait_for_reset(self) -> None:
        """Wait until a scheduled post-sync reset has happened."""
        if self._reset_task is not None:
            await self._reset_task

    def reset(self) -> None:
        """Return to a clean state: no selection, targets, cache or report."""
        if self._reset_task is not None:
            self._reset_task.cancel()
            self._reset_task = None
        self._inventory.clear()
        self._targets = []
        self.selection = set()
        self.conflicts = frozenset()
        self.report = None
        self.phase = SyncPhase.SELECTING
        logger.debug("Sync state reset")

    def close(self) -> None:
        """Cancel a scheduled reset without touching the current state."""
        if self._reset_task is not None:
            self._reset_task.cancel()
            self._reset_task = None
