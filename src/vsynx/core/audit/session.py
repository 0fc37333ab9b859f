"""Audit session state machine with cooperative cancellation.

One audit runs at a time. Its lifecycle is::

    IDLE --start--> RUNNING --+--> COMPLETED  (report shown and cached)
                              +--> CANCELLED  (late result discarded)
                              +--> FAILED     (error notice, cache untouched)

and the controller is back in ``IDLE`` as soon as any outcome is reached.

Cancellation never interrupts the in-flight request. Each ``start`` takes
a generation number; ``cancel`` and superseding starts advance the
generation, and a completion whose generation is stale is dropped
without touching state. Reports are cached per editor id so switching
editors restores the last audit instead of recomputing it.
"""

from __future__ import annotations

import logging
from enum import Enum

from vsynx.backend.base import ExtensionBackend
from vsynx.backend.models import AuditReport, ValidationResult
from vsynx.core.notices import Notices
from vsynx.editors.directory import EditorDirectory
from vsynx.editors.registry import VSCODE
from vsynx.exceptions import BackendError, InputError, InvalidStateError

logger = logging.getLogger(__name__)


class AuditState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"


class AuditOutcome(str, Enum):
    """How one ``start`` invocation ended."""

    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"


class AuditSessionController:
    """Runs audits for the current editor and caches their reports.

    Args:
        backend: Backend used for audits and single validations.
        notices: Sink for user-visible errors.
        directory: Resolves an editor id to its extensions path. Optional
            when every ``start`` call passes an explicit path.
        current_editor: Editor whose report is displayed initially.
    """

    def __init__(
        self,
        backend: ExtensionBackend,
        notices: Notices,
        directory: EditorDirectory | None = None,
        current_editor: str = VSCODE,
    ) -> None:
        self._backend = backend
        self._notices = notices
        self._directory = directory
        self._generation = 0
        self._cache: dict[str, AuditReport] = {}
        self.state = AuditState.IDLE
        self.running_editor: str | None = None
        self.current_editor = current_editor
        self.report: AuditReport = AuditReport.empty()
        self.validation_result: ValidationResult | None = None
        self.validating = False

    @property
    def loading(self) -> bool:
        return self.state is AuditState.RUNNING

    def cached(self, editor_id: str) -> AuditReport | None:
        return self._cache.get(editor_id)

    def cached_editors(self) -> list[str]:
        return list(self._cache)

    def _resolve_path(self, editor_id: str, path: str | None) -> str:
        if path:
            return path
        if self._directory is None:
            raise InputError(f"No extensions path known for editor {editor_id}")
        return self._directory.extensions_dir(editor_id)

    async def start(self, editor_id: str | None = None, path: str | None = None) -> AuditOutcome:
        """Audit every extension of ``editor_id`` (default: current editor).

        Args:
            editor_id: Editor to audit; becomes the current editor.
            path: Extensions directory override (e.g. a user-edited path).

        Returns:
            The outcome of this invocation.

        Raises:
            InvalidStateError: If an audit is running for another editor.
        """
        editor = editor_id or self.current_editor
        if self.state is AuditState.RUNNING and self.running_editor != editor:
            raise InvalidStateError(
                f"Audit already running for {self.running_editor}; cancel it first"
            )
        audit_path = self._resolve_path(editor, path)
        if editor != self.current_editor:
            self.current_editor = editor
            self.report = self._cache.get(editor, AuditReport.empty())

        self._generation += 1
        token = self._generation
        self.state = AuditState.RUNNING
        self.running_editor = editor
        self._notices.clear_error()
        logger.info("Starting audit for %s at %s", editor, audit_path)

        try:
            report = await self._backend.audit_extensions(audit_path)
        except BackendError as exc:
            if token != self._generation:
                logger.debug("Discarding failure of superseded audit for %s", editor)
                return AuditOutcome.CANCELLED
            self._finish()
            self._notices.post_error(f"Failed to audit extensions: {exc}")
            return AuditOutcome.FAILED

        if token != self._generation:
            logger.debug("Discarding result of cancelled audit for %s", editor)
            return AuditOutcome.CANCELLED

        self._finish()
        self._cache[editor] = report
        if editor == self.current_editor:
            self.report = report
        logger.info(
            "Audit complete for %s: %d extension(s), %d malicious, %d suspicious",
            editor, report.total_extensions, report.malicious_count,
            report.suspicious_count,
        )
        return AuditOutcome.COMPLETED

    def _finish(self) -> None:
        self.state = AuditState.IDLE
        self.running_editor = None

    def cancel(self) -> None:
        """Stop waiting for the running audit; its result will be ignored."""
        if self.state is AuditState.RUNNING:
            logger.info("Audit for %s cancelled", self.running_editor)
        self._generation += 1
        self._finish()

    def switch_editor(self, editor_id: str) -> AuditReport:
        """Make ``editor_id`` current and show its cached report.

        Any running audit is cancelled. Audits are never recomputed here.

        Returns:
            The cached report for ``editor_id`` or an empty report.
        """
        self.cancel()
        self.current_editor = editor_id
        self.report = self._cache.get(editor_id, AuditReport.empty())
        return self.report

    async def validate(self, extension_id: str) -> ValidationResult | None:
        """Validate one installed extension and keep the verdict.

        Returns:
            The verdict, or None if the backend call failed.
        """
        if not extension_id.strip():
            self._notices.post_error("Please choose an extension to validate")
            return None
        self.validating = True
        self._notices.clear_error()
        try:
            result = await self._backend.validate_extension(extension_id.strip())
        except BackendError as exc:
            self._notices.post_error(f"Failed to validate extension: {exc}")
            return None
        finally:
            self.validating = False
        self.validation_result = result
        return result
