"""Shared test helpers: an in-memory backend and model builders.

``FakeBackend`` keeps editor inventories in memory and behaves like the
real backend for conflicts and syncs. Tests steer it three ways:

- ``fail(method, exc)`` makes every call to ``method`` raise ``exc``;
- ``queue(method, *values)`` returns (or raises) the queued values first;
- ``gate(method)`` returns an ``asyncio.Event`` the call waits on, which
  lets a test interleave completions deterministically.

Every call is recorded in ``calls`` as ``(method, args)``.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from typing import Any

from vsynx.backend.base import ExtensionBackend
from vsynx.backend.models import (
    AuditReport,
    CLIStatus,
    EditorFamily,
    EditorProfile,
    EditorStatus,
    ExtensionMetadata,
    ExtensionRecord,
    SyncReport,
    SyncResult,
    TrustLevel,
    ValidationResult,
)
from vsynx.editors.registry import CLI_COMMANDS

# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def make_record(ext_id: str, version: str = "1.0.0") -> ExtensionRecord:
    """An installed extension record."""
    publisher, _, name = ext_id.partition(".")
    return ExtensionRecord(id=ext_id, version=version, publisher=publisher, name=name)


def make_meta(ext_id: str, verified: bool = True) -> ExtensionMetadata:
    """A marketplace search result."""
    publisher, _, name = ext_id.partition(".")
    return ExtensionMetadata(
        id=ext_id,
        publisher=publisher,
        name=name,
        display_name=name.title(),
        version="2.0.0",
        is_verified_publisher=verified,
        source="marketplace",
    )


def make_verdict(ext_id: str, level: TrustLevel = TrustLevel.LEGITIMATE) -> ValidationResult:
    """A validation verdict for ``ext_id``."""
    return ValidationResult(extension_id=ext_id, trust_level=level, recommendation="ok")


def make_audit(*levels: TrustLevel) -> AuditReport:
    """An audit report with one result per level."""
    results = tuple(make_verdict(f"pub.ext{i}", level) for i, level in enumerate(levels))
    return AuditReport(
        total_extensions=len(results),
        legitimate_count=levels.count(TrustLevel.LEGITIMATE),
        suspicious_count=levels.count(TrustLevel.SUSPICIOUS),
        malicious_count=levels.count(TrustLevel.MALICIOUS),
        unknown_count=levels.count(TrustLevel.UNKNOWN),
        results=results,
        audit_time="2026-01-01T00:00:00Z",
    )


def _profile(editor_id: str, name: str, family: EditorFamily) -> EditorProfile:
    return EditorProfile(
        id=editor_id,
        name=name,
        extensions_dir=f"/home/user/.{editor_id}/extensions",
        cli_command=CLI_COMMANDS.get(editor_id),
        family=family,
    )


def default_profiles() -> list[EditorProfile]:
    """The six editors the backend ships with."""
    vs = EditorFamily.VSCODE
    clone = EditorFamily.CLONE
    return [
        _profile("vscode", "VS Code", vs),
        _profile("vscode-insiders", "VS Code Insiders", vs),
        _profile("vscodium", "VSCodium", vs),
        _profile("windsurf", "Windsurf", clone),
        _profile("cursor", "Cursor", clone),
        _profile("kiro", "Kiro", clone),
    ]


UNAVAILABLE = {"vscode-insiders", "vscodium", "kiro"}


# ---------------------------------------------------------------------------
# Fake backend
# ---------------------------------------------------------------------------


class FakeBackend(ExtensionBackend):
    """In-memory backend for controller and CLI tests.

    By default vscode, windsurf and cursor are available; only the
    ``code`` CLI is on PATH.
    """

    def __init__(self) -> None:
        self.profiles = default_profiles()
        self.unavailable: set[str] = set(UNAVAILABLE)
        self.cli_status = CLIStatus(
            vscode_available=True,
            vscode_path="/usr/bin/code",
            any_available=True,
            preferred_cli="code",
        )
        self.inventories: dict[str, list[ExtensionRecord]] = {}
        self.audit_reports: dict[str, AuditReport] = {}
        self.verdicts: dict[str, ValidationResult] = {}
        self.marketplace: list[ExtensionMetadata] = []
        self.sync_errors: dict[str, list[str]] = {}
        self.installed: list[tuple[str, str]] = []
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self._failures: dict[str, Exception] = {}
        self._queued: dict[str, list[Any]] = {}
        self._gates: dict[str, asyncio.Event] = {}

    # -- Steering --

    def fail(self, method: str, exc: Exception) -> None:
        self._failures[method] = exc

    def recover(self, method: str) -> None:
        self._failures.pop(method, None)

    def queue(self, method: str, *values: Any) -> None:
        self._queued.setdefault(method, []).extend(values)

    def gate(self, method: str) -> asyncio.Event:
        """Hold calls to ``method`` until the returned event is set."""
        event = asyncio.Event()
        self._gates[method] = event
        return event

    def calls_to(self, method: str) -> list[tuple[Any, ...]]:
        return [args for name, args in self.calls if name == method]

    def set_inventory(self, editor_id: str, *ext_ids: str) -> None:
        self.inventories[editor_id] = [make_record(e) for e in ext_ids]

    async def _enter(self, method: str, *args: Any) -> Any:
        """Record the call, honour gates and failures, pop queued values.

        Returns:
            A queued value, or None when nothing is queued.
        """
        self.calls.append((method, args))
        gate = self._gates.get(method)
        if gate is not None:
            await gate.wait()
        queued = self._queued.get(method)
        if queued:
            value = queued.pop(0)
            if isinstance(value, Exception):
                raise value
            return value
        if method in self._failures:
            raise self._failures[method]
        return None

    def _keys(self, editor_id: str) -> set[str]:
        return {r.key for r in self.inventories.get(editor_id, [])}

    # -- ExtensionBackend --

    async def list_editor_extensions(self, editor_id: str) -> list[ExtensionRecord]:
        queued = await self._enter("list_editor_extensions", editor_id)
        if queued is not None:
            return queued
        return list(self.inventories.get(editor_id, []))

    async def list_installed_extensions(self, path: str) -> list[ExtensionRecord]:
        queued = await self._enter("list_installed_extensions", path)
        if queued is not None:
            return queued
        for profile in self.profiles:
            if profile.extensions_dir == path:
                return list(self.inventories.get(profile.id, []))
        return []

    async def validate_extension(self, extension_id: str) -> ValidationResult:
        queued = await self._enter("validate_extension", extension_id)
        if queued is not None:
            return queued
        return self.verdicts.get(extension_id, make_verdict(extension_id, TrustLevel.UNKNOWN))

    async def audit_extensions(self, path: str) -> AuditReport:
        queued = await self._enter("audit_extensions", path)
        if queued is not None:
            return queued
        return self.audit_reports.get(path, AuditReport.empty())

    async def search_marketplace(self, keyword: str) -> list[ExtensionMetadata]:
        queued = await self._enter("search_marketplace", keyword)
        if queued is not None:
            return queued
        needle = keyword.lower()
        return [m for m in self.marketplace if needle in m.id.lower()]

    async def get_editor_profiles(self) -> list[EditorProfile]:
        await self._enter("get_editor_profiles")
        return list(self.profiles)

    async def get_editor_statuses(self) -> list[EditorStatus]:
        await self._enter("get_editor_statuses")
        statuses = []
        for profile in self.profiles:
            available = profile.id not in self.unavailable
            statuses.append(
                EditorStatus(
                    editor=profile,
                    is_available=available,
                    extension_count=len(self.inventories.get(profile.id, [])),
                    disabled_reason="" if available else "Extensions directory not found",
                    dir_exists=available,
                    index_file_exists=available,
                    cli_available=self.cli_status.command_for(profile.id) is not None,
                )
            )
        return statuses

    async def get_cli_status(self) -> CLIStatus:
        await self._enter("get_cli_status")
        return self.cli_status

    async def install_extension(self, cli_command: str, extension_id: str) -> None:
        await self._enter("install_extension", cli_command, extension_id)
        self.installed.append((cli_command, extension_id))
        for editor_id, command in CLI_COMMANDS.items():
            if command == cli_command and extension_id.lower() not in self._keys(editor_id):
                self.inventories.setdefault(editor_id, []).append(make_record(extension_id))

    async def sync_extensions(
        self,
        source_editor: str,
        target_editors: Sequence[str],
        extension_ids: Sequence[str],
        overwrite: bool,
    ) -> SyncReport:
        queued = await self._enter(
            "sync_extensions", source_editor, tuple(target_editors),
            tuple(extension_ids), overwrite,
        )
        if queued is not None:
            return queued

        results = []
        for target in target_editors:
            existing = self._keys(target)
            copied = skipped = overwritten = 0
            conflicts = []
            for ext_id in extension_ids:
                if ext_id.lower() in existing:
                    conflicts.append(ext_id)
                    if not overwrite:
                        skipped += 1
                        continue
                    overwritten += 1
                else:
                    self.inventories.setdefault(target, []).append(make_record(ext_id))
                copied += 1
            errors = tuple(self.sync_errors.get(target, []))
            results.append(
                SyncResult(
                    target_editor=target,
                    success=not errors,
                    copied_count=copied,
                    skipped_count=skipped,
                    overwritten_count=overwritten,
                    index_updated=copied > 0,
                    conflicts=tuple(conflicts),
                    errors=errors,
                )
            )
        return SyncReport(
            source_editor=source_editor,
            results=tuple(results),
            total_copied=sum(r.copied_count for r in results),
            total_skipped=sum(r.skipped_count for r in results),
            total_errors=sum(len(r.errors) for r in results),
        )

    async def detect_conflicts(
        self,
        source_editor: str,
        target_editor: str,
        extension_ids: Sequence[str],
    ) -> list[str]:
        queued = await self._enter(
            "detect_conflicts", source_editor, target_editor, tuple(extension_ids)
        )
        if queued is not None:
            return queued
        existing = self._keys(target_editor)
        return [e for e in extension_ids if e.lower() in existing]
