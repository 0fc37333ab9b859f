"""Wire models exchanged with the extension-management backend.

Every model is a dataclass with a ``from_dict`` constructor that accepts
the backend's camelCase JSON. Missing optional fields fall back to
neutral defaults so that older backends remain readable.

- ``EditorProfile`` / ``EditorStatus`` -- editor catalog and availability.
- ``ExtensionRecord`` -- one installed extension in one editor.
- ``ExtensionMetadata`` -- a marketplace hit or registry snapshot.
- ``ValidationResult`` / ``AuditReport`` -- trust verdicts.
- ``SyncResult`` / ``SyncReport`` -- outcome of one sync execution.
- ``CLIStatus`` -- availability of the VS Code family command-line tools.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


# ---------------------------------------------------------------------------
# Trust levels
# ---------------------------------------------------------------------------


class TrustLevel(str, Enum):
    """Backend-assigned trust classification of an extension.

    The value is the exact wire string. Anything the backend sends that
    is not one of the four known levels is read as ``UNKNOWN``.
    """

    LEGITIMATE = "Legitimate"
    SUSPICIOUS = "Suspicious"
    MALICIOUS = "Malicious"
    UNKNOWN = "Unknown"

    @classmethod
    def parse(cls, value: Any) -> TrustLevel:
        """Map a wire value onto a trust level, defaulting to UNKNOWN."""
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN


# ---------------------------------------------------------------------------
# Editors
# ---------------------------------------------------------------------------


class EditorFamily(str, Enum):
    """Whether an editor ships the VS Code command-line interface."""

    VSCODE = "vscode-compatible"
    CLONE = "clone"


@dataclass(frozen=True)
class EditorProfile:
    """Immutable descriptor of a known editor.

    Attributes:
        id: Unique editor key (e.g. "vscode", "windsurf").
        name: Human-readable display name.
        extensions_dir: Absolute path of the editor's extensions directory.
        cli_command: Command-line tool name, if the editor has one.
        family: VS Code family member or clone.
        index_file: Name of the extensions index inside ``extensions_dir``.
        is_custom: True for user-defined editors.
    """

    id: str
    name: str
    extensions_dir: str
    cli_command: str | None = None
    family: EditorFamily = EditorFamily.CLONE
    index_file: str = "extensions.json"
    is_custom: bool = False

    @property
    def is_vscode_family(self) -> bool:
        return self.family is EditorFamily.VSCODE

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EditorProfile:
        family = (
            EditorFamily.VSCODE if data.get("isVSCodeFamily") else EditorFamily.CLONE
        )
        return cls(
            id=str(data["id"]),
            name=str(data.get("name", data["id"])),
            extensions_dir=str(data.get("extensionsDir", "")),
            cli_command=data.get("cliCommand") or None,
            family=family,
            index_file=str(data.get("indexFile") or "extensions.json"),
            is_custom=bool(data.get("isCustom", False)),
        )


@dataclass(frozen=True)
class EditorStatus:
    """Availability of one editor, recomputed on every directory reload.

    Attributes:
        editor: The profile this status describes.
        is_available: Whether the editor may be used as source or target.
        extension_count: Number of extension folders found.
        disabled_reason: Why the editor is unavailable (empty if available).
        dir_exists: Whether the extensions directory exists.
        index_file_exists: Whether the extensions index exists.
        cli_available: Whether the editor's CLI was found on PATH.
        cli_path: Resolved CLI path, if found.
    """

    editor: EditorProfile
    is_available: bool
    extension_count: int = 0
    disabled_reason: str = ""
    dir_exists: bool = False
    index_file_exists: bool = False
    cli_available: bool = False
    cli_path: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EditorStatus:
        return cls(
            editor=EditorProfile.from_dict(data["editor"]),
            is_available=bool(data.get("isAvailable", False)),
            extension_count=int(data.get("extensionCount", 0)),
            disabled_reason=str(data.get("disabledReason", "")),
            dir_exists=bool(data.get("dirExists", False)),
            index_file_exists=bool(data.get("indexFileExists", False)),
            cli_available=bool(data.get("cliAvailable", False)),
            cli_path=str(data.get("cliPath", "")),
        )


# ---------------------------------------------------------------------------
# Extensions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ExtensionRecord:
    """An extension installed in one editor.

    Two editors holding the same id produce two independent records.

    Attributes:
        id: ``publisher.name`` identifier, case preserved for display.
        version: Installed version string.
        enabled: Whether the extension is enabled.
        path: Install path on disk.
        publisher: Publisher part of the id.
        name: Name part of the id.
        last_modified: ISO-8601 timestamp of the install folder.
    """

    id: str
    version: str = ""
    enabled: bool = True
    path: str = ""
    publisher: str = ""
    name: str = ""
    last_modified: str = ""

    @property
    def key(self) -> str:
        """Lower-cased id used for every comparison."""
        return self.id.lower()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ExtensionRecord:
        return cls(
            id=str(data["id"]),
            version=str(data.get("version", "")),
            enabled=bool(data.get("isEnabled", True)),
            path=str(data.get("path", "")),
            publisher=str(data.get("publisher", "")),
            name=str(data.get("name", "")),
            last_modified=str(data.get("lastModified", "")),
        )


@dataclass(frozen=True)
class ExtensionMetadata:
    """Marketplace metadata for one extension.

    Used both for search hits and for the registry snapshots attached to
    a ``ValidationResult``.
    """

    id: str
    publisher: str = ""
    name: str = ""
    display_name: str = ""
    version: str = ""
    description: str = ""
    is_verified_publisher: bool = False
    publisher_domain: str = ""
    repository_url: str = ""
    homepage_url: str = ""
    download_url: str = ""
    source: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ExtensionMetadata:
        return cls(
            id=str(data["id"]),
            publisher=str(data.get("publisher", "")),
            name=str(data.get("name", "")),
            display_name=str(data.get("displayName", "")),
            version=str(data.get("version", "")),
            description=str(data.get("description", "")),
            is_verified_publisher=bool(data.get("isVerifiedPublisher", False)),
            publisher_domain=str(data.get("publisherDomain", "")),
            repository_url=str(data.get("repositoryUrl", "")),
            homepage_url=str(data.get("homepageUrl", "")),
            download_url=str(data.get("downloadUrl", "")),
            source=str(data.get("source", "")),
        )


def _optional_metadata(data: Any) -> ExtensionMetadata | None:
    if not isinstance(data, dict) or not data.get("id"):
        return None
    return ExtensionMetadata.from_dict(data)


# ---------------------------------------------------------------------------
# Validation and audit
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ValidationResult:
    """Trust verdict for a single extension.

    Attributes:
        extension_id: The validated id.
        trust_level: Backend classification.
        marketplace_data: Snapshot from the Microsoft marketplace.
        openvsx_data: Snapshot from Open VSX.
        installed_data: Snapshot of the local install, if known.
        differences: Human-readable differences between registries.
        sha_match: Whether payload hashes matched.
        recommendation: Backend recommendation text.
        validation_time: ISO-8601 timestamp.
        error: Error text if validation could not complete.
    """

    extension_id: str
    trust_level: TrustLevel = TrustLevel.UNKNOWN
    marketplace_data: ExtensionMetadata | None = None
    openvsx_data: ExtensionMetadata | None = None
    installed_data: ExtensionMetadata | None = None
    differences: list[str] = field(default_factory=list)
    sha_match: bool = False
    recommendation: str = ""
    validation_time: str = ""
    error: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ValidationResult:
        return cls(
            extension_id=str(data["extensionId"]),
            trust_level=TrustLevel.parse(data.get("trustLevel")),
            marketplace_data=_optional_metadata(data.get("marketplaceData")),
            openvsx_data=_optional_metadata(data.get("openvsxData")),
            installed_data=_optional_metadata(data.get("installedData")),
            differences=[str(d) for d in data.get("differences") or []],
            sha_match=bool(data.get("shaMatch", False)),
            recommendation=str(data.get("recommendation", "")),
            validation_time=str(data.get("validationTime", "")),
            error=data.get("error") or None,
        )


@dataclass(frozen=True)
class AuditReport:
    """Result of auditing every extension of one editor.

    Attributes:
        total_extensions: Number of extensions audited.
        legitimate_count: Extensions classified LEGITIMATE.
        suspicious_count: Extensions classified SUSPICIOUS.
        malicious_count: Extensions classified MALICIOUS.
        unknown_count: Extensions classified UNKNOWN.
        results: Per-extension results in backend order.
        audit_time: ISO-8601 timestamp of the audit.
    """

    total_extensions: int = 0
    legitimate_count: int = 0
    suspicious_count: int = 0
    malicious_count: int = 0
    unknown_count: int = 0
    results: tuple[ValidationResult, ...] = ()
    audit_time: str = ""

    @classmethod
    def empty(cls) -> AuditReport:
        """The report displayed for an editor that was never audited."""
        return cls()

    @property
    def is_empty(self) -> bool:
        return self.total_extensions == 0 and not self.results

    def counts(self) -> dict[TrustLevel, int]:
        """Return the per-level counts as a mapping."""
        return {
            TrustLevel.LEGITIMATE: self.legitimate_count,
            TrustLevel.SUSPICIOUS: self.suspicious_count,
            TrustLevel.MALICIOUS: self.malicious_count,
            TrustLevel.UNKNOWN: self.unknown_count,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AuditReport:
        return cls(
            total_extensions=int(data.get("totalExtensions", 0)),
            legitimate_count=int(data.get("legitimateCount", 0)),
            suspicious_count=int(data.get("suspiciousCount", 0)),
            malicious_count=int(data.get("maliciousCount", 0)),
            unknown_count=int(data.get("unknownCount", 0)),
            results=tuple(
                ValidationResult.from_dict(r) for r in data.get("results") or []
            ),
            audit_time=str(data.get("auditTime", "")),
        )


# ---------------------------------------------------------------------------
# Sync
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SyncResult:
    """Outcome of syncing into one target editor."""

    target_editor: str
    success: bool = False
    copied_count: int = 0
    skipped_count: int = 0
    overwritten_count: int = 0
    index_updated: bool = False
    conflicts: tuple[str, ...] = ()
    errors: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SyncResult:
        return cls(
            target_editor=str(data["targetEditor"]),
            success=bool(data.get("success", False)),
            copied_count=int(data.get("copiedCount", 0)),
            skipped_count=int(data.get("skippedCount", 0)),
            overwritten_count=int(data.get("overwrittenCount", 0)),
            index_updated=bool(data.get("indexUpdated", False)),
            conflicts=tuple(str(c) for c in data.get("conflicts") or []),
            errors=tuple(str(e) for e in data.get("errors") or []),
        )


@dataclass(frozen=True)
class SyncReport:
    """Aggregate of one sync execution across all targets.

    A nonzero ``total_errors`` is a partial success: extensions already
    copied stay copied.
    """

    source_editor: str
    results: tuple[SyncResult, ...] = ()
    total_copied: int = 0
    total_skipped: int = 0
    total_errors: int = 0

    @property
    def has_errors(self) -> bool:
        return self.total_errors > 0

    def result_for(self, target_editor: str) -> SyncResult | None:
        for result in self.results:
            if result.target_editor == target_editor:
                return result
        return None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SyncReport:
        return cls(
            source_editor=str(data.get("sourceEditor", "")),
            results=tuple(SyncResult.from_dict(r) for r in data.get("results") or []),
            total_copied=int(data.get("totalCopied", 0)),
            total_skipped=int(data.get("totalSkipped", 0)),
            total_errors=int(data.get("totalErrors", 0)),
        )


# ---------------------------------------------------------------------------
# CLI availability
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CLIStatus:
    """Availability of the VS Code family command-line tools."""

    vscode_available: bool = False
    vscode_path: str = ""
    insiders_available: bool = False
    insiders_path: str = ""
    codium_available: bool = False
    codium_path: str = ""
    any_available: bool = False
    preferred_cli: str = ""

    def command_for(self, editor_id: str) -> str | None:
        """Return the CLI command that installs into ``editor_id``.

        Returns None for editors without a CLI or whose CLI is missing.
        """
        from vsynx.editors.registry import CLI_COMMANDS

        flags = {
            "vscode": self.vscode_available,
            "vscode-insiders": self.insiders_available,
            "vscodium": self.codium_available,
        }
        if not flags.get(editor_id, False):
            return None
        return CLI_COMMANDS[editor_id]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CLIStatus:
        return cls(
            vscode_available=bool(data.get("vscodeAvailable", False)),
            vscode_path=str(data.get("vscodePath", "")),
            insiders_available=bool(data.get("insidersAvailable", False)),
            insiders_path=str(data.get("insidersPath", "")),
            codium_available=bool(data.get("codiumAvailable", False)),
            codium_path=str(data.get("codiumPath", "")),
            any_available=bool(data.get("anyAvailable", False)),
            preferred_cli=str(data.get("preferredCli", "")),
        )
