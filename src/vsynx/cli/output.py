"""Rich output formatting helpers for the vsynx CLI.

Tables for editors, extensions, audit reports, marketplace results and
sync reports, plus a JSON emitter shared by every ``--format json``
command.

Trust Level Color Mapping:
    Legitimate = bold green, Suspicious = yellow, Malicious = bold red,
    Unknown = dim
"""

from __future__ import annotations

import json
from dataclasses import asdict, is_dataclass
from typing import Any

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from vsynx.backend.models import (
    AuditReport,
    EditorProfile,
    EditorStatus,
    ExtensionMetadata,
    ExtensionRecord,
    SyncReport,
    TrustLevel,
    ValidationResult,
)

_TRUST_LEVEL_STYLES: dict[TrustLevel, str] = {
    TrustLevel.LEGITIMATE: "bold green",
    TrustLevel.SUSPICIOUS: "yellow",
    TrustLevel.MALICIOUS: "bold red",
    TrustLevel.UNKNOWN: "dim",
}

console = Console()


def trust_level_style(level: TrustLevel) -> str:
    """Return the Rich style string for a given trust level."""
    return _TRUST_LEVEL_STYLES.get(level, "white")


def _yes_no(flag: bool) -> Text:
    return Text("yes", style="green") if flag else Text("no", style="dim")


def emit_json(data: Any) -> None:
    """Print ``data`` (dataclasses, lists of them, or plain values) as JSON."""
    if is_dataclass(data) and not isinstance(data, type):
        data = asdict(data)
    elif isinstance(data, list):
        data = [asdict(d) if is_dataclass(d) else d for d in data]
    click.echo(json.dumps(data, indent=2, default=str))


def print_editors(profiles: list[EditorProfile]) -> None:
    """Print the known editor profiles."""
    table = Table(title="Editors", show_header=True, header_style="bold")
    table.add_column("ID", style="bold")
    table.add_column("Name")
    table.add_column("Family", style="dim")
    table.add_column("CLI")
    table.add_column("Extensions Directory", style="dim")

    for profile in profiles:
        table.add_row(
            profile.id,
            profile.name,
            profile.family.value,
            profile.cli_command or "-",
            profile.extensions_dir,
        )
    console.print(table)


def print_statuses(statuses: list[EditorStatus]) -> None:
    """Print availability of every editor."""
    table = Table(title="Editor Status", show_header=True, header_style="bold")
    table.add_column("Editor", style="bold")
    table.add_column("Available", justify="center")
    table.add_column("Extensions", justify="right")
    table.add_column("CLI", justify="center")
    table.add_column("Reason", style="dim")

    for status in statuses:
        table.add_row(
            status.editor.id,
            _yes_no(status.is_available),
            str(status.extension_count),
            _yes_no(status.cli_available),
            status.disabled_reason or "-",
        )
    console.print(table)


def print_extensions(records: list[ExtensionRecord], title: str) -> None:
    """Print installed extension records."""
    if not records:
        console.print("[dim]No extensions found.[/dim]")
        return

    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column("ID", style="bold")
    table.add_column("Version")
    table.add_column("Enabled", justify="center")

    for record in records:
        table.add_row(record.id, record.version or "-", _yes_no(record.enabled))
    console.print(table)
    console.print(f"[dim]{len(records)} extension(s)[/dim]")


def print_audit_report(report: AuditReport) -> None:
    """Print audit counts and one row per validated extension."""
    summary = (
        f"Total: {report.total_extensions}  "
        f"[bold green]Legitimate: {report.legitimate_count}[/bold green]  "
        f"[yellow]Suspicious: {report.suspicious_count}[/yellow]  "
        f"[bold red]Malicious: {report.malicious_count}[/bold red]  "
        f"[dim]Unknown: {report.unknown_count}[/dim]"
    )
    console.print(Panel(summary, title="Audit Report", expand=False))

    if not report.results:
        return
    table = Table(show_header=True, header_style="bold")
    table.add_column("Extension", style="bold")
    table.add_column("Trust", justify="center")
    table.add_column("Recommendation")

    for result in report.results:
        level = result.trust_level
        table.add_row(
            result.extension_id,
            Text(level.value, style=trust_level_style(level)),
            result.recommendation or "-",
        )
    console.print(table)


def print_validation(result: ValidationResult) -> None:
    """Print the verdict for a single extension."""
    level = result.trust_level
    lines = [
        f"[bold]Extension:[/bold] {result.extension_id}",
        f"[bold]Trust Level:[/bold] [{trust_level_style(level)}]{level.value}[/]",
    ]
    if result.recommendation:
        lines.append(f"[bold]Recommendation:[/bold] {result.recommendation}")
    if result.marketplace_data is not None:
        meta = result.marketplace_data
        lines.append(
            f"[bold]Publisher:[/bold] {meta.publisher}"
            + (" [green](verified)[/green]" if meta.is_verified_publisher else "")
        )
    if result.differences:
        lines.append("[bold]Differences:[/bold]")
        lines.extend(f"  - {d}" for d in result.differences)
    if result.error:
        lines.append(f"[red]Error: {result.error}[/red]")
    console.print(Panel("\n".join(lines), title="Validation", expand=False))


def print_search_results(results: list[ExtensionMetadata], query: str) -> None:
    """Print marketplace search results."""
    table = Table(
        title=f'Marketplace results for "{query}"', show_header=True, header_style="bold"
    )
    table.add_column("ID", style="bold")
    table.add_column("Name")
    table.add_column("Version")
    table.add_column("Verified", justify="center")
    table.add_column("Description", style="dim", overflow="fold")

    for meta in results:
        table.add_row(
            meta.id,
            meta.display_name or meta.name,
            meta.version or "-",
            _yes_no(meta.is_verified_publisher),
            meta.description,
        )
    console.print(table)


def print_sync_report(report: SyncReport) -> None:
    """Print per-target sync outcomes and the totals."""
    table = Table(
        title=f"Sync Report (source: {report.source_editor})",
        show_header=True,
        header_style="bold",
    )
    table.add_column("Target", style="bold")
    table.add_column("Status", justify="center")
    table.add_column("Copied", justify="right")
    table.add_column("Skipped", justify="right")
    table.add_column("Overwritten", justify="right")
    table.add_column("Conflicts", style="yellow")
    table.add_column("Errors", style="red")

    for result in report.results:
        status = (
            Text("OK", style="bold green") if result.success else Text("FAILED", style="bold red")
        )
        table.add_row(
            result.target_editor,
            status,
            str(result.copied_count),
            str(result.skipped_count),
            str(result.overwritten_count),
            ", ".join(result.conflicts) or "-",
            "; ".join(result.errors) or "-",
        )
    console.print(table)
    console.print(
        f"Total: copied {report.total_copied}, skipped {report.total_skipped}, "
        f"errors {report.total_errors}"
    )


def print_conflicts(source: str, per_target: dict[str, frozenset[str]], checked: int) -> None:
    """Print the conflict pre-flight for each target."""
    console.print(f"[bold]Source:[/bold] {source}   [bold]Extensions checked:[/bold] {checked}")
    for target, conflicts in per_target.items():
        if not conflicts:
            console.print(f"  {target}: [green]no conflicts[/green]")
            continue
        console.print(f"  {target}: [yellow]{len(conflicts)} conflict(s)[/yellow]")
        for ext_id in sorted(conflicts):
            console.print(f"    - {ext_id}")
