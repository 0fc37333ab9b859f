"""``vsynx sync`` - Copy extensions from one editor to others.

Subcommands:
    preview  - Show which selected extensions already exist in each target.
    run      - Execute the sync. Conflicting extensions are skipped unless
               ``--overwrite`` is given.

Exit Codes:
    0 - Sync finished cleanly (or preview found no conflicts).
    1 - Invalid selection, backend failure, or per-target sync errors.
    3 - Conflicts were left in place (run without ``--overwrite``, or a
        preview that found conflicts).
"""

from __future__ import annotations

import sys
from collections.abc import Callable

import click

from vsynx.backend.models import SyncReport
from vsynx.cli.output import emit_json, print_conflicts, print_sync_report
from vsynx.cli.runner import (
    EXIT_CONFLICTS,
    EXIT_FAILURE,
    exit_on_notice,
    fail,
    run_in_session,
    split_csv,
)
from vsynx.config import Settings
from vsynx.core.sync.models import SyncPhase
from vsynx.session import Session


def _selection_options(func: Callable) -> Callable:
    """Attach the source/target/extension options shared by both subcommands."""
    options = [
        click.option("--from", "source", required=True, help="Source editor (e.g. vscode)."),
        click.option("--to", "targets", required=True, help="Target editors, comma-separated."),
        click.option("--ext", "exts", default=None, help="Extension ids, comma-separated."),
        click.option("--all", "sync_all", is_flag=True, help="Select every source extension."),
        click.option(
            "--format", "output_format",
            type=click.Choice(["text", "json"]),
            default="text",
            help="Output format (default: text).",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


async def _prepare(
    session: Session,
    source: str,
    targets: list[str],
    exts: list[str],
    sync_all: bool,
) -> bool:
    """Load editors, pick the source, select extensions and add targets."""
    if not await session.start():
        return False
    orchestrator = session.sync
    if sync_all:
        if await orchestrator.load_source(source) is None:
            return False
        orchestrator.select_all_visible()
    else:
        if not orchestrator.set_source(source):
            return False
        for ext_id in exts:
            if ext_id not in orchestrator.selection:
                orchestrator.toggle_extension(ext_id)
    for target in targets:
        if not await orchestrator.toggle_target(target):
            return False
    return True


def _check_selection(exts: list[str], sync_all: bool) -> None:
    if not exts and not sync_all:
        fail("--ext or --all is required")


@click.group("sync")
def sync_group() -> None:
    """Sync extensions between editors."""


@sync_group.command("preview")
@_selection_options
@click.pass_obj
def sync_preview_command(
    settings: Settings,
    source: str,
    targets: str,
    exts: str | None,
    sync_all: bool,
    output_format: str,
) -> None:
    """Preview conflicts of a sync without copying anything."""
    ext_ids = split_csv(exts)
    _check_selection(ext_ids, sync_all)
    target_ids = split_csv(targets)

    async def _preview(session: Session) -> tuple[dict[str, frozenset[str]], int] | None:
        if not await _prepare(session, source, target_ids, ext_ids, sync_all):
            return None
        return await session.sync.detect_conflicts(), len(session.sync.selection)

    outcome, session = run_in_session(settings, _preview)
    if outcome is None:
        exit_on_notice(session)
        fail("Sync preview failed")
    per_target, checked = outcome

    if output_format == "json":
        emit_json({
            "source": source,
            "targets": target_ids,
            "totalChecked": checked,
            "conflicts": {t: sorted(c) for t, c in per_target.items()},
        })
    else:
        print_conflicts(source, per_target, checked)

    if any(per_target.values()):
        sys.exit(EXIT_CONFLICTS)


@sync_group.command("run")
@_selection_options
@click.option("--overwrite", is_flag=True, help="Replace extensions that already exist in targets.")
@click.pass_obj
def sync_run_command(
    settings: Settings,
    source: str,
    targets: str,
    exts: str | None,
    sync_all: bool,
    output_format: str,
    overwrite: bool,
) -> None:
    """Copy the selected extensions from --from to every --to editor."""
    ext_ids = split_csv(exts)
    _check_selection(ext_ids, sync_all)
    target_ids = split_csv(targets)

    async def _run(session: Session) -> tuple[SyncReport | None, frozenset[str]]:
        if not await _prepare(session, source, target_ids, ext_ids, sync_all):
            return None, frozenset()
        orchestrator = session.sync
        report = await orchestrator.start_sync()
        if orchestrator.phase is not SyncPhase.CONFLICT_CONFIRMATION:
            return report, frozenset()
        pending = orchestrator.conflicts
        if overwrite:
            return await orchestrator.overwrite_all(), pending
        return await orchestrator.skip_conflicts(), pending

    (report, pending), session = run_in_session(settings, _run)
    if report is None:
        exit_on_notice(session)
        fail("Sync failed")

    if output_format == "json":
        emit_json(report)
    else:
        print_sync_report(report)
        if pending and not overwrite:
            click.echo(
                f"\n{len(pending)} extension(s) already exist in a target. "
                "Use --overwrite to replace them."
            )

    if report.has_errors:
        sys.exit(EXIT_FAILURE)
    unresolved = pending or any(r.conflicts for r in report.results)
    if unresolved and not overwrite:
        sys.exit(EXIT_CONFLICTS)
