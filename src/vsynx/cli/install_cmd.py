"""``vsynx install`` - Install extensions via the VS Code family CLI.

Extensions are installed into the install target (``--editor``, default:
the first editor whose CLI is on PATH). With ``--sync-to`` every
installed extension is then copied to the listed editors, replacing any
copy already there.

Exit Codes:
    0 - Every extension installed (and synced).
    1 - Any install or sync failed, or the CLI is unavailable.
"""

from __future__ import annotations

from pathlib import Path

import click

from vsynx.backend.models import ExtensionMetadata
from vsynx.cli.output import console
from vsynx.cli.runner import exit_on_notice, fail, run_in_session, split_csv
from vsynx.config import Settings
from vsynx.editors.registry import CLI_COMMANDS
from vsynx.session import Session


def _read_id_file(path: Path) -> list[str]:
    """Extension ids from a file: one per line, ``#`` starts a comment."""
    ids = []
    for line in path.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if line and not line.startswith("#"):
            ids.append(line)
    return ids


@click.command("install")
@click.argument("extension_ids", nargs=-1)
@click.option(
    "--editor", "install_editor",
    type=click.Choice(sorted(CLI_COMMANDS)),
    default=None,
    help="Editor to install into (default: first editor with a CLI).",
)
@click.option(
    "--file", "-f", "id_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="File with extension ids, one per line.",
)
@click.option("--sync-to", default=None, help="Comma-separated editors to sync to afterwards.")
@click.pass_obj
def install_command(
    settings: Settings,
    extension_ids: tuple[str, ...],
    install_editor: str | None,
    id_file: Path | None,
    sync_to: str | None,
) -> None:
    """Install EXTENSION_IDS, optionally syncing them to other editors.

    Examples:

        vsynx install ms-python.python

        vsynx install esbenp.prettier-vscode --sync-to windsurf,cursor
    """
    ids = list(extension_ids)
    if id_file is not None:
        ids.extend(_read_id_file(id_file))
    if not ids:
        fail("No extensions specified. Usage: vsynx install <extension-id> [...]")
    targets = split_csv(sync_to)

    async def _install(session: Session) -> dict[str, bool]:
        if not await session.start():
            return {}
        if install_editor is not None:
            session.directory.install_target = install_editor

        outcome: dict[str, bool] = {}
        for ext_id in ids:
            if not targets:
                outcome[ext_id] = await session.install.install_only(ext_id)
                continue
            session.search.select_result(ExtensionMetadata(id=ext_id))
            session.install.open()
            rejected = [t for t in targets if not session.install.toggle_target(t)]
            if rejected:
                outcome[ext_id] = False
                continue
            report = await session.install.run()
            outcome[ext_id] = report is not None and not report.has_errors
        return outcome

    outcome, session = run_in_session(settings, _install)
    if not outcome:
        exit_on_notice(session)

    for ext_id, ok in outcome.items():
        mark = "[green]OK[/green]" if ok else "[red]FAILED[/red]"
        console.print(f"{mark} {ext_id}")
    failed = sum(1 for ok in outcome.values() if not ok)
    console.print(f"\nSuccess: {len(outcome) - failed}, Failed: {failed}")
    if failed:
        fail(session.notices.error or f"{failed} extension(s) failed")
