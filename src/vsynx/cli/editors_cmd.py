"""``vsynx editors`` - Inspect known editors.

Subcommands:
    list    - Every editor profile the backend knows.
    status  - Availability of all editors, or of one editor.

Exit Codes:
    0 - Listing printed (or the named editor is available).
    1 - Backend failure, unknown editor, or the named editor is unavailable.
"""

from __future__ import annotations

import click

from vsynx.cli.output import emit_json, print_editors, print_statuses
from vsynx.cli.runner import exit_on_notice, fail, run_in_session
from vsynx.config import Settings
from vsynx.exceptions import UnknownEditorError
from vsynx.session import Session

_format_option = click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text).",
)


async def _load(session: Session) -> bool:
    return await session.start()


@click.group("editors")
def editors_group() -> None:
    """Inspect known editors and their availability."""


@editors_group.command("list")
@_format_option
@click.pass_obj
def editors_list_command(settings: Settings, output_format: str) -> None:
    """List all known editors."""
    _, session = run_in_session(settings, _load)
    exit_on_notice(session)

    profiles = session.directory.profiles
    if output_format == "json":
        emit_json(profiles)
    else:
        print_editors(profiles)


@editors_group.command("status")
@click.argument("editor_id", required=False)
@_format_option
@click.pass_obj
def editors_status_command(settings: Settings, editor_id: str | None, output_format: str) -> None:
    """Show availability of every editor, or of EDITOR_ID only."""
    _, session = run_in_session(settings, _load)
    exit_on_notice(session)

    directory = session.directory
    if editor_id is None:
        statuses = directory.statuses
    else:
        try:
            status = directory.status(editor_id)
        except UnknownEditorError as exc:
            fail(str(exc))
        statuses = [status] if status is not None else []

    if output_format == "json":
        emit_json(statuses)
    else:
        print_statuses(statuses)

    if editor_id is not None and not directory.is_available(editor_id):
        fail(f"{editor_id} is not available: {directory.disabled_reason(editor_id)}")
