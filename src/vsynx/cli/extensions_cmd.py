"""``vsynx extensions list`` - List installed extensions.

Lists the extensions of an editor (by id) or of an arbitrary extensions
directory (``--path``).
"""

from __future__ import annotations

import click

from vsynx.backend.models import ExtensionRecord
from vsynx.cli.output import emit_json, print_extensions
from vsynx.cli.runner import exit_on_notice, run_in_session
from vsynx.config import Settings
from vsynx.exceptions import BackendError
from vsynx.session import Session


@click.group("extensions")
def extensions_group() -> None:
    """List installed extensions."""


@extensions_group.command("list")
@click.option("--editor", "editor_id", default=None, help="Editor id (default: source editor).")
@click.option("--path", default=None, help="Extensions directory to read instead of an editor.")
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text).",
)
@click.pass_obj
def extensions_list_command(
    settings: Settings,
    editor_id: str | None,
    path: str | None,
    output_format: str,
) -> None:
    """List the extensions of an editor or directory."""
    editor = editor_id or settings.source_editor

    async def _list(session: Session) -> list[ExtensionRecord]:
        try:
            if path:
                return await session.backend.list_installed_extensions(path)
            return await session.backend.list_editor_extensions(editor)
        except BackendError as exc:
            session.notices.post_error(f"Failed to load extensions: {exc}")
            return []

    records, session = run_in_session(settings, _list)
    exit_on_notice(session)

    if output_format == "json":
        emit_json(records)
    else:
        print_extensions(records, title=f"Extensions in {path or editor}")
