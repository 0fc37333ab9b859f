"""``vsynx audit`` and ``vsynx validate`` - Trust checks.

``audit`` validates every extension of an editor (or directory) and
prints the report; ``validate`` checks a single extension id.

Exit Codes:
    0 - Completed, nothing malicious.
    1 - Backend failure.
    2 - At least one extension was classified as malicious.
"""

from __future__ import annotations

import sys

import click

from vsynx.backend.models import TrustLevel
from vsynx.cli.output import emit_json, print_audit_report, print_validation
from vsynx.cli.runner import EXIT_MALICIOUS, exit_on_notice, fail, run_in_session
from vsynx.config import Settings
from vsynx.core.audit.session import AuditOutcome
from vsynx.exceptions import InputError, UnknownEditorError
from vsynx.session import Session


@click.command("audit")
@click.option("--editor", "editor_id", default=None, help="Editor to audit (default: source editor).")
@click.option("--path", default=None, help="Extensions directory override.")
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text).",
)
@click.pass_obj
def audit_command(
    settings: Settings,
    editor_id: str | None,
    path: str | None,
    output_format: str,
) -> None:
    """Audit all installed extensions of an editor.

    Examples:

        vsynx audit

        vsynx audit --editor cursor --format json
    """
    editor = editor_id or settings.source_editor

    async def _audit(session: Session) -> AuditOutcome:
        if path is None and not await session.start():
            return AuditOutcome.FAILED
        try:
            return await session.audit.start(editor, path)
        except (InputError, UnknownEditorError) as exc:
            session.notices.post_error(str(exc))
            return AuditOutcome.FAILED

    _, session = run_in_session(settings, _audit)
    exit_on_notice(session)

    report = session.audit.report
    if output_format == "json":
        emit_json(report)
    else:
        print_audit_report(report)

    if report.malicious_count > 0:
        sys.exit(EXIT_MALICIOUS)


@click.command("validate")
@click.argument("extension_id")
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text).",
)
@click.pass_obj
def validate_command(settings: Settings, extension_id: str, output_format: str) -> None:
    """Validate a single extension by its publisher.name id."""
    result, session = run_in_session(
        settings, lambda s: s.audit.validate(extension_id)
    )
    exit_on_notice(session)
    if result is None:
        fail(f"No verdict for {extension_id}")

    if output_format == "json":
        emit_json(result)
    else:
        print_validation(result)

    if result.trust_level is TrustLevel.MALICIOUS:
        sys.exit(EXIT_MALICIOUS)
