"""``vsynx marketplace`` - Search and explore the marketplace.

Subcommands:
    search <query>        - Search for extensions.
    open <extension-id>   - Print the marketplace page URL of an extension.
"""

from __future__ import annotations

import click

from vsynx.backend.models import ExtensionMetadata
from vsynx.cli.output import console, emit_json, print_search_results
from vsynx.cli.runner import exit_on_notice, fail, run_in_session
from vsynx.config import Settings
from vsynx.session import Session

MARKETPLACE_ITEM_URL = "https://marketplace.visualstudio.com/items?itemName={}"


@click.group("marketplace")
def marketplace_group() -> None:
    """Search and explore the Microsoft Marketplace."""


@marketplace_group.command("search")
@click.argument("query")
@click.option("--limit", "-l", default=20, type=int, help="Max results to display (default 20).")
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text).",
)
@click.pass_obj
def marketplace_search_command(
    settings: Settings,
    query: str,
    limit: int,
    output_format: str,
) -> None:
    """Search the marketplace for QUERY.

    Examples:

        vsynx marketplace search prettier

        vsynx marketplace search python --limit 5 --format json
    """
    if not query.strip():
        fail("Please enter a search term (e.g., python, prettier, eslint)")

    async def _search(session: Session) -> list[ExtensionMetadata] | None:
        session.search.query = query
        return await session.search.search()

    results, session = run_in_session(settings, _search)
    if results is None:
        exit_on_notice(session)
        fail("Search failed")
    if limit > 0:
        results = results[:limit]

    if output_format == "json":
        emit_json(results)
        return
    if not results:
        console.print(f'[dim]No extensions found matching "{query}".[/dim]')
        return
    print_search_results(results, query)


@marketplace_group.command("open")
@click.argument("extension_id")
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text).",
)
def marketplace_open_command(extension_id: str, output_format: str) -> None:
    """Print the marketplace URL for EXTENSION_ID."""
    url = MARKETPLACE_ITEM_URL.format(extension_id)
    if output_format == "json":
        emit_json({"extensionId": extension_id, "url": url})
    else:
        click.echo(url)
