"""vsynx CLI: sync, audit and search editor extensions.

Entry point for the ``vsynx`` command-line tool. Registers all
subcommands under a single Click group. Every command talks to the
extension-management backend over HTTP (``--backend-url`` or the
``VSYNX_BACKEND_URL`` environment variable).

Commands:
    editors      Inspect known editors and their availability.
    extensions   List installed extensions of an editor or directory.
    audit        Audit every extension of an editor.
    validate     Validate a single extension.
    marketplace  Search the marketplace.
    sync         Preview or run a sync between editors.
    install      Install via CLI, optionally syncing to other editors.

Usage::

    vsynx editors status
    vsynx audit --editor vscode
    vsynx marketplace search prettier
    vsynx sync preview --from vscode --to windsurf,cursor --all
    vsynx sync run --from vscode --to windsurf --ext esbenp.prettier-vscode
    vsynx install ms-python.python --sync-to windsurf,cursor
"""

from __future__ import annotations

from pathlib import Path

import click
import yaml

from vsynx import __version__
from vsynx.cli.audit_cmd import audit_command, validate_command
from vsynx.cli.editors_cmd import editors_group
from vsynx.cli.extensions_cmd import extensions_group
from vsynx.cli.install_cmd import install_command
from vsynx.cli.marketplace_cmd import marketplace_group
from vsynx.cli.runner import setup_logging
from vsynx.cli.sync_cmd import sync_group
from vsynx.config import Settings


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--backend-url",
    envvar="VSYNX_BACKEND_URL",
    default=None,
    help="Base URL of the extension backend.",
)
@click.option(
    "--config", "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML settings file.",
)
@click.option("--timeout", type=float, default=None, help="HTTP timeout in seconds.")
@click.option("-v", "--verbose", is_flag=True, help="Log backend traffic to stderr.")
@click.pass_context
def cli(
    ctx: click.Context,
    backend_url: str | None,
    config_path: Path | None,
    timeout: float | None,
    verbose: bool,
) -> None:
    """vsynx: Secure extension manager for VS Code and its forks.

    Sync extensions between editors with conflict detection, audit
    installed extensions against the marketplace, and search for new
    ones.
    """
    setup_logging(verbose)
    try:
        settings = Settings.from_file(config_path) if config_path else Settings()
        ctx.obj = settings.override(backend_url=backend_url, http_timeout=timeout)
    except (ValueError, yaml.YAMLError) as exc:
        raise click.ClickException(str(exc)) from exc


# Register all subcommands
cli.add_command(editors_group)
cli.add_command(extensions_group)
cli.add_command(audit_command)
cli.add_command(validate_command)
cli.add_command(marketplace_group)
cli.add_command(sync_group)
cli.add_command(install_command)
