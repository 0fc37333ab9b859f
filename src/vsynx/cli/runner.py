"""Plumbing shared by the commands that talk to the backend.

Every command builds its work as a coroutine over a ``Session``, runs it
to completion, and only then decides on output and exit code. Exits never
happen inside the event loop.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from collections.abc import Awaitable, Callable
from typing import NoReturn, TypeVar

import click
from rich.console import Console
from rich.logging import RichHandler

from vsynx.config import Settings
from vsynx.session import Session

T = TypeVar("T")

# Exit codes shared by all commands.
EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_MALICIOUS = 2
EXIT_CONFLICTS = 3


def setup_logging(verbose: bool) -> None:
    """Send log records to stderr through Rich when ``verbose`` is set."""
    if not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(name)s: %(message)s",
        datefmt="%H:%M:%S",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def run_in_session(
    settings: Settings,
    action: Callable[[Session], Awaitable[T]],
) -> tuple[T, Session]:
    """Open a session, await ``action`` on it and close the session.

    Args:
        settings: Session settings from the command group.
        action: Coroutine function receiving the open session.

    Returns:
        The action's return value and the (closed) session, whose
        notices the caller inspects.
    """
    session = Session.connect(settings)

    async def _main() -> T:
        async with session:
            return await action(session)

    return asyncio.run(_main()), session


def fail(message: str, code: int = EXIT_FAILURE) -> NoReturn:
    """Print ``message`` to stderr and exit with ``code``."""
    click.echo(f"Error: {message}", err=True)
    sys.exit(code)


def exit_on_notice(session: Session) -> None:
    """Exit with a failure if an action left an error notice behind."""
    if session.notices.error:
        fail(session.notices.error)


def split_csv(value: str | None) -> list[str]:
    """Split a comma-separated option into trimmed, non-empty items."""
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]
