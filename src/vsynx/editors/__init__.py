"""Editor catalog: CLI commands and the live session directory.

Public API::

    from vsynx.editors import EditorDirectory

    directory = EditorDirectory(backend, notices)
    await directory.load()
    print(directory.available_ids())
"""

from __future__ import annotations

from vsynx.editors.directory import EditorDirectory
from vsynx.editors.registry import CLI_COMMANDS

__all__ = [
    "CLI_COMMANDS",
    "EditorDirectory",
]
