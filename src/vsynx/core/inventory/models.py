"""Inventory states: explicitly unloaded, or loaded with a complete id set.

An editor that has not been fetched is ``NOT_LOADED``; an editor that was
fetched and has no extensions is ``Loaded(frozenset())``. Callers gating
UI actions must distinguish the two.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union


class NotLoaded:
    """Marker state for an editor whose inventory was never fetched."""

    _instance: NotLoaded | None = None

    def __new__(cls) -> NotLoaded:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NOT_LOADED"


NOT_LOADED = NotLoaded()


@dataclass(frozen=True)
class Loaded:
    """A fully populated inventory.

    Attributes:
        ids: Lower-cased extension ids installed in the editor.
    """

    ids: frozenset[str] = field(default_factory=frozenset)

    def __contains__(self, extension_id: object) -> bool:
        return isinstance(extension_id, str) and extension_id.lower() in self.ids

    @property
    def size(self) -> int:
        return len(self.ids)


InventoryState = Union[NotLoaded, Loaded]
