"""Inventory cache for sync targets.

Submodules:
    models -- NotLoaded / Loaded tagged states
    cache  -- InventoryCache (ensure_loaded, has, invalidate)
"""

from vsynx.core.inventory.cache import InventoryCache
from vsynx.core.inventory.models import NOT_LOADED, InventoryState, Loaded, NotLoaded

__all__ = [
    "InventoryCache",
    "InventoryState",
    "Loaded",
    "NOT_LOADED",
    "NotLoaded",
]
