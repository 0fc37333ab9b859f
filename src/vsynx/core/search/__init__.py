"""Marketplace search and autocomplete.

Public API::

    from vsynx.core.search import SearchController, Key
"""

from vsynx.core.search.controller import Key, SearchController

__all__ = [
    "Key",
    "SearchController",
]
