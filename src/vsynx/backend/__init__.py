"""Backend contract, wire models and the HTTP transport.

Public API::

    from vsynx.backend import ExtensionBackend, HttpBackend
    from vsynx.backend.models import SyncReport, TrustLevel
"""

from __future__ import annotations

from vsynx.backend.base import ExtensionBackend
from vsynx.backend.http import HttpBackend

__all__ = [
    "ExtensionBackend",
    "HttpBackend",
]
