"""Audit sessions with per-editor report caching.

Public API::

    from vsynx.core.audit import AuditSessionController, AuditOutcome
"""

from vsynx.core.audit.session import AuditOutcome, AuditSessionController, AuditState

__all__ = [
    "AuditOutcome",
    "AuditSessionController",
    "AuditState",
]
