"""Guided extension sync between editors.

Submodules:
    models       -- SyncPhase, FilterMode
    orchestrator -- SyncOrchestrator (selection, pre-flight, execution)
"""

from vsynx.core.sync.models import FilterMode, SyncPhase
from vsynx.core.sync.orchestrator import SyncOrchestrator

__all__ = [
    "FilterMode",
    "SyncOrchestrator",
    "SyncPhase",
]
