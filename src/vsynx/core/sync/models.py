"""Sync orchestrator phases and view filter modes."""

from __future__ import annotations

from enum import Enum


class SyncPhase(str, Enum):
    """Where the orchestrator is in one sync attempt.

    SELECTING -> (CONFLICT_CONFIRMATION) -> EXECUTING -> REPORTING -> SELECTING
    """

    SELECTING = "selecting"
    CONFLICT_CONFIRMATION = "conflict_confirmation"
    EXECUTING = "executing"
    REPORTING = "reporting"


class FilterMode(str, Enum):
    """Projection of the candidate list against the selected targets."""

    ALL = "all"
    MISSING = "missing"
    PRESENT = "present"
