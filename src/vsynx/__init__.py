"""vsynx: Orchestration of editor extension sync, audit and marketplace search."""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"
