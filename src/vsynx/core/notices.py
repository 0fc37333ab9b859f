"""User-visible messages shared by all controllers.

Controllers never let a backend failure escape an action: they post a
display string here and return the session to a valid state. A notice
stays until it is dismissed or replaced by a newer one.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)

HISTORY_LIMIT = 100


class NoticeKind(str, Enum):
    INFO = "info"
    ERROR = "error"


@dataclass(frozen=True)
class Notice:
    kind: NoticeKind
    message: str


class Notices:
    """Holds the current error and info messages of a session."""

    def __init__(self) -> None:
        self._error: Notice | None = None
        self._info: Notice | None = None
        self._history: deque[Notice] = deque(maxlen=HISTORY_LIMIT)

    @property
    def error(self) -> str | None:
        return self._error.message if self._error else None

    @property
    def info(self) -> str | None:
        return self._info.message if self._info else None

    @property
    def history(self) -> list[Notice]:
        """The most recent notices, oldest first."""
        return list(self._history)

    def post_error(self, message: str) -> None:
        logger.warning("%s", message)
        self._error = Notice(NoticeKind.ERROR, message)
        self._history.append(self._error)

    def post_info(self, message: str) -> None:
        logger.info("%s", message)
        self._info = Notice(NoticeKind.INFO, message)
        self._history.append(self._info)

    def clear_error(self) -> None:
        self._error = None

    def dismiss(self) -> None:
        """Clear both the error and the info message."""
        self._error = None
        self._info = None
