from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from core.errors import PortalError

logger = logging.getLogger(__name__)


class NoticeLevel(str, Enum):
    SUCCESS = "success"
    INFO = "info"
    ERROR = "error"


@dataclass(frozen=True)
class Notice:
    level: NoticeLevel
    message: str
    error: PortalError | None = None


class NoticeBoard:
    """
    Transient user-facing notices. Views post; the UI drains and renders them
    once (Streamlit toasts, or the ``detail`` of an API error).
    """

    def __init__(self) -> None:
        self._pending: list[Notice] = []

    def success(self, message: str) -> None:
        self._pending.append(Notice(NoticeLevel.SUCCESS, message))

    def info(self, message: str) -> None:
        self._pending.append(Notice(NoticeLevel.INFO, message))

    def error(self, message: str, error: PortalError | None = None) -> None:
        self._pending.append(Notice(NoticeLevel.ERROR, message, error))

    def fail(self, error: PortalError, message: str | None = None) -> None:
        """Log ``error`` and post it; ``message`` overrides the text shown."""
        if error.code == "REMOTE_ERROR":
            logger.error("%s", error.message, exc_info=error)
        else:
            logger.warning("%s", error.message)
        self.error(message or error.message, error)

    @property
    def last_error(self) -> Notice | None:
        for n in reversed(self._pending):
            if n.level is NoticeLevel.ERROR:
                return n
        return None

    def peek(self) -> list[Notice]:
        return list(self._pending)

    def drain(self) -> list[Notice]:
        out, self._pending = self._pending, []
        return out
