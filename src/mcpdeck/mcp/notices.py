# User-visible notices raised by the MCP config lifecycle.
# Created: 2026-10-15

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)


class NoticeLevel(str, Enum):
    SUCCESS = "success"
    INFO = "info"
    ERROR = "error"


@dataclass(frozen=True)
class Notice:
    level: NoticeLevel
    message: str
    server_name: str | None = None
    closable: bool = False


Notifier = Callable[[Notice], None]

_LOG_LEVELS = {
    NoticeLevel.SUCCESS: logging.INFO,
    NoticeLevel.INFO: logging.INFO,
    NoticeLevel.ERROR: logging.WARNING,
}


class NoticeLog:
    """Notifier that logs every notice and keeps it for later display."""

    def __init__(self) -> None:
        self.notices: list[Notice] = []

    def __call__(self, notice: Notice) -> None:
        logger.log(_LOG_LEVELS[notice.level], "%s", notice.message)
        self.notices.append(notice)

    def for_server(self, name: str) -> list[Notice]:
        return [n for n in self.notices if n.server_name == name]

    def clear(self) -> None:
        self.notices.clear()
