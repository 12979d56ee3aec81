from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Literal

logger = logging.getLogger(__name__)

NoticeLevel = Literal["info", "success", "error"]

_LOG_LEVELS = {"info": logging.INFO, "success": logging.INFO, "error": logging.WARNING}


@dataclass(slots=True)
class Notice:
    level: NoticeLevel
    message: str


@dataclass(slots=True)
class NoticeBoard:
    notices: list[Notice] = field(default_factory=list)

    def post(self, level: NoticeLevel, message: str) -> None:
        self.notices.append(Notice(level, message))
        logger.log(_LOG_LEVELS[level], "%s: %s", level, message)

    def info(self, message: str) -> None:
        self.post("info", message)

    def success(self, message: str) -> None:
        self.post("success", message)

    def error(self, message: str) -> None:
        self.post("error", message)

    def drain(self) -> list[Notice]:
        pending, self.notices = self.notices, []
        return pending

    def messages(self, level: NoticeLevel | None = None) -> list[str]:
        return [notice.message for notice in self.notices if level is None or notice.level == level]
