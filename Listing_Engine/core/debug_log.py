"""
Debug Log — the in-session log sink shown in the dashboard's debug panel.

Lines are kept oldest-first as "[HH:MM:SS] [TAG] message". Every line is
also forwarded to the stdlib logger so server logs carry the same trail.

Tags:
    START / SYSTEM / SUCCESS / ERROR     — lifecycle (INFO, ERROR)
    SCRAPE, PARSE-HTML, GENERATE-ALL ... — tool-specific debug (DEBUG)
    <TOOL>-ERROR                         — tool failure (ERROR)
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

logger = logging.getLogger(__name__)

START = "START"
SYSTEM = "SYSTEM"
SUCCESS = "SUCCESS"
ERROR = "ERROR"

_LIFECYCLE_TAGS = {START, SYSTEM, SUCCESS}


def _level_for(tag: str) -> int:
    if tag == ERROR or tag.endswith("-ERROR"):
        return logging.ERROR
    if tag in _LIFECYCLE_TAGS:
        return logging.INFO
    return logging.DEBUG


class DebugLog:
    """Ordered, timestamped, tag-prefixed log lines for one session."""

    def __init__(self, clock: Callable[[], datetime] | None = None):
        self._clock = clock or datetime.now
        self._lines: list[str] = []

    def add(self, tag: str, message: str) -> str:
        line = f"[{self._clock().strftime('%H:%M:%S')}] [{tag}] {message}"
        self._lines.append(line)
        logger.log(_level_for(tag), "[%s] %s", tag, message)
        return line

    def start(self, message: str) -> str:
        return self.add(START, message)

    def system(self, message: str) -> str:
        return self.add(SYSTEM, message)

    def success(self, message: str) -> str:
        return self.add(SUCCESS, message)

    def error(self, message: str) -> str:
        return self.add(ERROR, message)

    @property
    def lines(self) -> list[str]:
        return list(self._lines)

    def clear(self) -> None:
        self._lines.clear()

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self):
        return iter(list(self._lines))
