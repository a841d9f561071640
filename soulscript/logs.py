"""Simulation log - bounded ring of structured diagnostics

This is what the host UI renders under the world view. Each entry is also
forwarded to the ``soulscript.simulation`` logger so host applications can
route script diagnostics through their normal logging configuration.
"""

import logging
from collections import deque
from datetime import datetime, timezone
from enum import Enum
from typing import Deque, List, Optional

from pydantic import BaseModel, Field


logger = logging.getLogger("soulscript.simulation")


class LogLevel(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    DEBUG = "debug"


_STDLIB_LEVELS = {
    LogLevel.INFO: logging.INFO,
    LogLevel.WARNING: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
    LogLevel.DEBUG: logging.DEBUG,
}


class LogEntry(BaseModel):
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    level: LogLevel
    message: str
    entity_id: Optional[int] = None


class SimulationLog:
    """Keeps the most recent ``capacity`` entries, oldest dropped first"""

    def __init__(self, capacity: int = 100):
        self.capacity = capacity
        self._entries: Deque[LogEntry] = deque(maxlen=capacity)

    def append(self, level: LogLevel, message: str, entity_id: Optional[int] = None) -> LogEntry:
        entry = LogEntry(level=level, message=message, entity_id=entity_id)
        self._entries.append(entry)
        logger.log(_STDLIB_LEVELS[entry.level], message, extra={"entity_id": entity_id})
        return entry

    def entries(self, level: Optional[LogLevel] = None) -> List[LogEntry]:
        if level is None:
            return list(self._entries)
        return [e for e in self._entries if e.level == level]

    def count(self, level: Optional[LogLevel] = None) -> int:
        return len(self.entries(level))

    def clear(self):
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(list(self._entries))
