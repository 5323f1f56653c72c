"""
Package logging.

All components log through children of the ``modeswitch`` logger; the child
name is the context tag (``modeswitch.transport``, ``modeswitch.supervisor``,
...). ``configure_logging`` installs the console format and a ring-buffer
history handler that the CLI and the API read back.
"""

import logging
from collections import deque
from dataclasses import dataclass
from datetime import datetime
from typing import Deque, List, Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
ROOT_NAME = "modeswitch"
DEFAULT_HISTORY_SIZE = 1000

logger = logging.getLogger(ROOT_NAME)

def get_logger(context: str) -> logging.Logger:
    """Return the child logger used for a component"""
    return logger.getChild(context)

@dataclass(frozen=True)
class LogEntry:
    timestamp: datetime
    level: str
    context: str
    message: str

    def __str__(self) -> str:
        stamp = self.timestamp.strftime("%H:%M:%S.") + f"{self.timestamp.microsecond // 1000:03d}"
        return f"[{stamp}] [{self.level}] [{self.context}] {self.message}"

class LogHistoryHandler(logging.Handler):
    """Keeps the most recent log records in memory"""

    def __init__(self, max_entries: int = DEFAULT_HISTORY_SIZE, level: int = logging.NOTSET):
        super().__init__(level)
        self._entries: Deque[LogEntry] = deque(maxlen=max_entries)

    @property
    def max_entries(self) -> int:
        return self._entries.maxlen

    def emit(self, record: logging.LogRecord):
        context = record.name
        if context.startswith(ROOT_NAME + "."):
            context = context[len(ROOT_NAME) + 1:]
        try:
            message = record.getMessage()
        except Exception:
            self.handleError(record)
            return
        self._entries.append(LogEntry(
            timestamp=datetime.fromtimestamp(record.created),
            level=record.levelname,
            context=context,
            message=message,
        ))

    def entries(self, limit: Optional[int] = None) -> List[LogEntry]:
        entries = list(self._entries)
        if limit is not None:
            entries = entries[-limit:] if limit > 0 else []
        return entries

    def resize(self, max_entries: int):
        if max_entries != self._entries.maxlen:
            self._entries = deque(self._entries, maxlen=max_entries)

    def clear(self):
        self._entries.clear()

    def export(self) -> str:
        """Render the history as a plain-text report"""
        lines = [
            "=== ModeSwitch Log Export ===",
            f"Export Time: {datetime.now():%Y-%m-%d %H:%M:%S}",
            f"Total Entries: {len(self._entries)}",
            "=============================",
            "",
        ]
        lines.extend(str(entry) for entry in self._entries)
        return "\n".join(lines) + "\n"

log_history = LogHistoryHandler()
logger.addHandler(log_history)
logger.setLevel(logging.INFO)

def configure_logging(level: str = "INFO", history_size: int = DEFAULT_HISTORY_SIZE) -> LogHistoryHandler:
    """Configure console output and the size of the in-memory history"""
    logging.basicConfig(level=logging.WARNING, format=LOG_FORMAT)
    logger.setLevel(level.upper())
    log_history.resize(history_size)
    return log_history
