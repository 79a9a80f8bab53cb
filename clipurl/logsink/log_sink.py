"""
LogSink: append-only, persisted event list.

Responsibilities:
    - Persist allocator/resolver outcomes under the "logs" key for later display
    - Mirror each entry to the `clipurl.logsink` Python logger

Entries are never pruned. Each `record` is a full load-append-save cycle
over the key-value store.
"""

import logging
import threading
from typing import Any, Callable, Dict, List, Optional

from ..models import LogEntry, iso_timestamp
from ..storage.base import BaseKeyValueStore, LockLike
from ..storage.collection import JsonCollection
from .base import BaseLogSink, ERROR, INFO

LOGS_KEY = "logs"

_LEVELS = {INFO: logging.INFO, ERROR: logging.ERROR}

log = logging.getLogger("clipurl.logsink")


class LogSink(JsonCollection[LogEntry], BaseLogSink):
    def __init__(
        self,
        kv: BaseKeyValueStore,
        key: str = LOGS_KEY,
        timestamp: Optional[Callable[[], str]] = None,
        lock: Optional[LockLike] = None,
    ):
        """
        Args:
            kv (BaseKeyValueStore): Backend holding the serialized entries.
            key (str): Storage key, "logs" by default.
            timestamp (callable): Returns the ISO timestamp for new entries (injectable for tests).
            lock: Guards the load-append-save cycle; share the store profile's RLock.
        """
        super().__init__(kv, key, decode=LogEntry.from_dict, encode=LogEntry.to_dict)
        self._timestamp = timestamp or iso_timestamp
        self.lock = lock if lock is not None else threading.RLock()

    def record(self, level: str, message: str, data: Optional[Dict[str, Any]] = None) -> None:
        if level not in _LEVELS:
            raise ValueError(f"Unknown log level: {level!r}")
        entry = LogEntry(timestamp=self._timestamp(), level=level, message=message, data=dict(data or {}))
        with self.lock:
            entries = self.load()
            entries.append(entry)
            self.save(entries)
        log.log(_LEVELS[level], "%s %s", message, entry.data)

    def entries(self, level: Optional[str] = None) -> List[LogEntry]:
        """All entries in insertion order, optionally filtered by level."""
        entries = self.load()
        if level is not None:
            entries = [e for e in entries if e.level == level]
        return entries
