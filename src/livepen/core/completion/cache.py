"""Short-lived memo of completion results.

Entries are keyed on ``(len(source), line, column, dialect)``.  The key does
not hash the source text, so an edit that keeps the length unchanged within
the TTL can return a stale list; keystroke bursts make that rare enough.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from livepen.config.defaults import CACHE_MAX_ENTRIES, CACHE_TTL_SECONDS
from livepen.config.dialects import Dialect
from livepen.core.parsers.base import Position

logger = logging.getLogger(__name__)

CacheKey = tuple[int, int, int, str]


@dataclass
class _Entry:
    value: Any
    stored_at: float


def cache_key(source: str, position: Position, dialect: Dialect) -> CacheKey:
    return (len(source), position.line, position.column, dialect.value)


class ResultCache:
    """TTL + size-bounded cache; reads take no lock, writes do."""

    def __init__(
        self,
        ttl: float = CACHE_TTL_SECONDS,
        max_entries: int = CACHE_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl = ttl
        self.max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[CacheKey, _Entry] = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: CacheKey) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() - entry.stored_at > self.ttl:
            with self._lock:
                current = self._entries.get(key)
                if current is entry:
                    del self._entries[key]
            logger.debug("Cache entry %s expired", key)
            return None
        return entry.value

    def put(self, key: CacheKey, value: Any) -> None:
        with self._lock:
            self._entries.pop(key, None)
            self._entries[key] = _Entry(value=value, stored_at=self._clock())
            while len(self._entries) > self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("Cache full, evicted %s", evicted)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries
