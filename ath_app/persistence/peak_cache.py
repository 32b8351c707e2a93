"""Peak record cache keyed by symbol."""

import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional

import structlog

from ..data.models import PeakRecord
from ..utils.time import is_expired, now_utc


class PeakCache(ABC):
    """Get/put contract for caching resolved peaks."""

    @abstractmethod
    def get(self, symbol: str) -> Optional[PeakRecord]:
        """Cached record for symbol, None if absent or expired."""

    @abstractmethod
    def put(self, symbol: str, record: PeakRecord, ttl: timedelta) -> None:
        """Store record for symbol for at most ttl."""


@dataclass(frozen=True)
class CachedPeak:
    """Cache entry with its storage time."""
    record: PeakRecord
    stored_at: datetime
    ttl: timedelta


class InMemoryPeakCache(PeakCache):
    """Thread-safe, process-local peak cache."""

    def __init__(self, clock: Callable[[], datetime] = now_utc):
        self.logger = structlog.get_logger("peak.cache")
        self._clock = clock
        self._entries: dict[str, CachedPeak] = {}
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def get(self, symbol: str) -> Optional[PeakRecord]:
        key = symbol.upper()
        with self._lock:
            entry = self._entries.get(key)

            if entry is None:
                self.misses += 1
                return None

            if is_expired(entry.stored_at, entry.ttl, self._clock()):
                del self._entries[key]
                self.misses += 1
                self.logger.debug("Cached peak expired", symbol=key)
                return None

            self.hits += 1
            return entry.record

    def put(self, symbol: str, record: PeakRecord, ttl: timedelta) -> None:
        key = symbol.upper()
        with self._lock:
            self._entries[key] = CachedPeak(record=record, stored_at=self._clock(), ttl=ttl)

    def clear(self) -> None:
        """Drop every entry."""
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
