"""
Extraction Result Cache

In-memory, process-lifetime cache of ExtractionResults keyed by source URL.

Entries expire a fixed TTL after they were stored. Expired entries are
dropped lazily on lookup, or in bulk by purge_expired() for hosts that
want a periodic sweep. There is no capacity bound.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from ..common.constants import CACHE_TTL_MINUTES
from ..models import ExtractionResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    """A cached result and the clock value at which it stops being served."""
    result: ExtractionResult
    expires_at: float


class ExtractionCache:
    """
    Thread-safe TTL cache of extraction results.

    Usage:
        cache = ExtractionCache(ttl_seconds=1800)
        cache.put(url, result)
        cache.get(url)          # result until 30 minutes later, then None
    """

    def __init__(
        self,
        ttl_seconds: float = CACHE_TTL_MINUTES * 60,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize the cache.

        Args:
            ttl_seconds: Lifetime of an entry in seconds
            clock: Monotonic time source (injectable for tests)
        """
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def get(self, url: str) -> Optional[ExtractionResult]:
        """Return the cached result for url, or None if absent or expired."""
        with self._lock:
            entry = self._entries.get(url)
            if entry is None:
                return None
            if self._clock() >= entry.expires_at:
                del self._entries[url]
                logger.debug("Cache entry expired: %s", url)
                return None
            return entry.result

    def put(self, url: str, result: ExtractionResult) -> None:
        """Store result for url with a fresh expiry, replacing any previous entry."""
        with self._lock:
            self._entries[url] = CacheEntry(result=result, expires_at=self._clock() + self.ttl_seconds)

    def invalidate(self, url: str) -> bool:
        """Drop the entry for url. Returns True if there was one."""
        with self._lock:
            return self._entries.pop(url, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def purge_expired(self) -> int:
        """Remove every expired entry. Returns the number removed."""
        with self._lock:
            now = self._clock()
            expired = [url for url, entry in self._entries.items() if now >= entry.expires_at]
            for url in expired:
                del self._entries[url]

        if expired:
            logger.info("Purged %d expired cache entries", len(expired))
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, url: str) -> bool:
        return self.get(url) is not None
