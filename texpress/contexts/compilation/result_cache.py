"""
Bounded TTL cache for compiled previews.

Entries expire ttl_s seconds after they are stored. Expired entries are
swept on every write; when the cache is still full after a sweep, the
oldest entry is evicted. All operations are guarded by one lock.
"""

import hashlib
import threading
import time
from collections import OrderedDict
from typing import Any, Callable, Optional, Tuple

from texpress.contexts.compilation.logger import log_cache_hit, log_cache_store


def make_key(markup: str, filename: str, preferred_method: Optional[str] = None) -> str:
    """SHA-256 hex digest identifying one compile request."""
    digest = hashlib.sha256()
    for part in (markup, filename, preferred_method or ""):
        digest.update(part.encode("utf-8"))
        digest.update(b"\x00")
    return digest.hexdigest()


class ResultCache:
    """
    Thread-safe key -> value store with expiry and a size bound.

    Args:
        ttl_s: Seconds an entry stays valid
        max_entries: Upper bound on stored entries
        clock: Monotonic time source (tests inject a fake)
    """

    def __init__(
        self,
        ttl_s: float = 300,
        max_entries: int = 128,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_entries < 1:
            raise ValueError(f"max_entries must be positive, got {max_entries}")
        self.ttl_s = ttl_s
        self.max_entries = max_entries
        self._clock = clock
        self._entries: "OrderedDict[str, Tuple[float, Any]]" = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _expired(self, stored_at: float, now: float) -> bool:
        return now - stored_at >= self.ttl_s

    def _sweep(self, now: float) -> None:
        expired = [
            key for key, (stored_at, _) in self._entries.items() if self._expired(stored_at, now)
        ]
        for key in expired:
            del self._entries[key]

    def get(self, key: str) -> Optional[Any]:
        """Return the live value for key, or None if missing or expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            stored_at, value = entry
            if self._expired(stored_at, self._clock()):
                del self._entries[key]
                return None
        log_cache_hit(key)
        return value

    def put(self, key: str, value: Any) -> None:
        """Store value under key, sweeping expired entries and evicting the oldest if full."""
        with self._lock:
            now = self._clock()
            self._sweep(now)
            self._entries.pop(key, None)
            while len(self._entries) >= self.max_entries:
                self._entries.popitem(last=False)
            self._entries[key] = (now, value)
            size = len(self._entries)
        log_cache_store(key, size)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
