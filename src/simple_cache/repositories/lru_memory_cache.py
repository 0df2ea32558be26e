"""Thread-safe LRU implementation of MemoryCache."""

import threading
from collections import OrderedDict
from collections.abc import Hashable
from typing import Any

from simple_cache.config import settings


class LRUMemoryCache:
    """Least-recently-used in-process cache.

    This class satisfies the MemoryCache protocol through structural
    typing. Every operation takes an internal lock, so one instance can
    be shared by all threads of the process.
    """

    def __init__(self, max_entries: int | None = None) -> None:
        """Initialize the LRU cache.

        Args:
            max_entries: Capacity before the least recently used entry is
                evicted. Defaults to settings.
        """
        self._max_entries = settings.memory_cache_size if max_entries is None else max_entries
        if self._max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self._entries: OrderedDict[Hashable, Any] = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: Hashable) -> Any | None:
        with self._lock:
            if key not in self._entries:
                return None
            self._entries.move_to_end(key)
            return self._entries[key]

    def set(self, key: Hashable, value: Any) -> None:
        with self._lock:
            # pop first so an equal key with new fields replaces the stored key
            self._entries.pop(key, None)
            self._entries[key] = value
            while len(self._entries) > self._max_entries:
                self._entries.popitem(last=False)

    def remove(self, key: Hashable) -> bool:
        with self._lock:
            if key not in self._entries:
                return False
            del self._entries[key]
            return True

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: Hashable) -> bool:
        with self._lock:
            return key in self._entries

    @property
    def max_entries(self) -> int:
        """Get the cache capacity."""
        return self._max_entries
