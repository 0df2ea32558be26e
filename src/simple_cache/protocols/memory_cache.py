"""In-memory cache protocol.

The memory tier holds decoded images for the life of the process.
Its eviction policy belongs to the implementation, not to the cache
service.
"""

from collections.abc import Hashable
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class MemoryCache(Protocol):
    """Protocol for thread-safe in-process caches.

    Implementations must tolerate concurrent get/set from several
    threads without external locking.
    """

    def get(self, key: Hashable) -> Any | None:
        """Return the value cached under key, or None on a miss."""
        ...

    def set(self, key: Hashable, value: Any) -> None:
        """Cache value under key, evicting per the implementation's policy."""
        ...

    def remove(self, key: Hashable) -> bool:
        """Drop key. Returns True if it was present."""
        ...

    def clear(self) -> None:
        """Drop every entry."""
        ...

    def __len__(self) -> int: ...
