"""Protocol interfaces for swappable implementations.

This package contains protocol definitions using structural typing.
Protocols enable:
- Easy swapping of implementations (filesystem → Redis, LRU → anything)
- Unit testing with in-memory implementations
- Clear separation of concerns

Usage:
    ```python
    from simple_cache.protocols import StorageBackend

    storage: StorageBackend = FileStorageBackend.create()   # works
    storage: StorageBackend = RedisStorageBackend.create()  # also works
    ```
"""

from .cacheable import Cacheable
from .image_codec import ImageCodec
from .memory_cache import MemoryCache
from .storage_backend import StorageBackend

__all__ = [
    "Cacheable",
    "ImageCodec",
    "MemoryCache",
    "StorageBackend",
]
