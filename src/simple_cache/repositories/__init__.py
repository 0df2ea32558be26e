"""Repository layer for data access.

This layer abstracts external dependencies (filesystem, Redis, Pillow)
behind protocol-based interfaces. This enables:
- Easy swapping of implementations (disk → Redis)
- Unit testing with temporary directories and mock clients
- Clear separation of concerns

The repositories are protocol-based (structural typing), not inheritance-based.
Any class implementing the required methods will satisfy the protocol.
"""

from simple_cache.protocols import ImageCodec, MemoryCache, StorageBackend

from .file_storage_backend import FileStorageBackend
from .lru_memory_cache import LRUMemoryCache
from .pillow_image_codec import PillowImageCodec
from .redis_storage_backend import RedisStorageBackend

__all__ = [
    "StorageBackend",
    "MemoryCache",
    "ImageCodec",
    "FileStorageBackend",
    "RedisStorageBackend",
    "LRUMemoryCache",
    "PillowImageCodec",
]
