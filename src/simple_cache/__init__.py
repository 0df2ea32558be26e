"""Simple Cache - two-tier (memory + disk) cache for blobs, images and records.

This package provides a layered architecture:

Layers:
    - entities: Value objects (CacheKey, CacheLevel)
    - protocols: Interface contracts (StorageBackend, MemoryCache, ImageCodec, Cacheable)
    - repositories: Implementations (filesystem, Redis, LRU, Pillow)
    - services: RecordCache (strict engine) and CacheService (public surface)

Usage:
    ```python
    from simple_cache import CacheKey, CacheService

    cache = CacheService.create()

    await cache.save_many("feeds/home.json", notes)
    await cache.insert("feeds/home.json", [newest])
    notes = cache.get("feeds/home.json", list[Note])

    await cache.save_image(CacheKey.from_url(url), image)
    image = cache.object(CacheKey.from_url(url))
    ```
"""

from simple_cache.config import get_redis_client, get_settings, settings, setup_logging
from simple_cache.entities import CacheKey, CacheLevel
from simple_cache.exceptions import (
    CacheError,
    DecodeError,
    NotFoundError,
    NotMatchedError,
    StorageError,
)
from simple_cache.protocols import Cacheable, ImageCodec, MemoryCache, StorageBackend
from simple_cache.repositories import (
    FileStorageBackend,
    LRUMemoryCache,
    PillowImageCodec,
    RedisStorageBackend,
)
from simple_cache.services import CacheService, RecordCache

__all__ = [
    # Configuration
    "settings",
    "get_settings",
    "get_redis_client",
    "setup_logging",
    # Entities
    "CacheKey",
    "CacheLevel",
    # Errors
    "CacheError",
    "NotFoundError",
    "DecodeError",
    "StorageError",
    "NotMatchedError",
    # Protocols (interfaces)
    "Cacheable",
    "StorageBackend",
    "MemoryCache",
    "ImageCodec",
    # Repositories (data access)
    "FileStorageBackend",
    "RedisStorageBackend",
    "LRUMemoryCache",
    "PillowImageCodec",
    # Services
    "CacheService",
    "RecordCache",
]
