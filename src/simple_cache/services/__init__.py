"""Service layer for business logic.

This layer contains the core cache logic and orchestration.
Services depend on protocols (interfaces), not concrete implementations,
making them testable and flexible.

Architecture:
    CacheService -> RecordCache -> StorageBackend
    (public)     -> (engine)    -> (data access)

Usage:
    ```python
    from simple_cache.services import CacheService

    # Using factory method (recommended)
    cache = CacheService.create()

    # Or manual creation
    cache = CacheService(storage=storage, memory_cache=LRUMemoryCache(50))
    ```
"""

from .cache_service import CacheService
from .record_cache import RecordCache

__all__ = [
    "CacheService",
    "RecordCache",
]
