"""
Shared fixtures for the simple cache tests.
"""

import pytest

from simple_cache import CacheService, FileStorageBackend, LRUMemoryCache, PillowImageCodec, RecordCache


@pytest.fixture
def storage(tmp_path):
    """Create a file storage backend in a temporary directory."""
    return FileStorageBackend(tmp_path / "cache")


@pytest.fixture
def records(storage):
    """Create a strict record cache over the temporary storage."""
    return RecordCache(storage)


@pytest.fixture
def service(storage):
    """Create a cache service over the temporary storage."""
    return CacheService(
        storage=storage,
        memory_cache=LRUMemoryCache(max_entries=8),
        image_codec=PillowImageCodec(quality=100),
    )
