"""Cache service: the public surface for glue code.

This service orchestrates the two tiers by coordinating the storage
backend (disk tier), the memory cache (decoded images) and the record
engine. Every method swallows CacheError, logs it and reports the
failure as False or None.
"""

import asyncio
import logging
from collections.abc import AsyncIterator, Iterable, Sequence
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any, TypeVar

from simple_cache.config import settings
from simple_cache.entities import CacheKey, CacheLevel
from simple_cache.exceptions import CacheError
from simple_cache.protocols import Cacheable, ImageCodec, MemoryCache, StorageBackend
from simple_cache.repositories import (
    FileStorageBackend,
    LRUMemoryCache,
    PillowImageCodec,
    RedisStorageBackend,
)
from simple_cache.services.record_cache import RecordCache

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R", bound=Cacheable)


@dataclass
class _KeyLock:
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    users: int = 0


class CacheService:
    """Two-tier cache for records, blobs and images.

    This service depends on PROTOCOLS, not concrete implementations:
    - StorageBackend: can be the filesystem, Redis, etc.
    - MemoryCache: any thread-safe in-process cache
    - ImageCodec: any image encode/decode pair

    Build one instance at startup and pass it to every call site.

    Mutations run in a worker thread and are serialized per key within
    this instance, so updates issued through one service are never lost.
    remove_all also waits for the in-flight mutations under its path.
    A lock lives only while a mutation holds or waits on it.
    Separate instances (or processes) sharing a cache directory are not
    coordinated.

    Example:
        ```python
        from simple_cache.services import CacheService

        cache = CacheService.create()

        await cache.save_many("feeds/home.json", notes)
        await cache.append("feeds/home.json", [note])
        notes = cache.get("feeds/home.json", list[Note])
        ```
    """

    def __init__(
        self,
        storage: StorageBackend,
        memory_cache: MemoryCache,
        image_codec: ImageCodec | None = None,
        default_extension: str | None = None,
    ) -> None:
        """Initialize the cache service.

        Args:
            storage: Disk tier backend (required).
            memory_cache: Memory tier for decoded images (required).
            image_codec: Codec for save_image / object. Image methods fail
                without one.
            default_extension: Extension for keys without one. Defaults to settings.
        """
        self._storage = storage
        self._memory = memory_cache
        self._codec = image_codec
        self._default_extension = default_extension or settings.image_extension
        self._records = RecordCache(storage, default_extension=self._default_extension)
        self._locks: dict[str, _KeyLock] = {}

    @classmethod
    def create(
        cls,
        storage: StorageBackend | None = None,
        memory_cache: MemoryCache | None = None,
        image_codec: ImageCodec | None = None,
    ) -> "CacheService":
        """Factory method to create CacheService with sensible defaults.

        Backends are picked from settings: the file backend under
        SIMPLE_CACHE_DIR, or Redis when SIMPLE_CACHE_BACKEND=redis.

        Args:
            storage: Disk tier backend. If None, uses settings.
            memory_cache: Memory tier. If None, an LRU sized from settings.
            image_codec: Image codec. If None, Pillow JPEG.

        Returns:
            Configured CacheService instance
        """
        if storage is None:
            storage = RedisStorageBackend.create() if settings.uses_redis else FileStorageBackend.create()

        return cls(
            storage=storage,
            memory_cache=memory_cache or LRUMemoryCache(settings.memory_cache_size),
            image_codec=image_codec or PillowImageCodec(settings.image_quality),
        )

    @asynccontextmanager
    async def _locked(self, *names: str) -> AsyncIterator[None]:
        # entries live only while someone holds or waits on them
        entries = []
        for name in sorted(set(names)):
            entry = self._locks.get(name)
            if entry is None:
                entry = self._locks[name] = _KeyLock()
            entry.users += 1
            entries.append((name, entry))

        acquired = []
        try:
            for _, entry in entries:
                await entry.lock.acquire()
                acquired.append(entry)
            yield
        finally:
            for entry in acquired:
                entry.lock.release()
            for name, entry in entries:
                entry.users -= 1
                if entry.users == 0:
                    del self._locks[name]

    async def _mutate(self, name: str, operation: str, func: Any, *args: Any, also: Iterable[str] = ()) -> bool:
        async with self._locked(name, *also):
            try:
                await asyncio.to_thread(func, *args)
            except CacheError as e:
                logger.warning("%s failed for %s: %s", operation, name, e.message)
                return False
        return True

    # Records

    async def save(self, path: str, record: Any) -> bool:
        """Store one record as the whole document at path."""
        key = CacheKey.from_path(path)
        return await self._mutate(self._records.name_for(key), "save", self._records.save_one, key, record)

    async def save_many(self, path: str, records: Sequence[Any]) -> bool:
        """Store records as the whole document at path, in order."""
        key = CacheKey.from_path(path)
        return await self._mutate(self._records.name_for(key), "save_many", self._records.save_many, key, records)

    async def append(self, path: str, records: Sequence[T], record_type: type[T] | None = None) -> bool:
        """Add records to the tail of the collection at path."""
        key = CacheKey.from_path(path)
        return await self._mutate(
            self._records.name_for(key), "append", self._records.append, key, records, record_type
        )

    async def insert(self, path: str, records: Sequence[T], record_type: type[T] | None = None) -> bool:
        """Add records to the head of the collection at path, in the given order."""
        key = CacheKey.from_path(path)
        return await self._mutate(
            self._records.name_for(key), "insert", self._records.insert, key, records, record_type
        )

    async def remove(self, path: str, item_id: str, record_type: type[R]) -> bool:
        """Remove every record with item_id from the collection at path.

        Returns:
            False only if the document is missing, unreadable or cannot be
            written. A document with no matching record still returns True.
        """
        key = CacheKey.from_path(path)
        return await self._mutate(
            self._records.name_for(key), "remove", self._records.remove_by_id, key, item_id, record_type
        )

    async def replace(self, path: str, item_id: str, new_record: R) -> bool:
        """Replace the first record with item_id in the collection at path.

        Returns:
            False if the document is missing or no record has item_id.
        """
        key = CacheKey.from_path(path)
        return await self._mutate(
            self._records.name_for(key), "replace", self._records.replace_by_id, key, item_id, new_record
        )

    def get(self, path: str, as_type: type[T]) -> T | None:
        """Read the document at path as as_type, or None if missing or corrupt."""
        return self._records.get(CacheKey.from_path(path), as_type)

    # Blobs

    async def save_data(self, key: CacheKey, data: bytes) -> bool:
        """Store raw bytes at key, unchanged."""
        name = key.filename(self._default_extension)
        return await self._mutate(name, "save_data", self._storage.write, name, data)

    def get_data(self, key: CacheKey) -> bytes | None:
        """Read raw bytes stored at key."""
        name = key.filename(self._default_extension)
        try:
            return self._storage.read(name)
        except CacheError as e:
            logger.debug("Cache miss for %s: %s", name, e.message)
            return None

    # Images

    async def save_image(self, key: CacheKey, image: Any, level: CacheLevel = CacheLevel.DISK) -> bool:
        """Cache a decoded image in memory, and on disk unless level is MEMORY.

        Returns:
            False if encoding or the disk write failed. The memory tier
            keeps the image either way.
        """
        self._memory.set(key, image)
        if level < CacheLevel.DISK:
            return True
        if self._codec is None:
            logger.warning("save_image for %s needs an image codec", key.identifier)
            return False

        name = key.filename(self._default_extension)
        return await self._mutate(name, "save_image", self._encode_and_write, name, image)

    def _encode_and_write(self, name: str, image: Any) -> None:
        self._storage.write(name, self._codec.encode(image))  # type: ignore[union-attr]

    def object(self, key: CacheKey) -> Any | None:
        """Return the image for key from memory, falling back to disk.

        A disk hit is decoded and put in the memory tier.
        """
        image = self._memory.get(key)
        if image is not None:
            return image
        if self._codec is None:
            return None

        name = key.filename(self._default_extension)
        try:
            image = self._codec.decode(self._storage.read(name))
        except CacheError as e:
            logger.debug("Image miss for %s: %s", name, e.message)
            return None

        self._memory.set(key, image)
        return image

    async def object_async(self, key: CacheKey) -> Any | None:
        """Like object, but reads and decodes in a worker thread."""
        return await asyncio.to_thread(self.object, key)

    # Directories

    def get_directory(self, path: str) -> str | None:
        """Return the resolved storage location of path.

        Returns None if path cannot be addressed, e.g. it escapes the
        cache directory.
        """
        try:
            return self._storage.location(path)
        except CacheError as e:
            logger.warning("get_directory failed for %s: %s", path, e.message)
            return None

    async def remove_all(self, path: str) -> bool:
        """Delete everything stored under path. Missing paths succeed.

        Waits for the mutations already in flight under path before
        deleting. A mutation of a name that had none in flight is not held
        back and may land before or after the delete.
        """
        return await self._mutate(
            path, "remove_all", self._storage.remove_subtree, path, also=self._names_under(path)
        )

    def _names_under(self, prefix: str) -> list[str]:
        base = prefix.strip("/")
        if not base:
            return list(self._locks)
        return [name for name in self._locks if name == base or name.startswith(f"{base}/")]

    @property
    def records(self) -> RecordCache:
        """Get the strict record engine, which raises typed errors."""
        return self._records

    @property
    def storage(self) -> StorageBackend:
        """Get the underlying storage backend (for testing)."""
        return self._storage

    @property
    def memory_cache(self) -> MemoryCache:
        """Get the underlying memory cache (for testing)."""
        return self._memory
