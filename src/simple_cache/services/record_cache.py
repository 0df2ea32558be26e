"""Record cache: whole-document CRUD over ordered collections.

Each key holds one JSON document: an array for collections, an object
for single records. Every mutation reads the whole document, transforms
it in memory and writes the whole document back. There is no locking
here; two concurrent mutations of the same key race and the last write
wins. CacheService serializes its own calls per key.

Errors propagate as CacheError subclasses. Use CacheService for the
variant that collapses them to False / None.
"""

import logging
from collections.abc import Sequence
from functools import lru_cache
from typing import Any, TypeVar

from pydantic import TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError, to_json

from simple_cache.config import settings
from simple_cache.entities import CacheKey
from simple_cache.exceptions import CacheError, DecodeError, NotFoundError, NotMatchedError
from simple_cache.protocols import Cacheable, StorageBackend

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R", bound=Cacheable)


@lru_cache(maxsize=256)
def _adapter(tp: Any) -> TypeAdapter[Any]:
    return TypeAdapter(tp)


class RecordCache:
    """Strict read-modify-write engine for cached records.

    Example:
        ```python
        records = RecordCache(FileStorageBackend.create())
        key = CacheKey.from_path("feeds/home.json")

        records.save_many(key, [a, b, c])
        records.append(key, [d])
        records.replace_by_id(key, b.id, b2)
        notes = records.load(key, list[Note])
        ```
    """

    def __init__(self, storage: StorageBackend, default_extension: str | None = None) -> None:
        """Initialize the record cache.

        Args:
            storage: Byte storage the documents live in (required).
            default_extension: Extension for keys without one. Defaults to settings.
        """
        self._storage = storage
        self._default_extension = default_extension or settings.image_extension

    def name_for(self, key: CacheKey) -> str:
        """Return the storage name of the document for key."""
        return key.filename(self._default_extension)

    def _encode(self, name: str, value: Any) -> bytes:
        try:
            return to_json(value)
        except PydanticSerializationError as e:
            raise DecodeError(name, original_error=e) from e

    def _decode(self, name: str, data: bytes, as_type: Any) -> Any:
        try:
            return _adapter(as_type).validate_json(data)
        except ValidationError as e:
            raise DecodeError(name, original_error=e) from e

    def _write(self, name: str, value: Any) -> None:
        self._storage.write(name, self._encode(name, value))

    def _read_list(self, name: str, record_type: Any, missing_ok: bool) -> list[Any]:
        try:
            data = self._storage.read(name)
        except NotFoundError:
            if missing_ok:
                return []
            raise
        return self._decode(name, data, list[record_type])

    def save_one(self, key: CacheKey, record: Any) -> None:
        """Store a single record as the whole document.

        Never merges with what was there before.

        Raises:
            DecodeError: If the record is not serializable
            StorageError: If the write fails
        """
        self._write(self.name_for(key), record)

    def save_many(self, key: CacheKey, records: Sequence[Any]) -> None:
        """Store records as the whole document, in the given order.

        No deduplication is performed.

        Raises:
            DecodeError: If a record is not serializable
            StorageError: If the write fails
        """
        self._write(self.name_for(key), list(records))

    def append(
        self,
        key: CacheKey,
        records: Sequence[T],
        record_type: type[T] | None = None,
    ) -> list[T]:
        """Add records after every record already stored.

        A missing document counts as empty.

        Args:
            key: Document key
            records: Records to add, in order
            record_type: Type to decode existing records as. Inferred
                from the first new record when omitted.

        Returns:
            The full sequence that was written

        Raises:
            DecodeError: If the existing document is not a list of record_type
            StorageError: If the read or write fails
        """
        name = self.name_for(key)
        existing = self._read_list(name, self._infer_type(records, record_type), missing_ok=True)
        combined = existing + list(records)
        self._write(name, combined)
        logger.debug("Appended %d records to %s (%d total)", len(records), name, len(combined))
        return combined

    def insert(
        self,
        key: CacheKey,
        records: Sequence[T],
        record_type: type[T] | None = None,
        at_head: bool = True,
    ) -> list[T]:
        """Add records before every record already stored.

        Records keep their given order, so callers wanting them reversed
        must reverse them first. A missing document counts as empty.

        Args:
            key: Document key
            records: Records to add, in order
            record_type: Type to decode existing records as. Inferred
                from the first new record when omitted.
            at_head: If False, behaves like append.

        Returns:
            The full sequence that was written

        Raises:
            DecodeError: If the existing document is not a list of record_type
            StorageError: If the read or write fails
        """
        if not at_head:
            return self.append(key, records, record_type)

        name = self.name_for(key)
        existing = self._read_list(name, self._infer_type(records, record_type), missing_ok=True)
        combined = list(records) + existing
        self._write(name, combined)
        logger.debug("Inserted %d records into %s (%d total)", len(records), name, len(combined))
        return combined

    def remove_by_id(self, key: CacheKey, item_id: str, record_type: type[R]) -> int:
        """Remove every record whose cache_item_id equals item_id.

        The document is rewritten even when nothing matched.

        Args:
            key: Document key
            item_id: Id to remove
            record_type: Record type (must satisfy Cacheable)

        Returns:
            Number of records removed, possibly 0

        Raises:
            NotFoundError: If the document does not exist
            DecodeError: If the document is not a list of record_type
            StorageError: If the read or write fails
        """
        name = self.name_for(key)
        existing = self._read_list(name, record_type, missing_ok=False)
        kept = [record for record in existing if record.cache_item_id != item_id]
        self._write(name, kept)
        removed = len(existing) - len(kept)
        logger.debug("Removed %d records with id %r from %s", removed, item_id, name)
        return removed

    def replace_by_id(
        self,
        key: CacheKey,
        item_id: str,
        new_record: R,
        record_type: type[R] | None = None,
    ) -> list[R]:
        """Replace the first record whose cache_item_id equals item_id.

        The replacement keeps the position of the record it replaces.

        Args:
            key: Document key
            item_id: Id to look for
            new_record: Replacement record
            record_type: Type to decode existing records as. Defaults to
                the type of new_record.

        Returns:
            The full sequence that was written

        Raises:
            NotFoundError: If the document does not exist
            NotMatchedError: If no record has item_id; nothing is written
            DecodeError: If the document is not a list of record_type
            StorageError: If the read or write fails
        """
        name = self.name_for(key)
        existing = self._read_list(name, record_type or type(new_record), missing_ok=False)
        for index, record in enumerate(existing):
            if record.cache_item_id == item_id:
                existing[index] = new_record
                break
        else:
            raise NotMatchedError(name, item_id)

        self._write(name, existing)
        logger.debug("Replaced record %r at index %d in %s", item_id, index, name)
        return existing

    def load(self, key: CacheKey, as_type: type[T]) -> T:
        """Read and decode the document for key.

        Args:
            key: Document key
            as_type: Shape to decode, e.g. ``list[Note]`` or ``Note``

        Raises:
            NotFoundError: If the document does not exist
            DecodeError: If the document does not match as_type
            StorageError: If the read fails
        """
        name = self.name_for(key)
        return self._decode(name, self._storage.read(name), as_type)

    def get(self, key: CacheKey, as_type: type[T]) -> T | None:
        """Like load, but returns None on any failure."""
        try:
            return self.load(key, as_type)
        except CacheError as e:
            logger.debug("Cache miss for %s: %s", self.name_for(key), e.message)
            return None

    @staticmethod
    def _infer_type(records: Sequence[Any], record_type: Any) -> Any:
        if record_type is not None:
            return record_type
        if records:
            return type(records[0])
        # nothing to infer from; decode loosely, re-encoding keeps the content
        return Any

    @property
    def storage(self) -> StorageBackend:
        """Get the underlying storage backend."""
        return self._storage
