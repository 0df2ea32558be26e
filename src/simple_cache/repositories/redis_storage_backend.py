"""Redis implementation of StorageBackend.

Each name is stored as a plain string value at ``{prefix}:{name}``.
Namespaces are emulated with the "/" in names, so removing a subtree
is a SCAN over ``{prefix}:{name}/*`` plus the exact key.
"""

import logging
import re

import redis

from simple_cache.config import get_redis_client, settings
from simple_cache.exceptions import NotFoundError, StorageError

logger = logging.getLogger(__name__)

_GLOB_SPECIAL = re.compile(r"([*?\[\]\\])")


class RedisStorageBackend:
    """Redis storage keyed by prefixed names.

    This class satisfies the StorageBackend protocol through structural
    typing - no explicit inheritance needed.

    SET replaces a value in one step, so a failed write leaves the
    previous value untouched.
    """

    def __init__(
        self,
        redis_client: redis.Redis | None = None,
        prefix: str | None = None,
    ) -> None:
        """Initialize the Redis storage backend.

        Args:
            redis_client: Redis client instance. If None, creates default.
            prefix: Key prefix for every stored name. Defaults to settings.
        """
        self._client = redis_client or get_redis_client()
        self._prefix = prefix or settings.redis_prefix

    @classmethod
    def create(cls, prefix: str | None = None) -> "RedisStorageBackend":
        """Factory method to create RedisStorageBackend with defaults.

        Args:
            prefix: Redis key prefix. If None, uses settings.

        Returns:
            Configured RedisStorageBackend
        """
        return cls(prefix=prefix)

    def _key(self, name: str) -> str:
        if name.startswith("/") or ".." in name.split("/"):
            raise StorageError(f"Name escapes the cache namespace: {name!r}", name=name)
        return f"{self._prefix}:{name.rstrip('/')}"

    def write(self, name: str, data: bytes) -> None:
        """Store data at name, replacing any previous value.

        Args:
            name: Relative storage name
            data: Bytes to store

        Raises:
            StorageError: If Redis rejects the write
        """
        key = self._key(name)
        try:
            self._client.set(key, data)
        except redis.RedisError as e:
            raise StorageError(f"Failed to write {name!r}", name=name, original_error=e) from e

        logger.debug("Wrote %d bytes to %s", len(data), key)

    def read(self, name: str) -> bytes:
        """Read the value stored at name.

        Args:
            name: Relative storage name

        Returns:
            Stored bytes

        Raises:
            NotFoundError: If the key does not exist
            StorageError: If Redis is unreachable
        """
        try:
            value = self._client.get(self._key(name))
        except redis.RedisError as e:
            raise StorageError(f"Failed to read {name!r}", name=name, original_error=e) from e

        if value is None:
            raise NotFoundError(name)
        if isinstance(value, str):
            return value.encode("utf-8")
        return value  # type: ignore[return-value]

    def exists(self, name: str) -> bool:
        """Check whether the key, or any key under it, exists."""
        try:
            if self._client.exists(self._key(name)):
                return True
            return next(iter(self._client.scan_iter(match=self._subtree_pattern(name), count=1)), None) is not None
        except redis.RedisError as e:
            raise StorageError(f"Failed to check {name!r}", name=name, original_error=e) from e

    def _subtree_pattern(self, prefix: str) -> str:
        base = self._key(prefix)
        escaped = _GLOB_SPECIAL.sub(r"\\\1", base)
        # empty prefix: everything we own
        if not prefix.strip("/"):
            return f"{escaped}*"
        return f"{escaped}/*"

    def remove_subtree(self, prefix: str) -> None:
        """Delete the key at prefix and every key under ``prefix/``.

        Missing keys are a no-op.

        Args:
            prefix: Relative storage name or namespace

        Raises:
            StorageError: If Redis rejects the delete
        """
        try:
            count = 0
            keys = list(self._client.scan_iter(match=self._subtree_pattern(prefix)))
            if prefix.strip("/"):
                keys.append(self._key(prefix))
            if keys:
                count = self._client.delete(*keys)  # type: ignore[assignment]
        except redis.RedisError as e:
            raise StorageError(f"Failed to remove {prefix!r}", name=prefix, original_error=e) from e

        logger.debug("Removed %s keys under %s", count, self._key(prefix))

    def location(self, name: str) -> str:
        """Return the Redis key name is stored at."""
        return self._key(name)

    def health_check(self) -> bool:
        """Check if Redis is accessible.

        Returns:
            True if healthy, False otherwise
        """
        try:
            result = self._client.ping()
            return bool(result)
        except redis.RedisError:
            return False

    @property
    def client(self) -> redis.Redis:
        """Get the Redis client."""
        return self._client
