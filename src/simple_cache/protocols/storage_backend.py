"""Storage backend protocol.

Defines the interface for any byte store the cache can persist
documents, blobs and images to.

Implementations can include:
- Local filesystem under a caches directory (default)
- Redis
- Any other store that can read, write and delete bytes by name
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class StorageBackend(Protocol):
    """Protocol for byte-addressable storage backends.

    Names are "/"-separated relative paths such as ``"feeds/home.json"``.
    Anything before the last "/" is a directory-like namespace that
    ``remove_subtree`` can drop in one call.

    Names must stay inside the backend's namespace: an absolute name
    (leading "/") or a ".." segment raises StorageError from every
    method, whichever backend is in use.

    Example:
        ```python
        from simple_cache.protocols import StorageBackend

        storage: StorageBackend = FileStorageBackend.create()
        storage: StorageBackend = RedisStorageBackend.create()
        ```
    """

    def write(self, name: str, data: bytes) -> None:
        """Replace whatever is stored at name with data.

        Parent namespaces are created as needed. On failure the previous
        content, if any, is left in place.

        Args:
            name: Relative storage name
            data: Bytes to store

        Raises:
            StorageError: On any I/O failure
        """
        ...

    def read(self, name: str) -> bytes:
        """Read the bytes stored at name.

        Args:
            name: Relative storage name

        Returns:
            The stored bytes

        Raises:
            NotFoundError: If nothing is stored at name
            StorageError: On any other I/O failure
        """
        ...

    def exists(self, name: str) -> bool:
        """Check whether anything is stored at name.

        Args:
            name: Relative storage name

        Returns:
            True if a value (or namespace) exists at name
        """
        ...

    def remove_subtree(self, prefix: str) -> None:
        """Delete the value or namespace at prefix, and everything under it.

        Removing something that does not exist is a no-op.

        Args:
            prefix: Relative storage name or namespace

        Raises:
            StorageError: If the underlying delete fails
        """
        ...

    def location(self, name: str) -> str:
        """Return the resolved storage location of name.

        Args:
            name: Relative storage name

        Returns:
            Absolute filesystem path, backend key or similar
        """
        ...
