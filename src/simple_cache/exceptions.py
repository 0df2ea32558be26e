"""Cache exceptions.

Storage backends and the record engine raise these. The public
CacheService catches CacheError and collapses it to False / None.
"""

from typing import Any


class CacheError(Exception):
    """Base exception for cache errors.

    Attributes:
        message: Human-readable description
        name: Storage name (relative path or key) the error refers to
        details: Extra context for logging
    """

    def __init__(
        self,
        message: str,
        name: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.name = name
        self.details = details or {}
        super().__init__(self.message)


class NotFoundError(CacheError):
    """Raised when no document, blob or image exists at a key."""

    def __init__(self, name: str) -> None:
        super().__init__(message=f"Nothing cached at {name!r}", name=name)


class DecodeError(CacheError):
    """Raised when stored bytes do not parse as the requested shape."""

    def __init__(self, name: str, original_error: Exception | None = None) -> None:
        details = {}
        if original_error is not None:
            details["original_error"] = str(original_error)
            details["original_error_type"] = type(original_error).__name__
        super().__init__(message=f"Could not decode {name!r}", name=name, details=details)
        if original_error is not None:
            self.__cause__ = original_error


class StorageError(CacheError):
    """Raised on I/O failure: permission, disk full, directory creation."""

    def __init__(
        self,
        message: str,
        name: str | None = None,
        original_error: Exception | None = None,
    ) -> None:
        details = {}
        if original_error is not None:
            details["original_error"] = str(original_error)
            details["original_error_type"] = type(original_error).__name__
        super().__init__(message=message, name=name, details=details)
        if original_error is not None:
            self.__cause__ = original_error


class NotMatchedError(CacheError):
    """Raised when a replace target id is absent from the stored document."""

    def __init__(self, name: str, item_id: str) -> None:
        super().__init__(
            message=f"No record with id {item_id!r} in {name!r}",
            name=name,
            details={"item_id": item_id},
        )
        self.item_id = item_id
