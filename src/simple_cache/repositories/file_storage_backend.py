"""Filesystem implementation of StorageBackend.

Stores each name as a file under a root cache directory. Names with
"/" become nested directories. Writes go to a temporary file in the
destination directory and are moved into place with ``os.replace``, so
a failed write never leaves a truncated file behind.
"""

import logging
import os
import shutil
import tempfile
from pathlib import Path

from simple_cache.config import settings
from simple_cache.exceptions import NotFoundError, StorageError

logger = logging.getLogger(__name__)


class FileStorageBackend:
    """Disk storage rooted at a single cache directory.

    This class satisfies the StorageBackend protocol through structural
    typing - no explicit inheritance needed.
    """

    def __init__(self, root: str | os.PathLike[str]) -> None:
        """Initialize the file storage backend.

        The root directory is created lazily on the first write.

        Args:
            root: Directory all names are resolved against.
        """
        self._root = Path(root).expanduser().resolve()

    @classmethod
    def create(cls, root: str | os.PathLike[str] | None = None) -> "FileStorageBackend":
        """Factory method to create FileStorageBackend with defaults.

        Args:
            root: Cache directory. If None, uses settings.

        Returns:
            Configured FileStorageBackend
        """
        return cls(root=root or settings.cache_dir)

    def _resolve(self, name: str) -> Path:
        path = (self._root / name).resolve()
        escapes = name.startswith("/") or ".." in name.split("/")
        if escapes or (path != self._root and self._root not in path.parents):
            raise StorageError(f"Name escapes the cache directory: {name!r}", name=name)
        return path

    def write(self, name: str, data: bytes) -> None:
        """Atomically replace the file at name with data.

        Args:
            name: Relative storage name
            data: Bytes to store

        Raises:
            StorageError: If directories cannot be created or the file written
        """
        path = self._resolve(name)
        if path == self._root or path.is_dir():
            raise StorageError(f"Cannot write over a directory: {name!r}", name=name)

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        except OSError as e:
            raise StorageError(f"Failed to create directory for {name!r}", name=name, original_error=e) from e

        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, path)
        except OSError as e:
            try:
                os.unlink(tmp_path)
            except FileNotFoundError:
                pass
            raise StorageError(f"Failed to write {name!r}", name=name, original_error=e) from e

        logger.debug("Wrote %d bytes to %s", len(data), path)

    def read(self, name: str) -> bytes:
        """Read the file at name.

        Args:
            name: Relative storage name

        Returns:
            File contents

        Raises:
            NotFoundError: If no file exists at name
            StorageError: On any other I/O failure
        """
        path = self._resolve(name)
        try:
            return path.read_bytes()
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError) as e:
            raise NotFoundError(name) from e
        except OSError as e:
            raise StorageError(f"Failed to read {name!r}", name=name, original_error=e) from e

    def exists(self, name: str) -> bool:
        """Check whether a file or directory exists at name."""
        return self._resolve(name).exists()

    def remove_subtree(self, prefix: str) -> None:
        """Delete the file or directory tree at prefix.

        An empty prefix clears the whole cache directory. Missing paths
        are a no-op.

        Args:
            prefix: Relative file or directory name

        Raises:
            StorageError: If the delete fails
        """
        path = self._resolve(prefix)
        try:
            if path.is_dir() and not path.is_symlink():
                shutil.rmtree(path)
            else:
                path.unlink()
        except FileNotFoundError:
            return
        except OSError as e:
            raise StorageError(f"Failed to remove {prefix!r}", name=prefix, original_error=e) from e

        logger.debug("Removed %s", path)

    def location(self, name: str) -> str:
        """Return the absolute filesystem path of name."""
        return str(self._resolve(name))

    @property
    def root(self) -> Path:
        """Get the cache directory."""
        return self._root
