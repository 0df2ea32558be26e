"""Cache key value object and key derivation."""

import posixpath
import re
import uuid
from dataclasses import dataclass
from urllib.parse import quote, urlsplit

DEFAULT_IMAGE_EXTENSION = "jpeg"
DEFAULT_URL_EXTENSION = "dat"

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9-]")
_DASH_RUNS = re.compile(r"-{2,}")


def _escaped(text: str, safe: str) -> str:
    # non-ASCII survives as the hex digits of its %XX escapes
    return quote(text, safe=safe + "%")


def _format_dimension(value: float) -> str:
    # 100.0 -> "100", so float and int sizes share a key
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def identifier_for_url(url: str) -> str:
    """Derive a filesystem-safe identifier from a URL.

    Host, path and query take part in the identifier; scheme, port and
    fragment do not, so ``http://a.com/x`` and ``https://a.com/x#top``
    collide.

    Characters that are not URL-safe (non-ASCII included) are
    percent-encoded first and existing escapes are kept, so
    ``/caf%C3%A9`` and ``/café`` share an identifier while ``/café``
    and ``/cafè`` do not.

    When host, path and query are all empty the identifier is a fresh
    random UUID, so repeated calls with such a URL never hit the cache.

    Args:
        url: The URL to derive the identifier from

    Returns:
        Identifier made of ASCII letters, digits and single dashes
    """
    parts = urlsplit(url)
    structure = ""
    if parts.hostname:
        structure += f"{_escaped(parts.hostname, '')}-"
    if parts.path:
        structure += f"{_escaped(parts.path, '/')}-"
    if parts.query:
        structure += f"{_escaped(parts.query, '=&')}-"
    if not structure:
        return str(uuid.uuid4())

    identifier = structure.replace("/", "-").replace(".", "-")
    identifier = _UNSAFE_CHARS.sub("", identifier)
    identifier = _DASH_RUNS.sub("-", identifier)
    identifier = identifier.strip("-")
    # e.g. a query made only of punctuation
    return identifier or str(uuid.uuid4())


@dataclass(frozen=True, eq=False)
class CacheKey:
    """Canonical identifier of a cache entry.

    Identity is the identifier alone: two keys with the same identifier
    and different extensions are equal and address the same memory
    cache slot.

    Attributes:
        identifier: Canonical, filesystem-safe name (may contain "/" when
            derived from a path, which becomes subdirectories on disk)
        extension: Optional file extension without the dot
    """

    identifier: str
    extension: str | None = None

    @classmethod
    def from_path(cls, path: str, size: tuple[float, float] | None = None) -> "CacheKey":
        """Build a key from a logical path such as ``"feeds/home.json"``.

        Args:
            path: Logical path; the text after the last "." is the extension
            size: Optional (width, height); appended to the identifier as
                ``-{width}-{height}`` so each rendering size gets its own key

        Returns:
            The derived CacheKey
        """
        extension = None
        segments = path.split(".")
        if len(segments) > 1:
            extension = segments.pop()
        identifier = "".join(segments)

        # suffix goes on the identifier, since keys compare by identifier only
        if size is not None:
            width, height = size
            identifier = f"{identifier}-{_format_dimension(width)}-{_format_dimension(height)}"
        return cls(identifier=identifier, extension=extension)

    @classmethod
    def from_url(cls, url: str) -> "CacheKey":
        """Build a key from a URL.

        Args:
            url: Absolute URL

        Returns:
            The derived CacheKey, with the URL path extension or "dat"
        """
        extension = posixpath.splitext(urlsplit(url).path)[1].lstrip(".")
        return cls(
            identifier=identifier_for_url(url),
            extension=extension or DEFAULT_URL_EXTENSION,
        )

    def filename(self, default_extension: str = DEFAULT_IMAGE_EXTENSION) -> str:
        """Return ``identifier.extension``, using default_extension when unset."""
        return f"{self.identifier}.{self.extension or default_extension}"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CacheKey):
            return NotImplemented
        return self.identifier == other.identifier

    def __hash__(self) -> int:
        return hash(self.identifier)
