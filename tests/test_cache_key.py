"""
Tests for cache key derivation.
"""

import uuid

import pytest

from simple_cache import CacheKey
from simple_cache.entities.cache_key import identifier_for_url


def test_from_path_splits_extension():
    """The text after the last dot is the extension."""
    key = CacheKey.from_path("feeds/home.json")
    assert key.identifier == "feeds/home"
    assert key.extension == "json"
    assert key.filename() == "feeds/home.json"


def test_from_path_joins_remaining_segments_without_dots():
    """Earlier dots are dropped from the identifier."""
    key = CacheKey.from_path("a.b.c")
    assert key.identifier == "ab"
    assert key.extension == "c"


def test_from_path_without_extension_uses_default_on_filename():
    """Paths without a dot fall back to the image extension."""
    key = CacheKey.from_path("notes")
    assert key.extension is None
    assert key.filename() == "notes.jpeg"
    assert key.filename("json") == "notes.json"


def test_from_path_size_suffix():
    """A size is appended to the identifier."""
    assert CacheKey.from_path("avatars/jane", size=(64, 48)).identifier == "avatars/jane-64-48"
    assert CacheKey.from_path("avatars/jane", size=(64.0, 48.0)).identifier == "avatars/jane-64-48"


def test_from_path_sizes_are_distinct_keys():
    """Different rendering sizes of the same path never share a key."""
    small = CacheKey.from_path("avatar.png", size=(50, 50))
    large = CacheKey.from_path("avatar.png", size=(100, 200))
    assert small != large
    assert large.identifier == "avatar-100-200"
    assert large.extension == "png"


def test_from_url_identifier():
    """Host, path and query become a dash-separated identifier."""
    key = CacheKey.from_url("https://img.example.com/photos/cat.png?w=200")
    assert key.identifier == "img-example-com-photos-cat-png-w200"
    assert key.extension == "png"
    assert key.filename() == "img-example-com-photos-cat-png-w200.png"


def test_from_url_default_extension():
    """URLs without a path extension use "dat"."""
    key = CacheKey.from_url("https://a.com/x?q=1")
    assert key.identifier == "a-com-x-q1"
    assert key.extension == "dat"


@pytest.mark.parametrize(
    "left, right",
    [
        ("https://a.com/x?q=1", "http://a.com/x?q=1"),
        ("https://a.com/x?q=1", "https://a.com/x?q=1#section"),
        ("ftp://a.com/x", "https://a.com/x#top"),
    ],
)
def test_scheme_and_fragment_are_ignored(left, right):
    """URLs differing only by scheme or fragment collide."""
    assert CacheKey.from_url(left).identifier == CacheKey.from_url(right).identifier


@pytest.mark.parametrize(
    "left, right",
    [
        ("https://a.com/x?q=1", "https://a.com/x?q=2"),
        ("https://a.com/x", "https://b.com/x"),
        ("https://a.com/x", "https://a.com/y"),
    ],
)
def test_host_path_and_query_are_significant(left, right):
    """URLs differing by host, path or query get different identifiers."""
    assert CacheKey.from_url(left).identifier != CacheKey.from_url(right).identifier


@pytest.mark.parametrize(
    "left, right",
    [
        ("https://a.com/caf%C3%A9", "https://a.com/caf%C3%A8"),
        ("https://a.com/%E6%97%A5%E6%9C%AC", "https://a.com/%E4%B8%AD%E5%9B%BD"),
        ("https://a.com/café", "https://a.com/cafè"),
        ("https://a.com/x?q=日本", "https://a.com/x?q=中国"),
    ],
)
def test_non_ascii_paths_and_queries_are_significant(left, right):
    """Non-ASCII characters keep URLs apart instead of being dropped."""
    assert CacheKey.from_url(left).identifier != CacheKey.from_url(right).identifier


def test_encoded_and_raw_non_ascii_share_an_identifier():
    """A percent-encoded path and its raw form address the same entry."""
    encoded = CacheKey.from_url("https://a.com/caf%C3%A9")
    raw = CacheKey.from_url("https://a.com/café")
    assert encoded.identifier == raw.identifier == "a-com-cafC3A9"


@pytest.mark.parametrize(
    "url",
    [
        "https://a.com/some path/ünïcode.png?x=[1]&y=<2>",
        "https://a.com/../../etc/passwd",
        "https://a.com/.hidden",
    ],
)
def test_identifier_is_filesystem_safe(url):
    """Identifiers only contain ASCII letters, digits and single inner dashes."""
    identifier = CacheKey.from_url(url).identifier
    assert identifier
    assert all(c.isascii() and (c.isalnum() or c == "-") for c in identifier)
    assert "--" not in identifier
    assert not identifier.startswith("-")
    assert not identifier.endswith("-")


def test_degenerate_url_falls_back_to_random_identifier():
    """Without host, path or query every call gets a new UUID."""
    first = identifier_for_url("about:")
    second = identifier_for_url("about:")
    assert first != second
    uuid.UUID(first)


def test_equality_ignores_extension():
    """Keys compare and hash by identifier only."""
    a = CacheKey("abc", "png")
    b = CacheKey("abc", "jpeg")
    assert a == b
    assert hash(a) == hash(b)
    assert a != CacheKey("abd", "png")
    assert {a: 1}[b] == 1


def test_keys_are_immutable():
    """CacheKey is frozen."""
    key = CacheKey("abc")
    with pytest.raises(AttributeError):
        key.identifier = "other"  # type: ignore[misc]
