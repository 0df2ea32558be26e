"""
Tests for the strict record cache engine.
"""

import json

import pytest
from sample_records import Bookmark, Note, note

from simple_cache import CacheKey, DecodeError, NotFoundError, NotMatchedError

KEY = CacheKey.from_path("feeds/home.json")


def stored_bytes(records) -> bytes:
    return records.storage.read(records.name_for(KEY))


def test_save_many_round_trip(records):
    """Records come back in the exact order and content they were saved."""
    notes = [note("c"), note("a"), note("b")]
    records.save_many(KEY, notes)
    assert records.load(KEY, list[Note]) == notes


def test_document_is_plain_json(records):
    """The stored document is a JSON array with field names verbatim."""
    records.save_many(KEY, [note("a")])
    assert json.loads(stored_bytes(records)) == [{"id": "a", "text": "note a"}]


def test_save_one_stores_object(records):
    """A single record is stored as a JSON object, not an array."""
    key = CacheKey.from_path("profile.json")
    records.save_one(key, note("me"))
    assert records.load(key, Note) == note("me")
    assert json.loads(records.storage.read("profile.json")) == {"id": "me", "text": "note me"}


def test_save_many_overwrites_without_merging(records):
    """Saving replaces the previous document entirely."""
    records.save_many(KEY, [note("a"), note("b")])
    records.save_many(KEY, [note("c")])
    assert records.load(KEY, list[Note]) == [note("c")]


def test_save_many_keeps_duplicates(records):
    """No deduplication is performed."""
    records.save_many(KEY, [note("a"), note("a")])
    assert len(records.load(KEY, list[Note])) == 2


def test_append_goes_to_tail(records):
    """save(r1) then append(r2) reads back r1 + r2."""
    first = [note("a"), note("b")]
    second = [note("c"), note("d")]
    records.save_many(KEY, first)
    written = records.append(KEY, second)
    assert written == first + second
    assert records.load(KEY, list[Note]) == first + second


def test_append_to_missing_document(records):
    """A missing document counts as empty."""
    records.append(KEY, [note("a")])
    assert records.load(KEY, list[Note]) == [note("a")]


def test_append_nothing_keeps_existing_records(records):
    """Appending an empty list without a type keeps the document intact."""
    records.save_many(KEY, [note("a"), note("b")])
    records.append(KEY, [])
    assert records.load(KEY, list[Note]) == [note("a"), note("b")]


def test_insert_goes_to_head_in_given_order(records):
    """save(r1) then insert(r2) reads back r2 + r1."""
    first = [note("a"), note("b")]
    second = [note("y"), note("z")]
    records.save_many(KEY, first)
    records.insert(KEY, second)
    assert records.load(KEY, list[Note]) == second + first


def test_insert_not_at_head_appends(records):
    """at_head=False behaves like append."""
    records.save_many(KEY, [note("a")])
    records.insert(KEY, [note("b")], at_head=False)
    assert records.load(KEY, list[Note]) == [note("a"), note("b")]


def test_remove_by_id_removes_every_match(records):
    """All records with the id are removed, the rest keep their order."""
    records.save_many(KEY, [note("a"), note("b", "first"), note("c"), note("b", "second")])
    removed = records.remove_by_id(KEY, "b", Note)
    assert removed == 2
    assert records.load(KEY, list[Note]) == [note("a"), note("c")]


def test_remove_by_id_without_match_succeeds(records):
    """A missing id is not an error; nothing is removed."""
    records.save_many(KEY, [note("a")])
    assert records.remove_by_id(KEY, "zzz", Note) == 0
    assert records.load(KEY, list[Note]) == [note("a")]


def test_remove_by_id_on_missing_document_raises(records):
    """Removing from a document that was never saved is NotFound."""
    with pytest.raises(NotFoundError):
        records.remove_by_id(KEY, "a", Note)


def test_remove_one_of_a_thousand(records):
    """999 records remain, in original relative order, without the target."""
    notes = [note(f"item-{i}") for i in range(1000)]
    records.save_many(KEY, notes)

    records.remove_by_id(KEY, "item-500", Note)

    remaining = records.load(KEY, list[Note])
    assert len(remaining) == 999
    assert remaining == notes[:500] + notes[501:]


def test_replace_by_id_keeps_position(records):
    """Only the first match is replaced, in place."""
    records.save_many(KEY, [note("a"), note("b", "first"), note("b", "second")])
    records.replace_by_id(KEY, "b", note("b", "edited"))
    assert records.load(KEY, list[Note]) == [note("a"), note("b", "edited"), note("b", "second")]


def test_replace_by_id_absent_leaves_bytes_unchanged(records):
    """A missing id raises NotMatched and nothing is written."""
    records.save_many(KEY, [note("a"), note("b")])
    before = stored_bytes(records)

    with pytest.raises(NotMatchedError) as exc_info:
        records.replace_by_id(KEY, "zzz", note("zzz"))

    assert exc_info.value.item_id == "zzz"
    assert stored_bytes(records) == before


def test_replace_by_id_on_missing_document_raises(records):
    """Replacing in a document that was never saved is NotFound."""
    with pytest.raises(NotFoundError):
        records.replace_by_id(KEY, "a", note("a"))


def test_concrete_scenario(records):
    """[A,B,C] -> append D -> insert Z -> replace B -> remove A."""
    a, b, c, d, z = (note(i) for i in "abcdz")
    b2 = note("b", "b2")

    records.save_many(KEY, [a, b, c])
    records.append(KEY, [d])
    assert records.load(KEY, list[Note]) == [a, b, c, d]

    records.insert(KEY, [z])
    assert records.load(KEY, list[Note]) == [z, a, b, c, d]

    records.replace_by_id(KEY, b.id, b2)
    assert records.load(KEY, list[Note]) == [z, a, b2, c, d]

    records.remove_by_id(KEY, a.id, Note)
    assert records.load(KEY, list[Note]) == [z, b2, c, d]


def test_dataclass_records(records):
    """Dataclasses with a cache_item_id field work like models."""
    key = CacheKey.from_path("bookmarks.json")
    records.save_many(key, [Bookmark("1", "https://a.com"), Bookmark("2", "https://b.com")])
    records.replace_by_id(key, "2", Bookmark("2", "https://c.com"))
    records.remove_by_id(key, "1", Bookmark)
    assert records.load(key, list[Bookmark]) == [Bookmark("2", "https://c.com")]


def test_get_never_saved_returns_none(records):
    """A key that was never saved is absent, not an empty collection."""
    assert records.get(KEY, list[Note]) is None
    with pytest.raises(NotFoundError):
        records.load(KEY, list[Note])


def test_get_corrupt_document_returns_none(records):
    """Undecodable bytes look like a miss through get, DecodeError through load."""
    records.storage.write(records.name_for(KEY), b"not json at all")
    assert records.get(KEY, list[Note]) is None
    with pytest.raises(DecodeError):
        records.load(KEY, list[Note])


def test_mutating_corrupt_document_raises_and_keeps_bytes(records):
    """An undecodable document is never silently overwritten."""
    records.storage.write(records.name_for(KEY), b"{broken")
    with pytest.raises(DecodeError):
        records.append(KEY, [note("a")])
    with pytest.raises(DecodeError):
        records.insert(KEY, [note("a")])
    assert stored_bytes(records) == b"{broken"


def test_append_to_single_record_document_raises(records):
    """A document saved with save_one is not a collection."""
    records.save_one(KEY, note("a"))
    with pytest.raises(DecodeError):
        records.append(KEY, [note("b")])


def test_name_uses_default_extension(records):
    """Keys without an extension are stored under the default one."""
    assert records.name_for(CacheKey.from_path("notes")) == "notes.jpeg"
