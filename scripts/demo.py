#!/usr/bin/env python3
"""
Demo script for simple cache.

This script walks through key derivation, record collections, raw blobs
and images using a throwaway cache directory.
"""

import asyncio
import tempfile

from PIL import Image
from pydantic import BaseModel

from simple_cache import CacheKey, CacheService, FileStorageBackend, setup_logging


class Note(BaseModel):
    """Sample record stored in collections."""

    id: str
    text: str

    @property
    def cache_item_id(self) -> str:
        return self.id


def print_section(title: str) -> None:
    """Print a section header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


def demo_keys() -> None:
    """Demonstrate key derivation."""
    print_section("Key Derivation")

    examples = [
        CacheKey.from_path("feeds/home.json"),
        CacheKey.from_path("avatars/jane", size=(64, 64)),
        CacheKey.from_url("https://img.example.com/photos/cat.png?w=200"),
        CacheKey.from_url("http://img.example.com/photos/cat.png?w=200#top"),
    ]
    for key in examples:
        print(f"  {key.identifier!r:50} -> {key.filename()}")


async def demo_records(cache: CacheService) -> None:
    """Demonstrate collection mutations."""
    print_section("Record Collections")

    path = "feeds/home.json"
    a, b, c = (Note(id=i, text=f"note {i}") for i in "abc")

    await cache.save_many(path, [a, b, c])
    await cache.append(path, [Note(id="d", text="note d")])
    await cache.insert(path, [Note(id="z", text="note z")])
    await cache.replace(path, "b", Note(id="b", text="note b, edited"))
    await cache.remove(path, "a", Note)

    notes = cache.get(path, list[Note]) or []
    print(f"  {[n.id for n in notes]}")
    print(f"  stored at {cache.get_directory(path)}")

    missing = cache.get("feeds/never-saved.json", list[Note])
    print(f"  never saved -> {missing}")


async def demo_images(cache: CacheService) -> None:
    """Demonstrate the memory and disk tiers for images."""
    print_section("Images")

    key = CacheKey.from_url("https://img.example.com/photos/red.jpeg")
    await cache.save_image(key, Image.new("RGB", (32, 32), "red"))
    print(f"  memory entries: {len(cache.memory_cache)}")

    cache.memory_cache.clear()
    image = cache.object(key)
    print(f"  reloaded from disk: {image.size if image else None}")

    await cache.save_data(CacheKey.from_path("blobs/raw.bin"), b"\x00\x01\x02")
    print(f"  raw blob: {cache.get_data(CacheKey.from_path('blobs/raw.bin'))!r}")


async def run() -> None:
    """Run all demos against a temporary cache directory."""
    with tempfile.TemporaryDirectory() as root:
        cache = CacheService.create(storage=FileStorageBackend.create(root))
        demo_keys()
        await demo_records(cache)
        await demo_images(cache)
        await cache.remove_all("feeds")


def main() -> None:
    """Run all demos."""
    setup_logging()
    print("\n🚀 Simple Cache Demo")
    print("=" * 70)

    asyncio.run(run())

    print("\n" + "=" * 70)
    print("✅ Demo completed successfully!")
    print("=" * 70)


if __name__ == "__main__":
    main()
