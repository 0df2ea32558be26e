"""Cache level enum."""

from enum import IntEnum


class CacheLevel(IntEnum):
    """How far down the tiers an image is written.

    MEMORY keeps the image in the in-process cache only. DISK also
    persists the encoded bytes, and is the default.
    """

    MEMORY = 0
    DISK = 1
