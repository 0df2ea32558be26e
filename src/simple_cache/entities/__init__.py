"""Domain entities for internal representation.

These are pure value objects used by services and repositories.

Entities should have:
- No I/O
- No external dependencies
- Pure domain logic only
"""

from .cache_key import CacheKey
from .cache_level import CacheLevel

__all__ = ["CacheKey", "CacheLevel"]
