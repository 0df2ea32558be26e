import logging
import os
from dataclasses import dataclass
from functools import lru_cache

import redis
from dotenv import load_dotenv

load_dotenv()


def _default_cache_dir() -> str:
    base = os.getenv("XDG_CACHE_HOME") or os.path.join(os.path.expanduser("~"), ".cache")
    return os.path.join(base, "SimpleCache")


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Storage
    cache_dir: str = os.getenv("SIMPLE_CACHE_DIR") or _default_cache_dir()
    backend: str = os.getenv("SIMPLE_CACHE_BACKEND", "file").strip().lower()

    # Memory tier
    memory_cache_size: int = int(os.getenv("SIMPLE_CACHE_MEMORY_SIZE", "100"))

    # Images
    image_extension: str = os.getenv("SIMPLE_CACHE_IMAGE_EXTENSION", "jpeg")
    image_quality: int = int(os.getenv("SIMPLE_CACHE_IMAGE_QUALITY", "100"))

    # Redis
    redis_url: str = os.getenv("REDIS_URL", "redis://localhost:6379")
    redis_password: str | None = os.getenv("REDIS_PASSWORD")
    redis_prefix: str = os.getenv("SIMPLE_CACHE_REDIS_PREFIX", "simple_cache")

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()

    @property
    def uses_redis(self) -> bool:
        """Check if the redis storage backend is selected.

        Returns:
            True if SIMPLE_CACHE_BACKEND is "redis", False otherwise
        """
        return self.backend == "redis"

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if self.backend not in ("file", "redis"):
            raise ValueError(f"SIMPLE_CACHE_BACKEND must be 'file' or 'redis', got {self.backend!r}")

        if self.memory_cache_size <= 0:
            raise ValueError("SIMPLE_CACHE_MEMORY_SIZE must be a positive integer")

        if not 1 <= self.image_quality <= 100:
            raise ValueError(
                f"SIMPLE_CACHE_IMAGE_QUALITY must be between 1 and 100, got {self.image_quality}"
            )

        if not self.image_extension or "." in self.image_extension or "/" in self.image_extension:
            raise ValueError("SIMPLE_CACHE_IMAGE_EXTENSION must be a bare extension like 'jpeg'")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


def get_redis_client() -> redis.Redis:
    """Create a Redis client instance."""
    return redis.from_url(
        settings.redis_url,
        password=settings.redis_password,
        decode_responses=False,
    )


def setup_logging(level: str | None = None) -> None:
    """Attach a console handler to the package logger.

    Safe to call more than once; only the first call installs a handler.

    Args:
        level: Log level name. Defaults to settings.log_level.
    """
    logger = logging.getLogger("simple_cache")
    logger.setLevel(level or settings.log_level)
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    logger.addHandler(handler)
