"""
Tests for settings validation.
"""

import pytest

from simple_cache.config import Settings


def test_defaults_are_valid():
    """Default settings construct without errors."""
    settings = Settings(backend="file")
    assert settings.uses_redis is False
    assert settings.memory_cache_size > 0


def test_redis_backend_flag():
    """uses_redis follows the backend name."""
    assert Settings(backend="redis").uses_redis is True


@pytest.mark.parametrize(
    "overrides",
    [
        {"backend": "s3"},
        {"memory_cache_size": 0},
        {"image_quality": 0},
        {"image_quality": 101},
        {"image_extension": ".jpeg"},
        {"image_extension": ""},
    ],
)
def test_invalid_settings_raise(overrides):
    """Out-of-range values are rejected."""
    with pytest.raises(ValueError):
        Settings(**overrides)
