"""
Moodle Wiki — Cache Factory Integration Tests

Tests factory registration, configuration handling and lifecycle management.
"""

from collections.abc import AsyncGenerator

import pytest

from moodle_wiki.cache.backends.memory import MemoryCacheBackend
from moodle_wiki.cache.factory import (
    close_all_caches,
    create_cache,
    get_cache,
    list_cache_instances,
    reset_cache_factory,
)
from moodle_wiki.cache.interface import CacheInterface
from moodle_wiki.config import CacheBackend, CacheConfig
from moodle_wiki.errors import ConfigurationError


class TestCacheFactory:
    """Test suite for cache factory functionality."""

    @pytest.fixture(autouse=True)
    async def cleanup(self) -> AsyncGenerator[None, None]:
        """Clean up cache instances after each test."""
        yield
        await close_all_caches()
        reset_cache_factory()

    async def test_create_memory_cache_default(self, mock_env_memory: None) -> None:
        cache = create_cache()

        assert isinstance(cache, CacheInterface)
        assert isinstance(cache, MemoryCacheBackend)
        await cache.set("test_key", "test_value")
        assert await cache.get("test_key") == "test_value"

    async def test_create_with_explicit_config(self) -> None:
        config = CacheConfig(backend=CacheBackend.MEMORY, namespace="test_ns")

        cache = create_cache(config=config, name="custom")

        assert isinstance(cache, MemoryCacheBackend)
        assert cache.namespace == "test_ns"

    async def test_namespace_override(self) -> None:
        config = CacheConfig(backend=CacheBackend.MEMORY, namespace="base")

        cache = create_cache(config=config, name="site:school", namespace="base:school")

        assert isinstance(cache, MemoryCacheBackend)
        assert cache.namespace == "base:school"

    async def test_same_name_returns_same_instance(self, mock_env_memory: None) -> None:
        assert create_cache(name="one") is create_cache(name="one")
        assert get_cache("one") is create_cache(name="one")

    async def test_get_cache_creates_missing(self, mock_env_memory: None) -> None:
        cache = get_cache("lazy")

        assert "lazy" in list_cache_instances()
        assert isinstance(cache, CacheInterface)

    async def test_redis_without_url(self) -> None:
        config = CacheConfig.model_construct(backend=CacheBackend.REDIS, namespace="x", redis_url=None)

        with pytest.raises(ConfigurationError):
            create_cache(config=config, name="broken")

    async def test_close_all_caches(self, mock_env_memory: None) -> None:
        create_cache(name="a")
        create_cache(name="b")

        await close_all_caches()

        assert list_cache_instances() == []
