"""
Moodle Wiki — Cache Factory

Canonical factory for creating response cache instances from configuration.

Key points:
- Select backend with CACHE_BACKEND=memory|redis (memory unless REDIS_URL is set)
- When redis is selected, the redis client must be installed and REDIS_URL set
- Instances are registered by name; each site gets its own named instance

Examples:
    from moodle_wiki.cache.factory import create_cache

    cache = create_cache()

    from moodle_wiki.config import CacheBackend, CacheConfig
    cfg = CacheConfig(backend=CacheBackend.MEMORY, namespace="test")
    mem_cache = create_cache(cfg, name="test")
"""

from __future__ import annotations

import logging

from ..config import CacheBackend, CacheConfig, get_config
from ..errors import ConfigurationError
from .backends.memory import MemoryCacheBackend
from .interface import CacheInterface

logger = logging.getLogger(__name__)

# Cache instances registry
_cache_instances: dict[str, CacheInterface] = {}


def _create_memory_cache(config: CacheConfig, namespace: str) -> CacheInterface:
    """Internal helper to construct a memory cache backend."""
    return MemoryCacheBackend(namespace=namespace)


def _create_redis_cache(config: CacheConfig, namespace: str) -> CacheInterface:
    """Internal helper to construct a redis cache backend with lazy import."""
    if not config.redis_url:
        raise ConfigurationError(
            "REDIS_URL must be set when CACHE_BACKEND=redis",
            details={"env": "REDIS_URL", "backend": "redis"},
        )

    # Lazy import to avoid hard dependency when memory backend is used
    try:
        from .backends.redis import RedisCacheBackend
    except ImportError as e:
        raise ConfigurationError(
            "Redis backend selected but redis client is unavailable. Install with: pip install 'redis>=5.0.0'",
            details={"package": "redis>=5.0.0", "error": str(e), "backend": "redis"},
        ) from e

    return RedisCacheBackend(
        redis_url=config.redis_url,
        namespace=namespace,
        max_connections=config.redis_max_connections,
        socket_timeout=config.redis_socket_timeout,
    )


def create_cache(
    config: CacheConfig | None = None,
    name: str = "default",
    namespace: str | None = None,
) -> CacheInterface:
    """
    Create a cache backend instance based on configuration.

    Args:
        config: Cache configuration (uses global config if not provided)
        name: Cache instance name (for multiple cache instances)
        namespace: Key namespace; defaults to the configured namespace

    Returns:
        Configured cache backend instance, or the existing one registered under name

    Raises:
        ConfigurationError: If cache configuration is invalid or backend unavailable
    """
    if name in _cache_instances:
        logger.debug("Returning existing cache instance: %s", name)
        return _cache_instances[name]

    if config is None:
        config = get_config().cache

    namespace = namespace or config.namespace

    logger.info(
        "Creating cache instance '%s' with backend: %s",
        name,
        config.backend,
        extra={"cache_name": name, "backend": str(config.backend), "namespace": namespace},
    )

    if config.backend == CacheBackend.MEMORY:
        cache = _create_memory_cache(config, namespace)
    elif config.backend == CacheBackend.REDIS:
        cache = _create_redis_cache(config, namespace)
    else:
        raise ConfigurationError(
            f"Unknown cache backend: {config.backend}",
            details={
                "backend": str(config.backend),
                "supported": ["memory", "redis"],
            },
        )

    _cache_instances[name] = cache
    return cache


def get_cache(name: str = "default") -> CacheInterface:
    """
    Get an existing cache instance by name.

    If the instance doesn't exist, it is created from the global configuration.

    Args:
        name: Cache instance name

    Returns:
        Cache backend instance
    """
    if name not in _cache_instances:
        logger.debug("Cache instance '%s' not found, creating new instance", name)
        return create_cache(name=name)

    return _cache_instances[name]


async def close_all_caches() -> None:
    """
    Close all cache instances and release resources.

    Should be called during graceful shutdown.
    """
    if not _cache_instances:
        logger.debug("No cache instances to close")
        return

    logger.info("Closing %d cache instance(s)...", len(_cache_instances))

    for name, cache in list(_cache_instances.items()):
        try:
            await cache.close()
            logger.info("Closed cache instance: %s", name)
        except Exception as e:
            logger.error(
                "Error closing cache instance '%s': %s",
                name,
                e,
                extra={"cache_name": name, "error": str(e)},
                exc_info=True,
            )

    _cache_instances.clear()


def reset_cache_factory() -> None:
    """
    Reset the cache factory by clearing all instance references.

    Does NOT call close() on instances - use close_all_caches() for proper cleanup.
    Only use this in testing contexts.
    """
    count = len(_cache_instances)
    _cache_instances.clear()
    logger.debug("Reset cache factory, cleared %d instance reference(s)", count)


def list_cache_instances() -> list[str]:
    """
    List all registered cache instance names.

    Returns:
        List of cache instance names
    """
    return list(_cache_instances.keys())
