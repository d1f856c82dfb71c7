"""
Moodle Wiki — Memory Cache Backend

In-process response cache. Entries have no TTL and no size bound; prefix
deletion is a linear scan over the stored keys.
"""

import asyncio
import logging
from typing import Any

from ...errors import CacheOperationError
from ..interface import CacheInterface

logger = logging.getLogger(__name__)


class MemoryCacheBackend(CacheInterface):
    """
    In-memory cache backend.

    Suitable for tests and single-process deployments where responses do
    not need to survive a restart.
    """

    def __init__(self, namespace: str = "moodle_wiki"):
        """
        Initialize memory cache backend.

        Args:
            namespace: Cache key namespace/prefix
        """
        self.namespace = namespace

        self._cache: dict[str, Any] = {}

        # Stats
        self._hits = 0
        self._misses = 0
        self._sets = 0
        self._deletes = 0

        self._lock = asyncio.Lock()

    def _make_key(self, key: str) -> str:
        """Create namespaced cache key."""
        return f"{self.namespace}:{key}"

    async def get(self, key: str) -> Any | None:
        """Retrieve value from cache."""
        if not key:
            logger.warning("Attempted to get cache value with empty key")
            return None

        async with self._lock:
            cache_key = self._make_key(key)

            if cache_key not in self._cache:
                self._misses += 1
                return None

            self._hits += 1
            return self._cache[cache_key]

    async def set(self, key: str, value: Any) -> bool:
        """Store value in cache."""
        if not key:
            logger.warning("Attempted to set cache value with empty key")
            return False

        async with self._lock:
            self._cache[self._make_key(key)] = value
            self._sets += 1
            return True

    async def delete(self, key: str) -> bool:
        """Delete key from cache."""
        if not key:
            logger.warning("Attempted to delete cache value with empty key")
            return False

        async with self._lock:
            cache_key = self._make_key(key)

            if cache_key in self._cache:
                del self._cache[cache_key]
                self._deletes += 1
                return True

            return False

    async def delete_prefix(self, prefix: str) -> int:
        """Delete every entry whose key starts with prefix."""
        if not prefix:
            # An empty prefix would wipe the namespace; clear() is the explicit way
            raise CacheOperationError(
                "Refusing to delete with an empty key prefix",
                details={"namespace": self.namespace},
            )

        async with self._lock:
            ns_prefix = self._make_key(prefix)
            matched = [cache_key for cache_key in self._cache if cache_key.startswith(ns_prefix)]

            for cache_key in matched:
                del self._cache[cache_key]

            self._deletes += len(matched)
            logger.debug(
                f"Deleted {len(matched)} entries with prefix '{prefix}'",
                extra={"prefix": prefix, "namespace": self.namespace, "deleted": len(matched)},
            )
            return len(matched)

    async def exists(self, key: str) -> bool:
        """Check if key exists."""
        if not key:
            return False

        async with self._lock:
            return self._make_key(key) in self._cache

    async def clear(self) -> bool:
        """Clear all entries from cache."""
        async with self._lock:
            size = len(self._cache)
            self._cache.clear()
            logger.info(f"Cleared {size} entries from memory cache namespace '{self.namespace}'")
            return True

    async def get_stats(self) -> dict[str, Any]:
        """Get cache statistics."""
        async with self._lock:
            total_requests = self._hits + self._misses
            hit_rate = (self._hits / total_requests * 100) if total_requests > 0 else 0.0

            return {
                "backend": "memory",
                "size": len(self._cache),
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate": round(hit_rate, 2),
                "sets": self._sets,
                "deletes": self._deletes,
                "namespace": self.namespace,
            }

    async def close(self) -> None:
        """Close cache and release resources."""
        # Nothing to release; data lives in-process
        logger.debug(f"Memory cache backend closed for namespace '{self.namespace}'")
