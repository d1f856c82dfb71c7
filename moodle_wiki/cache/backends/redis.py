"""
Moodle Wiki — Redis Cache Backend

Asynchronous Redis response cache with:
- JSON serialization for values
- Namespace prefixing so several sites can share one Redis database
- Prefix deletion via SCAN MATCH + batched DEL

Entries are stored without expiry; they stay until invalidated.

Requires: redis>=5.0 with asyncio support

Example:
    cache = RedisCacheBackend(redis_url="redis://localhost:6379", namespace="moodle_wiki:school")
    await cache.set("mmaModWiki:page:12#ab12", {"page": {...}})
    removed = await cache.delete_prefix("mmaModWiki:page:12#")
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from ...errors import CacheOperationError
from ..interface import CacheInterface

logger = logging.getLogger(__name__)

try:
    from redis.asyncio import Redis
except ImportError as e:  # pragma: no cover
    raise ImportError(
        "Redis async client is required but not installed. "
        "Install with: pip install 'redis>=5.0.0' or add 'redis' to your dependencies."
    ) from e

# Characters with special meaning in a SCAN MATCH glob
_GLOB_SPECIAL = re.compile(r"([*?\[\]\\])")


class RedisCacheBackend(CacheInterface):
    """
    Redis cache backend with JSON serialization.

    Notes:
    - Keys are prefixed with the configured namespace to avoid collisions.
    - Values are stored as UTF-8 JSON strings.
    - Read failures degrade to cache misses; delete failures raise
      CacheOperationError so a failed invalidation is never silent.
    """

    def __init__(
        self,
        redis_url: str,
        namespace: str = "moodle_wiki",
        max_connections: int = 10,
        socket_timeout: int = 5,
        scan_batch_size: int = 1000,
    ) -> None:
        """
        Initialize Redis cache backend.

        Args:
            redis_url: Connection URL, e.g., redis://localhost:6379/0 or rediss:// for TLS
            namespace: Prefix for all keys
            max_connections: Connection pool size
            socket_timeout: Socket timeout in seconds
            scan_batch_size: COUNT hint for SCAN and chunk size for DEL
        """
        if not redis_url:
            raise ValueError("redis_url is required")

        self.namespace = namespace.strip() or "moodle_wiki"
        self.scan_batch_size = scan_batch_size
        self._hits = 0
        self._misses = 0
        self._sets = 0
        self._deletes = 0

        # Lazy connection; connects on first command
        self._client = Redis.from_url(  # type: ignore[call-overload]
            url=redis_url,
            decode_responses=True,
            max_connections=max_connections,
            socket_timeout=socket_timeout,
        )

    # ------------ Helpers ------------

    def _make_key(self, key: str) -> str:
        """Create namespaced key."""
        return f"{self.namespace}:{key}"

    def _match_pattern(self, prefix: str) -> str:
        """Build a SCAN MATCH pattern selecting every key under prefix."""
        return _GLOB_SPECIAL.sub(r"\\\1", self._make_key(prefix)) + "*"

    @staticmethod
    def _to_json(value: Any) -> str:
        """Serialize value to JSON string."""
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"))

    @staticmethod
    def _from_json(data: str | bytes | None) -> Any | None:
        """Deserialize JSON string to Python object. Returns None if data is None."""
        if data is None:
            return None
        if isinstance(data, bytes):
            data = data.decode("utf-8")
        try:
            return json.loads(data)
        except (ValueError, UnicodeDecodeError) as e:
            logger.warning(
                f"Failed to decode JSON from cache, treating as miss: {e}",
                extra={"data_preview": data[:100], "error": str(e)},
            )
            return None

    async def _scan_and_delete(self, pattern: str) -> int:
        """Delete every key matching pattern, batch by batch."""
        cursor = 0
        total_deleted = 0

        while True:
            cursor, keys = await self._client.scan(cursor=cursor, match=pattern, count=self.scan_batch_size)
            if keys:
                total_deleted += int(await self._client.delete(*keys))
            if cursor == 0:
                break

        return total_deleted

    # ------------ Core Interface ------------

    async def get(self, key: str) -> Any | None:
        """Retrieve a value by key."""
        try:
            data = await self._client.get(self._make_key(key))
        except Exception as e:
            logger.error(
                f"Failed to get key '{key}' from Redis: {e}",
                extra={"key": key, "namespace": self.namespace, "error": str(e)},
                exc_info=True,
            )
            self._misses += 1
            return None

        value = self._from_json(data)
        if value is None:
            self._misses += 1
            return None

        self._hits += 1
        return value

    async def set(self, key: str, value: Any) -> bool:
        """Store a value without expiry."""
        try:
            payload = self._to_json(value)
        except (TypeError, ValueError) as e:
            logger.error(
                f"Failed to serialize value for key '{key}': {e}",
                extra={"key": key, "value_type": type(value).__name__, "error": str(e)},
            )
            return False

        try:
            res = await self._client.set(name=self._make_key(key), value=payload)
        except Exception as e:
            logger.error(
                f"Failed to set key '{key}' in Redis: {e}",
                extra={"key": key, "namespace": self.namespace, "error": str(e)},
                exc_info=True,
            )
            return False

        success = bool(res)
        if success:
            self._sets += 1
        return success

    async def delete(self, key: str) -> bool:
        """Delete a single key."""
        try:
            deleted = await self._client.delete(self._make_key(key))
        except Exception as e:
            raise CacheOperationError(
                f"Failed to delete key '{key}' from Redis: {e}",
                details={"key": key, "namespace": self.namespace, "error": str(e)},
            ) from e

        if deleted:
            self._deletes += 1
        return bool(deleted)

    async def delete_prefix(self, prefix: str) -> int:
        """Delete every key under prefix using SCAN MATCH."""
        if not prefix:
            raise CacheOperationError(
                "Refusing to delete with an empty key prefix",
                details={"namespace": self.namespace},
            )

        pattern = self._match_pattern(prefix)
        try:
            total_deleted = await self._scan_and_delete(pattern)
        except Exception as e:
            raise CacheOperationError(
                f"Failed to delete keys with prefix '{prefix}' from Redis: {e}",
                details={"prefix": prefix, "namespace": self.namespace, "error": str(e)},
            ) from e

        self._deletes += total_deleted
        logger.debug(
            f"Deleted {total_deleted} keys with prefix '{prefix}'",
            extra={"prefix": prefix, "namespace": self.namespace, "deleted": total_deleted},
        )
        return total_deleted

    async def exists(self, key: str) -> bool:
        """Check if a key exists."""
        try:
            return bool(await self._client.exists(self._make_key(key)))
        except Exception as e:
            logger.error(
                f"Failed to check existence of key '{key}' in Redis: {e}",
                extra={"key": key, "namespace": self.namespace, "error": str(e)},
                exc_info=True,
            )
            return False

    async def clear(self) -> bool:
        """Clear all entries under the namespace."""
        try:
            total_deleted = await self._scan_and_delete(self._match_pattern(""))
        except Exception as e:
            logger.error(
                f"Failed to clear cache for namespace '{self.namespace}': {e}",
                extra={"namespace": self.namespace, "error": str(e)},
                exc_info=True,
            )
            return False

        self._deletes += total_deleted
        logger.info(f"Cleared {total_deleted} keys from namespace '{self.namespace}'")
        return True

    async def get_stats(self) -> dict[str, Any]:
        """Return cache statistics and Redis connectivity."""
        total_requests = self._hits + self._misses
        stats: dict[str, Any] = {
            "backend": "redis",
            "namespace": self.namespace,
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": round((self._hits / total_requests) * 100, 2) if total_requests else 0.0,
            "sets": self._sets,
            "deletes": self._deletes,
            "connected": False,
        }

        try:
            stats["connected"] = bool(await self._client.ping())
            info = await self._client.info(section="server")
            stats["redis_version"] = info.get("redis_version")
        except Exception as e:
            logger.warning(f"Failed to get Redis INFO (restricted or unavailable): {e}", extra={"error": str(e)})

        return stats

    async def close(self) -> None:
        """Close the Redis client and release resources."""
        try:
            await self._client.aclose()
            logger.info(f"Closed Redis cache backend for namespace '{self.namespace}'")
        finally:
            await self._client.connection_pool.disconnect()

    async def get_many(self, keys: list[str]) -> dict[str, Any]:
        """Retrieve multiple values in one round-trip using MGET."""
        if not keys:
            return {}

        try:
            values = await self._client.mget([self._make_key(k) for k in keys])
        except Exception as e:
            logger.error(
                f"Failed to get multiple keys from Redis: {e}",
                extra={"key_count": len(keys), "namespace": self.namespace, "error": str(e)},
                exc_info=True,
            )
            return {}

        result: dict[str, Any] = {}
        for k, raw in zip(keys, values, strict=False):
            value = self._from_json(raw)
            if value is None:
                self._misses += 1
                continue
            self._hits += 1
            result[k] = value

        return result
