"""
Moodle Wiki — Cached Site

A Site that keeps web-service read responses in a persistent cache backend.

Storage layout:
    <cache_key>#<digest>    response of a read filed under cache_key
    <function>#<digest>     response of a read without a cache key

The digest is a SHA-1 over the function name and its parameters, so reads
that share a cache key but differ in parameters (e.g. two sort orders of
the same page listing) are stored side by side. Invalidating a cache key
removes every variant filed under it; invalidating a prefix removes every
entry whose cache key starts with that prefix.
"""

import hashlib
import json
import logging
from typing import Any

from ..cache.interface import CacheInterface
from ..errors import InvalidArgumentError
from ..observability import site_context
from .interface import Site, WebServiceTransport

logger = logging.getLogger(__name__)

ENTRY_SEPARATOR = "#"


def request_digest(function: str, params: dict[str, Any]) -> str:
    """Stable digest of a web-service call."""
    payload = json.dumps({"function": function, "params": params}, sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.sha1(payload.encode("utf-8")).hexdigest()


class CachedSite(Site):
    """
    Site implementation backed by a transport and a response cache.

    Writes always go to the transport and are never cached. Transport
    errors propagate unchanged and leave the cache untouched.
    """

    def __init__(self, site_id: str, transport: WebServiceTransport, cache: CacheInterface):
        super().__init__(site_id)
        self._transport = transport
        self._cache = cache

    @property
    def cache(self) -> CacheInterface:
        return self._cache

    @staticmethod
    def _entry_key(function: str, params: dict[str, Any], cache_key: str | None) -> str:
        return f"{cache_key or function}{ENTRY_SEPARATOR}{request_digest(function, params)}"

    def is_capable(self, function: str) -> bool:
        return function in self._transport.functions

    async def read(
        self,
        function: str,
        params: dict[str, Any],
        cache_key: str | None = None,
    ) -> dict[str, Any]:
        entry_key = self._entry_key(function, params, cache_key)

        with site_context(self.site_id):
            cached = await self._cache.get(entry_key)
            if cached is not None:
                logger.debug(
                    f"Cache hit for {function}",
                    extra={"function": function, "cache_key": cache_key},
                )
                return cached

            logger.debug(
                f"Cache miss for {function}, calling web service",
                extra={"function": function, "cache_key": cache_key},
            )
            response = await self._transport.call(function, params)
            await self._cache.set(entry_key, response)
            return response

    async def write(self, function: str, params: dict[str, Any]) -> Any:
        with site_context(self.site_id):
            logger.debug(f"Calling {function}", extra={"function": function})
            return await self._transport.call(function, params)

    async def invalidate_cache_for_key(self, key: str) -> None:
        if not key:
            raise InvalidArgumentError("key", key)

        with site_context(self.site_id):
            removed = await self._cache.delete_prefix(f"{key}{ENTRY_SEPARATOR}")
            logger.debug(
                f"Invalidated {removed} cached response(s) for key '{key}'",
                extra={"cache_key": key, "removed": removed},
            )

    async def invalidate_cache_for_key_prefix(self, prefix: str) -> None:
        if not prefix:
            raise InvalidArgumentError("prefix", prefix)

        with site_context(self.site_id):
            removed = await self._cache.delete_prefix(prefix)
            logger.debug(
                f"Invalidated {removed} cached response(s) with prefix '{prefix}'",
                extra={"cache_prefix": prefix, "removed": removed},
            )

    async def close(self) -> None:
        await self._cache.close()
