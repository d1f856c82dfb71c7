"""
Moodle Wiki — Site Interface

The contract consumed from the Remote Data Service: a site that can tell
which web-service functions it offers, perform cached reads and uncached
writes, and invalidate its response cache by exact key or key prefix.

How requests reach the server (HTTP, tokens, retries) belongs to a
WebServiceTransport and is outside this package.
"""

from abc import ABC, abstractmethod
from collections.abc import Collection
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class WebServiceTransport(Protocol):
    """Performs raw web-service calls against one site."""

    @property
    def functions(self) -> Collection[str]:
        """Names of the web-service functions the site exposes."""
        ...

    async def call(self, function: str, params: dict[str, Any]) -> dict[str, Any]:
        """Call a web-service function and return its decoded JSON response."""
        ...


class Site(ABC):
    """
    Abstract base class for a resolved site context.

    All failures raised by a site (network, permission, web-service
    exceptions) propagate to callers untouched.
    """

    def __init__(self, site_id: str):
        self.site_id = site_id

    @abstractmethod
    def is_capable(self, function: str) -> bool:
        """
        Check whether the site exposes a web-service function.

        Args:
            function: Web-service function name

        Returns:
            True if the function can be called on this site
        """
        pass

    @abstractmethod
    async def read(
        self,
        function: str,
        params: dict[str, Any],
        cache_key: str | None = None,
    ) -> dict[str, Any]:
        """
        Perform a cache-aware read.

        Args:
            function: Web-service function name
            params: Call parameters
            cache_key: Key the response is filed under for later invalidation

        Returns:
            Decoded JSON response
        """
        pass

    @abstractmethod
    async def write(self, function: str, params: dict[str, Any]) -> Any:
        """
        Perform an uncached write.

        Args:
            function: Web-service function name
            params: Call parameters

        Returns:
            Decoded JSON response
        """
        pass

    @abstractmethod
    async def invalidate_cache_for_key(self, key: str) -> None:
        """Invalidate every cached response filed under exactly this key."""
        pass

    @abstractmethod
    async def invalidate_cache_for_key_prefix(self, prefix: str) -> None:
        """Invalidate every cached response whose key starts with prefix."""
        pass

    async def close(self) -> None:
        """Release resources held by the site."""
        return None
