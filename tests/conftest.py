"""
Moodle Wiki — Test Configuration and Shared Fixtures

Provides pytest configuration and shared fixtures for unit and integration tests.
"""

import os
from collections.abc import Generator
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

# Set test environment
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "DEBUG"

from moodle_wiki.cache.backends.memory import MemoryCacheBackend  # noqa: E402
from moodle_wiki.sites import CachedSite, Site, SitesManager  # noqa: E402
from moodle_wiki.wiki import SubwikiListCache, WikiService  # noqa: E402
from moodle_wiki.wiki.service import READ_FUNCTIONS, VIEW_PAGE, VIEW_WIKI  # noqa: E402


class FakeTransport:
    """In-memory web-service transport that records every call."""

    def __init__(
        self,
        responses: dict[str, Any] | None = None,
        functions: set[str] | None = None,
    ):
        self.responses = responses or {}
        self.functions = functions if functions is not None else set(READ_FUNCTIONS) | {VIEW_WIKI, VIEW_PAGE}
        self.calls: list[tuple[str, dict[str, Any]]] = []

    async def call(self, function: str, params: dict[str, Any]) -> dict[str, Any]:
        self.calls.append((function, params))
        response = self.responses.get(function, {})
        if isinstance(response, Exception):
            raise response
        if callable(response):
            return response(params)
        return response

    def calls_to(self, function: str) -> list[dict[str, Any]]:
        return [params for name, params in self.calls if name == function]


@pytest.fixture
def test_redis_url() -> str:
    """Get Redis URL for testing (database 15 for isolation)."""
    return os.environ.get("TEST_REDIS_URL", "redis://localhost:6379/15")


@pytest.fixture
def mock_site() -> MagicMock:
    """A Site double whose remote calls are AsyncMocks."""
    site = MagicMock(spec=Site)
    site.site_id = "school"
    site.is_capable = MagicMock(return_value=True)
    site.read = AsyncMock(return_value={})
    site.write = AsyncMock(return_value={"status": True, "warnings": []})
    site.invalidate_cache_for_key = AsyncMock(return_value=None)
    site.invalidate_cache_for_key_prefix = AsyncMock(return_value=None)
    site.close = AsyncMock(return_value=None)
    return site


@pytest.fixture
def sites(mock_site: MagicMock) -> SitesManager:
    """Sites manager with the mock site as current site."""
    manager = SitesManager()
    manager.add_site(mock_site, current=True)
    return manager


@pytest.fixture
def subwiki_lists() -> SubwikiListCache:
    return SubwikiListCache()


@pytest.fixture
def service(sites: SitesManager, subwiki_lists: SubwikiListCache) -> WikiService:
    return WikiService(sites, subwiki_lists)


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def cached_site(transport: FakeTransport) -> CachedSite:
    """CachedSite over the fake transport and a fresh memory cache."""
    return CachedSite("school", transport, MemoryCacheBackend(namespace="test"))


@pytest.fixture
def mock_env_memory(monkeypatch: pytest.MonkeyPatch) -> None:
    """Set environment variables for memory cache backend."""
    monkeypatch.setenv("CACHE_BACKEND", "memory")
    monkeypatch.setenv("CACHE_NAMESPACE", "test")
    monkeypatch.delenv("REDIS_URL", raising=False)


@pytest.fixture(autouse=True)
def reset_cache_factory() -> Generator[None, None, None]:
    """Reset cache factory after each test to prevent state leakage."""
    yield
    from moodle_wiki.cache.factory import reset_cache_factory

    reset_cache_factory()


@pytest.fixture(autouse=True)
def reset_config() -> Generator[None, None, None]:
    """Drop the loaded configuration so environment changes don't leak between tests."""
    yield
    from moodle_wiki.config import loader

    loader._config_instance = None
