"""
Moodle Wiki — CachedSite Tests

Tests read-through caching, exact-key and prefix invalidation, and that
writes and transport failures bypass the cache.
"""

from typing import Any

import pytest

from moodle_wiki.errors import InvalidArgumentError
from moodle_wiki.sites import CachedSite, WebServiceTransport
from moodle_wiki.sites.cached import request_digest


class TestCachedSite:
    """Test suite for CachedSite."""

    def test_transport_protocol(self, transport: Any) -> None:
        assert isinstance(transport, WebServiceTransport)

    def test_is_capable(self, cached_site: CachedSite, transport: Any) -> None:
        transport.functions = {"mod_wiki_get_subwikis"}

        assert cached_site.is_capable("mod_wiki_get_subwikis") is True
        assert cached_site.is_capable("mod_wiki_get_page_contents") is False

    async def test_read_is_cached(self, cached_site: CachedSite, transport: Any) -> None:
        """A second identical read is served from the cache."""
        transport.responses["mod_wiki_get_subwikis"] = {"subwikis": [{"id": 1}]}

        first = await cached_site.read("mod_wiki_get_subwikis", {"wikiid": 3}, cache_key="mmaModWiki:subwikis:3")
        second = await cached_site.read("mod_wiki_get_subwikis", {"wikiid": 3}, cache_key="mmaModWiki:subwikis:3")

        assert first == second == {"subwikis": [{"id": 1}]}
        assert len(transport.calls) == 1

    async def test_read_variants_under_one_key(self, cached_site: CachedSite, transport: Any) -> None:
        """Different parameters under the same cache key are stored separately."""
        transport.responses["mod_wiki_get_subwiki_pages"] = lambda params: {"pages": [params["options"]["sortby"]]}
        key = "mmaModWiki:subwikipages:3:-1:0"

        by_title = await cached_site.read("mod_wiki_get_subwiki_pages", {"options": {"sortby": "title"}}, cache_key=key)
        by_id = await cached_site.read("mod_wiki_get_subwiki_pages", {"options": {"sortby": "id"}}, cache_key=key)

        assert by_title == {"pages": ["title"]}
        assert by_id == {"pages": ["id"]}

    async def test_invalidate_key(self, cached_site: CachedSite, transport: Any) -> None:
        """After exact invalidation the next read goes to the transport."""
        transport.responses["mod_wiki_get_page_contents"] = {"page": {"id": 12}}
        params = {"pageid": 12}

        await cached_site.read("mod_wiki_get_page_contents", params, cache_key="mmaModWiki:page:12")
        await cached_site.invalidate_cache_for_key("mmaModWiki:page:12")
        await cached_site.read("mod_wiki_get_page_contents", params, cache_key="mmaModWiki:page:12")

        assert len(transport.calls) == 2

    async def test_invalidate_key_is_exact(self, cached_site: CachedSite, transport: Any) -> None:
        """Invalidating page 1 keeps page 12 cached."""
        transport.responses["mod_wiki_get_page_contents"] = {"page": {}}

        await cached_site.read("mod_wiki_get_page_contents", {"pageid": 12}, cache_key="mmaModWiki:page:12")
        await cached_site.invalidate_cache_for_key("mmaModWiki:page:1")

        entry = f"mmaModWiki:page:12#{request_digest('mod_wiki_get_page_contents', {'pageid': 12})}"
        assert await cached_site.cache.exists(entry) is True

    async def test_invalidate_prefix(self, cached_site: CachedSite, transport: Any) -> None:
        transport.responses["mod_wiki_get_subwiki_pages"] = {"pages": []}
        for wiki_id, group_id in [(3, -1), (3, 4), (30, -1)]:
            await cached_site.read(
                "mod_wiki_get_subwiki_pages",
                {"wikiid": wiki_id, "groupid": group_id},
                cache_key=f"mmaModWiki:subwikipages:{wiki_id}:{group_id}:0",
            )

        await cached_site.invalidate_cache_for_key_prefix("mmaModWiki:subwikipages:3:")

        stats = await cached_site.cache.get_stats()
        assert stats["size"] == 1

    async def test_read_without_cache_key(self, cached_site: CachedSite, transport: Any) -> None:
        transport.responses["core_webservice_get_site_info"] = {"sitename": "School"}

        await cached_site.read("core_webservice_get_site_info", {})
        await cached_site.read("core_webservice_get_site_info", {})

        assert len(transport.calls) == 1

    async def test_write_is_not_cached(self, cached_site: CachedSite, transport: Any) -> None:
        transport.responses["mod_wiki_view_wiki"] = {"status": True}

        await cached_site.write("mod_wiki_view_wiki", {"wikiid": 3})
        await cached_site.write("mod_wiki_view_wiki", {"wikiid": 3})

        assert transport.calls_to("mod_wiki_view_wiki") == [{"wikiid": 3}, {"wikiid": 3}]
        stats = await cached_site.cache.get_stats()
        assert stats["size"] == 0

    async def test_transport_error_not_cached(self, cached_site: CachedSite, transport: Any) -> None:
        transport.responses["mod_wiki_get_subwikis"] = ConnectionError("offline")

        with pytest.raises(ConnectionError):
            await cached_site.read("mod_wiki_get_subwikis", {"wikiid": 3}, cache_key="mmaModWiki:subwikis:3")

        stats = await cached_site.cache.get_stats()
        assert stats["size"] == 0

    @pytest.mark.parametrize("method", ["invalidate_cache_for_key", "invalidate_cache_for_key_prefix"])
    async def test_empty_key_rejected(self, cached_site: CachedSite, method: str) -> None:
        with pytest.raises(InvalidArgumentError):
            await getattr(cached_site, method)("")
