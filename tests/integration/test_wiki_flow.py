"""
Moodle Wiki — Wiki Service Integration Tests

Runs WikiService against a CachedSite with a memory cache and a fake
transport, checking that invalidation drops exactly the right responses.
"""

from typing import Any

import pytest

from moodle_wiki.cache.backends.memory import MemoryCacheBackend
from moodle_wiki.errors import NotFoundError
from moodle_wiki.sites import SitesManager
from moodle_wiki.wiki import WikiService
from moodle_wiki.wiki.service import GET_PAGE_CONTENTS, GET_SUBWIKI_PAGES, GET_SUBWIKIS, GET_WIKIS_BY_COURSES


def pages_response(params: dict[str, Any]) -> dict[str, Any]:
    return {"pages": [{"wikiid": params["wikiid"], "groupid": params["groupid"], "userid": params["userid"]}]}


class TestWikiFlow:
    """End-to-end tests of reads and invalidation through a cached site."""

    @pytest.fixture
    def wiki_service(self, transport: Any) -> WikiService:
        transport.responses.update(
            {
                GET_WIKIS_BY_COURSES: {"wikis": [{"id": 3, "coursemodule": 30, "name": "Class wiki"}]},
                GET_SUBWIKIS: {"subwikis": [{"id": 1, "groupid": 0, "userid": 0}]},
                GET_SUBWIKI_PAGES: pages_response,
                GET_PAGE_CONTENTS: {"page": {"id": 12, "cachedcontent": "<p>Hi</p>"}},
            }
        )
        sites = SitesManager()
        sites.create_cached_site("school", transport, cache=MemoryCacheBackend(namespace="test"))
        return WikiService(sites)

    async def test_reads_are_cached(self, wiki_service: WikiService, transport: Any) -> None:
        for _ in range(3):
            await wiki_service.get_wiki(5, 30, field="coursemodule")
            await wiki_service.get_subwikis(3)
            await wiki_service.get_page_contents(12)

        assert len(transport.calls) == 3

    async def test_invalidate_subwiki_pages_only_touches_one_wiki(
        self,
        wiki_service: WikiService,
        transport: Any,
    ) -> None:
        """Every page listing of wiki 3 is refetched, wiki 30 stays cached."""
        await wiki_service.get_subwiki_pages(3)
        await wiki_service.get_subwiki_pages(3, group_id=4, user_id=7)
        await wiki_service.get_subwiki_pages(30)

        await wiki_service.invalidate_subwiki_pages(3)

        await wiki_service.get_subwiki_pages(3)
        await wiki_service.get_subwiki_pages(3, group_id=4, user_id=7)
        await wiki_service.get_subwiki_pages(30)

        wiki_ids = [params["wikiid"] for params in transport.calls_to(GET_SUBWIKI_PAGES)]
        assert wiki_ids == [3, 3, 30, 3, 3]

    async def test_invalidate_subwikis(self, wiki_service: WikiService, transport: Any) -> None:
        subwikis = await wiki_service.get_subwikis(3)
        wiki_service.set_subwiki_list(3, subwikis, len(subwikis), subwikis[0]["id"])

        await wiki_service.invalidate_subwikis(3)
        await wiki_service.get_subwikis(3)

        assert wiki_service.get_subwiki_list(3) is None
        assert len(transport.calls_to(GET_SUBWIKIS)) == 2

    async def test_invalidate_page_is_exact(self, wiki_service: WikiService, transport: Any) -> None:
        await wiki_service.get_page_contents(12)
        await wiki_service.get_subwikis(3)

        await wiki_service.invalidate_page(12)
        await wiki_service.get_page_contents(12)
        await wiki_service.get_subwikis(3)

        assert len(transport.calls_to(GET_PAGE_CONTENTS)) == 2
        assert len(transport.calls_to(GET_SUBWIKIS)) == 1

    async def test_invalidate_content(self, wiki_service: WikiService, transport: Any) -> None:
        await wiki_service.get_wiki(5, 3)
        await wiki_service.get_subwikis(3)
        await wiki_service.get_subwiki_pages(3)
        await wiki_service.get_page_contents(12)

        await wiki_service.invalidate_content(5, 3, page_id=12)

        await wiki_service.get_wiki(5, 3)
        await wiki_service.get_subwikis(3)
        await wiki_service.get_subwiki_pages(3)
        await wiki_service.get_page_contents(12)

        assert len(transport.calls) == 8

    async def test_missing_wiki(self, wiki_service: WikiService) -> None:
        with pytest.raises(NotFoundError):
            await wiki_service.get_wiki(5, 999)

    async def test_plugin_enabled(self, wiki_service: WikiService, transport: Any) -> None:
        assert await wiki_service.is_plugin_enabled() is True

        transport.functions = {GET_WIKIS_BY_COURSES, GET_SUBWIKIS}
        assert await wiki_service.is_plugin_enabled() is False

    async def test_log_page_view(self, wiki_service: WikiService, transport: Any) -> None:
        transport.responses["mod_wiki_view_page"] = {"status": True, "warnings": []}

        assert await wiki_service.log_page_view(12) == {"status": True, "warnings": []}
        assert transport.calls_to("mod_wiki_view_page") == [{"pageid": 12}]
