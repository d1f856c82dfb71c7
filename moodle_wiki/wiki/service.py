"""
Moodle Wiki — Wiki Service

Cache-aware reads, cache invalidation and view reports for the wiki
activity of a Moodle site.

Every read follows the same pattern: resolve the site, build the cache key,
read through the site's response cache, then check that the expected field
is present in the response. A missing field (or a lookup that matches
nothing) raises NotFoundError. Site and transport failures propagate
unchanged and are neither logged nor retried here.

Usage:
    sites = SitesManager()
    sites.create_cached_site("school", transport, current=True)
    wikis = WikiService(sites)

    wiki = await wikis.get_wiki(course_id=5, value=42)
    pages = await wikis.get_subwiki_pages(wiki["id"])
"""

import asyncio
import logging
from typing import Any

from ..errors import InvalidArgumentError, NotFoundError
from ..sites import Site, SitesManager
from . import keys
from .models import SubwikiListRecord, SubwikiPagesOptions
from .subwiki_lists import SubwikiListCache

logger = logging.getLogger(__name__)

# Web-service functions
GET_WIKIS_BY_COURSES = "mod_wiki_get_wikis_by_courses"
GET_SUBWIKIS = "mod_wiki_get_subwikis"
GET_SUBWIKI_PAGES = "mod_wiki_get_subwiki_pages"
GET_PAGE_CONTENTS = "mod_wiki_get_page_contents"
VIEW_WIKI = "mod_wiki_view_wiki"
VIEW_PAGE = "mod_wiki_view_page"

READ_FUNCTIONS = (
    GET_WIKIS_BY_COURSES,
    GET_SUBWIKIS,
    GET_SUBWIKI_PAGES,
    GET_PAGE_CONTENTS,
)


def _require_field(response: dict[str, Any], field: str, resource: str, identifier: Any) -> Any:
    """Return response[field], raising NotFoundError if it is absent or null."""
    value = response.get(field) if isinstance(response, dict) else None
    if value is None:
        raise NotFoundError(resource, identifier)
    return value


class WikiService:
    """
    Query, invalidation and view-report operations for wikis.

    Owns the SubwikiListCache it is given (or a fresh one), so the lifetime
    of the selection records follows the lifetime of the service.
    """

    def __init__(self, sites: SitesManager, subwiki_lists: SubwikiListCache | None = None):
        self._sites = sites
        self._subwiki_lists = subwiki_lists if subwiki_lists is not None else SubwikiListCache()

    @property
    def subwiki_lists(self) -> SubwikiListCache:
        return self._subwiki_lists

    async def _site(self, site_id: str | None) -> Site:
        return await self._sites.resolve_site(site_id)

    async def is_plugin_enabled(self, site_id: str | None = None) -> bool:
        """Whether the site offers every web service the wiki reads need."""
        site = await self._site(site_id)
        return all(site.is_capable(function) for function in READ_FUNCTIONS)

    # ------------ Queries ------------

    async def get_wiki(
        self,
        course_id: int,
        value: Any,
        field: str = "id",
        site_id: str | None = None,
    ) -> dict[str, Any]:
        """
        Get a wiki of a course.

        Args:
            course_id: Course the wiki belongs to
            value: Identifier to look for
            field: Wiki attribute holding the identifier ("id" or "coursemodule")
            site_id: Site to read from; the current site when omitted

        Returns:
            The first wiki whose field equals value

        Raises:
            NotFoundError: If the response has no wikis or none matches
        """
        site = await self._site(site_id)
        response = await site.read(
            GET_WIKIS_BY_COURSES,
            {"courseids": [course_id]},
            cache_key=keys.wiki_data_key(course_id),
        )

        wikis = _require_field(response, "wikis", "Wiki", value)
        # Identifiers may come back as str or int depending on the site
        for wiki in wikis:
            if field in wiki and str(wiki[field]) == str(value):
                return wiki

        raise NotFoundError("Wiki", value)

    async def get_subwikis(self, wiki_id: int, site_id: str | None = None) -> list[dict[str, Any]]:
        """Get the subwikis of a wiki."""
        site = await self._site(site_id)
        response = await site.read(
            GET_SUBWIKIS,
            {"wikiid": wiki_id},
            cache_key=keys.subwikis_key(wiki_id),
        )
        return _require_field(response, "subwikis", "Subwikis", wiki_id)

    async def get_subwiki_pages(
        self,
        wiki_id: int,
        group_id: int | None = None,
        user_id: int | None = None,
        sort_by: str | None = None,
        sort_direction: str | None = None,
        include_content: bool | None = None,
        site_id: str | None = None,
    ) -> list[dict[str, Any]]:
        """
        Get the pages of a subwiki.

        Args:
            wiki_id: Wiki ID
            group_id: Group of the subwiki (default -1, no group filter)
            user_id: Owner of the subwiki (default 0, no user filter)
            sort_by: Page attribute to sort by (default "title")
            sort_direction: "ASC" or "DESC" (default "ASC")
            include_content: Inline page contents (default False)
            site_id: Site to read from; the current site when omitted

        Returns:
            The subwiki pages
        """
        options = SubwikiPagesOptions.from_args(group_id, user_id, sort_by, sort_direction, include_content)
        site = await self._site(site_id)
        response = await site.read(
            GET_SUBWIKI_PAGES,
            options.to_params(wiki_id),
            cache_key=keys.subwiki_pages_key(wiki_id, options.group_id, options.user_id),
        )
        return _require_field(response, "pages", "Subwiki pages", wiki_id)

    async def get_page_contents(self, page_id: int, site_id: str | None = None) -> dict[str, Any]:
        """Get the full contents of a wiki page."""
        site = await self._site(site_id)
        response = await site.read(
            GET_PAGE_CONTENTS,
            {"pageid": page_id},
            cache_key=keys.page_content_key(page_id),
        )
        return _require_field(response, "page", "Page", page_id)

    # ------------ Subwiki selection lists ------------

    def get_subwiki_list(self, wiki_id: Any) -> SubwikiListRecord | None:
        return self._subwiki_lists.get(wiki_id)

    def set_subwiki_list(self, wiki_id: Any, subwikis: list[Any], count: int, selected: Any) -> None:
        self._subwiki_lists.set(wiki_id, subwikis, count, selected)

    def clear_subwiki_list(self, wiki_id: Any = None) -> None:
        self._subwiki_lists.clear(wiki_id)

    # ------------ Invalidation ------------

    async def invalidate_wiki_data(self, course_id: int, site_id: str | None = None) -> None:
        """Invalidate the wikis of a course."""
        site = await self._site(site_id)
        await site.invalidate_cache_for_key(keys.wiki_data_key(course_id))

    async def invalidate_subwikis(self, wiki_id: int, site_id: str | None = None) -> None:
        """Invalidate the subwikis of a wiki along with its selection list."""
        # The selection list goes first so it never outlives the responses it was built from
        self._subwiki_lists.clear(wiki_id)
        site = await self._site(site_id)
        await site.invalidate_cache_for_key(keys.subwikis_key(wiki_id))

    async def invalidate_subwiki_pages(self, wiki_id: int, site_id: str | None = None) -> None:
        """Invalidate every page listing of a wiki, whatever its group and user."""
        site = await self._site(site_id)
        await site.invalidate_cache_for_key_prefix(keys.subwiki_pages_key_prefix(wiki_id))

    async def invalidate_page(self, page_id: int, site_id: str | None = None) -> None:
        """Invalidate the contents of a page."""
        site = await self._site(site_id)
        await site.invalidate_cache_for_key(keys.page_content_key(page_id))

    async def invalidate_content(
        self,
        course_id: int,
        wiki_id: int,
        page_id: int | None = None,
        site_id: str | None = None,
    ) -> None:
        """Invalidate everything a wiki view shows, e.g. on pull-to-refresh."""
        logger.debug(
            "Invalidating wiki content",
            extra={"course_id": course_id, "wiki_id": wiki_id, "page_id": page_id},
        )
        tasks = [
            self.invalidate_wiki_data(course_id, site_id),
            self.invalidate_subwikis(wiki_id, site_id),
            self.invalidate_subwiki_pages(wiki_id, site_id),
        ]
        if page_id:
            tasks.append(self.invalidate_page(page_id, site_id))
        await asyncio.gather(*tasks)

    # ------------ View reports ------------

    async def log_view(self, wiki_id: int | None, site_id: str | None = None) -> Any:
        """Report the wiki as being viewed."""
        if not wiki_id:
            raise InvalidArgumentError("wiki_id", wiki_id)

        site = await self._site(site_id)
        return await site.write(VIEW_WIKI, {"wikiid": wiki_id})

    async def log_page_view(self, page_id: int | None, site_id: str | None = None) -> Any:
        """Report a wiki page as being viewed."""
        if not page_id:
            raise InvalidArgumentError("page_id", page_id)

        site = await self._site(site_id)
        return await site.write(VIEW_PAGE, {"pageid": page_id})
