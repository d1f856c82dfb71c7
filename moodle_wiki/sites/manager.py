"""
Moodle Wiki — Sites Manager

Owns the known sites and which one is current. Every wiki operation asks
the manager to resolve its site context, either the current one or an
explicit site id.
"""

from __future__ import annotations

import logging

from ..cache.factory import create_cache
from ..cache.interface import CacheInterface
from ..config import get_config
from ..errors import SiteNotFoundError
from .cached import CachedSite
from .interface import Site, WebServiceTransport

logger = logging.getLogger(__name__)


class SitesManager:
    """Registry of sites plus the current-site selection."""

    def __init__(self, default_site_id: str | None = None):
        """
        Args:
            default_site_id: Site made current when it is added; defaults
                to DEFAULT_SITE_ID from the configuration
        """
        self._sites: dict[str, Site] = {}
        self._current_site_id: str | None = None
        self._default_site_id = default_site_id if default_site_id is not None else get_config().site.default_site_id

    @property
    def current_site_id(self) -> str | None:
        return self._current_site_id

    def add_site(self, site: Site, current: bool = False) -> Site:
        """
        Register a site.

        The site becomes current when requested, when it is the configured
        default, or when no site is current yet.
        """
        self._sites[site.site_id] = site
        if current or site.site_id == self._default_site_id or self._current_site_id is None:
            self._current_site_id = site.site_id

        logger.info(
            f"Registered site '{site.site_id}'",
            extra={"site_id": site.site_id, "current": self._current_site_id == site.site_id},
        )
        return site

    def create_cached_site(
        self,
        site_id: str,
        transport: WebServiceTransport,
        cache: CacheInterface | None = None,
        current: bool = False,
    ) -> CachedSite:
        """
        Build and register a CachedSite.

        Without an explicit cache, one is created through the cache factory
        under the name "site:<site_id>", namespaced per site.
        """
        if cache is None:
            config = get_config().cache
            cache = create_cache(name=f"site:{site_id}", namespace=f"{config.namespace}:{site_id}")

        site = CachedSite(site_id, transport, cache)
        self.add_site(site, current=current)
        return site

    def set_current_site(self, site_id: str) -> None:
        if site_id not in self._sites:
            raise SiteNotFoundError(site_id)
        self._current_site_id = site_id

    def list_sites(self) -> list[str]:
        return list(self._sites)

    async def resolve_site(self, site_id: str | None = None) -> Site:
        """
        Resolve a site context.

        Args:
            site_id: Site to resolve; the current site when omitted

        Returns:
            The resolved Site

        Raises:
            SiteNotFoundError: If the site is unknown or no site is current
        """
        site_id = site_id or self._current_site_id
        if site_id is None or site_id not in self._sites:
            raise SiteNotFoundError(site_id)
        return self._sites[site_id]

    async def close(self) -> None:
        """Close every registered site."""
        for site_id, site in list(self._sites.items()):
            try:
                await site.close()
            except Exception as e:
                logger.error(
                    f"Error closing site '{site_id}': {e}",
                    extra={"site_id": site_id, "error": str(e)},
                    exc_info=True,
                )
        self._sites.clear()
        self._current_site_id = None
