"""
Moodle Wiki — Client data-access layer for the Moodle wiki activity

Cache-aware web-service reads, prefix-scoped cache invalidation and
subwiki selection bookkeeping on top of a site's response cache.
"""

__version__ = "1.0.0"

from .errors import InvalidArgumentError, MoodleWikiError, NotFoundError, SiteNotFoundError
from .sites import CachedSite, Site, SitesManager, WebServiceTransport
from .wiki import SubwikiListCache, SubwikiListRecord, SubwikiPagesOptions, WikiService

__all__ = [
    "CachedSite",
    "InvalidArgumentError",
    "MoodleWikiError",
    "NotFoundError",
    "Site",
    "SiteNotFoundError",
    "SitesManager",
    "SubwikiListCache",
    "SubwikiListRecord",
    "SubwikiPagesOptions",
    "WebServiceTransport",
    "WikiService",
]
