"""
Moodle Wiki — Sites Module

Site contexts the wiki layer reads from and writes to.
"""

from .cached import CachedSite
from .interface import Site, WebServiceTransport
from .manager import SitesManager

__all__ = [
    "CachedSite",
    "Site",
    "SitesManager",
    "WebServiceTransport",
]
