"""
Moodle Wiki — Wiki Module

Cache keys, subwiki selection lists and the WikiService facade.
"""

from . import keys
from .models import SubwikiListRecord, SubwikiPagesOptions
from .service import READ_FUNCTIONS, WikiService
from .subwiki_lists import SubwikiListCache

__all__ = [
    "keys",
    "READ_FUNCTIONS",
    "SubwikiListCache",
    "SubwikiListRecord",
    "SubwikiPagesOptions",
    "WikiService",
]
