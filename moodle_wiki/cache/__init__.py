"""
Moodle Wiki — Cache Module

Persistent response cache with pluggable backends. Sites store web-service
responses here and invalidate them by exact key or by key prefix.

- factory.py: single place where cache backends are created
- interface.py: abstract interface all backends implement
- backends/: memory and Redis implementations

Usage:
    from moodle_wiki.cache import create_cache

    cache = create_cache()
    await cache.set("mmaModWiki:subwikis:3#d41d8c", {"subwikis": []})
    await cache.delete_prefix("mmaModWiki:subwikis:3#")
"""

from .factory import (
    close_all_caches,
    create_cache,
    get_cache,
    list_cache_instances,
    reset_cache_factory,
)
from .interface import CacheInterface

__all__ = [
    # Factory functions
    "create_cache",
    "get_cache",
    "close_all_caches",
    "list_cache_instances",
    "reset_cache_factory",
    # Interface
    "CacheInterface",
]
