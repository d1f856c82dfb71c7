"""
Moodle Wiki — Cache Backends

Redis backend is lazy-loaded via factory.py to avoid a hard dependency.
"""

from .memory import MemoryCacheBackend

__all__ = [
    "MemoryCacheBackend",
]
