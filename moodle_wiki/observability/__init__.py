"""
Moodle Wiki — Observability Module

Structured JSON logging shared by every module of the package.

Usage:
    from moodle_wiki.observability import configure_logging, site_context

    configure_logging("DEBUG")

    with site_context("school"):
        # log records emitted here carry site_id="school"
        pass
"""

from .logging import JSONFormatter, configure_logging, get_site_id, site_context

__all__ = [
    "JSONFormatter",
    "configure_logging",
    "get_site_id",
    "site_context",
]
