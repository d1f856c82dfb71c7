"""
Cache keys for wiki web-service responses.

Keys are namespaced by a type tag followed by the identifier chain, so
keys of different entity types never collide. Page-list keys of one wiki
all share subwiki_pages_key_prefix(wiki_id), which is what lets every
group/user variant be invalidated at once.
"""

KEY_NAMESPACE = "mmaModWiki"


def wiki_data_key(course_id: int) -> str:
    """Key for the wikis of a course."""
    return f"{KEY_NAMESPACE}:wiki:{course_id}"


def subwikis_key(wiki_id: int) -> str:
    """Key for the subwikis of a wiki."""
    return f"{KEY_NAMESPACE}:subwikis:{wiki_id}"


def subwiki_pages_key_prefix(wiki_id: int) -> str:
    """
    Prefix shared by every page-list key of a wiki.

    Ends with the separator, so the prefix for wiki 3 does not cover the
    keys of wiki 30.
    """
    return f"{KEY_NAMESPACE}:subwikipages:{wiki_id}:"


def subwiki_pages_key(wiki_id: int, group_id: int, user_id: int) -> str:
    """Key for the page list of one subwiki (wiki, group, user)."""
    return f"{subwiki_pages_key_prefix(wiki_id)}{group_id}:{user_id}"


def page_content_key(page_id: int) -> str:
    """Key for the contents of a page."""
    return f"{KEY_NAMESPACE}:page:{page_id}"
