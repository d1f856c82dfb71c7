"""
Moodle Wiki — Wiki Models

Local value types of the wiki layer. Remote payloads (wikis, subwikis,
pages) stay plain JSON dictionaries.
"""

from dataclasses import dataclass, field
from typing import Any

# Sentinels understood by mod_wiki_get_subwiki_pages
NO_GROUP = -1
NO_USER = 0

DEFAULT_SORT_BY = "title"
DEFAULT_SORT_DIRECTION = "ASC"


@dataclass(frozen=True)
class SubwikiListRecord:
    """Last computed subwiki selection list of a wiki."""

    subwikis: list[Any] = field(default_factory=list)
    count: int = 0
    selected: Any = None


@dataclass(frozen=True)
class SubwikiPagesOptions:
    """
    Filters and ordering of a subwiki page listing.

    Attributes:
        group_id: Group of the subwiki; -1 means no group filter
        user_id: Owner of an individual subwiki; 0 means no user filter
        sort_by: Page attribute to sort by
        sort_direction: "ASC" or "DESC"
        include_content: Whether pages carry their content inline
    """

    group_id: int = NO_GROUP
    user_id: int = NO_USER
    sort_by: str = DEFAULT_SORT_BY
    sort_direction: str = DEFAULT_SORT_DIRECTION
    include_content: bool = False

    @classmethod
    def from_args(
        cls,
        group_id: int | None = None,
        user_id: int | None = None,
        sort_by: str | None = None,
        sort_direction: str | None = None,
        include_content: bool | None = None,
    ) -> "SubwikiPagesOptions":
        """
        Build options from optional call arguments.

        A missing group falls back to -1, while an explicit group 0 is kept.
        Any falsy user id means "no user filter" (0). Empty sort settings
        fall back to the defaults.
        """
        return cls(
            group_id=NO_GROUP if group_id is None else group_id,
            user_id=user_id or NO_USER,
            sort_by=sort_by or DEFAULT_SORT_BY,
            sort_direction=sort_direction or DEFAULT_SORT_DIRECTION,
            include_content=bool(include_content),
        )

    def to_params(self, wiki_id: int) -> dict[str, Any]:
        """Parameters for mod_wiki_get_subwiki_pages."""
        return {
            "wikiid": wiki_id,
            "groupid": self.group_id,
            "userid": self.user_id,
            "options": {
                "sortby": self.sort_by,
                "sortdirection": self.sort_direction,
                "includecontent": self.include_content,
            },
        }
