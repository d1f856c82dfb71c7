"""
Moodle Wiki — Subwiki List Cache

Process-lifetime memory of which subwiki a user last picked for each wiki,
so a view can re-render its selector without recomputing it. Not persisted,
no TTL, no size bound.
"""

import logging
import threading
from typing import Any

from .models import SubwikiListRecord

logger = logging.getLogger(__name__)


class SubwikiListCache:
    """
    Mapping of wiki id to its SubwikiListRecord.

    Every operation runs to completion under a lock, so one instance can
    be shared by coroutines and threads alike.
    """

    def __init__(self) -> None:
        self._records: dict[Any, SubwikiListRecord] = {}
        self._lock = threading.Lock()

    def get(self, wiki_id: Any) -> SubwikiListRecord | None:
        """Return the record stored for wiki_id, or None."""
        with self._lock:
            return self._records.get(wiki_id)

    def set(self, wiki_id: Any, subwikis: list[Any], count: int, selected: Any) -> None:
        """Store the record for wiki_id, replacing any previous one."""
        record = SubwikiListRecord(subwikis=subwikis, count=count, selected=selected)
        with self._lock:
            self._records[wiki_id] = record

    def clear(self, wiki_id: Any = None) -> None:
        """Forget the record of wiki_id, or every record when omitted."""
        with self._lock:
            if wiki_id is None:
                count = len(self._records)
                self._records.clear()
                logger.debug(f"Cleared {count} subwiki list(s)")
            else:
                self._records.pop(wiki_id, None)

    def __contains__(self, wiki_id: Any) -> bool:
        with self._lock:
            return wiki_id in self._records

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
