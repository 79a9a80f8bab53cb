"""
LinkStore: the persisted shortcode -> LinkRecord collection.

Stored under the "links" key as one JSON array. Code uniqueness is an
invariant the allocator maintains; the store itself does no indexing.
"""

from typing import List, Optional

from ..models import LinkRecord
from .base import BaseKeyValueStore
from .collection import JsonCollection

LINKS_KEY = "links"


class LinkStore(JsonCollection[LinkRecord]):
    def __init__(self, kv: BaseKeyValueStore, key: str = LINKS_KEY):
        super().__init__(kv, key, decode=LinkRecord.from_dict, encode=LinkRecord.to_dict)

    @staticmethod
    def find(records: List[LinkRecord], code: str) -> Optional[LinkRecord]:
        """Return the record with `code` from a loaded snapshot, or None."""
        for record in records:
            if record.code == code:
                return record
        return None
