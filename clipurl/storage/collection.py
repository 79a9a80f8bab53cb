"""
Whole-collection JSON persistence over a key-value store.

A collection is one JSON array stored under one key. There is no partial
update API: callers `load()` a full snapshot, modify it, and `save()` the
full replacement. Missing or corrupt data degrades to an empty collection.
"""

import json
import logging
from typing import Any, Callable, Dict, Generic, List, TypeVar

from .base import BaseKeyValueStore

log = logging.getLogger("clipurl.storage")

T = TypeVar("T")


class JsonCollection(Generic[T]):
    """Typed JSON array persisted under a single key."""

    def __init__(
        self,
        kv: BaseKeyValueStore,
        key: str,
        decode: Callable[[Dict[str, Any]], T],
        encode: Callable[[T], Dict[str, Any]],
    ):
        self.kv = kv
        self.key = key
        self._decode = decode
        self._encode = encode

    def load(self) -> List[T]:
        raw = self.kv.get_item(self.key)
        if raw is None:
            return []
        try:
            items = json.loads(raw)
            if not isinstance(items, list):
                raise ValueError(f"expected a JSON array, got {type(items).__name__}")
            return [self._decode(item) for item in items]
        except (ValueError, TypeError, KeyError, AttributeError) as exc:
            log.warning("Discarding corrupt %r collection: %s", self.key, exc)
            return []

    def save(self, items: List[T]) -> None:
        self.kv.set_item(self.key, json.dumps([self._encode(item) for item in items]))
