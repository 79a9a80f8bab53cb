"""
Key-value storage for clipurl (in-memory implementation).

Design:
    - Reference implementation of the BaseKeyValueStore contract.
    - Default backend and the fake injected by tests; state lives as long as
      the instance does.
    - For a store that survives restarts use FileKeyValueStore or DBKeyValueStore.
"""

from typing import Dict, Optional

from .base import BaseKeyValueStore


class MemoryKeyValueStore(BaseKeyValueStore):
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        """
        Initialize the backing dictionary.

        Internal schema:
            self.items = {key: serialized_value}
        """
        self.items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value

    def remove_item(self, key: str) -> bool:
        return self.items.pop(key, None) is not None
