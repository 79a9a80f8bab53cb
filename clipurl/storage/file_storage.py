"""
FileKeyValueStore: a single JSON file holding every key of one store profile.

File layout:
    {"links": "<json text>", "logs": "<json text>"}

Values stay opaque strings, exactly as the in-memory backend keeps them.
Writes go to a sibling temp file first and are moved into place with
os.replace, so a crash mid-write leaves the previous file intact.
A missing or unreadable file reads as an empty store.
"""

import json
import logging
import os
import tempfile
from typing import Dict, Optional

from .base import BaseKeyValueStore

log = logging.getLogger("clipurl.storage")


class FileKeyValueStore(BaseKeyValueStore):
    """JSON-file implementation of the key-value contract.

    Parameters
    ----------
    path : str
        Location of the store file. Parent directories are created on first write.
    """

    def __init__(self, path: str) -> None:
        self.path = path

    # ---- Internal helpers -------------------------------------------------

    def _read_all(self) -> Dict[str, str]:
        try:
            with open(self.path, "r", encoding="utf-8") as fh:
                raw = json.load(fh)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as exc:
            log.warning("Store file %s unreadable, treating as empty: %s", self.path, exc)
            return {}
        if not isinstance(raw, dict):
            log.warning("Store file %s is not a JSON object, treating as empty", self.path)
            return {}
        return {str(k): v for k, v in raw.items() if isinstance(v, str)}

    def _write_all(self, items: Dict[str, str]) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(prefix=".clipurl-", suffix=".json", dir=directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(items, fh)
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    # ---- Contract methods -------------------------------------------------

    def get_item(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        items = self._read_all()
        items[key] = value
        self._write_all(items)

    def remove_item(self, key: str) -> bool:
        items = self._read_all()
        if key not in items:
            return False
        del items[key]
        self._write_all(items)
        return True
