"""
Storage factory – choose the key-value backend from config
==========================================================

Centralizes selection of where the store profile lives so the rest of the
app stays ignorant of it.

- Reads environment **at call time** to avoid stale values in tests.
- Imports the DB backend **only if** the selected backend is "postgres".

Environment variables
---------------------
- CLIPURL_STORAGE_BACKEND: "memory" (default), "file" or "postgres"
- CLIPURL_STORE_PATH:      JSON file path if backend=="file"
- CLIPURL_DB_DSN:          DSN string if backend=="postgres"
"""

from typing import Optional
import logging
import os

from clipurl.storage.base import BaseKeyValueStore
from clipurl.storage.storage import MemoryKeyValueStore

log = logging.getLogger("clipurl.storage")


def get_kv_store(backend: Optional[str] = None, **kwargs) -> BaseKeyValueStore:
    """
    Return a key-value store based on configuration.

    Parameters
    ----------
    backend : str, optional
        "memory", "file" or "postgres". If omitted, reads CLIPURL_STORAGE_BACKEND.
    kwargs : dict
        Extra args for the backend: path="..." for file, dsn="..." for postgres.

    Returns
    -------
    BaseKeyValueStore-compatible instance
    """
    be = (backend or os.getenv("CLIPURL_STORAGE_BACKEND", "memory")).strip().lower()
    log.info("Selected storage backend: %r", be)

    if be == "memory":
        return MemoryKeyValueStore()

    if be == "file":
        from clipurl.storage.file_storage import FileKeyValueStore
        path = kwargs.get("path") or os.getenv("CLIPURL_STORE_PATH", "clipurl_store.json")
        return FileKeyValueStore(path=path)

    if be == "postgres":
        dsn = kwargs.get("dsn") or os.getenv("CLIPURL_DB_DSN", "")
        if not dsn:
            raise ValueError("DB_DSN is required for postgres backend (env CLIPURL_DB_DSN)")
        # Local import to avoid hard dependency when not using postgres
        from clipurl.storage.db_storage import DBKeyValueStore
        return DBKeyValueStore(dsn=dsn)

    raise ValueError(f"Unknown storage backend: {be!r}")
