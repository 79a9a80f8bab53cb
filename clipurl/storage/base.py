"""
Base key-value storage interface for clipurl.

Purpose:
    Define the small string-keyed contract that the link store and log sink
    persist through. It mirrors a browser profile's persistent storage:
    string keys, string values, whole-value overwrites.

Testing & Coverage:
    These are abstract methods and are not executed directly in tests.
    We annotate them with `# pragma: no cover` so coverage tools don't
    penalize the project for un-runnable abstract declarations.
"""

from abc import ABC, abstractmethod
from typing import Any, ContextManager, Optional

# Lock guarding one store profile's load-modify-save cycles (a threading.RLock).
LockLike = ContextManager[Any]


class BaseKeyValueStore(ABC):
    """Abstract base class for key-value backends."""

    @abstractmethod  # pragma: no cover
    def get_item(self, key: str) -> Optional[str]:
        """
        Return the raw string stored under `key`.

        Returns:
            Optional[str]: The stored value, or None when the key is absent.
        """
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def set_item(self, key: str, value: str) -> None:
        """Store `value` under `key`, replacing any previous value."""
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def remove_item(self, key: str) -> bool:
        """
        Delete `key`.

        Returns:
            bool: True if a value was removed, False if the key was absent.
        """
        raise NotImplementedError
