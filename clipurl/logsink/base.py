"""
Abstract base for log sinks.

The allocator and resolver only depend on `record`, so tests can pass any
object with that method (or this base) and inspect what was recorded.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

__all__ = ["BaseLogSink", "INFO", "ERROR"]

INFO = "info"
ERROR = "error"


class BaseLogSink(ABC):
    """Abstract base for pluggable event logs."""

    @abstractmethod
    def record(self, level: str, message: str, data: Optional[Dict[str, Any]] = None) -> None:  # pragma: no cover
        """
        Append one entry.

        Args:
            level (str): "info" or "error".
            message (str): Short human-readable message.
            data (dict): JSON-serializable context for the entry.
        """
        raise NotImplementedError
