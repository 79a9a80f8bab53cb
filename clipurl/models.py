"""
Record types persisted by clipurl.

Serialized field names are camelCase so the stored JSON documents keep the
shape the web client wrote into its "links" and "logs" keys:

    {"url": ..., "code": ..., "createdAt": 1700000000000,
     "expiresAt": 1700001800000, "clicks": [{"timestamp": ..., "source": ..., "geo": ...}]}

Timestamps on links and clicks are epoch milliseconds; log entries carry an
ISO-8601 UTC string.
"""

import time
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Mapping, Optional


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def iso_timestamp(ms: Optional[int] = None) -> str:
    """Epoch ms -> ISO-8601 UTC with millisecond precision and a trailing 'Z'."""
    ms = now_ms() if ms is None else ms
    when = datetime.fromtimestamp(ms // 1000, tz=timezone.utc) + timedelta(milliseconds=ms % 1000)
    return when.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class ClickEvent:
    """A single recorded redirect traversal. Never mutated once stored."""
    timestamp: int
    source: str = "direct"
    geo: str = "unknown"

    def to_dict(self) -> Dict[str, Any]:
        return {"timestamp": self.timestamp, "source": self.source, "geo": self.geo}

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "ClickEvent":
        return cls(
            timestamp=int(raw["timestamp"]),
            source=str(raw.get("source", "direct")),
            geo=str(raw.get("geo", "unknown")),
        )


@dataclass
class LinkRecord:
    """Binds a shortcode to a destination URL, its lifetime and click history."""
    url: str
    code: str
    created_at: int
    expires_at: int
    clicks: List[ClickEvent] = field(default_factory=list)

    def is_expired(self, at_ms: int) -> bool:
        return at_ms > self.expires_at

    def to_dict(self) -> Dict[str, Any]:
        return {
            "url": self.url,
            "code": self.code,
            "createdAt": self.created_at,
            "expiresAt": self.expires_at,
            "clicks": [c.to_dict() for c in self.clicks],
        }

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "LinkRecord":
        return cls(
            url=str(raw["url"]),
            code=str(raw["code"]),
            created_at=int(raw["createdAt"]),
            expires_at=int(raw["expiresAt"]),
            clicks=[ClickEvent.from_dict(c) for c in raw.get("clicks") or []],
        )


@dataclass(frozen=True)
class LogEntry:
    timestamp: str
    level: str
    message: str
    data: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "level": self.level,
            "message": self.message,
            "data": dict(self.data),
        }

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "LogEntry":
        return cls(
            timestamp=str(raw["timestamp"]),
            level=str(raw["level"]),
            message=str(raw["message"]),
            data=dict(raw.get("data") or {}),
        )
