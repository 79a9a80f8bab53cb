"""
Error kinds raised by the clipurl core.

Every error is row- or request-scoped. The allocator and resolver catch
them at their boundary and turn them into error log entries, so none of
these escape `ShortcodeAllocator.allocate` or `RedirectResolver.resolve`.
"""

from typing import Any, Dict, Optional

__all__ = [
    "ClipUrlError",
    "InvalidUrl",
    "InvalidCodeFormat",
    "CodeCollision",
    "CodeSpaceExhausted",
    "ShortcodeNotFound",
    "LinkExpired",
]


class ClipUrlError(ValueError):
    """Base class; carries a short `kind` tag and the log payload."""

    kind = "error"
    message = "Shortlink error"

    def __init__(self, data: Optional[Dict[str, Any]] = None):
        super().__init__(self.message)
        self.data: Dict[str, Any] = dict(data or {})


class InvalidUrl(ClipUrlError):
    kind = "invalid_url"
    message = "Invalid URL"


class InvalidCodeFormat(ClipUrlError):
    kind = "invalid_code_format"
    message = "Invalid shortcode format"


class CodeCollision(ClipUrlError):
    kind = "collision"
    message = "Shortcode collision"


class CodeSpaceExhausted(ClipUrlError):
    kind = "store_exhausted"
    message = "Shortcode space exhausted"


class ShortcodeNotFound(ClipUrlError):
    kind = "not_found"
    message = "Shortcode not found"


class LinkExpired(ClipUrlError):
    kind = "expired"
    message = "Link expired"
