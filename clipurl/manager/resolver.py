"""
RedirectResolver module for clipurl.

Resolves a shortcode taken from a request path into a redirect target,
recording a click on success. Failures are terminal for the request: the
caller sends the visitor home. The click append and the caller's
navigation are not atomic; the load-modify-save itself runs under the
store profile lock shared with the allocator and log sink.
"""

import enum
import threading
from dataclasses import dataclass
from typing import Callable, Optional

from ..errors import ClipUrlError, LinkExpired, ShortcodeNotFound
from ..logsink.base import BaseLogSink, ERROR, INFO
from ..models import ClickEvent, now_ms
from ..storage.base import LockLike
from ..storage.link_store import LinkStore

HOME_PATH = "/"


class Outcome(str, enum.Enum):
    OK = "ok"
    NOT_FOUND = "not_found"
    EXPIRED = "expired"


@dataclass(frozen=True)
class Resolution:
    outcome: Outcome
    code: str
    url: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.outcome is Outcome.OK

    @property
    def redirect_target(self) -> str:
        """Destination URL on success, the home path otherwise."""
        return self.url if self.ok and self.url else HOME_PATH


_FAILURES = {ShortcodeNotFound: Outcome.NOT_FOUND, LinkExpired: Outcome.EXPIRED}


class RedirectResolver:
    def __init__(
        self,
        store: LinkStore,
        log_sink: BaseLogSink,
        clock: Optional[Callable[[], int]] = None,
        lock: Optional[LockLike] = None,
    ):
        self.store = store
        self.log_sink = log_sink
        self.clock = clock or now_ms
        self.lock = lock if lock is not None else threading.RLock()

    def resolve(self, code: str, referrer: Optional[str] = None, geo: Optional[str] = None) -> Resolution:
        """
        Look up `code`, check expiry, and record a click.

        Args:
            code (str): Shortcode from the request path.
            referrer (str): Referring page, "direct" when empty.
            geo (str): Opaque client locale/timezone string.

        Returns:
            Resolution: OK with the URL, or NOT_FOUND / EXPIRED. Nothing is
            written to the link store on failure.
        """
        with self.lock:
            records = self.store.load()
            record = LinkStore.find(records, code)
            now = self.clock()
            try:
                if record is None:
                    raise ShortcodeNotFound({"code": code})
                if record.is_expired(now):
                    raise LinkExpired({"code": code})
            except ClipUrlError as err:
                self.log_sink.record(ERROR, err.message, err.data)
                return Resolution(outcome=_FAILURES[type(err)], code=code)

            record.clicks.append(ClickEvent(timestamp=now, source=referrer or "direct", geo=geo or "unknown"))
            self.store.save(records)
            self.log_sink.record(INFO, "Redirected", {"code": code, "url": record.url})
            return Resolution(outcome=Outcome.OK, code=code, url=record.url)
