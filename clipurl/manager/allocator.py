"""
ShortcodeAllocator module for clipurl.

Responsibilities:
    - Validate submitted URLs and optional custom shortcodes
    - Assign a unique code to every accepted row
    - Record one log entry per row outcome
    - Persist the updated link collection once per batch

Design notes:
    - Rows are processed in input order against one working snapshot, so
      collision checks see codes accepted earlier in the same batch.
    - Custom codes are never regenerated: a taken custom code rejects the row.
    - Generated codes retry on collision up to `max_attempts` times.
    - Storage, log sink, code strategy, clock and lock are injected.
"""

import re
import threading
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Mapping, Optional, Set, Union
from urllib.parse import urlparse

from ..config import settings
from ..errors import ClipUrlError, CodeCollision, CodeSpaceExhausted, InvalidCodeFormat, InvalidUrl
from ..logsink.base import BaseLogSink, ERROR, INFO
from ..models import LinkRecord, now_ms
from ..storage.base import LockLike
from ..storage.link_store import LinkStore
from .strategies import get_strategy

CodePattern = re.compile(r"^[a-zA-Z0-9_-]{3,24}$")
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")

MS_PER_MINUTE = 60_000

CodeStrategy = Callable[[], str]


@dataclass(frozen=True)
class SubmissionRow:
    """One row of a shorten request. `validity` is minutes as entered (string or int)."""
    url: str
    validity: Union[str, int, None] = None
    code: Optional[str] = None

    @classmethod
    def coerce(cls, row: Union["SubmissionRow", Mapping[str, Any]]) -> "SubmissionRow":
        if isinstance(row, SubmissionRow):
            return row
        url = row.get("url")
        code = row.get("code")
        return cls(
            url="" if url is None else str(url),
            validity=row.get("validity"),
            code=None if code is None else str(code),
        )


def is_valid_url(url: str) -> bool:
    """
    True for absolute http(s) URLs with a host.

    Other absolute schemes (ftp:, mailto:, javascript:) are rejected on
    purpose: the stored URL becomes a redirect target.
    """
    if not url or not isinstance(url, str):
        return False
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme in {"http", "https"} and bool(parsed.netloc)


def is_valid_code(code: str) -> bool:
    return isinstance(code, str) and bool(CodePattern.match(code))


def parse_validity(validity: Union[str, int, None], default: Optional[int] = None) -> int:
    """
    Minutes from a submitted validity value.

    Takes the leading integer of a string ("5", " 7 ", "-5", "10min").
    A missing or non-numeric value, or zero, yields the default. Negative
    values are kept and produce a link that is already expired.
    """
    fallback = settings.DEFAULT_VALIDITY_MINUTES if default is None else default
    if isinstance(validity, bool):
        return fallback
    if isinstance(validity, int):
        minutes = validity
    else:
        match = _LEADING_INT.match(str(validity)) if validity is not None else None
        if not match:
            return fallback
        minutes = int(match.group(1))
    return minutes or fallback


class ShortcodeAllocator:
    """Turns a batch of submission rows into persisted LinkRecords."""

    def __init__(
        self,
        store: LinkStore,
        log_sink: BaseLogSink,
        code_strategy: Optional[CodeStrategy] = None,
        clock: Optional[Callable[[], int]] = None,
        max_attempts: Optional[int] = None,
        lock: Optional[LockLike] = None,
    ):
        """
        Args:
            store (LinkStore): Link collection to read and replace.
            log_sink (BaseLogSink): Receives one entry per row outcome.
            code_strategy (callable): () -> candidate code; random base-36 by default.
            clock (callable): () -> epoch ms; wall clock by default.
            max_attempts (int): Cap on generated-code retries per row.
            lock: Guards the load-modify-save cycle. Share one RLock with the
                resolver and log sink of the same store profile.
        """
        self.store = store
        self.log_sink = log_sink
        self.code_strategy = code_strategy or get_strategy()
        self.clock = clock or now_ms
        self.max_attempts = max_attempts if max_attempts is not None else settings.MAX_CODE_ATTEMPTS
        self.lock = lock if lock is not None else threading.RLock()

    # ---------------------------------------------------------------------
    # Validation helpers
    # ---------------------------------------------------------------------
    def _validate_url(self, url: str) -> None:
        if not is_valid_url(url):
            raise InvalidUrl({"url": url})

    def _claim_custom_code(self, code: str, taken: Set[str]) -> str:
        if not is_valid_code(code):
            raise InvalidCodeFormat({"code": code})
        if code in taken:
            raise CodeCollision({"code": code})
        return code

    def _generate_code(self, taken: Set[str]) -> str:
        for _ in range(self.max_attempts):
            candidate = self.code_strategy()
            if candidate not in taken:
                return candidate
        raise CodeSpaceExhausted({"attempts": self.max_attempts})

    # ---------------------------------------------------------------------
    # Public API
    # ---------------------------------------------------------------------
    def allocate(self, rows: Iterable[Union[SubmissionRow, Mapping[str, Any]]]) -> List[LinkRecord]:
        """
        Validate and store every row that can be accepted.

        Rules (per row, independently):
            - URL must be an absolute http(s) URL.
            - A custom code must match ^[a-zA-Z0-9_-]{3,24}$ and be unused.
            - Without a custom code, a random code is generated and retried
              until it is unused.

        The whole batch runs under `self.lock`. "Short URL created" entries
        are recorded only after the link collection has been saved.

        Returns:
            List[LinkRecord]: The accepted records, in input order.
        """
        with self.lock:
            records = self.store.load()
            taken = {r.code for r in records}
            accepted: List[LinkRecord] = []

            for raw in rows:
                row = SubmissionRow.coerce(raw)
                try:
                    self._validate_url(row.url)
                    if row.code:
                        code = self._claim_custom_code(row.code, taken)
                    else:
                        code = self._generate_code(taken)
                except ClipUrlError as err:
                    self.log_sink.record(ERROR, err.message, err.data)
                    continue

                created_at = self.clock()
                record = LinkRecord(
                    url=row.url,
                    code=code,
                    created_at=created_at,
                    expires_at=created_at + parse_validity(row.validity) * MS_PER_MINUTE,
                )
                records.append(record)
                taken.add(code)
                accepted.append(record)

            if accepted:
                self.store.save(records)
                for record in accepted:
                    self.log_sink.record(INFO, "Short URL created", record.to_dict())
            return accepted
