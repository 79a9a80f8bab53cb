"""
Main API module for clipurl.

Responsibilities:
    - Accept batches of up to five URLs to shorten
    - Redirect /{code} to its destination, recording a click
    - Expose link statistics and the persisted event log
    - Log one line per HTTP request

Architecture:
    - App Factory pattern (create_app) for test isolation and DI.
    - In-memory key-value store by default; file or Postgres from config.
    - Allocator and resolver hold all the rules; routes only translate HTTP.
"""

import logging
import threading
from typing import Any, Callable, Dict, List, Optional, Union

from fastapi import FastAPI, Request
from fastapi.responses import RedirectResponse
from pydantic import BaseModel, Field

from clipurl.analytics.analytics import click_series, link_summary
from clipurl.config import settings
from clipurl.logsink.log_sink import LogSink
from clipurl.manager.allocator import ShortcodeAllocator, SubmissionRow
from clipurl.manager.resolver import RedirectResolver
from clipurl.middleware.request_logging import RequestLoggingMiddleware
from clipurl.storage.base import BaseKeyValueStore
from clipurl.storage.link_store import LinkStore
from clipurl.storage.storage_factory import get_kv_store


class ShortenRow(BaseModel):
    """One submitted row: destination, validity in minutes, optional custom code."""
    url: str = ""
    validity: Optional[Union[int, str]] = None
    code: Optional[str] = None


class ShortenRequest(BaseModel):
    """Request payload for a batch of links."""
    rows: List[ShortenRow] = Field(..., min_length=1, max_length=settings.MAX_BATCH_ROWS)


def _client_geo(request: Request) -> str:
    """
    Opaque "timezone | locale" string, as the web client reports it.

    Timezone comes from X-Timezone, locale from the first Accept-Language tag.
    """
    tz = request.headers.get("x-timezone", "").strip() or "unknown"
    lang = request.headers.get("accept-language", "").split(",")[0].split(";")[0].strip() or "unknown"
    return f"{tz} | {lang}"


def create_app(
    kv_store: Optional[BaseKeyValueStore] = None,
    clock: Optional[Callable[[], int]] = None,
) -> FastAPI:
    """
    Factory function to build and configure a new FastAPI app instance.

    Args:
        kv_store (BaseKeyValueStore): Store profile to use; chosen from config when omitted.
        clock (callable): () -> epoch ms, shared by allocator and resolver.

    Returns:
        FastAPI: A configured application with its own store, log sink,
                 allocator and resolver.
    """
    app = FastAPI(
        title="clipurl",
        description="URL shortener over a single local store profile",
        docs_url="/docs",
    )
    log = logging.getLogger("clipurl")

    if not logging.getLogger().handlers:
        logging.basicConfig(level=settings.LOG_LEVEL)

    # ----------------------------------------------------------------
    # Per-app instances (isolated for tests, swappable for production)
    # ----------------------------------------------------------------
    kv = kv_store if kv_store is not None else get_kv_store()
    # Routes run in the threadpool; one lock serializes every load-modify-save on this profile.
    profile_lock = threading.RLock()
    links = LinkStore(kv)
    log_sink = LogSink(kv, lock=profile_lock)
    allocator = ShortcodeAllocator(store=links, log_sink=log_sink, clock=clock, lock=profile_lock)
    resolver = RedirectResolver(store=links, log_sink=log_sink, clock=clock, lock=profile_lock)
    log.info("clipurl store backend: %s", type(kv).__name__)

    app.add_middleware(RequestLoggingMiddleware)

    # ----------------------------------------------------------------
    # Routes
    # ----------------------------------------------------------------
    @app.get("/")
    def home() -> Dict[str, Any]:
        return {"service": "clipurl", "shorten": "/shorten", "stats": "/stats", "logs": "/logs"}

    @app.get("/health")
    def health() -> Dict[str, str]:
        return {"status": "ok"}

    @app.post("/shorten")
    def shorten(req: ShortenRequest, request: Request) -> Dict[str, Any]:
        """
        Shorten a batch of URLs.

        Rejected rows are dropped from the response and recorded in /logs;
        the request itself always succeeds once the payload is well-formed.
        """
        created = allocator.allocate(
            SubmissionRow(url=row.url, validity=row.validity, code=row.code) for row in req.rows
        )
        return {
            "results": [
                {
                    "url": r.url,
                    "code": r.code,
                    "short_url": str(request.url_for("redirect_code", code=r.code)),
                    "createdAt": r.created_at,
                    "expiresAt": r.expires_at,
                }
                for r in created
            ]
        }

    @app.get("/stats")
    def stats() -> Dict[str, Any]:
        records = links.load()
        summary = link_summary(records)
        return {
            "links": [dict(r.to_dict(), totalClicks=summary[r.code]["total_clicks"]) for r in records],
            "chart": click_series(records),
        }

    @app.get("/logs")
    def logs() -> Dict[str, Any]:
        return {"logs": [e.to_dict() for e in log_sink.entries()]}

    # Must stay last: any other single path segment is a shortcode.
    @app.get("/{code}")
    def redirect_code(code: str, request: Request) -> RedirectResponse:
        resolution = resolver.resolve(
            code,
            referrer=request.headers.get("referer"),
            geo=_client_geo(request),
        )
        return RedirectResponse(url=resolution.redirect_target, status_code=302)

    return app


# `uvicorn main:app --reload` and `from main import app` continue to work.
app = create_app()
