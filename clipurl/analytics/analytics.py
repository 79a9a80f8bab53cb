"""
Analytics module for clipurl.

Responsibilities:
    - Summarize click history per link
    - Build the clicks-per-code series used by the statistics chart

Both functions work on a loaded snapshot of LinkRecords and never write.
"""

from typing import Any, Dict, List

from ..models import LinkRecord


def link_summary(records: List[LinkRecord]) -> Dict[str, Dict[str, Any]]:
    """
    Get a summary of click events for every link.

    Returns:
        Dict[str, Dict]: code -> summary including:
            - url: str
            - total_clicks: int
            - last_click: epoch ms of the newest click, or None
            - sources: dict with referrer counts
            - created_at / expires_at: epoch ms

    Example:
        {
            "promo": {
                "url": "https://example.com",
                "total_clicks": 3,
                "last_click": 1755835287551,
                "sources": {"direct": 2, "https://news.example": 1},
                "created_at": 1755835000000,
                "expires_at": 1755836800000,
            }
        }
    """
    summary: Dict[str, Dict[str, Any]] = {}
    for record in records:
        sources: Dict[str, int] = {}
        for click in record.clicks:
            sources[click.source] = sources.get(click.source, 0) + 1
        summary[record.code] = {
            "url": record.url,
            "total_clicks": len(record.clicks),
            "last_click": record.clicks[-1].timestamp if record.clicks else None,
            "sources": sources,
            "created_at": record.created_at,
            "expires_at": record.expires_at,
        }
    return summary


def click_series(records: List[LinkRecord]) -> List[Dict[str, Any]]:
    """Chart points in store order: [{"name": code, "clicks": n}, ...]."""
    return [{"name": r.code, "clicks": len(r.clicks)} for r in records]
