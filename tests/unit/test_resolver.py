"""
Unit tests for RedirectResolver.

Covers:
    - Unknown codes (no mutation, not-found outcome)
    - Live codes (exactly one click appended, URL yielded)
    - Expired codes (expired outcome, no click)
    - Click source/geo defaults and log entries
"""

from clipurl.manager.resolver import HOME_PATH, Outcome


def test_unknown_code_does_not_mutate_store(resolver, allocator, kv, log_sink):
    allocator.allocate([{"url": "https://example.com", "code": "known"}])
    before = kv.get_item("links")

    result = resolver.resolve("missing")

    assert result.outcome is Outcome.NOT_FOUND
    assert not result.ok
    assert result.url is None
    assert result.redirect_target == HOME_PATH
    assert kv.get_item("links") == before
    last = log_sink.entries()[-1]
    assert (last.level, last.message, last.data) == ("error", "Shortcode not found", {"code": "missing"})


def test_unknown_code_on_empty_store_writes_no_links(resolver, kv):
    assert resolver.resolve("nothing").outcome is Outcome.NOT_FOUND
    assert kv.get_item("links") is None


def test_live_code_appends_one_click(resolver, allocator, link_store, clock):
    allocator.allocate([{"url": "https://example.com", "code": "promo"}])
    clock.advance(minutes=1)

    result = resolver.resolve("promo", referrer="https://news.example", geo="Europe/Paris | fr-FR")

    assert result.ok
    assert result.url == "https://example.com"
    assert result.redirect_target == "https://example.com"
    clicks = link_store.load()[0].clicks
    assert len(clicks) == 1
    assert clicks[0].timestamp == clock.now
    assert clicks[0].source == "https://news.example"
    assert clicks[0].geo == "Europe/Paris | fr-FR"


def test_click_defaults_to_direct(resolver, allocator, link_store):
    allocator.allocate([{"url": "https://example.com", "code": "promo"}])
    resolver.resolve("promo", referrer="")
    click = link_store.load()[0].clicks[0]
    assert click.source == "direct"
    assert click.geo == "unknown"


def test_repeated_resolves_keep_click_history(resolver, allocator, link_store, clock):
    allocator.allocate([{"url": "https://example.com", "code": "promo"}])
    for _ in range(3):
        clock.advance(ms=10)
        resolver.resolve("promo")
    clicks = link_store.load()[0].clicks
    assert [c.timestamp for c in clicks] == sorted(c.timestamp for c in clicks)
    assert len(clicks) == 3


def test_only_matching_record_gets_click(resolver, allocator, link_store):
    allocator.allocate([
        {"url": "https://a.example", "code": "aaa"},
        {"url": "https://b.example", "code": "bbb"},
    ])
    resolver.resolve("bbb")
    by_code = {r.code: len(r.clicks) for r in link_store.load()}
    assert by_code == {"aaa": 0, "bbb": 1}


def test_redirect_logs_info(resolver, allocator, log_sink):
    allocator.allocate([{"url": "https://example.com", "code": "promo"}])
    resolver.resolve("promo")
    last = log_sink.entries()[-1]
    assert (last.level, last.message, last.data) == (
        "info", "Redirected", {"code": "promo", "url": "https://example.com"}
    )


def test_expired_after_validity(resolver, allocator, link_store, log_sink, clock):
    allocator.allocate([{"url": "https://example.com", "code": "promo", "validity": "30"}])
    clock.advance(minutes=31)

    result = resolver.resolve("promo")

    assert result.outcome is Outcome.EXPIRED
    assert result.redirect_target == HOME_PATH
    assert link_store.load()[0].clicks == []
    last = log_sink.entries()[-1]
    assert (last.level, last.message, last.data) == ("error", "Link expired", {"code": "promo"})


def test_exact_expiry_instant_still_resolves(resolver, allocator, clock):
    allocator.allocate([{"url": "https://example.com", "code": "promo", "validity": "30"}])
    clock.advance(minutes=30)
    assert resolver.resolve("promo").ok
    clock.advance(ms=1)
    assert resolver.resolve("promo").outcome is Outcome.EXPIRED
