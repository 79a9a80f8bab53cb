"""
Global pytest fixtures for the clipurl test suite.

Responsibilities:
    - Provide a fresh FastAPI TestClient via the app factory for integration tests
    - Provide an isolated in-memory key-value store, link store and log sink
    - Provide allocator and resolver fixtures sharing one controllable clock
"""

import pytest
from fastapi.testclient import TestClient

from main import create_app
from clipurl.logsink.log_sink import LogSink
from clipurl.manager.allocator import ShortcodeAllocator
from clipurl.manager.resolver import RedirectResolver
from clipurl.storage.link_store import LinkStore
from clipurl.storage.storage import MemoryKeyValueStore

T0 = 1_700_000_000_000  # 2023-11-14T22:13:20Z


class FakeClock:
    """Epoch-ms clock that only moves when told to."""

    def __init__(self, start: int = T0):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, *, minutes: float = 0, ms: int = 0) -> None:
        self.now += int(minutes * 60_000) + ms


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def kv() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture
def link_store(kv) -> LinkStore:
    return LinkStore(kv)


@pytest.fixture
def log_sink(kv) -> LogSink:
    return LogSink(kv)


@pytest.fixture
def allocator(link_store, log_sink, clock) -> ShortcodeAllocator:
    return ShortcodeAllocator(store=link_store, log_sink=log_sink, clock=clock)


@pytest.fixture
def resolver(link_store, log_sink, clock) -> RedirectResolver:
    return RedirectResolver(store=link_store, log_sink=log_sink, clock=clock)


@pytest.fixture
def client(kv, clock) -> TestClient:
    """Fresh app over the test's in-memory store and clock."""
    return TestClient(create_app(kv_store=kv, clock=clock))
