"""
Unit tests for RequestLoggingMiddleware.

Covers:
    - line format
    - one line per request, including error statuses and query strings
    - pass-through of the response
"""

import logging
import re

from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient

from clipurl.middleware.request_logging import RequestLoggingMiddleware, format_request_line

LINE = re.compile(
    r"^\[\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z\] (?P<method>[A-Z]+) (?P<path>\S+) - (?P<status>\d{3}) - \d+ms$"
)


def build_app():
    app = FastAPI()
    app.add_middleware(RequestLoggingMiddleware)

    @app.get("/ping")
    def ping():
        return {"pong": True}

    @app.post("/fail")
    def fail():
        raise HTTPException(status_code=418, detail="teapot")

    return app


def http_lines(caplog):
    return [r.getMessage() for r in caplog.records if r.name == "clipurl.http"]


def test_format_request_line():
    line = format_request_line("2024-01-01T00:00:00.000Z", "GET", "/abc?x=1", 302, 4)
    assert line == "[2024-01-01T00:00:00.000Z] GET /abc?x=1 - 302 - 4ms"


def test_logs_one_line_per_request(caplog):
    client = TestClient(build_app())
    with caplog.at_level(logging.INFO, logger="clipurl.http"):
        resp = client.get("/ping?verbose=1")
    assert resp.status_code == 200
    assert resp.json() == {"pong": True}
    lines = http_lines(caplog)
    assert len(lines) == 1
    m = LINE.match(lines[0])
    assert m, lines[0]
    assert (m["method"], m["path"], m["status"]) == ("GET", "/ping?verbose=1", "200")


def test_logs_error_status(caplog):
    client = TestClient(build_app())
    with caplog.at_level(logging.INFO, logger="clipurl.http"):
        resp = client.post("/fail")
    assert resp.status_code == 418
    m = LINE.match(http_lines(caplog)[0])
    assert (m["method"], m["path"], m["status"]) == ("POST", "/fail", "418")


def test_custom_logger():
    records = []

    class Collect(logging.Handler):
        def emit(self, record):
            records.append(record.getMessage())

    logger = logging.getLogger("test.custom.http")
    logger.setLevel(logging.INFO)
    logger.addHandler(Collect())

    app = FastAPI()
    app.add_middleware(RequestLoggingMiddleware, logger=logger)

    @app.get("/x")
    def x():
        return {}

    TestClient(app).get("/x")
    assert len(records) == 1 and " GET /x - 200 - " in records[0]
