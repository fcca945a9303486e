"""In-process exposition handler and synthetic scrape.

The handler is the prometheus_client WSGI app bound to an explicit registry.
``scrape`` drives it with a synthetic ``GET`` environ and returns the complete
response before any parsing happens; no socket is opened.
"""
from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any
from wsgiref.util import setup_testing_defaults

from prometheus_client import CollectorRegistry, make_wsgi_app

from ..errors import ExpositionReadError

logger = logging.getLogger(__name__)

__all__ = ["ScrapeResult", "metrics_handler", "scrape", "METRICS_PATH"]

METRICS_PATH = "/metrics"

WSGIApp = Callable[[dict[str, Any], Callable[..., Any]], Iterable[bytes]]


@dataclass(frozen=True)
class ScrapeResult:
    status: int
    body: str
    content_type: str = ""

    @property
    def ok(self) -> bool:
        return self.status == 200


def metrics_handler(registry: CollectorRegistry) -> WSGIApp:
    return make_wsgi_app(registry)


def scrape(app: WSGIApp, path: str = METRICS_PATH) -> ScrapeResult:
    """Issue ``GET path`` against ``app`` in-process and capture status + body."""
    environ: dict[str, Any] = {"REQUEST_METHOD": "GET", "PATH_INFO": path, "QUERY_STRING": ""}
    setup_testing_defaults(environ)
    captured: dict[str, Any] = {}

    def start_response(status: str, headers: list[tuple[str, str]], exc_info: Any = None) -> Callable[[bytes], None]:
        captured["status"] = status
        captured["headers"] = headers
        return lambda _data: None

    chunks = app(environ, start_response)
    try:
        body = b"".join(chunks)
    finally:
        close = getattr(chunks, "close", None)
        if callable(close):
            close()
    status = int(str(captured.get("status", "500")).split(" ", 1)[0])
    content_type = next((v for k, v in captured.get("headers", []) if k.lower() == "content-type"), "")
    logger.debug("Scraped %s status=%d bytes=%d", path, status, len(body))
    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ExpositionReadError(f"failed to parse metrics from prometheus endpoint, {e}") from e
    return ScrapeResult(status=status, body=text, content_type=content_type)
