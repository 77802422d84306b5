"""ASGI generic adapter for the metrics endpoint.

This adapter provides a framework-agnostic ASGI application that can be used
with any ASGI server (uvicorn, hypercorn, daphne) without requiring FastAPI
as a dependency.
"""

import asyncio
import json
import logging
from collections.abc import Callable, Coroutine
from typing import Any

from zfs_exporter.core.build_info import build_info_sample
from zfs_exporter.core.collector import VdevCollector
from zfs_exporter.core.encoding.prometheus import CONTENT_TYPE, encode_metrics

logger = logging.getLogger(__name__)

# ASGI type aliases
Scope = dict[str, Any]
Receive = Callable[[], Coroutine[Any, Any, dict[str, Any]]]
Send = Callable[[dict[str, Any]], Coroutine[Any, Any, None]]
ASGIApp = Callable[[Scope, Receive, Send], Coroutine[Any, Any, None]]

LANDING_PAGE = """<html>
<head><title>ZFS Exporter</title></head>
<body>
<h1>ZFS Exporter</h1>
<p><a href="/metrics">Metrics</a></p>
</body>
</html>
"""


async def _send_response(send: Send, status: int, content_type: str, body: str) -> None:
    """Send an HTTP response with headers and body.

    Args:
        send: ASGI send callable for writing response.
        status: HTTP status code.
        content_type: Content-Type header value.
        body: Response body as string (will be encoded to bytes).
    """
    headers = [(b"content-type", content_type.encode())]
    await send({"type": "http.response.start", "status": status, "headers": headers})
    await send({"type": "http.response.body", "body": body.encode()})


async def scrape(collector: VdevCollector) -> str:
    """Run one scrape in a worker thread and encode the result.

    The collector blocks on its stats source, so it must not run on the
    event loop. The build info gauge follows the vdev samples.
    """
    samples = await asyncio.to_thread(collector.collect)
    return encode_metrics([*samples, build_info_sample()])


async def _handle_endpoint(
    send: Send,
    endpoint_func: Callable[[], Coroutine[Any, Any, str]],
    content_type: str,
    log_message: str,
) -> None:
    """Execute an endpoint function with error handling and send response.

    Args:
        send: ASGI send callable for writing response.
        endpoint_func: Async function that returns response body.
        content_type: Content-Type header for success response.
        log_message: Message to log on error.
    """
    try:
        body = await endpoint_func()
    except Exception:
        logger.exception(log_message)
        error_body = json.dumps({"error": "Internal Server Error"})
        await _send_response(send, 500, "application/json", error_body)
        return
    await _send_response(send, 200, content_type, body)


def create_asgi_app(collector: VdevCollector) -> ASGIApp:
    """Create an ASGI app serving the collector on /metrics.

    A failed scrape answers 500 with a JSON error body; a partial metrics
    body is never sent.

    Args:
        collector: The collector to scrape on every request.

    Returns:
        ASGI application callable.
    """

    async def app(scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            return

        path = scope["path"]

        if path == "/metrics":
            await _handle_endpoint(
                send,
                lambda: scrape(collector),
                CONTENT_TYPE,
                "Error scraping ZFS statistics",
            )
        elif path == "/":
            await _send_response(send, 200, "text/html; charset=utf-8", LANDING_PAGE)
        else:
            await _send_response(send, 404, "text/plain", "Not Found")

    return app
