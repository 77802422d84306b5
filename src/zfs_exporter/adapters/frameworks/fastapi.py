"""FastAPI adapter for the metrics endpoint."""

import logging

from fastapi import APIRouter, Response
from fastapi.responses import JSONResponse

from zfs_exporter.adapters.frameworks.asgi import scrape
from zfs_exporter.core.collector import VdevCollector
from zfs_exporter.core.encoding.prometheus import CONTENT_TYPE

logger = logging.getLogger(__name__)


def create_metrics_router(collector: VdevCollector) -> APIRouter:
    """Create a FastAPI router with a /metrics endpoint.

    Args:
        collector: The collector to scrape on every request.

    Returns:
        APIRouter with /metrics configured.
    """
    router = APIRouter()

    @router.get("/metrics")
    async def get_metrics() -> Response:
        """Return ZFS vdev metrics in Prometheus text format."""
        try:
            body = await scrape(collector)
        except Exception:
            logger.exception("Error scraping ZFS statistics")
            return JSONResponse(
                content={"error": "Internal Server Error"}, status_code=500
            )
        return Response(content=body, media_type=CONTENT_TYPE)

    return router
